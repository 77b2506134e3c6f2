"""
Editor Controllers
==================
Glue between the model and the view: placement of catalog templates and the
editor session (selection, drag, history, gardens).

Note: Controllers talk to the renderer only through the SceneAdapter.
"""
