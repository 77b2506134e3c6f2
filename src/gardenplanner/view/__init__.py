"""
The VIEW layer: Qt widgets, the PyVista garden view and the SceneAdapter
that keeps it in sync with the element list.
"""
