"""Garden Planner: a 2D/3D garden layout editor."""

__version__ = "0.1.0"
