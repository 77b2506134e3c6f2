"""
Configuration & Path Management
===============================
Central registry for resource paths and editor-wide constants.

Why is this file needed?
------------------------
1. Abstraction: Garden dimensions, grid spacing and history depth are read by
   the model, the controllers and the views. Keeping them here avoids magic
   numbers scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find packaged assets (starter gardens) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the packaged assets directory.
    TEMPLATES_PATH (str): Absolute path to the starter garden templates.
"""
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "gardenplanner", relative_path)

    # config.py lives in src/gardenplanner/, assets are shipped next to it
    package_root: Path = Path(__file__).parent
    return os.path.join(str(package_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
TEMPLATES_PATH: str = os.path.join(ASSETS_PATH, "templates")

# Application identity (used by QSettings)
APP_NAME: str = "Garden Planner"
SETTINGS_ORGANIZATION: str = "gardenplanner"
SETTINGS_APPLICATION: str = "editor"

# Garden / grid (metres)
GARDEN_SIZE: float = 30.0
GRID_SIZE: float = 0.5

# Undo/redo depth
HISTORY_LIMIT: int = 50

# Camera
ZOOM_MIN: float = 0.5
ZOOM_MAX: float = 3.0
ZOOM_STEP: float = 0.1
ZOOM_SPEED: float = 2.0

# Persistence
STORAGE_KEY: str = "gardens"
SHARE_BASE_URL: str = "gardenplanner://open"

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
