"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line (share link, log level, log file).
2. Instantiates the Data Model (EditorState) and the garden storage.
3. Instantiates the Main Window (View), which wires the controller.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from gardenplanner.config import APP_NAME, SETTINGS_APPLICATION, SETTINGS_ORGANIZATION
from gardenplanner.logging_config import setup_logging
from gardenplanner.model.state import EditorState
from gardenplanner.model.storage import GardenStorage, SettingsStore
from gardenplanner.view.main_window import MainWindow


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gardenplanner", description="Plan a garden in 2D and 3D.")
    parser.add_argument("link", nargs="?", default=None, help="share link of a garden to open")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    QCoreApplication.setOrganizationName(SETTINGS_ORGANIZATION)
    QCoreApplication.setApplicationName(SETTINGS_APPLICATION)
    app = QApplication(sys.argv[:1])
    app.setApplicationDisplayName(APP_NAME)

    # 3. Initialize the Data Model
    state = EditorState()
    storage = GardenStorage(SettingsStore())

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(state, storage)
    window.show()

    if args.link:
        window.open_share_link(args.link)

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
