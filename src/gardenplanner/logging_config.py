"""
Logging Configuration
Sets up the 'gardenplanner' logger and routes the rendering stack's messages
through the same handlers.
"""
import logging
import sys
from typing import Optional

# Loggers of the rendering libraries that the editor drives directly.
RENDER_LOGGERS = ("pyvista", "pyvistaqt")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the 'gardenplanner' namespace.

    The rendering libraries only report warnings and errors unless `level` is
    DEBUG; their per-frame chatter would otherwise bury the editor's own log.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file (overwritten each run).
    """
    logger = logging.getLogger("gardenplanner")
    logger.setLevel(level)

    # main() may be called again in the same process (tests, restarts)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    render_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in RENDER_LOGGERS:
        render_logger = logging.getLogger(name)
        render_logger.setLevel(render_level)
        render_logger.handlers.clear()
        for handler in handlers:
            render_logger.addHandler(handler)
        render_logger.propagate = False

    logger.info("Logging initialized.")
