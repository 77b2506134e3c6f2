from __future__ import annotations

import logging
import os
import tempfile
import unittest

from gardenplanner.logging_config import RENDER_LOGGERS, setup_logging


class SetupLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        for name in ("gardenplanner",) + RENDER_LOGGERS:
            logger = logging.getLogger(name)
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
            logger.propagate = True
            logger.setLevel(logging.NOTSET)

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        self.assertEqual(len(logging.getLogger("gardenplanner").handlers), 1)

    def test_render_libraries_only_warn_unless_debugging(self) -> None:
        setup_logging(logging.INFO)
        self.assertEqual(logging.getLogger("pyvista").level, logging.WARNING)
        self.assertFalse(logging.getLogger("pyvista").propagate)

        setup_logging(logging.DEBUG)
        self.assertEqual(logging.getLogger("pyvista").level, logging.DEBUG)

    def test_log_file_receives_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "editor.log")
            setup_logging(log_file=path)
            logging.getLogger("gardenplanner.model.io").info("Imported garden 'Front'.")
            logging.getLogger("pyvista").warning("render warning")
            for handler in logging.getLogger("gardenplanner").handlers:
                handler.flush()

            with open(path, encoding="utf-8") as f:
                text = f.read()
            self.tearDown()

        self.assertIn("Imported garden 'Front'.", text)
        self.assertIn("render warning", text)


if __name__ == "__main__":
    unittest.main()
