import logging
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path

from artgen.config import Config
from artgen.logging_conf import setup_logging


class LoggingSetupTests(unittest.TestCase):
    def tearDown(self):
        logging.basicConfig(level=logging.WARNING, force=True)
        for name in ("urllib3", "requests"):
            logging.getLogger(name).setLevel(logging.NOTSET)

    def test_level_and_format_from_config(self):
        cfg = Config()
        cfg.update({"logging": {"level": "INFO", "format": "%(levelname)s|%(message)s"}})
        setup_logging(cfg)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.INFO)
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.handlers[0].formatter._fmt, "%(levelname)s|%(message)s")

    def test_level_override(self):
        setup_logging(Config(), level_override="debug")
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_rotating_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "artgen.log"
            cfg = Config()
            cfg.update({"logging": {"level": "INFO", "file": str(log_file), "format": "%(message)s"}})
            setup_logging(cfg)
            file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
            self.assertEqual(len(file_handlers), 1)
            logging.getLogger("artgen.test").info("rendered 12 rows")
            file_handlers[0].flush()
            self.assertIn("rendered 12 rows", log_file.read_text(encoding="utf-8"))
            logging.basicConfig(force=True)

    def test_http_debug(self):
        cfg = Config()
        setup_logging(cfg)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)
        cfg.update({"logging": {"http_debug": True}})
        setup_logging(cfg)
        self.assertEqual(logging.getLogger("urllib3").level, logging.DEBUG)
        self.assertEqual(logging.getLogger("requests").level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
