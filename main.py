"""Entry point for the Invoice Manager desktop app."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from PyQt5.QtWidgets import QApplication

from invoice_manager import config
from invoice_manager.ui.main_window import MainWindow


def configure_logging() -> logging.Logger:
    """Send the application's log records to a rotating file."""
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger("invoice_manager")
    if not logger.handlers:
        handler = RotatingFileHandler(
            config.LOG_FILE,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL)
        logger.propagate = False

    logging.captureWarnings(True)
    return logger


def main() -> None:
    configure_logging()
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
