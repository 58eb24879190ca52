import os
import sys

from dotenv import load_dotenv
from loguru import logger
from PySide6.QtWidgets import QApplication

from ui.ui_table import InventoryTableWindow


def configure_logging():
    load_dotenv()
    logger.remove()
    logger.add(sys.stderr, level=os.getenv("LOG_LEVEL", "INFO").upper())


def main():
    configure_logging()
    app = QApplication(sys.argv)

    window = InventoryTableWindow()
    window.show()

    sys.exit(app.exec())

if __name__ == "__main__":
    main()
