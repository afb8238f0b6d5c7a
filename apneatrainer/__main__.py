"""Allow running ApneaTrainer as a module: python -m apneatrainer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import TrainingWindow


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("ApneaTrainer")
    app.setOrganizationName("ApneaTrainer")

    window = TrainingWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
