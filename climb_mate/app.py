# climb_mate/app.py
from __future__ import annotations

import sys
from typing import Optional

from PyQt5.QtWidgets import QApplication

from .config import AppConfig, load_config
from .main_window import MainWindow


def run_app(cfg: Optional[AppConfig] = None) -> int:
    app = QApplication.instance() or QApplication(sys.argv)

    win = MainWindow(cfg or load_config())
    win.show()

    return app.exec_()
