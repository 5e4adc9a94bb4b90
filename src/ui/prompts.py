"""QMessageBox wrappers handed to the profile stores and sessions as callbacks."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QMessageBox, QWidget

from src.profiles.store import ConfirmFn


def confirm_with(parent: Optional[QWidget]) -> ConfirmFn:
    """A (title, message) -> bool callback asking Yes/No, defaulting to No."""

    def confirm(title: str, message: str) -> bool:
        reply = QMessageBox.question(
            parent,
            title,
            message,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes

    return confirm


def show_warning(parent: Optional[QWidget], title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
