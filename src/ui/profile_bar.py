"""Profile selector row shared by the item spawner and the grace window."""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QPushButton, QWidget

from src.models import EMPTY_PROFILE_NAME
from src.profiles.session import ProfileSession
from src.profiles.store import ProfileValidationError
from src.ui.prompts import confirm_with, show_warning
from src.ui.save_profile_dialog import SaveProfileDialog

logger = logging.getLogger(__name__)


class ProfileBar(QWidget):
    # Emitted after the session's active profile or selection was replaced
    profile_loaded = pyqtSignal(str)

    def __init__(
        self,
        session: ProfileSession,
        kind_label: str = "Profile",
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._session = session
        self._kind_label = kind_label

        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        row.addWidget(QLabel(f"{kind_label}:"))
        self._combo = QComboBox()
        self._combo.setMinimumWidth(180)
        row.addWidget(self._combo, 1)
        self._btn_save = QPushButton("Save")
        self._btn_delete = QPushButton("Delete")
        self._btn_delete.setObjectName("deleteButton")
        row.addWidget(self._btn_save)
        row.addWidget(self._btn_delete)

        self._combo.currentTextChanged.connect(self._on_selected)
        self._btn_save.clicked.connect(self._on_save)
        self._btn_delete.clicked.connect(self._on_delete)
        self.refresh()

    def refresh(self) -> None:
        """Rebuild the dropdown from the store and point it at the active profile."""
        self._combo.blockSignals(True)
        self._combo.clear()
        self._combo.addItems(self._session.store.names())
        self._combo.setCurrentText(self._session.active_name)
        self._combo.blockSignals(False)
        self.update_buttons()

    def update_buttons(self) -> None:
        self._btn_delete.setEnabled(self._session.has_profile)
        self._btn_save.setEnabled(bool(self._session.selection))

    def _revert_selection(self) -> None:
        self._combo.blockSignals(True)
        self._combo.setCurrentText(self._session.active_name)
        self._combo.blockSignals(False)

    def _on_selected(self, name: str) -> None:
        if not name:
            return
        if not self._session.select(name, confirm_with(self)):
            self._revert_selection()
            return
        logger.info(f"Loaded {self._kind_label.lower()} {name!r}")
        self.update_buttons()
        self.profile_loaded.emit(self._session.active_name)

    def _on_save(self) -> None:
        if not self._session.selection:
            show_warning(
                self,
                "Nothing to Save",
                f"Cannot save an empty {self._kind_label.lower()}. Please select at least one entry.",
            )
            return
        dialog = SaveProfileDialog(
            self._session.store.names(),
            f"Save {self._kind_label}",
            lambda name: self._session.save_as(name, confirm_with(self)),
            current_name=self._session.active_name,
            parent=self,
        )
        if dialog.exec() != SaveProfileDialog.DialogCode.Accepted:
            return
        self.refresh()
        self.profile_loaded.emit(self._session.active_name)

    def _on_delete(self) -> None:
        name = self._session.active_name
        try:
            deleted = self._session.delete_active(confirm_with(self))
        except ProfileValidationError as e:
            show_warning(self, "Delete", str(e))
            return
        except OSError as e:
            logger.error(f"Delete of {name!r} failed: {e}")
            show_warning(self, "Delete Failed", f"Could not write the profile file:\n{e}")
            return
        if deleted:
            logger.info(f"Deleted {self._kind_label.lower()} {name!r}")
            self.refresh()
            self.profile_loaded.emit(EMPTY_PROFILE_NAME)
