from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from src.models import is_reserved_name
from src.profiles.store import ProfileValidationError, hotkey_name_note, validate_profile_name
from src.ui.prompts import show_warning

logger = logging.getLogger(__name__)


class SaveProfileDialog(QDialog):
    """Asks for a profile name and hands it to ``submit``.

    ``submit`` performs the save (including any overwrite prompt) and returns
    False when the user backed out, in which case the dialog stays open.
    """

    def __init__(
        self,
        existing_names: Iterable[str],
        title: str,
        submit: Callable[[str], bool],
        current_name: str = "",
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(320)
        self._submit = submit
        self.selected_name = ""

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Profile name:"))
        self._combo_name = QComboBox()
        self._combo_name.setEditable(True)
        self._combo_name.addItems([n for n in existing_names if not is_reserved_name(n)])
        self._combo_name.setCurrentText("" if is_reserved_name(current_name) else current_name)
        layout.addWidget(self._combo_name)
        self._lbl_note = QLabel("")
        self._lbl_note.setWordWrap(True)
        self._lbl_note.setStyleSheet("color: #b36b00;")
        layout.addWidget(self._lbl_note)
        self._combo_name.currentTextChanged.connect(self._update_note)
        self._update_note(self._combo_name.currentText())

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_save)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _update_note(self, text: str) -> None:
        self._lbl_note.setText(hotkey_name_note(text) or "")

    def _on_save(self) -> None:
        try:
            name = validate_profile_name(self._combo_name.currentText())
            if not self._submit(name):
                return
        except ProfileValidationError as e:
            show_warning(self, "Invalid Name", str(e))
            return
        except OSError as e:
            logger.error(f"Profile save failed: {e}")
            show_warning(self, "Save Failed", f"Could not write the profile file:\n{e}")
            return
        self.selected_name = name
        self.accept()
