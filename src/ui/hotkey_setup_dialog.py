"""Hotkey setup dialog.

Receives the token tables (via a BindingParser) and the action catalog,
edits a working BindingSet, and on OK exposes the finalized set and its
file text to the caller. Nothing is written to disk here.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

from PyQt6.QtCore import QEvent, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from src.automation.binds import (
    BindingParser,
    format_binding,
    serialize_bindings,
    validate_bindings,
)
from src.automation.hotkey_capture import HotkeyCapture
from src.models import ActionCatalog, BindingMode, BindingRecord, BindingSet, Modifier
from src.profiles.session import DirtyGuard
from src.ui.prompts import confirm_with, show_warning

logger = logging.getLogger(__name__)

_COL_HOTKEY = 0
_COL_ACTION = 1
_COL_PARAM = 2
_COL_REMOVE = 3


def _build_qt_key_names() -> dict[int, str]:
    names: dict[int, str] = {}
    for i in range(26):
        names[Qt.Key.Key_A.value + i] = chr(ord("A") + i)
    for d in range(10):
        names[Qt.Key.Key_0.value + d] = f"D{d}"
    for n in range(1, 25):
        names[Qt.Key.Key_F1.value + n - 1] = f"F{n}"
    names.update({
        Qt.Key.Key_Space.value: "Space",
        Qt.Key.Key_Return.value: "Enter",
        Qt.Key.Key_Enter.value: "Enter",
        Qt.Key.Key_Tab.value: "Tab",
        Qt.Key.Key_Backtab.value: "Tab",
        Qt.Key.Key_Escape.value: "Escape",
        Qt.Key.Key_Backspace.value: "Back",
        Qt.Key.Key_Insert.value: "Insert",
        Qt.Key.Key_Delete.value: "Delete",
        Qt.Key.Key_Home.value: "Home",
        Qt.Key.Key_End.value: "End",
        Qt.Key.Key_PageUp.value: "PageUp",
        Qt.Key.Key_PageDown.value: "PageDown",
        Qt.Key.Key_Up.value: "Up",
        Qt.Key.Key_Down.value: "Down",
        Qt.Key.Key_Left.value: "Left",
        Qt.Key.Key_Right.value: "Right",
        Qt.Key.Key_Pause.value: "Pause",
        Qt.Key.Key_ScrollLock.value: "Scroll",
        Qt.Key.Key_CapsLock.value: "Capital",
        Qt.Key.Key_NumLock.value: "NumLock",
        Qt.Key.Key_Print.value: "PrintScreen",
        Qt.Key.Key_QuoteLeft.value: "OemTilde",
        Qt.Key.Key_Minus.value: "OemMinus",
        Qt.Key.Key_Equal.value: "OemPlus",
        Qt.Key.Key_BracketLeft.value: "OemOpenBrackets",
        Qt.Key.Key_BracketRight.value: "OemCloseBrackets",
        Qt.Key.Key_Backslash.value: "OemPipe",
        Qt.Key.Key_Semicolon.value: "OemSemicolon",
        Qt.Key.Key_Apostrophe.value: "OemQuotes",
        Qt.Key.Key_Comma.value: "OemComma",
        Qt.Key.Key_Period.value: "OemPeriod",
        Qt.Key.Key_Slash.value: "OemQuestion",
        # Shifted symbols (US layout) map back to the key that produced them
        Qt.Key.Key_Exclam.value: "D1",
        Qt.Key.Key_At.value: "D2",
        Qt.Key.Key_NumberSign.value: "D3",
        Qt.Key.Key_Dollar.value: "D4",
        Qt.Key.Key_Percent.value: "D5",
        Qt.Key.Key_AsciiCircum.value: "D6",
        Qt.Key.Key_Ampersand.value: "D7",
        Qt.Key.Key_Asterisk.value: "D8",
        Qt.Key.Key_ParenLeft.value: "D9",
        Qt.Key.Key_ParenRight.value: "D0",
        Qt.Key.Key_AsciiTilde.value: "OemTilde",
        Qt.Key.Key_Underscore.value: "OemMinus",
        Qt.Key.Key_Plus.value: "OemPlus",
        Qt.Key.Key_BraceLeft.value: "OemOpenBrackets",
        Qt.Key.Key_BraceRight.value: "OemCloseBrackets",
        Qt.Key.Key_Bar.value: "OemPipe",
        Qt.Key.Key_Colon.value: "OemSemicolon",
        Qt.Key.Key_QuoteDbl.value: "OemQuotes",
        Qt.Key.Key_Less.value: "OemComma",
        Qt.Key.Key_Greater.value: "OemPeriod",
        Qt.Key.Key_Question.value: "OemQuestion",
        # Pure modifiers: reported so the capture can ignore them
        Qt.Key.Key_Control.value: "Ctrl",
        Qt.Key.Key_Shift.value: "Shift",
        Qt.Key.Key_Alt.value: "Alt",
        Qt.Key.Key_AltGr.value: "Alt",
        Qt.Key.Key_Meta.value: "Win",
        Qt.Key.Key_Super_L.value: "LWin",
        Qt.Key.Key_Super_R.value: "RWin",
    })
    return names


_QT_KEY_NAMES = _build_qt_key_names()

_QT_KEYPAD_NAMES = {
    Qt.Key.Key_Asterisk.value: "Multiply",
    Qt.Key.Key_Plus.value: "Add",
    Qt.Key.Key_Minus.value: "Subtract",
    Qt.Key.Key_Period.value: "Decimal",
    Qt.Key.Key_Slash.value: "Divide",
}


def _build_vk_names() -> dict[int, str]:
    names: dict[int, str] = {}
    for i in range(26):
        names[0x41 + i] = chr(ord("A") + i)
    for d in range(10):
        names[0x30 + d] = f"D{d}"
        names[0x60 + d] = f"NumPad{d}"
    for n in range(1, 25):
        names[0x6F + n] = f"F{n}"
    names.update({
        0x08: "Back", 0x09: "Tab", 0x0D: "Enter", 0x13: "Pause", 0x14: "Capital",
        0x1B: "Escape", 0x20: "Space", 0x21: "PageUp", 0x22: "PageDown",
        0x23: "End", 0x24: "Home", 0x25: "Left", 0x26: "Up", 0x27: "Right",
        0x28: "Down", 0x2C: "PrintScreen", 0x2D: "Insert", 0x2E: "Delete",
        0x6A: "Multiply", 0x6B: "Add", 0x6D: "Subtract", 0x6E: "Decimal",
        0x6F: "Divide", 0x90: "NumLock", 0x91: "Scroll",
        0xBA: "OemSemicolon", 0xBB: "OemPlus", 0xBC: "OemComma",
        0xBD: "OemMinus", 0xBE: "OemPeriod", 0xBF: "OemQuestion",
        0xC0: "OemTilde", 0xDB: "OemOpenBrackets", 0xDC: "OemPipe",
        0xDD: "OemCloseBrackets", 0xDE: "OemQuotes",
        0x10: "Shift", 0x11: "Ctrl", 0x12: "Alt",
        0xA0: "LeftShift", 0xA1: "RightShift", 0xA2: "LeftCtrl",
        0xA3: "RightCtrl", 0xA4: "LeftAlt", 0xA5: "RightAlt",
        0x5B: "LWin", 0x5C: "RWin",
    })
    return names


_VK_NAMES = _build_vk_names()


def vk_key_name(vk: int) -> Optional[str]:
    """Windows virtual-key code -> key name; independent of Shift and layout."""
    return _VK_NAMES.get(vk)


def qt_key_name(key: int, keypad: bool = False) -> Optional[str]:
    """Qt key code -> key name used in the hotkey file (None if unsupported)."""
    if keypad:
        if Qt.Key.Key_0.value <= key <= Qt.Key.Key_9.value:
            return f"NumPad{key - Qt.Key.Key_0.value}"
        if key in _QT_KEYPAD_NAMES:
            return _QT_KEYPAD_NAMES[key]
    return _QT_KEY_NAMES.get(key)


def qt_modifiers(mods: Qt.KeyboardModifier) -> Modifier:
    result = Modifier.NONE
    if mods & Qt.KeyboardModifier.ControlModifier:
        result |= Modifier.CTRL
    if mods & Qt.KeyboardModifier.AltModifier:
        result |= Modifier.ALT
    if mods & Qt.KeyboardModifier.ShiftModifier:
        result |= Modifier.SHIFT
    if mods & Qt.KeyboardModifier.MetaModifier:
        result |= Modifier.WIN
    return result


class _HotkeyEdit(QLineEdit):
    """Read-only field that reports every key press instead of typing it."""

    key_captured = pyqtSignal(str, object)  # key name, Modifier
    focus_entered = pyqtSignal()
    focus_left = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setPlaceholderText("Click and press a key")

    def event(self, event) -> bool:  # type: ignore[override]
        # Tab would otherwise move focus before keyPressEvent sees it.
        if event.type() == QEvent.Type.KeyPress and event.key() in (
            Qt.Key.Key_Tab.value,
            Qt.Key.Key_Backtab.value,
        ):
            self.keyPressEvent(event)
            return True
        return super().event(event)

    def keyPressEvent(self, event) -> None:
        event.accept()
        name = None
        if sys.platform == "win32":
            name = vk_key_name(event.nativeVirtualKey())
        if name is None:
            keypad = bool(event.modifiers() & Qt.KeyboardModifier.KeypadModifier)
            name = qt_key_name(event.key(), keypad)
        if name:
            self.key_captured.emit(name, qt_modifiers(event.modifiers()))

    def focusInEvent(self, event) -> None:
        super().focusInEvent(event)
        self.focus_entered.emit()

    def focusOutEvent(self, event) -> None:
        super().focusOutEvent(event)
        self.focus_left.emit()


class HotkeySetupDialog(QDialog):
    def __init__(
        self,
        parser: BindingParser,
        catalog: ActionCatalog,
        existing_text: str = "",
        allow_clear: bool = True,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Hotkey Setup")
        self.setMinimumSize(620, 420)
        self._catalog = catalog
        self._bindings: BindingSet = parser.parse(existing_text or "")
        self._capture = HotkeyCapture(allow_clear=allow_clear)
        self._guard = DirtyGuard()
        self._result: Optional[BindingSet] = None

        self._build_ui()
        self._populate_table()

    @property
    def is_dense(self) -> bool:
        return self._bindings.mode == BindingMode.DENSE

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        hint = "Click a hotkey field and press the key combination."
        if self._capture.allow_clear:
            hint += " Esc or Backspace clears it."
        layout.addWidget(QLabel(hint))

        self._table = QTableWidget(0, 4)
        self._table.setHorizontalHeaderLabels(["Hotkey", "Action", "Parameter", ""])
        self._table.verticalHeader().setVisible(False)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        header = self._table.horizontalHeader()
        header.setSectionResizeMode(_COL_HOTKEY, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(_COL_ACTION, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(_COL_PARAM, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(_COL_REMOVE, QHeaderView.ResizeMode.ResizeToContents)
        layout.addWidget(self._table, 1)

        row = QHBoxLayout()
        self._btn_add = QPushButton("+ Add Hotkey")
        self._btn_add.setVisible(not self.is_dense)
        self._btn_add.clicked.connect(self._on_add)
        row.addWidget(self._btn_add)
        row.addStretch(1)
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        row.addWidget(buttons)
        layout.addLayout(row)

    def _populate_table(self) -> None:
        self._capture.cancel()
        self._table.setRowCount(0)
        for record in self._bindings:
            self._append_row(record)

    def _append_row(self, record: BindingRecord) -> None:
        row = self._table.rowCount()
        self._table.insertRow(row)

        edit = _HotkeyEdit()
        edit.setText(format_binding(record))
        edit.focus_entered.connect(lambda r=record: self._capture.begin(r))
        edit.focus_left.connect(self._capture.cancel)
        edit.key_captured.connect(
            lambda name, mods, r=record, e=edit: self._on_key_captured(r, e, name, mods)
        )
        self._table.setCellWidget(row, _COL_HOTKEY, edit)

        param = QLineEdit(record.parameter or "")
        param.setPlaceholderText("required")

        if self.is_dense:
            item = QTableWidgetItem(self._catalog.display_name(record.action))
            item.setFlags(Qt.ItemFlag.ItemIsEnabled)
            self._table.setItem(row, _COL_ACTION, item)
        else:
            combo = QComboBox()
            combo.addItem("")
            combo.addItems([spec.display_name for spec in self._catalog])
            combo.setCurrentText(self._catalog.display_name(record.action))
            combo.currentTextChanged.connect(
                lambda text, r=record, p=param: self._on_action_changed(r, p, text)
            )
            self._table.setCellWidget(row, _COL_ACTION, combo)

        param.setEnabled(self._catalog.needs_param(record.action))
        param.textEdited.connect(lambda text, r=record: self._on_param_edited(r, text))
        self._table.setCellWidget(row, _COL_PARAM, param)

        button = QPushButton("Clear" if self.is_dense else "Remove")
        button.clicked.connect(lambda _checked=False, r=record: self._on_remove(r))
        self._table.setCellWidget(row, _COL_REMOVE, button)

    def _on_key_captured(
        self, record: BindingRecord, edit: QLineEdit, name: str, mods: Modifier
    ) -> None:
        if self._capture.target is not record:
            self._capture.begin(record)
        text = self._capture.handle_key(name, mods)
        if text is None:
            return
        edit.setText(text)
        self._guard.mark()

    def _on_action_changed(self, record: BindingRecord, param: QLineEdit, text: str) -> None:
        record.action = self._catalog.from_display_name(text)
        needs = self._catalog.needs_param(record.action)
        param.setEnabled(needs)
        if not needs:
            record.parameter = None
            param.clear()
        self._guard.mark()

    def _on_param_edited(self, record: BindingRecord, text: str) -> None:
        record.parameter = text.strip() or None
        self._guard.mark()

    def _on_add(self) -> None:
        record = self._bindings.add()
        self._append_row(record)
        self._guard.mark()

    def _on_remove(self, record: BindingRecord) -> None:
        row = next((i for i, r in enumerate(self._bindings.records) if r is record), -1)
        if row < 0 or not self._bindings.remove(record):
            return
        self._capture.cancel()
        self._guard.mark()
        if self.is_dense:
            self._table.cellWidget(row, _COL_HOTKEY).clear()
            self._table.cellWidget(row, _COL_PARAM).clear()
        else:
            self._table.removeRow(row)

    def bindings(self) -> Optional[BindingSet]:
        """The confirmed set after OK, None if the dialog was cancelled."""
        return self._result

    def serialized_text(self) -> str:
        if self._result is None:
            return ""
        return serialize_bindings(self._result, self._catalog)

    def accept(self) -> None:  # type: ignore[override]
        problems = validate_bindings(self._bindings, self._catalog)
        if problems:
            show_warning(self, "Incomplete Hotkeys", "\n".join(problems))
            return
        self._result = self._bindings
        logger.info(f"Hotkey setup confirmed with {len(self._result.bound())} binding(s)")
        super().accept()

    def reject(self) -> None:  # type: ignore[override]
        if not self._guard.confirm_discard(
            confirm_with(self),
            "You have unsaved hotkey changes. Discard them?",
        ):
            return
        self._result = None
        super().reject()
