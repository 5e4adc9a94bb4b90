"""Global hotkey listener for hotkey file bindings (works when the app does not have focus).

Uses the 'keyboard' library with a low-level hook (keyboard.hook) instead of add_hotkey,
so bound keys are detected even when other keys (e.g. W while running) are held.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from src.models import BindingRecord, Modifier

logger = logging.getLogger(__name__)

_KEYBOARD_NAMES = {
    "Space": "space",
    "Enter": "enter",
    "Tab": "tab",
    "Escape": "esc",
    "Back": "backspace",
    "Insert": "insert",
    "Delete": "delete",
    "Home": "home",
    "End": "end",
    "PageUp": "page up",
    "PageDown": "page down",
    "Up": "up",
    "Down": "down",
    "Left": "left",
    "Right": "right",
    "Pause": "pause",
    "Scroll": "scroll lock",
    "Capital": "caps lock",
    "NumLock": "num lock",
    "PrintScreen": "print screen",
    "OemTilde": "`",
    "OemMinus": "-",
    "OemPlus": "=",
    "OemOpenBrackets": "[",
    "OemCloseBrackets": "]",
    "OemPipe": "\\",
    "OemSemicolon": ";",
    "OemQuotes": "'",
    "OemComma": ",",
    "OemPeriod": ".",
    "OemQuestion": "/",
    "Multiply": "num *",
    "Add": "num +",
    "Subtract": "num -",
    "Decimal": "num .",
    "Divide": "num /",
}

_KEYBOARD_MODIFIERS = {
    "ctrl": Modifier.CTRL,
    "left ctrl": Modifier.CTRL,
    "right ctrl": Modifier.CTRL,
    "control": Modifier.CTRL,
    "shift": Modifier.SHIFT,
    "left shift": Modifier.SHIFT,
    "right shift": Modifier.SHIFT,
    "alt": Modifier.ALT,
    "left alt": Modifier.ALT,
    "right alt": Modifier.ALT,
    "alt gr": Modifier.ALT,
    "windows": Modifier.WIN,
    "left windows": Modifier.WIN,
    "right windows": Modifier.WIN,
}


def keyboard_token(key: str) -> str:
    """Our key name ('D1', 'NumPad3', 'PageUp') -> keyboard library event name."""
    if key in _KEYBOARD_NAMES:
        return _KEYBOARD_NAMES[key]
    if len(key) == 2 and key[0] == "D" and key[1].isdigit():
        return key[1]
    if key.startswith("NumPad") and key[6:].isdigit():
        return f"num {key[6:]}"
    return key.lower()


# Names the keyboard library reports while Shift is held (US layout) -> unshifted key
_SHIFTED_NAMES = {
    "!": "1", "@": "2", "#": "3", "$": "4", "%": "5",
    "^": "6", "&": "7", "*": "8", "(": "9", ")": "0",
    "~": "`", "_": "-", "+": "=", "{": "[", "}": "]", "|": "\\",
    ":": ";", "\"": "'", "<": ",", ">": ".", "?": "/",
}


def event_token(name: str, is_keypad: bool = False) -> str:
    token = " ".join(str(name or "").strip().lower().split())
    if is_keypad and token and not token.startswith("num "):
        return f"num {token}"
    return _SHIFTED_NAMES.get(token, token)


def modifier_for_token(token: str) -> Modifier:
    return _KEYBOARD_MODIFIERS.get(token, Modifier.NONE)


def binding_index(records: list[BindingRecord]) -> dict[tuple[int, str], list[BindingRecord]]:
    """(modifier bits, key token) -> bindings triggered by that combo."""
    index: dict[tuple[int, str], list[BindingRecord]] = {}
    for record in records:
        if record.key is None or record.action is None:
            continue
        combo = (record.modifiers.value, keyboard_token(record.key))
        index.setdefault(combo, []).append(record)
    return index


def match_bindings(
    index: dict[tuple[int, str], list[BindingRecord]],
    held: Modifier,
    token: str,
) -> list[BindingRecord]:
    return list(index.get((held.value, token), []))


def _signature(records: list[BindingRecord]) -> tuple:
    return tuple(
        (r.modifiers.value, r.key, r.action, r.parameter)
        for r in records
        if r.key is not None and r.action is not None
    )


class _ListenerThread(QThread):
    """Uses a low-level keyboard.hook to listen for the current bindings."""

    triggered = pyqtSignal(object)

    def __init__(
        self,
        get_bindings: Callable[[], list[BindingRecord]],
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._get_bindings = get_bindings
        self._running = True
        self._hook = None

    def _unhook(self, keyboard) -> None:
        if self._hook is None:
            return
        try:
            keyboard.unhook(self._hook)
        except (KeyError, ValueError) as e:
            logger.debug(f"keyboard unhook failed: {e}")
        self._hook = None

    def run(self) -> None:
        try:
            import keyboard
        except ImportError:
            logger.warning(
                "keyboard library not installed; global hotkeys disabled. "
                "Install with: pip install keyboard"
            )
            return

        while self._running:
            records = list(self._get_bindings() or [])
            signature = _signature(records)
            if not signature:
                self._unhook(keyboard)
                self.msleep(500)
                continue
            self._unhook(keyboard)
            index = binding_index(records)

            # Track key-down state so we trigger only once per press.
            held_keys: set[str] = set()
            held_modifiers = [Modifier.NONE]
            held_modifier_tokens: dict[str, Modifier] = {}

            def on_event(event):
                if not self._running:
                    return
                token = event_token(
                    getattr(event, "name", None) or "",
                    bool(getattr(event, "is_keypad", False)),
                )
                if not token:
                    return
                modifier = modifier_for_token(token)
                if event.event_type == keyboard.KEY_DOWN:
                    if modifier != Modifier.NONE:
                        held_modifier_tokens[token] = modifier
                        held_modifiers[0] = _combine(held_modifier_tokens)
                        return
                    if token in held_keys:
                        return
                    held_keys.add(token)
                    for record in match_bindings(index, held_modifiers[0], token):
                        self.triggered.emit(record)
                elif event.event_type == keyboard.KEY_UP:
                    if modifier != Modifier.NONE:
                        held_modifier_tokens.pop(token, None)
                        held_modifiers[0] = _combine(held_modifier_tokens)
                        return
                    held_keys.discard(token)

            try:
                self._hook = keyboard.hook(on_event)
                logger.info(f"Global hotkeys active: {len(signature)} binding(s)")
            except Exception as e:
                logger.warning(f"keyboard hook failed: {e}")

            while self._running:
                if _signature(list(self._get_bindings() or [])) != signature:
                    break
                self.msleep(200)

        self._unhook(keyboard)

    def stop(self) -> None:
        self._running = False


def _combine(tokens: dict[str, Modifier]) -> Modifier:
    mods = Modifier.NONE
    for m in tokens.values():
        mods |= m
    return mods


class GlobalHotkeyListener(QObject):
    """Starts a background thread that emits the BindingRecord whose combo was pressed."""

    triggered = pyqtSignal(object)

    def __init__(
        self,
        get_bindings: Callable[[], list[BindingRecord]],
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._get_bindings = get_bindings
        self._thread: Optional[_ListenerThread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.isRunning():
            return
        self._thread = _ListenerThread(self._get_bindings, self)
        self._thread.triggered.connect(self.triggered.emit)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.stop()
            self._thread.wait(2000)
            self._thread = None
