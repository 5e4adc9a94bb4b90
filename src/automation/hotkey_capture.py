"""Key capture for hotkey fields: the next non-modifier key press becomes the binding."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from src.automation.binds import format_binding
from src.models import BindingRecord, Modifier

logger = logging.getLogger(__name__)

# Keys that only change the modifier state; capture keeps waiting on these.
MODIFIER_KEYS = frozenset({
    "LeftCtrl", "RightCtrl", "Ctrl",
    "LeftShift", "RightShift", "Shift",
    "LeftAlt", "RightAlt", "Alt",
    "LWin", "RWin", "Win",
})

# Reported instead of the real key while Alt is held; the real key comes separately.
SYSTEM_KEY = "System"

CLEAR_KEYS = frozenset({"Escape", "Back"})


class CaptureState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"


class HotkeyCapture:
    def __init__(self, allow_clear: bool = True):
        self.allow_clear = allow_clear
        self.state = CaptureState.IDLE
        self._target: Optional[BindingRecord] = None

    @property
    def target(self) -> Optional[BindingRecord]:
        return self._target

    @property
    def is_capturing(self) -> bool:
        return self.state == CaptureState.CAPTURING

    def begin(self, record: BindingRecord) -> None:
        self._target = record
        self.state = CaptureState.CAPTURING

    def cancel(self) -> None:
        self._target = None
        self.state = CaptureState.IDLE

    def handle_key(
        self,
        key: Optional[str],
        modifiers: Modifier = Modifier.NONE,
        system_key: Optional[str] = None,
    ) -> Optional[str]:
        """Feed one key press.

        Returns the new display text once the target record has been
        updated (capture is then finished), or None while still waiting.
        """
        if not self.is_capturing or self._target is None:
            return None
        if not key or key in MODIFIER_KEYS:
            return None
        effective = system_key if key == SYSTEM_KEY else key
        if not effective or effective in MODIFIER_KEYS:
            return None
        record = self._target
        if self.allow_clear and effective in CLEAR_KEYS:
            record.clear_key()
            logger.debug("Hotkey cleared")
        else:
            record.key = effective
            record.modifiers = modifiers
            logger.debug(f"Captured hotkey {format_binding(record)}")
        self.cancel()
        return format_binding(record)
