import unittest

from src.automation.hotkey_capture import CaptureState, HotkeyCapture
from src.models import BindingRecord, HotkeyAction, Modifier


class HotkeyCaptureTests(unittest.TestCase):
    def setUp(self) -> None:
        self.record = BindingRecord(action=HotkeyAction.QUICK_SAVE)
        self.capture = HotkeyCapture()
        self.capture.begin(self.record)

    def test_modifier_keys_keep_capturing(self) -> None:
        for key in ("LeftCtrl", "RightShift", "Alt", "LWin", "Win"):
            self.assertIsNone(self.capture.handle_key(key, Modifier.CTRL))
        self.assertEqual(self.capture.state, CaptureState.CAPTURING)
        self.assertIsNone(self.record.key)

    def test_key_with_modifiers_finishes_capture(self) -> None:
        text = self.capture.handle_key("F5", Modifier.CTRL | Modifier.SHIFT)
        self.assertEqual(text, "Ctrl+Shift+F5")
        self.assertEqual(self.capture.state, CaptureState.IDLE)
        self.assertEqual(self.record.key, "F5")
        self.assertEqual(self.record.modifiers, Modifier.CTRL | Modifier.SHIFT)

    def test_system_key_is_replaced_by_underlying_key(self) -> None:
        text = self.capture.handle_key("System", Modifier.ALT, system_key="F4")
        self.assertEqual(text, "Alt+F4")
        self.assertEqual(self.record.key, "F4")

    def test_escape_clears_binding(self) -> None:
        self.record.key = "F1"
        self.record.modifiers = Modifier.ALT
        text = self.capture.handle_key("Escape", Modifier.NONE)
        self.assertEqual(text, "")
        self.assertIsNone(self.record.key)
        self.assertEqual(self.record.modifiers, Modifier.NONE)

    def test_escape_binds_when_clear_is_disabled(self) -> None:
        capture = HotkeyCapture(allow_clear=False)
        capture.begin(self.record)
        self.assertEqual(capture.handle_key("Back", Modifier.NONE), "Back")
        self.assertEqual(self.record.key, "Back")

    def test_idle_capture_ignores_keys(self) -> None:
        self.capture.cancel()
        self.assertIsNone(self.capture.handle_key("F5", Modifier.CTRL))
        self.assertIsNone(self.record.key)
        self.assertIsNone(self.capture.target)


if __name__ == "__main__":
    unittest.main()
