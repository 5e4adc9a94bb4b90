import unittest

from PyQt6.QtCore import Qt

from src.ui.hotkey_setup_dialog import qt_key_name, vk_key_name


class QtKeyNameTests(unittest.TestCase):
    def test_shifted_digits_resolve_to_digit_keys(self) -> None:
        self.assertEqual(qt_key_name(Qt.Key.Key_Exclam.value), "D1")
        self.assertEqual(qt_key_name(Qt.Key.Key_At.value), "D2")
        self.assertEqual(qt_key_name(Qt.Key.Key_ParenRight.value), "D0")

    def test_shifted_symbols_outside_keypad_are_main_keys(self) -> None:
        self.assertEqual(qt_key_name(Qt.Key.Key_Plus.value, keypad=False), "OemPlus")
        self.assertEqual(qt_key_name(Qt.Key.Key_Asterisk.value, keypad=False), "D8")
        self.assertEqual(qt_key_name(Qt.Key.Key_Question.value), "OemQuestion")

    def test_keypad_keys(self) -> None:
        self.assertEqual(qt_key_name(Qt.Key.Key_Plus.value, keypad=True), "Add")
        self.assertEqual(qt_key_name(Qt.Key.Key_Asterisk.value, keypad=True), "Multiply")
        self.assertEqual(qt_key_name(Qt.Key.Key_3.value, keypad=True), "NumPad3")

    def test_unshifted_keys(self) -> None:
        self.assertEqual(qt_key_name(Qt.Key.Key_1.value), "D1")
        self.assertEqual(qt_key_name(Qt.Key.Key_Equal.value), "OemPlus")
        self.assertEqual(qt_key_name(Qt.Key.Key_F5.value), "F5")


class VirtualKeyNameTests(unittest.TestCase):
    def test_virtual_keys(self) -> None:
        self.assertEqual(vk_key_name(0x31), "D1")
        self.assertEqual(vk_key_name(0xBB), "OemPlus")
        self.assertEqual(vk_key_name(0x6B), "Add")
        self.assertEqual(vk_key_name(0x74), "F5")
        self.assertEqual(vk_key_name(0x63), "NumPad3")
        self.assertEqual(vk_key_name(0xA0), "LeftShift")
        self.assertIsNone(vk_key_name(0))


if __name__ == "__main__":
    unittest.main()
