import unittest

from src.models import ItemSelection
from src.profiles.codec import BuildCodec, GraceCodec, escape, split_fields, split_name, unescape


class EscapingTests(unittest.TestCase):
    def test_escape_doubles_pipes(self) -> None:
        self.assertEqual(escape("A|B"), "A||B")
        self.assertEqual(unescape("A||B"), "A|B")

    def test_split_fields_keeps_escaped_pipes(self) -> None:
        self.assertEqual(split_fields("a||b|c|d"), ["a|b", "c", "d"])

    def test_split_name_uses_first_unescaped_pipe(self) -> None:
        self.assertEqual(split_name("A||B|x||y|z"), ("A|B", "x||y|z"))

    def test_split_name_without_separator(self) -> None:
        self.assertIsNone(split_name("just a name"))
        self.assertIsNone(split_name("only||escaped"))


class BuildCodecTests(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = BuildCodec()

    def test_encode_line(self) -> None:
        line = self.codec.encode_line(
            "Boss Run",
            [
                ItemSelection("Moonveil", "Normal", "Default", 10, 1),
                ItemSelection("Golden Seed", quantity=5),
            ],
        )
        self.assertEqual(
            line, "Boss Run|Moonveil|Normal|Default|10|1;Golden Seed|Normal|Default|0|5"
        )

    def test_decode_line(self) -> None:
        name, items = self.codec.decode_line(
            "Bleed|Uchigatana|Blood|Seppuku|25|1;Rune Arc|Normal|Default|0|3"
        )
        self.assertEqual(name, "Bleed")
        self.assertEqual(
            items,
            [
                ItemSelection("Uchigatana", "Blood", "Seppuku", 25, 1),
                ItemSelection("Rune Arc", "Normal", "Default", 0, 3),
            ],
        )

    def test_pipes_in_name_and_fields_round_trip(self) -> None:
        items = [ItemSelection("Odd|Item", "In|fusion", "Ash", 3, 2)]
        line = self.codec.encode_line("A|B", items)
        self.assertTrue(line.startswith("A||B|Odd||Item|"))
        self.assertEqual(self.codec.decode_line(line), ("A|B", items))

    def test_check_record_flags_fields_that_cannot_round_trip(self) -> None:
        self.assertIsNone(self.codec.check_record(ItemSelection("Odd|Item", "In|fusion")))
        self.assertIsNotNone(self.codec.check_record(ItemSelection("|Odd")))
        self.assertIsNotNone(self.codec.check_record(ItemSelection("Dagger", "|Heavy")))
        self.assertIsNotNone(self.codec.check_record(ItemSelection("Dagger", ash_name="a;b")))
        self.assertIsNotNone(self.codec.check_record(ItemSelection("")))

    def test_short_and_malformed_records_are_skipped(self) -> None:
        name, items = self.codec.decode_line(
            "Mixed|Dagger|Normal;Dagger|Normal|Default|x|1;Dagger|Heavy|Default|2|1;"
        )
        self.assertEqual(name, "Mixed")
        self.assertEqual(items, [ItemSelection("Dagger", "Heavy", "Default", 2, 1)])

    def test_line_without_separator_is_rejected(self) -> None:
        self.assertIsNone(self.codec.decode_line("garbage"))

    def test_empty_profile_body(self) -> None:
        self.assertEqual(self.codec.decode_line("Empty|"), ("Empty", []))


class GraceCodecTests(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = GraceCodec()

    def test_encode_line(self) -> None:
        self.assertEqual(self.codec.encode_line("Early", [76101, 76111]), "Early:76101,76111")

    def test_decode_drops_duplicates_and_bad_ids(self) -> None:
        self.assertEqual(
            self.codec.decode_line("Early:76101, 76111,76101,abc,"),
            ("Early", [76101, 76111]),
        )

    def test_name_may_contain_colon(self) -> None:
        self.assertEqual(self.codec.decode_line("Run: Any%:1,2"), ("Run: Any%", [1, 2]))

    def test_line_without_colon_is_rejected(self) -> None:
        self.assertIsNone(self.codec.decode_line("76101,76111"))
        self.assertIsNone(self.codec.decode_line(":1,2"))


if __name__ == "__main__":
    unittest.main()
