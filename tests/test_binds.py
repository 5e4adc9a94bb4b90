import unittest

from src.automation.binds import (
    BindingParser,
    default_key_table,
    default_modifier_table,
    format_binding,
    parse_bindings,
    serialize_binding,
    serialize_bindings,
    validate_bindings,
)
from src.models import (
    ActionCatalog,
    BindingMode,
    BindingRecord,
    BindingSet,
    HotkeyAction,
    Modifier,
)


class BindingParserTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = ActionCatalog()

    def test_parses_modifiers_key_and_action(self) -> None:
        bindings = parse_bindings("CTRL SHIFT F5 QUICK_SAVE", self.catalog)
        self.assertEqual(len(bindings), 1)
        record = bindings.records[0]
        self.assertEqual(record.modifiers, Modifier.CTRL | Modifier.SHIFT)
        self.assertEqual(record.key, "F5")
        self.assertEqual(record.action, HotkeyAction.QUICK_SAVE)
        self.assertIsNone(record.parameter)
        self.assertEqual(serialize_bindings(bindings, self.catalog), "CTRL SHIFT F5 QUICK_SAVE")

    def test_parameterized_action_takes_next_token(self) -> None:
        bindings = parse_bindings("ALT T TELEPORT_LOAD mygrace", self.catalog)
        record = bindings.records[0]
        self.assertEqual(record.modifiers, Modifier.ALT)
        self.assertEqual(record.key, "T")
        self.assertEqual(record.parameter, "mygrace")
        self.assertEqual(validate_bindings(bindings, self.catalog), [])

    def test_missing_parameter_parses_but_fails_validation(self) -> None:
        bindings = parse_bindings("ALT T TELEPORT_LOAD", self.catalog)
        record = bindings.records[0]
        self.assertIsNone(record.parameter)
        problems = validate_bindings(bindings, self.catalog)
        self.assertEqual(len(problems), 1)
        self.assertIn("parameter", problems[0])

    def test_parameter_token_is_consumed_even_if_it_is_a_modifier(self) -> None:
        bindings = parse_bindings("F5 TELEPORT_LOAD CTRL", self.catalog)
        record = bindings.records[0]
        self.assertEqual(record.parameter, "CTRL")
        self.assertEqual(record.modifiers, Modifier.NONE)

    def test_comments_and_blank_lines_are_skipped(self) -> None:
        text = "; comment\r\n# F5 QUICK_SAVE\n// F6 QUICK_SAVE\n\r\n\nF7 NO_DEATH\n"
        bindings = parse_bindings(text, self.catalog)
        self.assertEqual([r.key for r in bindings], ["F7"])

    def test_lines_without_key_or_action_are_ignored(self) -> None:
        text = "CTRL QUICK_SAVE\nCTRL F5\nF5 BOGUS QUICK_SAVE\nf6 QUICK_SAVE"
        bindings = parse_bindings(text, self.catalog)
        self.assertEqual(len(bindings), 1)
        self.assertEqual(bindings.records[0].key, "F5")

    def test_modifier_order_is_free_on_read_and_fixed_on_write(self) -> None:
        bindings = parse_bindings("WIN SHIFT ALT CTRL D1 NO_DEATH", self.catalog)
        record = bindings.records[0]
        self.assertEqual(
            record.modifiers, Modifier.CTRL | Modifier.ALT | Modifier.SHIFT | Modifier.WIN
        )
        self.assertEqual(
            serialize_binding(record, self.catalog), "CTRL ALT SHIFT WIN D1 NO_DEATH"
        )

    def test_token_priority_is_modifier_then_key_then_action(self) -> None:
        parser = BindingParser(
            modifier_table={"SHIFT": Modifier.SHIFT},
            key_table={"SHIFT": "ShiftKey", "F1": "F1"},
            action_table={
                "SHIFT": HotkeyAction.NO_DEATH,
                "F1": HotkeyAction.QUICK_SAVE,
                "GO": HotkeyAction.KILL_TARGET,
            },
            catalog=self.catalog,
        )
        record = parser.parse("SHIFT F1 GO").records[0]
        self.assertEqual(record.modifiers, Modifier.SHIFT)
        self.assertEqual(record.key, "F1")
        self.assertEqual(record.action, HotkeyAction.KILL_TARGET)

    def test_sparse_mode_keeps_duplicate_actions(self) -> None:
        bindings = parse_bindings("F1 NO_DEATH\nF2 NO_DEATH", self.catalog, BindingMode.SPARSE)
        self.assertEqual([r.key for r in bindings], ["F1", "F2"])

    def test_dense_mode_has_one_slot_per_action_and_last_line_wins(self) -> None:
        bindings = parse_bindings(
            "F1 NO_DEATH\nCTRL F2 NO_DEATH\nF3 GAME_SPEED 2", self.catalog, BindingMode.DENSE
        )
        self.assertEqual(len(bindings), len(self.catalog))
        self.assertEqual([r.action for r in bindings], self.catalog.actions)
        no_death = bindings.record_for(HotkeyAction.NO_DEATH)
        self.assertEqual(no_death.key, "F2")
        self.assertEqual(no_death.modifiers, Modifier.CTRL)
        self.assertEqual(bindings.record_for(HotkeyAction.GAME_SPEED).parameter, "2")
        self.assertIsNone(bindings.record_for(HotkeyAction.QUICK_SAVE).key)

    def test_dense_empty_text_gives_unbound_defaults(self) -> None:
        bindings = parse_bindings("", self.catalog, BindingMode.DENSE)
        self.assertEqual(len(bindings), len(self.catalog))
        self.assertEqual(bindings.bound(), [])
        self.assertEqual(serialize_bindings(bindings, self.catalog), "")

    def test_round_trip(self) -> None:
        original = BindingSet(
            mode=BindingMode.SPARSE,
            records=[
                BindingRecord(Modifier.CTRL | Modifier.SHIFT, "F5", HotkeyAction.QUICK_SAVE),
                BindingRecord(Modifier.ALT, "T", HotkeyAction.TELEPORT_LOAD, "mygrace"),
                BindingRecord(Modifier.WIN, "NumPad3", HotkeyAction.GAME_SPEED, "0.5"),
                BindingRecord(Modifier.NONE, "PageDown", HotkeyAction.NO_CLIP),
                BindingRecord(Modifier.NONE, "F1", HotkeyAction.NO_CLIP),
            ],
        )
        text = serialize_bindings(original, self.catalog)
        self.assertEqual(parse_bindings(text, self.catalog), original)

    def test_key_names_are_written_upper_case(self) -> None:
        record = BindingRecord(Modifier.NONE, "NumPad1", HotkeyAction.INF_FP)
        line = serialize_binding(record, self.catalog)
        self.assertEqual(line, "NUMPAD1 INF_FP")
        self.assertEqual(parse_bindings(line, self.catalog).records[0].key, "NumPad1")

    def test_serializer_skips_unbound_records_and_stray_parameters(self) -> None:
        bindings = BindingSet(
            records=[
                BindingRecord(Modifier.CTRL, None, HotkeyAction.NO_DEATH),
                BindingRecord(Modifier.NONE, "F2", HotkeyAction.ONE_HP, "ignored"),
                BindingRecord(Modifier.NONE, "F3", None),
            ]
        )
        self.assertEqual(serialize_bindings(bindings, self.catalog, newline="\n"), "F2 ONE_HP")

    def test_default_tables_cover_every_modifier(self) -> None:
        mods = default_modifier_table()
        self.assertEqual(set(mods), {"CTRL", "ALT", "SHIFT", "WIN"})
        keys = default_key_table()
        self.assertEqual(keys["F12"], "F12")
        self.assertEqual(keys["PAGEUP"], "PageUp")


class BindingValidationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = ActionCatalog()

    def test_key_without_action_is_reported(self) -> None:
        bindings = BindingSet(records=[BindingRecord(Modifier.NONE, "F1", None)])
        problems = validate_bindings(bindings, self.catalog)
        self.assertEqual(len(problems), 1)
        self.assertIn("action", problems[0])

    def test_parameter_with_space_is_reported(self) -> None:
        bindings = BindingSet(
            records=[BindingRecord(Modifier.NONE, "F1", HotkeyAction.SPAWN_BUILD, "boss run")]
        )
        self.assertEqual(len(validate_bindings(bindings, self.catalog)), 1)

    def test_unbound_parameterized_record_is_not_validated(self) -> None:
        bindings = BindingSet.dense(self.catalog)
        self.assertEqual(validate_bindings(bindings, self.catalog), [])


class BindingSetTests(unittest.TestCase):
    def test_dense_set_rejects_add(self) -> None:
        bindings = BindingSet.dense(ActionCatalog())
        with self.assertRaises(ValueError):
            bindings.add()

    def test_dense_remove_clears_key(self) -> None:
        bindings = BindingSet.dense(ActionCatalog())
        record = bindings.record_for(HotkeyAction.NO_DEATH)
        record.key = "F1"
        record.modifiers = Modifier.CTRL
        self.assertTrue(bindings.remove(record))
        self.assertIsNone(record.key)
        self.assertEqual(record.modifiers, Modifier.NONE)
        self.assertIn(record, bindings.records)

    def test_sparse_remove_drops_record(self) -> None:
        bindings = BindingSet()
        first = bindings.add(BindingRecord(key="F1", action=HotkeyAction.NO_DEATH))
        second = bindings.add(BindingRecord(key="F1", action=HotkeyAction.NO_DEATH))
        self.assertTrue(bindings.remove(second))
        self.assertEqual(len(bindings), 1)
        self.assertIs(bindings.records[0], first)


class FormatBindingTests(unittest.TestCase):
    def test_display_order(self) -> None:
        record = BindingRecord(
            Modifier.WIN | Modifier.SHIFT | Modifier.ALT | Modifier.CTRL, "F5"
        )
        self.assertEqual(format_binding(record), "Ctrl+Alt+Shift+Win+F5")

    def test_unbound_is_empty(self) -> None:
        self.assertEqual(format_binding(BindingRecord(Modifier.CTRL)), "")


if __name__ == "__main__":
    unittest.main()
