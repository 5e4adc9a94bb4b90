import tempfile
import unittest
from pathlib import Path

from src.automation.game_process import (
    DryRunProcess,
    resolve_spawn,
    run_binding,
    spawn_all,
    unlock_graces,
)
from src.models import (
    ActionCatalog,
    BindingRecord,
    Catalog,
    CatalogItem,
    HotkeyAction,
    ItemCategory,
    ItemSelection,
    Lookup,
    Modifier,
)
from src.profiles.codec import BuildCodec, GraceCodec
from src.profiles.store import ProfileStore


def _catalog() -> Catalog:
    return Catalog(
        items=[
            CatalogItem("Uchigatana", 9000000, ItemCategory.SMITHING),
            CatalogItem("Moonveil", 9060000, ItemCategory.SOMBER),
            CatalogItem("Golden Seed", 1073752124, ItemCategory.NONE),
        ],
        infusions=[Lookup("Normal", 0), Lookup("Blood", 1100)],
        ashes=[Lookup("Default", 0), Lookup("Seppuku", 2147495148)],
    )


class SpawnTests(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = _catalog()

    def test_item_id_adds_level_and_infusion(self) -> None:
        resolved = resolve_spawn(
            self.catalog, ItemSelection("Uchigatana", "Blood", "Seppuku", 25, 1)
        )
        self.assertEqual(resolved, (9000000 + 25 + 1100, 1, 2147495148))

    def test_level_is_clamped_to_category(self) -> None:
        item_id, _, _ = resolve_spawn(self.catalog, ItemSelection("Moonveil", level=25))
        self.assertEqual(item_id, 9060010)
        item_id, _, _ = resolve_spawn(self.catalog, ItemSelection("Golden Seed", level=3))
        self.assertEqual(item_id, 1073752124)

    def test_unknown_infusion_and_ash_fall_back_to_zero(self) -> None:
        resolved = resolve_spawn(
            self.catalog, ItemSelection("uchigatana", "Nope", "Nope", 0, 2)
        )
        self.assertEqual(resolved, (9000000, 2, 0))

    def test_unknown_item_is_skipped(self) -> None:
        process = DryRunProcess()
        count = spawn_all(
            process,
            self.catalog,
            [ItemSelection("Nope"), ItemSelection("Golden Seed", quantity=4)],
        )
        self.assertEqual(count, 1)
        self.assertEqual(process.calls, [("spawn_item", 1073752124, 4, 0)])

    def test_unlock_graces_sets_flags(self) -> None:
        process = DryRunProcess()
        self.assertEqual(unlock_graces(process, [76101, 76111]), 2)
        self.assertEqual(
            process.calls,
            [("set_event_flag", 76101, True), ("set_event_flag", 76111, True)],
        )


class RunBindingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        tmp = Path(self._tmp.name)
        (tmp / "builds.txt").write_text(
            "bleed|Uchigatana|Blood|Default|5|1\n", encoding="utf-8"
        )
        (tmp / "graces.txt").write_text("early:76101,76111\n", encoding="utf-8")
        self.builds = ProfileStore(tmp / "builds.txt", BuildCodec())
        self.graces = ProfileStore(tmp / "graces.txt", GraceCodec())
        self.process = DryRunProcess()
        self.catalog = _catalog()
        self.actions = ActionCatalog()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, record: BindingRecord) -> str:
        return run_binding(
            record, self.process, self.catalog, self.actions, self.builds, self.graces
        )

    def test_spawn_build(self) -> None:
        message = self._run(BindingRecord(Modifier.NONE, "F1", HotkeyAction.SPAWN_BUILD, "bleed"))
        self.assertIn("bleed", message)
        self.assertEqual(self.process.calls, [("spawn_item", 9001105, 1, 0)])

    def test_missing_build(self) -> None:
        message = self._run(BindingRecord(Modifier.NONE, "F1", HotkeyAction.SPAWN_BUILD, "nope"))
        self.assertIn("not found", message)
        self.assertEqual(self.process.calls, [])

    def test_unlock_grace_profile(self) -> None:
        self._run(
            BindingRecord(Modifier.NONE, "F2", HotkeyAction.UNLOCK_GRACE_PROFILE, "early")
        )
        self.assertEqual(len(self.process.calls), 2)

    def test_other_actions_are_reported(self) -> None:
        message = self._run(BindingRecord(Modifier.CTRL, "F5", HotkeyAction.QUICK_SAVE))
        self.assertEqual(message, "Triggered Quick Save")


if __name__ == "__main__":
    unittest.main()
