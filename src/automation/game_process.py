"""Boundary to the game process: resolving selections to ids and issuing calls."""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from src.automation.binds import format_binding
from src.models import (
    ActionCatalog,
    BindingRecord,
    Catalog,
    HotkeyAction,
    ItemSelection,
    clamp_level,
)
from src.profiles.store import ProfileStore

logger = logging.getLogger(__name__)


class GameProcess(Protocol):
    def spawn_item(self, item_id: int, quantity: int, ash_id: int) -> None: ...

    def set_event_flag(self, flag_id: int, value: bool) -> None: ...


class DryRunProcess:
    """Logs every call instead of touching the game. Used when no game is attached."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def spawn_item(self, item_id: int, quantity: int, ash_id: int) -> None:
        self.calls.append(("spawn_item", item_id, quantity, ash_id))
        logger.info(f"[dry run] spawn item {item_id} x{quantity} ash={ash_id}")

    def set_event_flag(self, flag_id: int, value: bool) -> None:
        self.calls.append(("set_event_flag", flag_id, value))
        logger.info(f"[dry run] event flag {flag_id} = {value}")


def resolve_spawn(catalog: Catalog, selection: ItemSelection) -> Optional[tuple[int, int, int]]:
    """(item_id, quantity, ash_id) for a selection, or None if the item is unknown.

    The spawned id is base id + upgrade level + infusion offset; unknown
    infusions and ashes fall back to 0 (Normal / Default).
    """
    item = catalog.resolve_item(selection.name)
    if item is None:
        logger.warning(f"Unknown item {selection.name!r}, skipping")
        return None
    infusion = catalog.resolve_infusion(selection.infusion_name)
    ash = catalog.resolve_ash(selection.ash_name)
    level = clamp_level(selection.level, item.category)
    item_id = item.id + level + (infusion.id if infusion else 0)
    return item_id, max(1, selection.quantity), ash.id if ash else 0


def spawn_selection(process: GameProcess, catalog: Catalog, selection: ItemSelection) -> bool:
    resolved = resolve_spawn(catalog, selection)
    if resolved is None:
        return False
    item_id, quantity, ash_id = resolved
    process.spawn_item(item_id, quantity, ash_id)
    return True


def spawn_all(process: GameProcess, catalog: Catalog, selections: Iterable[ItemSelection]) -> int:
    """Spawn every known item of a build; returns how many were spawned."""
    return sum(1 for s in selections if spawn_selection(process, catalog, s))


def unlock_graces(process: GameProcess, grace_ids: Iterable[int]) -> int:
    count = 0
    for grace_id in grace_ids:
        process.set_event_flag(int(grace_id), True)
        count += 1
    logger.info(f"Unlocked {count} grace(s)")
    return count


def run_binding(
    record: BindingRecord,
    process: GameProcess,
    catalog: Catalog,
    actions: ActionCatalog,
    builds: ProfileStore[ItemSelection],
    graces: ProfileStore[int],
) -> str:
    """Carry out a triggered hotkey; returns a status line for the UI.

    Profile actions re-read their store first so a build saved in another
    window is picked up. Other actions are only reported here; their effect
    belongs to the game process.
    """
    label = actions.display_name(record.action) or str(record.action)
    if record.action == HotkeyAction.SPAWN_BUILD:
        builds.load()
        name = record.parameter or ""
        if name not in builds:
            logger.warning(f"Hotkey build {name!r} not found")
            return f"Build '{name}' not found"
        count = spawn_all(process, catalog, builds.get(name))
        return f"Spawned build '{name}' ({count} item(s))"
    if record.action == HotkeyAction.UNLOCK_GRACE_PROFILE:
        graces.load()
        name = record.parameter or ""
        if name not in graces:
            logger.warning(f"Hotkey grace profile {name!r} not found")
            return f"Grace profile '{name}' not found"
        count = unlock_graces(process, graces.get(name))
        return f"Unlocked {count} grace(s) from '{name}'"
    suffix = f" ({record.parameter})" if record.parameter else ""
    logger.info(f"Hotkey {format_binding(record)} triggered {label}{suffix}")
    return f"Triggered {label}{suffix}"
