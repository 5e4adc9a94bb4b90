from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Iterable, Iterator, Optional


class Modifier(Flag):
    NONE = 0
    CTRL = auto()
    ALT = auto()
    SHIFT = auto()
    WIN = auto()


# Fixed emission order for both the file format and the display text.
MODIFIER_ORDER = (Modifier.CTRL, Modifier.ALT, Modifier.SHIFT, Modifier.WIN)


class BindingMode(Enum):
    SPARSE = "sparse"  # free-add list, duplicates allowed
    DENSE = "dense"  # one slot per catalog action, updated in place

    @classmethod
    def from_value(cls, raw: object) -> BindingMode:
        value = str(raw or "").strip().lower()
        for mode in cls:
            if mode.value == value:
                return mode
        return cls.SPARSE


class HotkeyAction(Enum):
    NO_DEATH = "no_death"
    ONE_HP = "one_hp"
    INF_STAM = "inf_stam"
    INF_FP = "inf_fp"
    INF_CONSUM = "inf_consum"
    NO_GRAVITY = "no_gravity"
    NO_CLIP = "no_clip"
    FREE_CAM = "free_cam"
    QUICK_SAVE = "quick_save"
    TELEPORT_SAVE = "teleport_save"
    TELEPORT_LOAD = "teleport_load"
    GAME_SPEED = "game_speed"
    ADD_RUNES = "add_runes"
    SPAWN_BUILD = "spawn_build"
    UNLOCK_GRACE_PROFILE = "unlock_grace_profile"
    KILL_TARGET = "kill_target"
    TOGGLE_OVERLAY = "toggle_overlay"


@dataclass(frozen=True)
class ActionSpec:
    action: HotkeyAction
    display_name: str
    needs_param: bool = False


DEFAULT_ACTIONS: tuple[ActionSpec, ...] = (
    ActionSpec(HotkeyAction.NO_DEATH, "No Death"),
    ActionSpec(HotkeyAction.ONE_HP, "One HP"),
    ActionSpec(HotkeyAction.INF_STAM, "Infinite Stamina"),
    ActionSpec(HotkeyAction.INF_FP, "Infinite FP"),
    ActionSpec(HotkeyAction.INF_CONSUM, "Infinite Consumables"),
    ActionSpec(HotkeyAction.NO_GRAVITY, "No Gravity"),
    ActionSpec(HotkeyAction.NO_CLIP, "No Clip"),
    ActionSpec(HotkeyAction.FREE_CAM, "Free Camera"),
    ActionSpec(HotkeyAction.QUICK_SAVE, "Quick Save"),
    ActionSpec(HotkeyAction.TELEPORT_SAVE, "Save Position", needs_param=True),
    ActionSpec(HotkeyAction.TELEPORT_LOAD, "Load Position", needs_param=True),
    ActionSpec(HotkeyAction.GAME_SPEED, "Set Game Speed", needs_param=True),
    ActionSpec(HotkeyAction.ADD_RUNES, "Add Runes", needs_param=True),
    ActionSpec(HotkeyAction.SPAWN_BUILD, "Spawn Build", needs_param=True),
    ActionSpec(HotkeyAction.UNLOCK_GRACE_PROFILE, "Unlock Grace Profile", needs_param=True),
    ActionSpec(HotkeyAction.KILL_TARGET, "Kill Target"),
    ActionSpec(HotkeyAction.TOGGLE_OVERLAY, "Toggle Overlay"),
)


class ActionCatalog:
    """Read-only set of actions a binding can trigger.

    Token names are the enum member names (``QUICK_SAVE``); display names are
    what the hotkey dialog shows in its action column.
    """

    def __init__(self, specs: Iterable[ActionSpec] = DEFAULT_ACTIONS):
        self._specs: tuple[ActionSpec, ...] = tuple(specs)
        self._by_action = {s.action: s for s in self._specs}
        self._by_display = {s.display_name: s.action for s in self._specs}

    def __iter__(self) -> Iterator[ActionSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, action: object) -> bool:
        return action in self._by_action

    @property
    def actions(self) -> list[HotkeyAction]:
        return [s.action for s in self._specs]

    def needs_param(self, action: Optional[HotkeyAction]) -> bool:
        spec = self._by_action.get(action) if action is not None else None
        return bool(spec and spec.needs_param)

    def display_name(self, action: Optional[HotkeyAction]) -> str:
        spec = self._by_action.get(action) if action is not None else None
        return spec.display_name if spec else ""

    def from_display_name(self, name: str) -> Optional[HotkeyAction]:
        return self._by_display.get(name)

    def token_name(self, action: HotkeyAction) -> str:
        return action.name

    def token_table(self) -> dict[str, HotkeyAction]:
        """Token name -> action, the table the binding parser resolves against."""
        return {s.action.name: s.action for s in self._specs}


@dataclass
class BindingRecord:
    """One hotkey: modifiers + key -> action (+ parameter)."""
    modifiers: Modifier = Modifier.NONE
    key: Optional[str] = None
    action: Optional[HotkeyAction] = None
    parameter: Optional[str] = None

    @property
    def has_key(self) -> bool:
        return self.key is not None

    def clear_key(self) -> None:
        self.key = None
        self.modifiers = Modifier.NONE


@dataclass
class BindingSet:
    """Ordered binding collection edited by the hotkey dialog."""
    mode: BindingMode = BindingMode.SPARSE
    records: list[BindingRecord] = field(default_factory=list)

    @classmethod
    def dense(cls, catalog: ActionCatalog) -> BindingSet:
        """One empty slot per catalog action, in catalog order."""
        return cls(
            mode=BindingMode.DENSE,
            records=[BindingRecord(action=a) for a in catalog.actions],
        )

    @classmethod
    def empty(cls, mode: BindingMode, catalog: ActionCatalog) -> BindingSet:
        if mode == BindingMode.DENSE:
            return cls.dense(catalog)
        return cls(mode=BindingMode.SPARSE)

    def __iter__(self) -> Iterator[BindingRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def record_for(self, action: HotkeyAction) -> Optional[BindingRecord]:
        for record in self.records:
            if record.action == action:
                return record
        return None

    def add(self, record: Optional[BindingRecord] = None) -> BindingRecord:
        if self.mode == BindingMode.DENSE:
            raise ValueError("dense binding sets have a fixed slot per action")
        record = record if record is not None else BindingRecord()
        self.records.append(record)
        return record

    def remove(self, record: BindingRecord) -> bool:
        """Remove a record (sparse) or clear its key (dense). True if anything changed."""
        if self.mode == BindingMode.DENSE:
            if record in self.records and record.has_key:
                record.clear_key()
                record.parameter = None
                return True
            return False
        for i, r in enumerate(self.records):
            if r is record:
                del self.records[i]
                return True
        return False

    def bound(self) -> list[BindingRecord]:
        """Records that would be persisted (key and action set)."""
        return [r for r in self.records if r.has_key and r.action is not None]
