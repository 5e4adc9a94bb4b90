from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

# Reserved selector entry meaning "no profile loaded"; never persisted.
EMPTY_PROFILE_NAME = "<New Profile>"

DEFAULT_INFUSION = "Normal"
DEFAULT_ASH = "Default"


def is_reserved_name(name: str) -> bool:
    return str(name or "").strip().casefold() == EMPTY_PROFILE_NAME.casefold()


class ItemCategory(Enum):
    NONE = "none"
    SMITHING = "smithing"
    SOMBER = "somber"

    @classmethod
    def from_value(cls, raw: object) -> ItemCategory:
        value = str(raw or "").strip().lower()
        for category in cls:
            if category.value == value:
                return category
        return cls.NONE


_MAX_LEVEL = {
    ItemCategory.NONE: 0,
    ItemCategory.SMITHING: 25,
    ItemCategory.SOMBER: 10,
}


def max_level_for_category(category: ItemCategory) -> int:
    return _MAX_LEVEL.get(category, 0)


def clamp_level(level: int, category: ItemCategory) -> int:
    return min(max(0, int(level)), max_level_for_category(category))


@dataclass
class ItemSelection:
    """One entry of a build: item + infusion + ash + level + quantity."""
    name: str
    infusion_name: str = DEFAULT_INFUSION
    ash_name: str = DEFAULT_ASH
    level: int = 0
    quantity: int = 1

    def __post_init__(self) -> None:
        self.infusion_name = self.infusion_name or DEFAULT_INFUSION
        self.ash_name = self.ash_name or DEFAULT_ASH
        self.level = max(0, int(self.level))
        self.quantity = max(1, int(self.quantity))

    def display_text(self) -> str:
        parts = [self.name]
        if self.level:
            parts[0] += f" +{self.level}"
        if self.infusion_name != DEFAULT_INFUSION:
            parts.append(self.infusion_name)
        if self.ash_name != DEFAULT_ASH:
            parts.append(self.ash_name)
        text = " / ".join(parts)
        if self.quantity > 1:
            text += f" x{self.quantity}"
        return text


@dataclass
class GraceSelection:
    """Ordered, duplicate-free list of grace event flag ids."""
    ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.ids = _unique(self.ids)

    def add(self, grace_id: int) -> bool:
        if grace_id in self.ids:
            return False
        self.ids.append(int(grace_id))
        return True


def _unique(values: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    out: list[int] = []
    for v in values:
        v = int(v)
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out
