"""Static reference catalog (items, infusions, ashes of war, graces).

Loaded once at startup from JSON and treated as an immutable lookup table.
"""
from __future__ import annotations

import json
import logging
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, TypeVar

from src.models.profiles import ItemCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lookup:
    name: str
    id: int


@dataclass(frozen=True)
class CatalogItem:
    name: str
    id: int
    category: ItemCategory = ItemCategory.NONE


@dataclass(frozen=True)
class Grace:
    id: int
    name: str
    area: str = ""
    sub_area: str = ""


_T = TypeVar("_T", Lookup, CatalogItem, Grace)


def remove_diacritics(text: str) -> str:
    """'Rykard’s Ménage' -> 'Rykard’s Menage'."""
    if not text or not text.strip():
        return ""
    normalized = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in normalized if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def _find(entries: Sequence[_T], name: str) -> Optional[_T]:
    for entry in entries:
        if entry.name == name:
            return entry
    folded = (name or "").casefold()
    for entry in entries:
        if entry.name.casefold() == folded:
            return entry
    return None


@dataclass
class Catalog:
    items: list[CatalogItem] = field(default_factory=list)
    infusions: list[Lookup] = field(default_factory=list)
    ashes: list[Lookup] = field(default_factory=list)
    graces: list[Grace] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Catalog:
        return cls(
            items=[
                CatalogItem(
                    name=str(i["name"]),
                    id=int(i["id"]),
                    category=ItemCategory.from_value(i.get("category")),
                )
                for i in data.get("items", [])
            ],
            infusions=[Lookup(str(i["name"]), int(i["id"])) for i in data.get("infusions", [])],
            ashes=[Lookup(str(a["name"]), int(a["id"])) for a in data.get("ashes", [])],
            graces=[
                Grace(
                    id=int(g["id"]),
                    name=str(g["name"]),
                    area=str(g.get("area", "") or ""),
                    sub_area=str(g.get("sub_area", "") or ""),
                )
                for g in data.get("graces", [])
            ],
        )

    @classmethod
    def load(cls, path: Path) -> Catalog:
        """Load catalog JSON; an unreadable file gives an empty catalog."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Catalog not found at {path}, lists will be empty")
            return cls()
        except (OSError, ValueError) as e:
            logger.error(f"Could not read catalog {path}: {e}")
            return cls()
        catalog = cls.from_dict(data)
        logger.info(
            f"Loaded catalog from {path}: {len(catalog.items)} items, "
            f"{len(catalog.graces)} graces"
        )
        return catalog

    def resolve_item(self, name: str) -> Optional[CatalogItem]:
        return _find(self.items, name)

    def resolve_infusion(self, name: str) -> Optional[Lookup]:
        return _find(self.infusions, name)

    def resolve_ash(self, name: str) -> Optional[Lookup]:
        return _find(self.ashes, name)

    def resolve_grace(self, name: str) -> Optional[Grace]:
        return _find(self.graces, name)

    def grace_by_id(self, grace_id: int) -> Optional[Grace]:
        for grace in self.graces:
            if grace.id == grace_id:
                return grace
        return None

    def filter_items(self, text: str) -> list[CatalogItem]:
        """Items whose name contains text, ignoring case and accents."""
        needle = remove_diacritics(text or "").casefold()
        if not needle:
            return list(self.items)
        return [i for i in self.items if needle in remove_diacritics(i.name).casefold()]

    def graces_by_area(self) -> dict[str, dict[str, list[Grace]]]:
        """area -> sub area -> graces, in catalog order."""
        grouped: dict[str, dict[str, list[Grace]]] = {}
        for grace in self.graces:
            grouped.setdefault(grace.area, {}).setdefault(grace.sub_area, []).append(grace)
        return grouped
