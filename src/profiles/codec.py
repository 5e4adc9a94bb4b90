"""Line codecs for the profile files.

Build file, one profile per line; a literal ``|`` inside a name or field is
written as ``||``::

    Name|item|infusion|ash|level|qty;item|infusion|ash|level|qty

Grace profile file::

    Name:71001,71002,71003

Known limits of the doubled-delimiter scheme: a field (other than the last)
that is empty, or a field (other than the first) that starts with ``|``, does
not survive a save/load cycle; ``;`` cannot appear inside build fields.
``BuildCodec.check_record`` reports such records so they are refused before saving.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, TypeVar

from src.models import GraceSelection, ItemSelection

logger = logging.getLogger(__name__)

FIELD_SEP = "|"
RECORD_SEP = ";"
GRACE_NAME_SEP = ":"
GRACE_ID_SEP = ","

R = TypeVar("R")


def escape(text: str) -> str:
    return text.replace(FIELD_SEP, FIELD_SEP * 2)


def unescape(text: str) -> str:
    return text.replace(FIELD_SEP * 2, FIELD_SEP)


def split_fields(text: str, maxsplit: int = -1) -> list[str]:
    """Split on single '|', turning '||' back into a literal '|'."""
    fields: list[str] = []
    current: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c != FIELD_SEP:
            current.append(c)
            i += 1
            continue
        if i + 1 < n and text[i + 1] == FIELD_SEP:
            current.append(FIELD_SEP)
            i += 2
            continue
        fields.append("".join(current))
        current = []
        i += 1
        if maxsplit >= 0 and len(fields) >= maxsplit:
            # Rest is returned raw (still escaped).
            fields.append(text[i:])
            return fields
    fields.append("".join(current))
    return fields


def split_name(line: str) -> Optional[tuple[str, str]]:
    """(name, rest) split on the first unescaped '|'; None if there is none."""
    parts = split_fields(line, maxsplit=1)
    if len(parts) < 2:
        return None
    return parts[0], parts[1]


class ProfileCodec(Protocol[R]):
    def check_record(self, record: R) -> Optional[str]: ...

    def encode_line(self, name: str, records: list[R]) -> str: ...

    def decode_line(self, line: str) -> Optional[tuple[str, list[R]]]: ...


class BuildCodec:
    """Item builds: five positional fields per record."""

    def check_record(self, item: ItemSelection) -> Optional[str]:
        """Why item would not survive a save/load cycle, or None."""
        for label, value in (
            ("Item name", item.name),
            ("Infusion", item.infusion_name),
            ("Ash of war", item.ash_name),
        ):
            if not value:
                return f"{label} must not be empty."
            if value.startswith(FIELD_SEP):
                return f"{label} '{value}' must not start with '{FIELD_SEP}'."
            if RECORD_SEP in value:
                return f"{label} '{value}' must not contain '{RECORD_SEP}'."
        return None

    def encode_record(self, item: ItemSelection) -> str:
        return FIELD_SEP.join([
            escape(item.name),
            escape(item.infusion_name),
            escape(item.ash_name),
            str(item.level),
            str(item.quantity),
        ])

    def decode_record(self, text: str) -> Optional[ItemSelection]:
        fields = split_fields(text)
        if len(fields) < 5:
            logger.debug(f"Skipping build record with {len(fields)} fields: {text!r}")
            return None
        try:
            level = int(fields[3])
            quantity = int(fields[4])
        except ValueError:
            logger.debug(f"Skipping build record with bad numbers: {text!r}")
            return None
        return ItemSelection(
            name=fields[0],
            infusion_name=fields[1],
            ash_name=fields[2],
            level=level,
            quantity=quantity,
        )

    def encode_line(self, name: str, records: list[ItemSelection]) -> str:
        body = RECORD_SEP.join(self.encode_record(r) for r in records)
        return escape(name) + FIELD_SEP + body

    def decode_line(self, line: str) -> Optional[tuple[str, list[ItemSelection]]]:
        split = split_name(line)
        if split is None:
            return None
        name, rest = split
        items = []
        for chunk in rest.split(RECORD_SEP):
            if not chunk:
                continue
            item = self.decode_record(chunk)
            if item is not None:
                items.append(item)
        return name, items


class GraceCodec:
    """Grace profiles: comma separated event flag ids, no escaping."""

    def check_record(self, record: int) -> Optional[str]:
        return None

    def encode_line(self, name: str, records: list[int]) -> str:
        return name + GRACE_NAME_SEP + GRACE_ID_SEP.join(str(i) for i in records)

    def decode_line(self, line: str) -> Optional[tuple[str, list[int]]]:
        # Ids never contain ':', so the last one separates name from body.
        name, sep, body = line.rpartition(GRACE_NAME_SEP)
        if not sep or not name:
            return None
        ids = []
        for token in body.split(GRACE_ID_SEP):
            token = token.strip()
            if not token:
                continue
            try:
                ids.append(int(token))
            except ValueError:
                logger.debug(f"Skipping bad grace id {token!r} in profile {name!r}")
        return name, GraceSelection(ids).ids
