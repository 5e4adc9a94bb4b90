"""Parsing, resolving, serializing and displaying hotkey binding lines.

File format, one binding per line::

    [MOD...] KEY ACTION [PARAM]

Tokens are classified against three lookup tables in a fixed priority,
modifier -> key -> action. A token present in more than one table always
resolves to the first table that has it (known limitation, kept for
compatibility with existing hotkey files).
"""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from src.models import (
    MODIFIER_ORDER,
    ActionCatalog,
    BindingMode,
    BindingRecord,
    BindingSet,
    HotkeyAction,
    Modifier,
)

logger = logging.getLogger(__name__)

_COMMENT_PREFIXES = (";", "#", "//")

_MOD_TOKENS = {
    Modifier.CTRL: "CTRL",
    Modifier.ALT: "ALT",
    Modifier.SHIFT: "SHIFT",
    Modifier.WIN: "WIN",
}

_MOD_DISPLAY = {
    Modifier.CTRL: "Ctrl",
    Modifier.ALT: "Alt",
    Modifier.SHIFT: "Shift",
    Modifier.WIN: "Win",
}

# Canonical key names; the file stores them upper-cased.
KEY_NAMES: tuple[str, ...] = (
    tuple(chr(c) for c in range(ord("A"), ord("Z") + 1))
    + tuple(f"D{d}" for d in range(10))
    + tuple(f"F{n}" for n in range(1, 25))
    + tuple(f"NumPad{d}" for d in range(10))
    + (
        "Multiply", "Add", "Subtract", "Decimal", "Divide",
        "Space", "Enter", "Tab", "Escape", "Back",
        "Insert", "Delete", "Home", "End", "PageUp", "PageDown",
        "Up", "Down", "Left", "Right",
        "Pause", "Scroll", "Capital", "NumLock", "PrintScreen",
        "OemTilde", "OemMinus", "OemPlus", "OemOpenBrackets", "OemCloseBrackets",
        "OemPipe", "OemSemicolon", "OemQuotes", "OemComma", "OemPeriod", "OemQuestion",
    )
)


def default_modifier_table() -> dict[str, Modifier]:
    return {token: mod for mod, token in _MOD_TOKENS.items()}


def default_key_table() -> dict[str, str]:
    return {name.upper(): name for name in KEY_NAMES}


def key_token(key: str) -> str:
    """Key name as written to the hotkey file."""
    return key.upper()


def modifier_tokens(modifiers: Modifier) -> list[str]:
    return [_MOD_TOKENS[m] for m in MODIFIER_ORDER if m in modifiers]


class BindingParser:
    """Turns hotkey file text into a BindingSet.

    SPARSE mode appends one record per matched line. DENSE mode starts from
    one empty slot per catalog action and merges each matched line into the
    slot for its action (last line wins).
    """

    def __init__(
        self,
        modifier_table: Mapping[str, Modifier],
        key_table: Mapping[str, str],
        action_table: Mapping[str, HotkeyAction],
        catalog: ActionCatalog,
        mode: BindingMode = BindingMode.SPARSE,
    ):
        self._modifier_table = dict(modifier_table)
        self._key_table = dict(key_table)
        self._action_table = dict(action_table)
        self._catalog = catalog
        self.mode = mode

    @classmethod
    def with_defaults(
        cls,
        catalog: Optional[ActionCatalog] = None,
        mode: BindingMode = BindingMode.SPARSE,
    ) -> BindingParser:
        catalog = catalog or ActionCatalog()
        return cls(
            default_modifier_table(),
            default_key_table(),
            catalog.token_table(),
            catalog,
            mode,
        )

    def parse_line(self, line: str) -> Optional[BindingRecord]:
        """Resolve one line; None if it has no key or no action."""
        if line.startswith(_COMMENT_PREFIXES):
            return None
        record = BindingRecord()
        tokens = line.split(" ")
        j = 0
        while j < len(tokens):
            token = tokens[j]
            if token in self._modifier_table:
                record.modifiers |= self._modifier_table[token]
            elif token in self._key_table:
                record.key = self._key_table[token]
            elif token in self._action_table:
                record.action = self._action_table[token]
                # The parameter is the next token, whatever it is.
                if self._catalog.needs_param(record.action) and j + 1 < len(tokens):
                    record.parameter = tokens[j + 1] or None
                    j += 1
            elif token:
                logger.debug(f"Ignoring unknown hotkey token {token!r} in {line!r}")
            j += 1
        if record.key is None or record.action is None:
            logger.debug(f"Skipping hotkey line without key or action: {line!r}")
            return None
        return record

    def parse(self, text: str) -> BindingSet:
        bindings = BindingSet.empty(self.mode, self._catalog)
        lines = [ln for ln in (text or "").replace("\r", "\n").split("\n") if ln]
        for line in lines:
            record = self.parse_line(line)
            if record is None:
                continue
            if self.mode == BindingMode.DENSE:
                slot = bindings.record_for(record.action)
                if slot is None:
                    continue
                slot.modifiers = record.modifiers
                slot.key = record.key
                slot.parameter = record.parameter
            else:
                bindings.records.append(record)
        return bindings


def parse_bindings(
    text: str,
    catalog: Optional[ActionCatalog] = None,
    mode: BindingMode = BindingMode.SPARSE,
) -> BindingSet:
    """Parse hotkey file text with the default token tables."""
    return BindingParser.with_defaults(catalog, mode).parse(text)


def serialize_binding(record: BindingRecord, catalog: ActionCatalog) -> Optional[str]:
    """One hotkey file line, or None if the record is not persisted."""
    if record.key is None or record.action is None:
        return None
    parts = modifier_tokens(record.modifiers)
    parts.append(key_token(record.key))
    parts.append(catalog.token_name(record.action))
    if catalog.needs_param(record.action) and record.parameter:
        parts.append(record.parameter)
    return " ".join(parts)


def serialize_bindings(
    bindings: BindingSet,
    catalog: Optional[ActionCatalog] = None,
    newline: str = os.linesep,
) -> str:
    catalog = catalog or ActionCatalog()
    lines = [serialize_binding(r, catalog) for r in bindings]
    return newline.join(line for line in lines if line is not None)


def validate_bindings(bindings: BindingSet, catalog: ActionCatalog) -> list[str]:
    """Blocking problems that must be fixed before the set can be saved."""
    problems: list[str] = []
    for record in bindings:
        if not record.has_key:
            continue
        hotkey = format_binding(record)
        if record.action is None:
            problems.append(f"{hotkey}: choose an action.")
            continue
        if not catalog.needs_param(record.action):
            continue
        name = catalog.display_name(record.action)
        param = record.parameter or ""
        if not param.strip():
            problems.append(f"{hotkey} ({name}): a parameter is required.")
        elif any(c.isspace() for c in param):
            problems.append(f"{hotkey} ({name}): the parameter cannot contain spaces.")
    return problems


def format_binding(record: BindingRecord) -> str:
    """Display text, e.g. 'Ctrl+Shift+F5'; empty when no key is bound."""
    if record.key is None:
        return ""
    tokens = [_MOD_DISPLAY[m] for m in MODIFIER_ORDER if m in record.modifiers]
    tokens.append(record.key)
    return "+".join(tokens)
