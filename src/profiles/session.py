"""Editing state for a profile window: the working selection and its dirty flag."""
from __future__ import annotations

import logging
from typing import Callable, Generic, Iterable, Optional, TypeVar

from src.models import EMPTY_PROFILE_NAME, is_reserved_name
from src.profiles.store import ConfirmFn, ProfileStore

logger = logging.getLogger(__name__)

R = TypeVar("R")

DISCARD_TITLE = "Unsaved Changes"
DISCARD_MESSAGE = "You have unsaved changes. Do you want to discard them?"


class DirtyGuard:
    """Tracks unsaved user edits and asks before they are thrown away."""

    def __init__(self) -> None:
        self.dirty = False

    def mark(self) -> None:
        self.dirty = True

    def clear(self) -> None:
        self.dirty = False

    def confirm_discard(
        self,
        confirm: ConfirmFn,
        message: str = DISCARD_MESSAGE,
    ) -> bool:
        """True if there is nothing to lose or the user agreed to lose it."""
        if not self.dirty:
            return True
        return bool(confirm(DISCARD_TITLE, message))


class ProfileSession(Generic[R]):
    """Working selection of one profile window.

    User edits (add / remove) set the dirty flag; loading a profile does not.
    ``select`` leaves everything as it was when the user declines to discard,
    so the caller can put its selector back on ``active_name``.
    """

    def __init__(
        self,
        store: ProfileStore[R],
        unique: bool = False,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.unique = unique
        self.active_name = EMPTY_PROFILE_NAME
        self.selection: list[R] = []
        self.guard = DirtyGuard()
        self._on_change = on_change

    @property
    def dirty(self) -> bool:
        return self.guard.dirty

    @property
    def has_profile(self) -> bool:
        return not is_reserved_name(self.active_name)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def add(self, record: R) -> bool:
        if self.unique and record in self.selection:
            return False
        self.selection.append(record)
        self.guard.mark()
        self._changed()
        return True

    def remove(self, records: Iterable[R]) -> int:
        removed = 0
        for record in list(records):
            for i, existing in enumerate(self.selection):
                if existing is record or existing == record:
                    del self.selection[i]
                    removed += 1
                    break
        if removed:
            self.guard.mark()
            self._changed()
        return removed

    def select(self, name: str, confirm: ConfirmFn) -> bool:
        """Switch to profile ``name`` (or the sentinel, which clears the selection)."""
        if name == self.active_name:
            return True
        if not self.guard.confirm_discard(
            confirm,
            "You have unsaved changes. Do you want to discard them and load the new profile?",
        ):
            logger.debug(f"Switch to {name!r} declined, staying on {self.active_name!r}")
            return False
        if is_reserved_name(name) or name not in self.store:
            self.active_name = EMPTY_PROFILE_NAME
            self.selection = []
        else:
            self.active_name = name
            self.selection = self.store.get(name)
        self.guard.clear()
        self._changed()
        return True

    def reload(self) -> None:
        """Re-read the file and reset to the sentinel without prompting."""
        self.store.load()
        self.active_name = EMPTY_PROFILE_NAME
        self.selection = []
        self.guard.clear()
        self._changed()

    def can_close(self, confirm: ConfirmFn) -> bool:
        return self.guard.confirm_discard(confirm)

    def save_as(self, name: str, confirm: ConfirmFn) -> bool:
        current = self.active_name if self.has_profile else None
        if not self.store.save_or_overwrite(name, self.selection, confirm, current=current):
            return False
        self.active_name = name.strip()
        self.guard.clear()
        self._changed()
        return True

    def delete_active(self, confirm: ConfirmFn) -> bool:
        """Delete the loaded profile; the selection stays but is now unsaved."""
        if not self.store.delete(self.active_name, confirm):
            return False
        self.active_name = EMPTY_PROFILE_NAME
        if self.selection:
            self.guard.mark()
        self._changed()
        return True
