"""Named profile store backed by one text file.

The whole file is read on load and rewritten on every save or delete.
Two tool instances writing the same file are not coordinated; the last
writer wins.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar

from src.models import EMPTY_PROFILE_NAME, is_reserved_name
from src.profiles.codec import ProfileCodec

logger = logging.getLogger(__name__)

R = TypeVar("R")

# (title, message) -> True to proceed
ConfirmFn = Callable[[str, str], bool]


class ProfileValidationError(ValueError):
    """Raised before any file I/O when a save or delete request is invalid."""


def validate_profile_name(name: str) -> str:
    """Stripped name, or ProfileValidationError if empty or reserved."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ProfileValidationError("Please enter a profile name.")
    if cleaned.splitlines() != [cleaned]:
        raise ProfileValidationError("Profile names must fit on one line.")
    if is_reserved_name(cleaned):
        raise ProfileValidationError(
            f"'{EMPTY_PROFILE_NAME}' is reserved. Please choose a different name."
        )
    return cleaned


def hotkey_name_note(name: str) -> Optional[str]:
    """Warning for names that cannot be used as a hotkey parameter, or None."""
    if any(c.isspace() for c in (name or "").strip()):
        return "Names with spaces cannot be bound to a hotkey."
    return None


class ProfileStore(Generic[R]):
    def __init__(self, path: Path, codec: ProfileCodec[R], kind: str = "profile"):
        self.path = Path(path)
        self._codec = codec
        self.kind = kind
        self._profiles: dict[str, list[R]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def names(self) -> list[str]:
        """Selector entries: the sentinel first, then file order."""
        return [EMPTY_PROFILE_NAME] + list(self._profiles)

    def get(self, name: str) -> list[R]:
        return list(self._profiles.get(name, []))

    def load(self) -> None:
        self._profiles.clear()
        if not self.path.exists():
            logger.info(f"No {self.kind} file at {self.path}, starting empty")
            return
        text = self.path.read_text(encoding="utf-8")
        for line in text.split("\n"):
            line = line.rstrip("\r")
            decoded = self._codec.decode_line(line)
            if decoded is None:
                if line.strip():
                    logger.debug(f"Skipping malformed {self.kind} line: {line!r}")
                continue
            name, records = decoded
            if is_reserved_name(name):
                continue
            self._profiles[name] = records
        logger.info(f"Loaded {len(self._profiles)} {self.kind}(s) from {self.path}")

    def dumps(self) -> str:
        lines = [
            self._codec.encode_line(name, records)
            for name, records in self._profiles.items()
            if not is_reserved_name(name)
        ]
        return "".join(line + "\n" for line in lines)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.dumps(), encoding="utf-8")
        logger.info(f"Saved {len(self._profiles)} {self.kind}(s) to {self.path}")

    def save_or_overwrite(
        self,
        name: str,
        records: list[R],
        confirm: ConfirmFn,
        current: Optional[str] = None,
    ) -> bool:
        """Store records under name and rewrite the file.

        Overwriting an existing profile other than ``current`` (the one
        loaded in the editor) needs confirmation. Returns False if the
        user declined.
        """
        name = validate_profile_name(name)
        if not records:
            raise ProfileValidationError(
                f"Cannot save an empty {self.kind}. Please select at least one entry."
            )
        for record in records:
            problem = self._codec.check_record(record)
            if problem:
                raise ProfileValidationError(problem)
        if name in self._profiles and name != current:
            if not confirm(
                "Confirm Overwrite",
                f"A {self.kind} named '{name}' already exists. Do you want to overwrite it?",
            ):
                logger.debug(f"Overwrite of {self.kind} {name!r} declined")
                return False
        self._profiles[name] = list(records)
        self.save()
        return True

    def delete(self, name: str, confirm: ConfirmFn) -> bool:
        """Remove a profile after confirmation; False if missing or declined."""
        if is_reserved_name(name):
            raise ProfileValidationError(f"Please select a {self.kind} to delete.")
        if name not in self._profiles:
            logger.debug(f"Delete of unknown {self.kind} {name!r} ignored")
            return False
        if not confirm(
            "Confirm Delete",
            f"Are you sure you want to delete the {self.kind} '{name}'?",
        ):
            return False
        del self._profiles[name]
        self.save()
        return True
