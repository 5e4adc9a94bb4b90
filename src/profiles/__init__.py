from src.profiles.codec import BuildCodec, GraceCodec, escape, split_fields, unescape
from src.profiles.session import DirtyGuard, ProfileSession
from src.profiles.store import (
    ProfileStore,
    ProfileValidationError,
    hotkey_name_note,
    validate_profile_name,
)

__all__ = [
    "BuildCodec",
    "DirtyGuard",
    "GraceCodec",
    "ProfileSession",
    "ProfileStore",
    "ProfileValidationError",
    "escape",
    "hotkey_name_note",
    "split_fields",
    "unescape",
    "validate_profile_name",
]
