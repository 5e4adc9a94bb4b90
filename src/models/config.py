from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.models.bindings import BindingMode

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".er_overlay_tool"


def _log_level(value) -> str:
    """Upper-cased level name; unknown names fall back to INFO."""
    name = str(value or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        logger.warning(f"Unknown log level {value!r}, using INFO")
        return "INFO"
    return name


@dataclass
class AppConfig:
    """Runtime application configuration."""
    # Folder holding the hotkeys / builds / grace profile files; empty = DEFAULT_DATA_DIR
    data_dir: str = ""
    hotkeys_file: str = "hotkeys.txt"
    builds_file: str = "builds.txt"
    grace_profiles_file: str = "grace_profiles.txt"
    # Relative paths are resolved against the repository root
    catalog_path: str = "config/catalog.json"
    # "sparse" = free-add hotkey list, "dense" = one row per action
    binding_mode: BindingMode = BindingMode.SPARSE
    global_hotkeys_enabled: bool = True
    # Escape / Backspace clear a hotkey field instead of binding to it
    capture_clear_keys: bool = True
    always_on_top: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> AppConfig:
        files = data.get("files", {})
        hotkeys = data.get("hotkeys", {})
        return cls(
            data_dir=files.get("data_dir", ""),
            hotkeys_file=files.get("hotkeys", "hotkeys.txt"),
            builds_file=files.get("builds", "builds.txt"),
            grace_profiles_file=files.get("grace_profiles", "grace_profiles.txt"),
            catalog_path=files.get("catalog", "config/catalog.json"),
            binding_mode=BindingMode.from_value(hotkeys.get("mode", "sparse")),
            global_hotkeys_enabled=hotkeys.get("global_enabled", True),
            capture_clear_keys=hotkeys.get("capture_clear_keys", True),
            always_on_top=data.get("display", {}).get("always_on_top", False),
            log_level=_log_level(data.get("log_level")),
        )

    def to_dict(self) -> dict:
        """Serialize to dict for JSON config file (round-trip with from_dict)."""
        return {
            "files": {
                "data_dir": self.data_dir,
                "hotkeys": self.hotkeys_file,
                "builds": self.builds_file,
                "grace_profiles": self.grace_profiles_file,
                "catalog": self.catalog_path,
            },
            "hotkeys": {
                "mode": self.binding_mode.value,
                "global_enabled": self.global_hotkeys_enabled,
                "capture_clear_keys": self.capture_clear_keys,
            },
            "display": {"always_on_top": self.always_on_top},
            "log_level": self.log_level,
        }

    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else DEFAULT_DATA_DIR

    def hotkeys_path(self) -> Path:
        return self.data_path() / self.hotkeys_file

    def builds_path(self) -> Path:
        return self.data_path() / self.builds_file

    def grace_profiles_path(self) -> Path:
        return self.data_path() / self.grace_profiles_file

    def resolve_catalog_path(self, root: Path) -> Path:
        path = Path(self.catalog_path).expanduser()
        return path if path.is_absolute() else root / path
