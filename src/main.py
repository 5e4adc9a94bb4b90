"""ER Overlay Tool: Main entry point.

Wires together: config → catalog → main window (hotkeys, item spawner,
graces) → global hotkey listener.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from src.automation.game_process import DryRunProcess
from src.automation.global_hotkey import GlobalHotkeyListener
from src.models import ActionCatalog, AppConfig, Catalog
from src.ui import MainWindow

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).parent.parent
CONFIG_PATH = ROOT_DIR / "config" / "default_config.json"


def load_config(path: Path = CONFIG_PATH) -> AppConfig:
    """Load config from JSON, falling back to defaults."""
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read config {path}: {e}; using defaults")
            return AppConfig()
        logger.info(f"Loaded config from {path}")
        return AppConfig.from_dict(data)
    logger.warning(f"Config not found at {path}, using defaults")
    return AppConfig()


def main() -> None:
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    catalog = Catalog.load(config.resolve_catalog_path(ROOT_DIR))
    actions = ActionCatalog()
    # No game attach layer here; calls are logged.
    process = DryRunProcess()

    window = MainWindow(config, catalog, actions, process)
    window.show()

    hotkey_listener = GlobalHotkeyListener(get_bindings=window.active_bindings)
    hotkey_listener.triggered.connect(window.on_hotkey_triggered)
    if config.global_hotkeys_enabled:
        hotkey_listener.start()

    # --- Run ---
    exit_code = app.exec()

    # Cleanup
    hotkey_listener.stop()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
