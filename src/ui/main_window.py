"""Main application window.

Controls:
- Hotkey setup (writes the hotkeys file, refreshes global hotkeys)
- Item spawner with saved builds
- Grace unlocker with saved grace profiles
- List of active hotkeys and the last triggered action
"""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QListWidget,
    QMainWindow,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from src.automation.binds import BindingParser, format_binding
from src.automation.game_process import GameProcess, run_binding
from src.models import (
    ActionCatalog,
    AppConfig,
    BindingRecord,
    BindingSet,
    Catalog,
)
from src.profiles import BuildCodec, GraceCodec, ProfileSession, ProfileStore
from src.ui.hotkey_setup_dialog import HotkeySetupDialog
from src.ui.multi_spawn_window import MultiSpawnWindow
from src.ui.prompts import show_warning
from src.ui.unlock_graces_window import UnlockGracesWindow

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        config: AppConfig,
        catalog: Catalog,
        actions: ActionCatalog,
        process: GameProcess,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._config = config
        self._catalog = catalog
        self._actions = actions
        self._process = process
        self._parser = BindingParser.with_defaults(actions, config.binding_mode)
        self._hotkey_text = ""
        self._bindings: BindingSet = self._parser.parse("")
        self.setWindowTitle("ER Overlay Tool")
        self.setMinimumSize(420, 360)
        if config.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

        self._build_ui()
        self.setStatusBar(QStatusBar())
        self._connect_signals()
        self.load_hotkeys()

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        buttons = QHBoxLayout()
        self._btn_hotkeys = QPushButton("Hotkeys...")
        self._btn_spawner = QPushButton("Item Spawner...")
        self._btn_graces = QPushButton("Graces...")
        buttons.addWidget(self._btn_hotkeys)
        buttons.addWidget(self._btn_spawner)
        buttons.addWidget(self._btn_graces)
        layout.addLayout(buttons)

        hotkey_group = QGroupBox("Active Hotkeys")
        hotkey_layout = QVBoxLayout(hotkey_group)
        self._list_hotkeys = QListWidget()
        hotkey_layout.addWidget(self._list_hotkeys)
        layout.addWidget(hotkey_group, 1)

    def _connect_signals(self) -> None:
        self._btn_hotkeys.clicked.connect(self._open_hotkey_setup)
        self._btn_spawner.clicked.connect(self._open_spawner)
        self._btn_graces.clicked.connect(self._open_graces)

    def active_bindings(self) -> list[BindingRecord]:
        return self._bindings.bound()

    def load_hotkeys(self) -> None:
        path = self._config.hotkeys_path()
        if path.exists():
            try:
                self._hotkey_text = path.read_text(encoding="utf-8")
                logger.info(f"Loaded hotkeys from {path}")
            except OSError as e:
                logger.error(f"Could not read hotkeys file {path}: {e}")
                self._hotkey_text = ""
        else:
            logger.info(f"No hotkeys file at {path}")
            self._hotkey_text = ""
        self._apply_hotkeys(self._hotkey_text)

    def _apply_hotkeys(self, text: str) -> None:
        self._bindings = self._parser.parse(text)
        self._list_hotkeys.clear()
        for record in self.active_bindings():
            line = f"{format_binding(record)}  →  {self._actions.display_name(record.action)}"
            if record.parameter:
                line += f" ({record.parameter})"
            self._list_hotkeys.addItem(line)

    def _open_hotkey_setup(self) -> None:
        dialog = HotkeySetupDialog(
            self._parser,
            self._actions,
            existing_text=self._hotkey_text,
            allow_clear=self._config.capture_clear_keys,
            parent=self,
        )
        if dialog.exec() != HotkeySetupDialog.DialogCode.Accepted:
            return
        text = dialog.serialized_text()
        path = self._config.hotkeys_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            logger.info(f"Hotkeys saved to {path}")
        except OSError as e:
            logger.error(f"Hotkeys save failed: {e}")
            show_warning(self, "Save Failed", f"Could not write {path}:\n{e}")
            return
        self._hotkey_text = text
        self._apply_hotkeys(text)
        self._show_status("Hotkeys saved ✓")

    def _build_session(self) -> ProfileSession:
        store = ProfileStore(self._config.builds_path(), BuildCodec(), kind="build")
        store.load()
        return ProfileSession(store)

    def _grace_session(self) -> ProfileSession:
        store = ProfileStore(
            self._config.grace_profiles_path(), GraceCodec(), kind="grace profile"
        )
        store.load()
        return ProfileSession(store, unique=True)

    def _open_spawner(self) -> None:
        MultiSpawnWindow(self._catalog, self._build_session(), self._process, self).exec()

    def _open_graces(self) -> None:
        UnlockGracesWindow(self._catalog, self._grace_session(), self._process, self).exec()

    def on_hotkey_triggered(self, record: BindingRecord) -> None:
        """Run a binding reported by the global hotkey listener."""
        builds = ProfileStore(self._config.builds_path(), BuildCodec(), kind="build")
        graces = ProfileStore(
            self._config.grace_profiles_path(), GraceCodec(), kind="grace profile"
        )
        message = run_binding(record, self._process, self._catalog, self._actions, builds, graces)
        self._show_status(message)

    def _show_status(self, message: str) -> None:
        self.statusBar().showMessage(message)
        QTimer.singleShot(3000, self.statusBar().clearMessage)
