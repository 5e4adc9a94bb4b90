"""Item spawner: pick items into a build, save builds as named profiles, spawn them."""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from src.automation.game_process import GameProcess, spawn_all, spawn_selection
from src.models import (
    DEFAULT_ASH,
    DEFAULT_INFUSION,
    Catalog,
    CatalogItem,
    ItemCategory,
    ItemSelection,
    max_level_for_category,
)
from src.profiles.session import ProfileSession
from src.ui.profile_bar import ProfileBar
from src.ui.prompts import confirm_with, show_warning

logger = logging.getLogger(__name__)


class MultiSpawnWindow(QDialog):
    def __init__(
        self,
        catalog: Catalog,
        session: ProfileSession[ItemSelection],
        process: GameProcess,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Item Spawner")
        self.setMinimumSize(820, 480)
        self._catalog = catalog
        self._session = session
        self._process = process

        self._build_ui()
        self._connect_signals()
        self._refresh_available()
        self._refresh_selected()

    def _build_ui(self) -> None:
        top = QHBoxLayout(self)

        # --- Available items ---
        available_group = QGroupBox("Items")
        available_layout = QVBoxLayout(available_group)
        filter_row = QHBoxLayout()
        self._edit_filter = QLineEdit()
        self._edit_filter.setPlaceholderText("Filter...")
        self._btn_clear_filter = QPushButton("Clear")
        filter_row.addWidget(self._edit_filter, 1)
        filter_row.addWidget(self._btn_clear_filter)
        available_layout.addLayout(filter_row)
        self._list_available = QListWidget()
        available_layout.addWidget(self._list_available, 1)
        top.addWidget(available_group, 1)

        # --- Options for the next added item ---
        options_group = QGroupBox("Options")
        options_layout = QVBoxLayout(options_group)
        form = QFormLayout()
        self._combo_level = QComboBox()
        self._combo_infusion = QComboBox()
        self._combo_infusion.addItems([i.name for i in self._catalog.infusions] or [DEFAULT_INFUSION])
        self._combo_ash = QComboBox()
        self._combo_ash.addItems([a.name for a in self._catalog.ashes] or [DEFAULT_ASH])
        self._spin_quantity = QSpinBox()
        self._spin_quantity.setRange(1, 999)
        form.addRow("Level:", self._combo_level)
        form.addRow("Infusion:", self._combo_infusion)
        form.addRow("Ash of War:", self._combo_ash)
        form.addRow("Quantity:", self._spin_quantity)
        options_layout.addLayout(form)
        self._btn_add = QPushButton("Add >")
        self._btn_remove = QPushButton("< Remove")
        self._btn_spawn_one = QPushButton("Spawn")
        self._btn_spawn_one.setEnabled(False)
        options_layout.addWidget(self._btn_add)
        options_layout.addWidget(self._btn_remove)
        options_layout.addStretch(1)
        options_layout.addWidget(self._btn_spawn_one)
        top.addWidget(options_group)

        # --- Build ---
        build_group = QGroupBox("Build")
        build_layout = QVBoxLayout(build_group)
        self._profile_bar = ProfileBar(self._session, "Build")
        build_layout.addWidget(self._profile_bar)
        self._list_selected = QListWidget()
        self._list_selected.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        build_layout.addWidget(self._list_selected, 1)
        self._btn_spawn_all = QPushButton("Spawn All")
        build_layout.addWidget(self._btn_spawn_all)
        top.addWidget(build_group, 1)

        self._set_level_range(ItemCategory.NONE)

    def _connect_signals(self) -> None:
        self._edit_filter.textChanged.connect(self._refresh_available)
        self._btn_clear_filter.clicked.connect(self._edit_filter.clear)
        self._list_available.currentItemChanged.connect(self._on_available_changed)
        self._list_available.itemDoubleClicked.connect(lambda _item: self._on_add())
        self._list_selected.itemDoubleClicked.connect(lambda _item: self._on_remove())
        self._btn_add.clicked.connect(self._on_add)
        self._btn_remove.clicked.connect(self._on_remove)
        self._btn_spawn_one.clicked.connect(self._on_spawn_one)
        self._btn_spawn_all.clicked.connect(self._on_spawn_all)
        self._profile_bar.profile_loaded.connect(lambda _name: self._refresh_selected())

    def _selected_catalog_item(self) -> Optional[CatalogItem]:
        current = self._list_available.currentItem()
        return current.data(Qt.ItemDataRole.UserRole) if current is not None else None

    def _set_level_range(self, category: ItemCategory) -> None:
        self._combo_level.clear()
        self._combo_level.addItems([str(i) for i in range(max_level_for_category(category) + 1)])
        self._combo_level.setCurrentIndex(0)
        self._combo_level.setEnabled(category != ItemCategory.NONE)

    def _reset_options(self) -> None:
        self._spin_quantity.setValue(1)
        self._combo_level.setCurrentIndex(0)
        self._combo_infusion.setCurrentIndex(0)
        self._combo_ash.setCurrentIndex(0)

    def _current_options(self, item: CatalogItem) -> ItemSelection:
        return ItemSelection(
            name=item.name,
            infusion_name=self._combo_infusion.currentText() or DEFAULT_INFUSION,
            ash_name=self._combo_ash.currentText() or DEFAULT_ASH,
            level=int(self._combo_level.currentText() or 0),
            quantity=self._spin_quantity.value(),
        )

    def _refresh_available(self) -> None:
        self._list_available.clear()
        for item in self._catalog.filter_items(self._edit_filter.text()):
            entry = QListWidgetItem(item.name)
            entry.setData(Qt.ItemDataRole.UserRole, item)
            self._list_available.addItem(entry)

    def _refresh_selected(self) -> None:
        self._list_selected.clear()
        for selection in self._session.selection:
            entry = QListWidgetItem(selection.display_text())
            entry.setData(Qt.ItemDataRole.UserRole, selection)
            self._list_selected.addItem(entry)
        has_items = bool(self._session.selection)
        self._btn_spawn_all.setEnabled(has_items)
        self._profile_bar.update_buttons()

    def _on_available_changed(self, current, _previous) -> None:
        item = self._selected_catalog_item()
        if item is None:
            self._btn_spawn_one.setEnabled(False)
            self._btn_spawn_one.setText("Spawn")
            return
        self._btn_spawn_one.setEnabled(True)
        self._btn_spawn_one.setText(f"Spawn {item.name}")
        self._set_level_range(item.category)

    def _on_add(self) -> None:
        item = self._selected_catalog_item()
        if item is None:
            return
        self._session.add(self._current_options(item))
        self._reset_options()
        self._refresh_selected()

    def _on_remove(self) -> None:
        picked = [i.data(Qt.ItemDataRole.UserRole) for i in self._list_selected.selectedItems()]
        if self._session.remove(picked):
            self._refresh_selected()

    def _on_spawn_one(self) -> None:
        item = self._selected_catalog_item()
        if item is None:
            show_warning(self, "Spawn", "Please select an item from the list.")
            return
        if not spawn_selection(self._process, self._catalog, self._current_options(item)):
            show_warning(self, "Spawn", f"Could not resolve '{item.name}'.")

    def _on_spawn_all(self) -> None:
        count = spawn_all(self._process, self._catalog, self._session.selection)
        logger.info(f"Spawned {count}/{len(self._session.selection)} item(s)")

    def done(self, result: int) -> None:  # type: ignore[override]
        if not self._session.can_close(confirm_with(self)):
            return
        super().done(result)
