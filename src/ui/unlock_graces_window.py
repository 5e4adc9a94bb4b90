"""Grace unlocker: grace tree grouped by area, selectable into named grace profiles."""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from src.automation.game_process import GameProcess, unlock_graces
from src.models import Catalog
from src.models.catalog import remove_diacritics
from src.profiles.session import ProfileSession
from src.ui.profile_bar import ProfileBar
from src.ui.prompts import confirm_with

logger = logging.getLogger(__name__)


class UnlockGracesWindow(QDialog):
    def __init__(
        self,
        catalog: Catalog,
        session: ProfileSession[int],
        process: GameProcess,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Unlock Graces")
        self.setMinimumSize(700, 460)
        self._catalog = catalog
        self._session = session
        self._process = process

        self._build_ui()
        self._connect_signals()
        self._populate_tree()
        self._refresh_selected()

    def _build_ui(self) -> None:
        top = QHBoxLayout(self)

        tree_group = QGroupBox("Graces")
        tree_layout = QVBoxLayout(tree_group)
        filter_row = QHBoxLayout()
        self._edit_filter = QLineEdit()
        self._edit_filter.setPlaceholderText("Filter...")
        self._btn_clear_filter = QPushButton("Clear")
        filter_row.addWidget(self._edit_filter, 1)
        filter_row.addWidget(self._btn_clear_filter)
        tree_layout.addLayout(filter_row)
        self._tree = QTreeWidget()
        self._tree.setHeaderHidden(True)
        tree_layout.addWidget(self._tree, 1)
        top.addWidget(tree_group, 1)

        middle = QVBoxLayout()
        middle.addStretch(1)
        self._btn_add = QPushButton("Add >")
        self._btn_remove = QPushButton("< Remove")
        middle.addWidget(self._btn_add)
        middle.addWidget(self._btn_remove)
        middle.addStretch(1)
        top.addLayout(middle)

        selected_group = QGroupBox("Selected")
        selected_layout = QVBoxLayout(selected_group)
        self._profile_bar = ProfileBar(self._session, "Grace Profile")
        selected_layout.addWidget(self._profile_bar)
        self._list_selected = QListWidget()
        self._list_selected.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        selected_layout.addWidget(self._list_selected, 1)
        self._btn_activate = QPushButton("Activate Selected")
        selected_layout.addWidget(self._btn_activate)
        top.addWidget(selected_group, 1)

    def _connect_signals(self) -> None:
        self._edit_filter.textChanged.connect(self._populate_tree)
        self._btn_clear_filter.clicked.connect(self._edit_filter.clear)
        self._tree.itemDoubleClicked.connect(lambda _item, _col: self._on_add())
        self._list_selected.itemDoubleClicked.connect(lambda _item: self._on_remove())
        self._btn_add.clicked.connect(self._on_add)
        self._btn_remove.clicked.connect(self._on_remove)
        self._btn_activate.clicked.connect(self._on_activate)
        self._profile_bar.profile_loaded.connect(lambda _name: self._refresh_selected())

    def _populate_tree(self) -> None:
        needle = remove_diacritics(self._edit_filter.text()).casefold()
        self._tree.clear()
        for area, sub_areas in self._catalog.graces_by_area().items():
            area_item = QTreeWidgetItem(self._tree, [area])
            for sub_area, graces in sub_areas.items():
                sub_item = QTreeWidgetItem(area_item, [sub_area])
                for grace in graces:
                    if needle and needle not in remove_diacritics(grace.name).casefold():
                        continue
                    leaf = QTreeWidgetItem(sub_item, [grace.name])
                    leaf.setData(0, Qt.ItemDataRole.UserRole, grace.id)
                if sub_item.childCount() == 0:
                    area_item.removeChild(sub_item)
            if area_item.childCount() == 0:
                self._tree.takeTopLevelItem(self._tree.indexOfTopLevelItem(area_item))
            elif needle:
                area_item.setExpanded(True)
                for i in range(area_item.childCount()):
                    area_item.child(i).setExpanded(True)

    def _refresh_selected(self) -> None:
        self._list_selected.clear()
        for grace_id in self._session.selection:
            grace = self._catalog.grace_by_id(grace_id)
            entry = QListWidgetItem(grace.name if grace else str(grace_id))
            entry.setData(Qt.ItemDataRole.UserRole, grace_id)
            self._list_selected.addItem(entry)
        self._btn_activate.setEnabled(bool(self._session.selection))
        self._profile_bar.update_buttons()

    def _on_add(self) -> None:
        current = self._tree.currentItem()
        grace_id = current.data(0, Qt.ItemDataRole.UserRole) if current is not None else None
        if grace_id is None:
            return
        if self._session.add(int(grace_id)):
            self._refresh_selected()

    def _on_remove(self) -> None:
        picked = [i.data(Qt.ItemDataRole.UserRole) for i in self._list_selected.selectedItems()]
        if self._session.remove(picked):
            self._refresh_selected()

    def _on_activate(self) -> None:
        unlock_graces(self._process, self._session.selection)

    def done(self, result: int) -> None:  # type: ignore[override]
        if not self._session.can_close(confirm_with(self)):
            return
        super().done(result)
