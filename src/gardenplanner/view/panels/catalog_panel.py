"""
Element Catalog Panel
Category picker, search box and a drag source listing element templates.
"""
from typing import List

from PySide6.QtCore import QByteArray, QMimeData, Qt, Signal
from PySide6.QtWidgets import (
    QAbstractItemView, QComboBox, QGroupBox, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QVBoxLayout, QWidget
)

from gardenplanner.model.catalog import (
    CATEGORY_LABELS, ElementTemplate, get_elements_by_category, list_categories, search_elements
)
from gardenplanner.view.widgets.garden_view import TEMPLATE_MIME


class TemplateListWidget(QListWidget):
    """List whose drags carry the template id under TEMPLATE_MIME."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DragOnly)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)

    def mimeTypes(self) -> List[str]:
        return [TEMPLATE_MIME]

    def mimeData(self, items) -> QMimeData:
        mime = QMimeData()
        if items:
            template_id = items[0].data(Qt.ItemDataRole.UserRole)
            mime.setData(TEMPLATE_MIME, QByteArray(template_id.encode("utf-8")))
        return mime


class CatalogPanel(QWidget):
    # Emitted on double click; the main window places the template at the garden centre
    template_activated = Signal(str)
    category_changed = Signal(str)

    def __init__(self, current_category: str = "garden-plan") -> None:
        super().__init__()

        layout = QVBoxLayout(self)

        grp = QGroupBox("Elements")
        grp_layout = QVBoxLayout(grp)

        self.combo_category = QComboBox()
        for category in list_categories():
            self.combo_category.addItem(CATEGORY_LABELS.get(category, category), category)
        grp_layout.addWidget(self.combo_category)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search elements...")
        self.search_edit.setClearButtonEnabled(True)
        grp_layout.addWidget(self.search_edit)

        self.list_templates = TemplateListWidget()
        grp_layout.addWidget(self.list_templates)

        hint = QLabel("Drag an element onto the garden.")
        hint.setStyleSheet("color: gray;")
        hint.setWordWrap(True)
        grp_layout.addWidget(hint)

        layout.addWidget(grp)

        index = self.combo_category.findData(current_category)
        self.combo_category.setCurrentIndex(max(index, 0))
        self._populate(get_elements_by_category(self.current_category()))

        self.combo_category.currentIndexChanged.connect(self.on_category_changed)
        self.search_edit.textChanged.connect(self.on_search_changed)
        self.list_templates.itemDoubleClicked.connect(self.on_item_double_clicked)

    def current_category(self) -> str:
        return self.combo_category.currentData()

    def _populate(self, templates: List[ElementTemplate]) -> None:
        self.list_templates.clear()
        for template in templates:
            item = QListWidgetItem(template.name)
            item.setData(Qt.ItemDataRole.UserRole, template.id)
            item.setToolTip(f"{template.name} ({template.type})")
            self.list_templates.addItem(item)

    # --- SLOTS ---

    def on_category_changed(self, _index: int) -> None:
        self.search_edit.blockSignals(True)
        self.search_edit.clear()
        self.search_edit.blockSignals(False)
        self._populate(get_elements_by_category(self.current_category()))
        self.category_changed.emit(self.current_category())

    def on_search_changed(self, text: str) -> None:
        if text.strip():
            self._populate(search_elements(text))
        else:
            self._populate(get_elements_by_category(self.current_category()))

    def on_item_double_clicked(self, item: QListWidgetItem) -> None:
        self.template_activated.emit(item.data(Qt.ItemDataRole.UserRole))
