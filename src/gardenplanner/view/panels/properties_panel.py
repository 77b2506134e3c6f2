"""
Element Properties Panel
Editable form for the selected element: name, rotation and every property.
"""
from functools import partial
from typing import Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QCheckBox, QDoubleSpinBox, QFormLayout, QGroupBox, QLabel, QLineEdit,
    QPushButton, QVBoxLayout, QWidget
)

from gardenplanner.controller.editor import EditorController
from gardenplanner.model.elements import GardenElement, PropertyValue, is_number


def coerce_number(current: PropertyValue, value: float) -> PropertyValue:
    """Keep integers integral when the edited value allows it."""
    if isinstance(current, int) and not isinstance(current, bool) and float(value).is_integer():
        return int(value)
    return float(value)


def _label(key: str) -> str:
    return key.replace("_", " ").capitalize() + ":"


class PropertiesPanel(QWidget):
    def __init__(self, controller: EditorController) -> None:
        super().__init__()
        self.controller = controller
        self._element_id: Optional[str] = None
        self._editors: Dict[str, QWidget] = {}

        layout = QVBoxLayout(self)

        self.grp = QGroupBox("Properties")
        self.form = QFormLayout(self.grp)
        layout.addWidget(self.grp)

        self.lbl_empty = QLabel("Select an element to edit it.")
        self.lbl_empty.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.lbl_empty.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_empty)

        self.btn_delete = QPushButton("Delete Element")
        self.btn_delete.clicked.connect(self.on_delete_clicked)
        layout.addWidget(self.btn_delete)

        layout.addStretch()

        self.controller.selection_changed.connect(self.set_element)
        # Rebuild after the emitting editor has returned from its slot
        self.controller.elements_changed.connect(lambda: QTimer.singleShot(0, self.refresh))
        self.set_element(None)

    # --- PUBLIC ---

    def set_element(self, element: Optional[GardenElement]) -> None:
        self._element_id = element.id if element is not None else None
        self._rebuild(element)

    def refresh(self) -> None:
        """Re-read the selected element, e.g. after a drag or an undo."""
        element = self.controller.state.find_element(self._element_id) if self._element_id else None
        if element is None:
            self.set_element(None)
            return
        self._rebuild(element)

    # --- FORM ---

    def _rebuild(self, element: Optional[GardenElement]) -> None:
        while self.form.rowCount():
            self.form.removeRow(0)
        self._editors.clear()

        has_element = element is not None
        self.grp.setVisible(has_element)
        self.lbl_empty.setVisible(not has_element)
        self.btn_delete.setEnabled(has_element)
        if element is None:
            return

        self.form.addRow("Type:", QLabel(str(element.type)))

        name_edit = QLineEdit(element.name)
        name_edit.editingFinished.connect(partial(self.on_name_edited, name_edit))
        self.form.addRow("Name:", name_edit)

        self.form.addRow(
            "Position:",
            QLabel(f"x = {element.position.x:g} m, z = {element.position.z:g} m"),
        )

        rotation_spin = QDoubleSpinBox()
        rotation_spin.setRange(-360.0, 360.0)
        rotation_spin.setDecimals(1)
        rotation_spin.setSingleStep(15.0)
        rotation_spin.setSuffix(" °")
        rotation_spin.setValue(float(element.rotation))
        rotation_spin.editingFinished.connect(partial(self.on_rotation_edited, rotation_spin))
        self.form.addRow("Rotation:", rotation_spin)

        for key, value in element.properties.items():
            editor = self._make_editor(key, value)
            self._editors[key] = editor
            self.form.addRow(_label(key), editor)

    def _make_editor(self, key: str, value: PropertyValue) -> QWidget:
        if isinstance(value, bool):
            chk = QCheckBox()
            chk.setChecked(value)
            chk.toggled.connect(partial(self.on_property_edited, key))
            return chk

        if is_number(value):
            spin = QDoubleSpinBox()
            spin.setRange(-1e6, 1e6)
            spin.setDecimals(2)
            spin.setSingleStep(0.1)
            spin.setValue(float(value))
            spin.editingFinished.connect(
                lambda k=key, s=spin, v=value: self.on_property_edited(k, coerce_number(v, s.value()))
            )
            return spin

        edit = QLineEdit("" if value is None else str(value))
        edit.editingFinished.connect(lambda k=key, e=edit: self.on_property_edited(k, e.text()))
        return edit

    # --- SLOTS ---

    def on_name_edited(self, edit: QLineEdit) -> None:
        if self._element_id:
            self.controller.rename_element(self._element_id, edit.text().strip())

    def on_rotation_edited(self, spin: QDoubleSpinBox) -> None:
        if self._element_id:
            self.controller.set_rotation(self._element_id, spin.value())

    def on_property_edited(self, key: str, value: PropertyValue) -> None:
        if self._element_id:
            self.controller.update_property(self._element_id, key, value)

    def on_delete_clicked(self) -> None:
        if self._element_id:
            self.controller.remove_element(self._element_id)
