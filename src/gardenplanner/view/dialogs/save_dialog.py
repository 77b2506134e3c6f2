"""
Save Garden Dialog
Asks for the garden name and an optional description.
"""
from typing import Optional, Tuple

from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QFormLayout, QLineEdit, QPlainTextEdit, QVBoxLayout, QWidget
)


class SaveGardenDialog(QDialog):
    def __init__(self, name: str = "", description: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Save Garden")
        self.resize(400, 220)

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.name_edit = QLineEdit(name)
        self.name_edit.setPlaceholderText("My garden")
        form.addRow("Name:", self.name_edit)

        self.description_edit = QPlainTextEdit(description)
        self.description_edit.setPlaceholderText("Optional description")
        form.addRow("Description:", self.description_edit)

        layout.addLayout(form)

        self.buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

        self.name_edit.textChanged.connect(self._update_buttons)
        self._update_buttons()

    def _update_buttons(self) -> None:
        # A garden is stored under its name, so an empty name cannot be saved
        self.buttons.button(QDialogButtonBox.StandardButton.Save).setEnabled(bool(self.name_edit.text().strip()))

    def values(self) -> Tuple[str, str]:
        return self.name_edit.text().strip(), self.description_edit.toPlainText().strip()

    @staticmethod
    def get_values(name: str = "", description: str = "", parent: Optional[QWidget] = None) -> Optional[Tuple[str, str]]:
        """Run the dialog; (name, description) on accept, None on cancel."""
        dialog = SaveGardenDialog(name, description, parent)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.values()
