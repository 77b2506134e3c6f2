"""
Main Application Window
=======================
The primary GUI container that holds the menu bar, the side panels and the
garden view.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (like File -> Save) to the editor
   controller and turns storage errors into message boxes.
"""
import logging
import os

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QCloseEvent, QGuiApplication, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog, QInputDialog, QMainWindow, QMessageBox, QSplitter, QTabWidget
)

from gardenplanner.config import APP_NAME, ZOOM_STEP
from gardenplanner.controller.editor import EditorController
from gardenplanner.controller.placement import element_from_template
from gardenplanner.model.catalog import get_element_by_id
from gardenplanner.model.io import IOManager
from gardenplanner.model.state import EditorState, ViewMode
from gardenplanner.model.storage import GardenStorage, GardenStorageError
from gardenplanner.view.dialogs.save_dialog import SaveGardenDialog
from gardenplanner.view.panels.catalog_panel import CatalogPanel
from gardenplanner.view.panels.properties_panel import PropertiesPanel
from gardenplanner.view.scene import SceneAdapter
from gardenplanner.view.widgets.garden_view import GardenView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, state: EditorState, storage: GardenStorage) -> None:
        super().__init__()
        self.state = state
        self.is_modified: bool = False

        self.resize(1400, 900)

        # --- VIEW & CONTROLLER ---
        self.visualizer = GardenView()
        self.scene = SceneAdapter(self.visualizer)
        self.controller = EditorController(state, self.scene, storage)
        self.visualizer.pointer_handler = self.controller

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        self.side_tabs = QTabWidget()
        self.catalog_panel = CatalogPanel(state.current_category)
        self.properties_panel = PropertiesPanel(self.controller)
        self.side_tabs.addTab(self.catalog_panel, "Catalog")
        self.side_tabs.addTab(self.properties_panel, "Properties")
        splitter.addWidget(self.side_tabs)
        splitter.addWidget(self.visualizer)

        # 1 part sidebar : 4 parts garden view
        splitter.setSizes([320, 1080])

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # --- SIGNAL CONNECTIONS ---
        self.visualizer.template_dropped.connect(self.on_template_dropped)
        self.catalog_panel.template_activated.connect(self.on_template_activated)
        self.catalog_panel.category_changed.connect(self.controller.set_category)

        self.controller.selection_changed.connect(self.on_selection_changed)
        self.controller.elements_changed.connect(self._refresh_highlight)
        self.controller.history_changed.connect(self.on_history_changed)
        self.controller.dirty_changed.connect(self.set_modified)
        self.controller.garden_changed.connect(lambda _garden: self.update_window_title())
        self.controller.view_mode_changed.connect(self.on_view_mode_changed)

        self.on_history_changed(False, False)
        self.update_window_title()
        self.controller.render_all()

    def _create_actions(self) -> None:
        # File Actions
        self.act_new = QAction("New Garden", self)
        self.act_new.setShortcut(QKeySequence.StandardKey.New)
        self.act_new.triggered.connect(self.on_file_new)

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self.on_file_save)

        self.act_save_as = QAction("Save As...", self)
        self.act_save_as.setShortcut("Ctrl+Shift+S")
        self.act_save_as.triggered.connect(self.on_file_save_as)

        self.act_delete_garden = QAction("Delete Garden", self)
        self.act_delete_garden.triggered.connect(self.on_file_delete)

        self.act_export = QAction("Export to JSON...", self)
        self.act_export.triggered.connect(self.on_file_export)

        self.act_import = QAction("Import from JSON...", self)
        self.act_import.setShortcut("Ctrl+I")
        self.act_import.triggered.connect(self.on_file_import)

        self.act_share = QAction("Copy Share Link", self)
        self.act_share.triggered.connect(self.on_file_share)

        self.act_open_shared = QAction("Open Share Link...", self)
        self.act_open_shared.triggered.connect(self.on_file_open_shared)

        self.act_screenshot = QAction("Save Screenshot...", self)
        self.act_screenshot.triggered.connect(self.on_file_screenshot)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        # Edit Actions
        self.act_undo = QAction("Undo", self)
        self.act_undo.setShortcut("Ctrl+Z")
        self.act_undo.triggered.connect(self.controller.undo)

        self.act_redo = QAction("Redo", self)
        self.act_redo.setShortcuts([QKeySequence("Ctrl+Y"), QKeySequence("Ctrl+Shift+Z")])
        self.act_redo.triggered.connect(self.controller.redo)

        self.act_delete_element = QAction("Delete Element", self)
        self.act_delete_element.setShortcut(QKeySequence.StandardKey.Delete)
        self.act_delete_element.setEnabled(False)
        self.act_delete_element.triggered.connect(self.controller.remove_selected)

        # View Actions
        self.view_group = QActionGroup(self)
        self.act_view_2d = QAction("2D Plan", self, checkable=True)
        self.act_view_3d = QAction("3D View", self, checkable=True)
        for act, mode in ((self.act_view_2d, ViewMode.TOP_DOWN), (self.act_view_3d, ViewMode.PERSPECTIVE)):
            act.setChecked(self.state.current_view == mode)
            act.triggered.connect(lambda _checked, m=mode: self.controller.set_view_mode(m))
            self.view_group.addAction(act)

        self.act_grid = QAction("Show Grid", self, checkable=True)
        self.act_grid.setChecked(self.state.grid_visible)
        self.act_grid.toggled.connect(self.controller.set_grid_visible)

        self.act_snap = QAction("Snap to Grid", self, checkable=True)
        self.act_snap.setChecked(self.state.snap_to_grid)
        self.act_snap.toggled.connect(self.controller.set_snap_to_grid)

        self.act_zoom_in = QAction("Zoom In", self)
        self.act_zoom_in.setShortcut(QKeySequence.StandardKey.ZoomIn)
        self.act_zoom_in.triggered.connect(lambda: self.controller.zoom(ZOOM_STEP))

        self.act_zoom_out = QAction("Zoom Out", self)
        self.act_zoom_out.setShortcut(QKeySequence.StandardKey.ZoomOut)
        self.act_zoom_out.triggered.connect(lambda: self.controller.zoom(-ZOOM_STEP))

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_new)
        self.open_menu = file_menu.addMenu("Open Garden")
        self.open_menu.aboutToShow.connect(self._populate_open_menu)
        self.templates_menu = file_menu.addMenu("New from Template")
        self.templates_menu.aboutToShow.connect(self._populate_templates_menu)
        file_menu.addSeparator()
        file_menu.addAction(self.act_save)
        file_menu.addAction(self.act_save_as)
        file_menu.addAction(self.act_delete_garden)
        file_menu.addSeparator()
        file_menu.addAction(self.act_import)
        file_menu.addAction(self.act_export)
        file_menu.addAction(self.act_share)
        file_menu.addAction(self.act_open_shared)
        file_menu.addAction(self.act_screenshot)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.act_undo)
        edit_menu.addAction(self.act_redo)
        edit_menu.addSeparator()
        edit_menu.addAction(self.act_delete_element)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_view_2d)
        view_menu.addAction(self.act_view_3d)
        view_menu.addSeparator()
        view_menu.addAction(self.act_grid)
        view_menu.addAction(self.act_snap)
        view_menu.addSeparator()
        view_menu.addAction(self.act_zoom_in)
        view_menu.addAction(self.act_zoom_out)

    def _populate_open_menu(self) -> None:
        self.open_menu.clear()
        gardens = self.controller.list_gardens()
        if not gardens:
            act = self.open_menu.addAction("No saved gardens")
            act.setEnabled(False)
            return
        for garden in gardens:
            act = self.open_menu.addAction(garden.name)
            act.setToolTip(garden.description)
            act.triggered.connect(lambda _checked=False, gid=garden.id: self.on_file_open(gid))

    def _populate_templates_menu(self) -> None:
        self.templates_menu.clear()
        for name in IOManager.list_garden_templates():
            act = self.templates_menu.addAction(name.replace("-", " ").title())
            act.triggered.connect(lambda _checked=False, n=name: self.on_load_template(n))

    # --- HELPER METHODS ---

    def update_window_title(self) -> None:
        """Updates the window title based on garden name and dirty state."""
        garden = self.state.current_garden
        name = garden.name if garden is not None else "Untitled"
        title = f"{APP_NAME} - [{name}"
        if self.is_modified:
            title += "*"
        title += "]"
        self.setWindowTitle(title)

    def set_modified(self, modified: bool) -> None:
        """Sets the dirty flag and updates title if changed."""
        if self.is_modified != modified:
            self.is_modified = modified
            self.update_window_title()

    def _confirm_discard(self, title: str) -> bool:
        if not self.controller.has_unsaved_changes() or not self.state.elements:
            return True
        reply = QMessageBox.question(
            self,
            title,
            "The garden has unsaved changes. Discard them?",
            QMessageBox.StandardButton.Discard | QMessageBox.StandardButton.Cancel,
        )
        return reply == QMessageBox.StandardButton.Discard

    def _show_error(self, title: str, error: Exception) -> None:
        logger.error(f"{title}: {error}")
        QMessageBox.critical(self, title, str(error))

    # --- CONTROLLER SLOTS ---

    def on_template_dropped(self, template_id: str, x: float, y: float) -> None:
        element = self.controller.drop_template(template_id, x, y)
        if element is not None:
            self.statusBar().showMessage(f"Added {element.name}.", 3000)

    def on_template_activated(self, template_id: str) -> None:
        template = get_element_by_id(template_id)
        if template is not None:
            self.controller.add_element(element_from_template(template, 0.0, 0.0))

    def _refresh_highlight(self) -> None:
        # Visuals are rebuilt on edits and undo, so look the handle up again
        selected_id = self.state.selected_element_id
        self.visualizer.set_highlight(self.scene.handles.get(selected_id) if selected_id else None)

    def on_selection_changed(self, element) -> None:
        self.act_delete_element.setEnabled(element is not None)
        self._refresh_highlight()
        if element is not None:
            self.side_tabs.setCurrentWidget(self.properties_panel)

    def on_history_changed(self, can_undo: bool, can_redo: bool) -> None:
        self.act_undo.setEnabled(can_undo)
        self.act_redo.setEnabled(can_redo)

    def on_view_mode_changed(self, mode: str) -> None:
        self.act_view_2d.setChecked(mode == ViewMode.TOP_DOWN)
        self.act_view_3d.setChecked(mode == ViewMode.PERSPECTIVE)

    # --- FILE SLOTS ---

    def on_file_new(self) -> None:
        if self._confirm_discard("New Garden"):
            self.controller.new_garden()

    def on_file_open(self, garden_id: str) -> None:
        if not self._confirm_discard("Open Garden"):
            return
        try:
            garden = self.controller.load_garden(garden_id)
            self.statusBar().showMessage(f"Loaded '{garden.name}'.", 3000)
        except GardenStorageError as e:
            self._show_error("Error", e)

    def on_load_template(self, name: str) -> None:
        if not self._confirm_discard("New from Template"):
            return
        try:
            self.controller.load_template(name)
        except GardenStorageError as e:
            self._show_error("Error", e)

    def on_file_save(self) -> bool:
        if self.state.current_garden is None:
            return self.on_file_save_as()
        try:
            self.controller.quick_save()
            self.statusBar().showMessage("Garden saved.", 3000)
            return True
        except GardenStorageError as e:
            self._show_error("Error", e)
            return False

    def on_file_save_as(self) -> bool:
        current = self.state.current_garden
        values = SaveGardenDialog.get_values(
            current.name if current else "",
            current.description if current else "",
            self,
        )
        if values is None:
            return False
        name, description = values
        try:
            self.controller.save_garden(name, description)
            self.statusBar().showMessage(f"Garden '{name}' saved.", 3000)
            return True
        except GardenStorageError as e:
            self._show_error("Error", e)
            return False

    def on_file_delete(self) -> None:
        garden = self.state.current_garden
        if garden is None:
            QMessageBox.information(self, "Delete Garden", "This garden has not been saved yet.")
            return
        reply = QMessageBox.question(
            self,
            "Delete Garden",
            f"Delete '{garden.name}' permanently?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        try:
            self.controller.delete_current_garden()
        except GardenStorageError as e:
            self._show_error("Error", e)

    def on_file_export(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Export Garden To")
        if not directory:
            return
        try:
            path = self.controller.export_current(directory)
            self.statusBar().showMessage(f"Exported to {path}.", 5000)
        except (GardenStorageError, OSError) as e:
            self._show_error("Export Failed", e)

    def on_file_import(self) -> None:
        if not self._confirm_discard("Import Garden"):
            return
        fname, _ = QFileDialog.getOpenFileName(self, "Import Garden", "", "JSON Files (*.json)")
        if not fname:
            return
        try:
            garden = self.controller.import_file(fname)
            self.statusBar().showMessage(f"Imported '{garden.name}'.", 3000)
        except GardenStorageError as e:
            self._show_error("Import Failed", e)

    def on_file_share(self) -> None:
        link = self.controller.share_link()
        if link is None:
            QMessageBox.information(self, "Share Garden", "Save the garden before sharing it.")
            return
        QGuiApplication.clipboard().setText(link)
        QMessageBox.information(self, "Share Garden", f"Link copied to clipboard:\n{link}")

    def on_file_open_shared(self) -> None:
        link, ok = QInputDialog.getText(self, "Open Share Link", "Link:")
        if ok and link.strip():
            self.open_share_link(link.strip())

    def open_share_link(self, link: str) -> None:
        """Resolve a share link against the local store; warn if it is unknown here."""
        if not self._confirm_discard("Open Share Link"):
            return
        garden = self.controller.open_shared(link)
        if garden is None:
            QMessageBox.warning(self, "Open Share Link", "The shared garden was not found on this computer.")

    def on_file_screenshot(self) -> None:
        fname, _ = QFileDialog.getSaveFileName(self, "Save Screenshot", "", "PNG Images (*.png)")
        if not fname:
            return
        try:
            path = IOManager.save_screenshot(self.visualizer.plotter, fname)
            self.statusBar().showMessage(f"Screenshot saved to {os.path.basename(path)}.", 3000)
        except GardenStorageError as e:
            self._show_error("Screenshot Failed", e)

    def closeEvent(self, event: QCloseEvent, /) -> None:
        """Handle window close event to prompt for saving if modified."""
        if self.controller.has_unsaved_changes() and self.state.elements:
            reply = QMessageBox.question(
                self,
                "Save changes?",
                "The garden has unsaved changes. Save them before closing?",
                QMessageBox.StandardButton.Save | QMessageBox.StandardButton.Discard | QMessageBox.StandardButton.Cancel,
            )

            if reply == QMessageBox.StandardButton.Save:
                if not self.on_file_save():
                    event.ignore()
                    return
            elif reply == QMessageBox.StandardButton.Cancel:
                event.ignore()
                return

        # Close the PyVista plotter safely
        if self.visualizer and self.visualizer.plotter:
            self.visualizer.plotter.close()

        event.accept()
