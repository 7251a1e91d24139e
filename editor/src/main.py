import sys
import os
import json
import logging

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import (
    QMainWindow, QFileDialog, QMessageBox, QLabel, QScrollArea,
    QDialog, QVBoxLayout,
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

# Component imports
from components.card_canvas import CardCanvasWidget
from components.card_flip_widget import CardFlipWidget
from components.editor_session import CardEditorSession

# Model / service imports
from models.card_elements import ElementId, default_positions, get_spec
from models.profile import CardProfile
from services.card_renderer import CardRenderer
from services.layout_storage import LayoutStorage

# Utility imports
from utils.logger import configure_logging, loggerRaise, set_main_window
from constants import (
    STORAGE_KEY_CARD_PHOTO, STORAGE_KEY_LOGO1, STORAGE_KEY_LOGO2,
    STORAGE_KEY_TEMPLATE,
)

# Mixin imports
from mixins.config_mixin import ConfigMixin

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.webp);;All Files (*)"


class CardLayoutEditor(ConfigMixin, QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("ID Card Layout Editor")
        self.resize(1280, 860)

        # Settings (overridden by the config file)
        self.recent_exports = []
        self.show_debug_grid = True
        self.config_dir = os.path.join(os.path.expanduser("~"), ".card_layout_editor")
        self.config_file = os.path.join(self.config_dir, "config.json")
        self.storage_file = os.path.join(self.config_dir, "layout.json")
        self._load_config()

        # Initialize global logger with main window reference
        set_main_window(self)

        # Persistent layout + editing session
        self.storage = LayoutStorage(self.storage_file)
        self.session = CardEditorSession(
            store=self.storage.load_positions(),
            content=self.storage.load_content(),
            show_absent=True,
        )
        self.session.subscribe(self.storage.save_positions)
        self.renderer = CardRenderer()

        self.setup_ui()
        self.canvas.open_session()

    # ============= UI Setup =============

    def setup_ui(self):
        self._create_menu_bar()

        self.canvas = CardCanvasWidget(self.session)
        self.canvas.set_show_grid(self.show_debug_grid)
        self.canvas.coordinatesQueried.connect(self._on_coordinates_queried)
        self.canvas.positionsChanged.connect(self._on_positions_changed)

        scroll = QScrollArea()
        scroll.setWidget(self.canvas)
        scroll.setAlignment(Qt.AlignCenter)
        self.setCentralWidget(scroll)

        # Add status bar at bottom with left and right sections
        self.status_left = QLabel("Ready")
        self.status_right = QLabel("")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)

    def _create_menu_bar(self):
        menubar = self.menuBar()

        # File Menu
        file_menu = menubar.addMenu("&File")

        profile_action = file_menu.addAction("Load &Profile...")
        profile_action.setShortcut("Ctrl+O")
        profile_action.triggered.connect(self.load_profile)

        images_menu = file_menu.addMenu("Card &Images")
        for label, key in (
            ("Template...", STORAGE_KEY_TEMPLATE),
            ("Logo 1...", STORAGE_KEY_LOGO1),
            ("Logo 2...", STORAGE_KEY_LOGO2),
            ("Photo...", STORAGE_KEY_CARD_PHOTO),
        ):
            action = images_menu.addAction(label)
            action.triggered.connect(lambda checked, k=key: self.choose_image(k))

        file_menu.addSeparator()

        generate_action = file_menu.addAction("&Generate Card...")
        generate_action.setShortcut("Ctrl+G")
        generate_action.triggered.connect(self.generate_card)

        # Recent Cards submenu
        self.recent_menu = file_menu.addMenu("Recent Cards")
        self._update_recent_exports_menu()

        file_menu.addSeparator()

        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut("Alt+F4")
        exit_action.triggered.connect(self.close)

        # View Menu
        view_menu = menubar.addMenu("&View")

        self.grid_action = view_menu.addAction("Show Layout &Grid")
        self.grid_action.setCheckable(True)
        self.grid_action.setChecked(self.show_debug_grid)
        self.grid_action.toggled.connect(self._on_grid_toggled)

        reset_view_action = view_menu.addAction("&Reset Zoom")
        reset_view_action.setShortcut("Ctrl+0")
        reset_view_action.triggered.connect(self.reset_view)

        reset_layout_action = view_menu.addAction("Reset &Layout")
        reset_layout_action.triggered.connect(self.reset_layout)

        view_menu.addSeparator()

        preview_action = view_menu.addAction("Card &Preview...")
        preview_action.setShortcut("Ctrl+P")
        preview_action.triggered.connect(lambda: self.show_flip_preview(self.storage.card_image))

    # ========================================
    # Canvas Signals
    # ========================================

    def _on_coordinates_queried(self, element, x, y):
        label = get_spec(ElementId(element)).label
        self.status_left.setText(f"{label}: x={x:.1f}, y={y:.1f}")
        logger.debug("Coordinates queried: %s (%.1f, %.1f)", element, x, y)

    def _on_positions_changed(self, positions):
        self.status_right.setText(f"Layout saved ({len(positions)} elements)")

    def _on_grid_toggled(self, checked):
        self.show_debug_grid = checked
        self.canvas.set_show_grid(checked)
        self._save_config()

    # ========================================
    # Core Application Methods
    # ========================================

    def reset_view(self):
        self.canvas.open_session()

    def reset_layout(self):
        """Move every element back to its default position"""
        reply = QMessageBox.question(
            self,
            "Reset Layout",
            "Move every element back to its default position?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return
        for element_id, position in default_positions().items():
            self.session.set_position(element_id, position)
        self.canvas.update()

    def load_profile(self):
        """Load profile values from a JSON file"""
        filename, _ = QFileDialog.getOpenFileName(self, "Load Profile", "", "JSON Files (*.json);;All Files (*)")
        if not filename:
            return
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                profile = CardProfile.from_dict(json.load(f))
            self.storage.save_profile(profile)
            self._reload_content()
            self.status_left.setText(f"Profile loaded from {os.path.basename(filename)}")
        except Exception as e:
            loggerRaise(e, "Failed to load profile")

    def choose_image(self, key):
        filename, _ = QFileDialog.getOpenFileName(self, "Choose Image", "", IMAGE_FILTER)
        if not filename:
            return
        self.storage.set_image(key, filename)
        self._reload_content()

    def _reload_content(self):
        self.session.set_content(self.storage.load_content())
        self.canvas.update()

    def generate_card(self):
        """Render the card at rest and save it as PNG"""
        try:
            filename, _ = QFileDialog.getSaveFileName(
                self,
                "Generate Card",
                "",
                "PNG Files (*.png);;All Files (*)"
            )
            if not filename:
                return
            if not filename.lower().endswith('.png'):
                filename += '.png'

            path = self.renderer.save(self.session.snapshot(), self.session.content, filename)
            self.storage.card_image = str(path)
            self._add_to_recent_exports(str(path))
            self.status_left.setText(f"Card generated: {path}")
            self.show_flip_preview(str(path))
        except Exception as e:
            loggerRaise(e, "Failed to generate card")

    def show_flip_preview(self, card_image):
        if not card_image:
            QMessageBox.information(self, "Card Preview", "Generate a card first.")
            return
        dialog = QDialog(self)
        dialog.setWindowTitle("Card Preview")
        layout = QVBoxLayout(dialog)
        layout.addWidget(CardFlipWidget(card_image, parent=dialog))
        dialog.resize(720, 520)
        dialog.exec_()

    def closeEvent(self, event):
        self.session.dispose()
        self._save_config()
        super().closeEvent(event)


def main():
    """Main entry point for the ID card layout editor"""
    configure_logging(verbose='-v' in sys.argv)
    app = QtWidgets.QApplication([])

    # Use Fusion style with dark palette
    app.setStyle("Fusion")

    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ToolTipBase, Qt.white)
    dark_palette.setColor(QPalette.ToolTipText, Qt.white)
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.BrightText, Qt.red)
    dark_palette.setColor(QPalette.Link, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)

    app.setPalette(dark_palette)

    window = CardLayoutEditor()
    window.show()
    app.exec_()


if __name__ == "__main__":
    main()
