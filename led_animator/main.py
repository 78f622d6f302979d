import sys
import logging
from pathlib import Path
from PyQt6.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout,
                             QHBoxLayout, QPushButton, QFileDialog, QMessageBox,
                             QListWidget, QListWidgetItem, QLabel, QGroupBox, QSpinBox,
                             QLineEdit, QInputDialog)
from PyQt6.QtCore import Qt

from .core import AnimationEditor, FrameRenderer, LayerKind
from .core.config import HEADER_FILE_NAME, PROJECT_FILE_NAME, RAW_FRAMES_FILE_NAME
from .widgets import LedPreviewWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()

        self.editor = AnimationEditor()
        self.gif_renderer = FrameRenderer()

        # Remember last used directory
        self.last_dir = ""

        self.init_ui()
        self.setWindowTitle("LED Animator - Pixel Matrix Animation Editor")
        self.resize(1100, 650)

    def init_ui(self):
        central = QWidget()
        layout = QHBoxLayout()

        left = QVBoxLayout()
        self.preview = LedPreviewWidget(self.editor)
        self.preview.frame_info_changed.connect(self.on_frame_info_changed)
        left.addWidget(self.preview)
        left.addWidget(self.create_frame_group())
        left.addWidget(self.create_offset_group())
        layout.addLayout(left, 3)

        right = QVBoxLayout()
        right.addWidget(self.create_timebase_group())
        right.addWidget(self.create_layer_group())
        right.addWidget(self.create_content_group())
        layout.addLayout(right, 1)

        central.setLayout(layout)
        self.setCentralWidget(central)
        self.create_menu_bar()
        self.refresh_layers()

    def create_timebase_group(self) -> QGroupBox:
        group = QGroupBox("Timeline")
        row = QHBoxLayout()

        row.addWidget(QLabel("Frames:"))
        self.frames_spinbox = QSpinBox()
        self.frames_spinbox.setRange(1, 999)
        self.frames_spinbox.setValue(self.editor.frames_count)
        self.frames_spinbox.valueChanged.connect(self.on_frames_count_changed)
        row.addWidget(self.frames_spinbox)

        row.addWidget(QLabel("FPS:"))
        self.fps_spinbox = QSpinBox()
        self.fps_spinbox.setRange(1, 60)
        self.fps_spinbox.setValue(self.editor.fps)
        self.fps_spinbox.valueChanged.connect(self.preview.playback.set_fps)
        row.addWidget(self.fps_spinbox)

        group.setLayout(row)
        return group

    def create_layer_group(self) -> QGroupBox:
        group = QGroupBox("Layers")
        column = QVBoxLayout()

        self.layer_list = QListWidget()
        self.layer_list.itemChanged.connect(self.on_layer_item_changed)
        self.layer_list.currentRowChanged.connect(self.on_layer_selected)
        column.addWidget(self.layer_list)

        buttons = QHBoxLayout()
        add_button = QPushButton("Add Layer")
        add_button.clicked.connect(self.on_add_layer)
        buttons.addWidget(add_button)
        remove_button = QPushButton("Remove")
        remove_button.clicked.connect(self.on_remove_layer)
        buttons.addWidget(remove_button)
        column.addLayout(buttons)

        group.setLayout(column)
        return group

    def create_content_group(self) -> QGroupBox:
        group = QGroupBox("Content")
        column = QVBoxLayout()

        text_row = QHBoxLayout()
        self.text_edit = QLineEdit()
        self.text_edit.setPlaceholderText("Text")
        text_row.addWidget(self.text_edit)
        text_button = QPushButton("Apply Text")
        text_button.clicked.connect(self.on_apply_text)
        text_row.addWidget(text_button)
        column.addLayout(text_row)

        number_row = QHBoxLayout()
        self.digit_spinbox = QSpinBox()
        self.digit_spinbox.setRange(0, 9)
        number_row.addWidget(self.digit_spinbox)
        number_button = QPushButton("Stamp Number")
        number_button.clicked.connect(self.on_stamp_number)
        number_row.addWidget(number_button)
        column.addLayout(number_row)

        group.setLayout(column)
        return group

    def create_frame_group(self) -> QGroupBox:
        group = QGroupBox("Frame")
        row = QHBoxLayout()
        for label, handler in (
            ("Duplicate to Next", self.editor_action(lambda e: e.duplicate_to_next())),
            ("Delete Frame", self.on_delete_frame),
            ("Copy", self.editor_action(lambda e: e.copy_frame())),
            ("Paste", self.editor_action(lambda e: e.paste_frame())),
            ("Clear", self.editor_action(lambda e: e.clear_frame())),
        ):
            button = QPushButton(label)
            button.clicked.connect(handler)
            row.addWidget(button)
        group.setLayout(row)
        return group

    def create_offset_group(self) -> QGroupBox:
        group = QGroupBox("Offset")
        row = QHBoxLayout()
        for label, dx, dy in (("←", -1, 0), ("→", 1, 0), ("↑", 0, -1), ("↓", 0, 1)):
            button = QPushButton(label)
            button.clicked.connect(self.editor_action(lambda e, dx=dx, dy=dy: e.nudge(dx, dy)))
            row.addWidget(button)
        self.add_key_button = QPushButton("Add Keyframe")
        self.add_key_button.clicked.connect(self.editor_action(lambda e: e.add_keyframe()))
        row.addWidget(self.add_key_button)
        self.remove_key_button = QPushButton("Remove Keyframe")
        self.remove_key_button.clicked.connect(self.editor_action(lambda e: e.remove_keyframe(e.current)))
        row.addWidget(self.remove_key_button)
        self.keyframe_label = QLabel("")
        row.addWidget(self.keyframe_label)
        group.setLayout(row)
        return group

    def create_menu_bar(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        file_menu.addAction("Open...", self.open_file)
        file_menu.addSeparator()
        file_menu.addAction("Save Project", self.save_project)
        file_menu.addAction("Export Header", self.export_header)
        file_menu.addAction("Export Frames JSON", self.export_raw_frames)
        file_menu.addAction("Export GIF Preview", self.export_gif)
        file_menu.addSeparator()
        file_menu.addAction("Exit", self.close)

        help_menu = menubar.addMenu("Help")
        help_menu.addAction("About", self.show_about)

    # ----- Helpers -----
    def editor_action(self, action):
        def _run():
            action(self.editor)
            self.refresh_all()
        return _run

    def refresh_all(self):
        self.preview.refresh()
        self.refresh_layers()

    def refresh_layers(self):
        self.layer_list.blockSignals(True)
        self.layer_list.clear()
        selected_row = 0
        for row, layer in enumerate(self.editor.project.layers):
            item = QListWidgetItem(f"{layer.name} ({layer.kind.value})")
            item.setData(Qt.ItemDataRole.UserRole, layer.id)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Checked if layer.visible else Qt.CheckState.Unchecked)
            self.layer_list.addItem(item)
            if layer.id == self.editor.project.selected_layer_id:
                selected_row = row
        self.layer_list.setCurrentRow(selected_row)
        self.layer_list.blockSignals(False)

        layer = self.editor.selected_layer()
        keys = ", ".join(str(k.frame + 1) for k in layer.keyframes) if layer else ""
        self.keyframe_label.setText(f"Keyframes: {keys or '-'}")

    def sync_spinboxes(self):
        for spinbox, value in ((self.frames_spinbox, self.editor.frames_count),
                               (self.fps_spinbox, self.editor.fps)):
            spinbox.blockSignals(True)
            spinbox.setValue(value)
            spinbox.blockSignals(False)

    # ----- Handlers -----
    def on_frame_info_changed(self, current: int, total: int, interval: int):
        self.statusBar().showMessage(f"Frame {current}/{total} - {interval}ms")

    def on_frames_count_changed(self, value: int):
        self.preview.playback.set_frames_count(value)
        self.refresh_all()

    def on_layer_selected(self, row: int):
        item = self.layer_list.item(row)
        if item is not None:
            self.editor.select_layer(item.data(Qt.ItemDataRole.UserRole))
            self.refresh_layers()

    def on_layer_item_changed(self, item: QListWidgetItem):
        layer = self.editor.project.layer(item.data(Qt.ItemDataRole.UserRole))
        if layer is None:
            return
        visible = item.checkState() == Qt.CheckState.Checked
        if visible != layer.visible:
            self.editor.toggle_visibility(layer.id)
            self.preview.refresh()

    def on_add_layer(self):
        name, ok = QInputDialog.getText(self, "Add Layer", "Layer name:")
        if not ok or not name:
            return
        kind, ok = QInputDialog.getItem(self, "Add Layer", "Type:",
                                        [k.value for k in LayerKind], 0, False)
        if not ok:
            return
        self.editor.add_layer(name, LayerKind.parse(kind))
        self.refresh_all()

    def on_remove_layer(self):
        layer = self.editor.selected_layer()
        if layer is not None:
            self.editor.remove_layer(layer.id)
            self.refresh_all()

    def on_delete_frame(self):
        self.editor.delete_current_frame()
        self.sync_spinboxes()
        self.refresh_all()

    def on_apply_text(self):
        if not self.editor.apply_text(self.text_edit.text()):
            QMessageBox.warning(self, "Warning", "Select a text layer and enter some text.")
            return
        self.text_edit.clear()
        self.refresh_all()

    def on_stamp_number(self):
        if not self.editor.stamp_number(str(self.digit_spinbox.value())):
            QMessageBox.warning(self, "Warning", "Select a number layer first.")
            return
        self.refresh_all()

    # ----- Files -----
    def open_file(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Animation",
            self.last_dir,
            "Animations (*.ledproj *.json *.h);;All Files (*)"
        )
        if not file_path:
            return
        self.last_dir = str(Path(file_path).parent)
        self.preview.playback.pause()
        if not self.editor.import_file(file_path):
            QMessageBox.critical(self, "Error", f"Could not import:\n{file_path}")
            return
        self.sync_spinboxes()
        self.refresh_all()

    def save_with_dialog(self, title: str, suggested_name: str, file_filter: str, save):
        default_path = str(Path(self.last_dir) / suggested_name) if self.last_dir else suggested_name
        file_path, _ = QFileDialog.getSaveFileName(self, title, default_path, file_filter)
        if not file_path:
            return
        self.last_dir = str(Path(file_path).parent)
        try:
            save(file_path)
        except (OSError, ValueError) as e:
            logger.error("Saving %s failed: %s", file_path, e)
            QMessageBox.critical(self, "Error", f"Failed to save:\n{str(e)}")

    def save_project(self):
        self.save_with_dialog("Save Project", PROJECT_FILE_NAME,
                              "LED Projects (*.ledproj *.json)", self.editor.save_project)

    def export_header(self):
        self.save_with_dialog("Export Header", HEADER_FILE_NAME,
                              "C Headers (*.h)", self.editor.save_header)

    def export_raw_frames(self):
        self.save_with_dialog("Export Frames JSON", RAW_FRAMES_FILE_NAME,
                              "JSON Files (*.json)", self.editor.save_raw_frames)

    def export_gif(self):
        self.save_with_dialog("Export GIF Preview", "led_animation.gif", "GIF Files (*.gif)", self.save_gif)

    def save_gif(self, file_path: str):
        self.gif_renderer.save_gif(self.editor.project, file_path)
        info = self.gif_renderer.get_gif_info(file_path)
        self.statusBar().showMessage(
            f"Saved {Path(file_path).name}: {info['frame_count']} frames, "
            f"{info['size'][0]}x{info['size'][1]}, {info['file_size_bytes'] // 1024} KB"
        )

    def show_about(self):
        QMessageBox.about(
            self,
            "About LED Animator",
            f"LED Animator\n\n"
            f"Matrix: {self.editor.config.width}x{self.editor.config.height}\n"
            f"Exports firmware headers, raw frame bitmaps and project files."
        )


def main():
    app = QApplication(sys.argv)

    app.setStyle('Fusion')

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == '__main__':
    main()
