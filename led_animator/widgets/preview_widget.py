from PyQt6.QtWidgets import QWidget, QLabel, QVBoxLayout, QPushButton, QHBoxLayout
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QPixmap, QImage
from PIL import Image

from ..core.animation_editor import AnimationEditor
from ..core.frame_renderer import FrameRenderer
from .playback_controller import PlaybackController


class MatrixLabel(QLabel):
    """Preview label that reports which LED was clicked (left lights it, right clears it)"""

    cell_clicked = pyqtSignal(int, int, bool)

    def __init__(self, renderer: FrameRenderer, parent=None):
        super().__init__(parent)
        self.renderer = renderer

    def cell_at(self, px: float, py: float):
        pixmap = self.pixmap()
        if pixmap is None or pixmap.isNull():
            return None
        # Pixmap is drawn centered in the label
        left = px - (self.width() - pixmap.width()) // 2
        top = py - (self.height() - pixmap.height()) // 2
        if left < 0 or top < 0 or left >= pixmap.width() or top >= pixmap.height():
            return None
        pitch = self.renderer.cell + self.renderer.gap
        return int(left) // pitch, int(top) // pitch

    def mousePressEvent(self, event):
        if event.button() in (Qt.MouseButton.LeftButton, Qt.MouseButton.RightButton):
            pos = event.position()
            cell = self.cell_at(pos.x(), pos.y())
            if cell is not None:
                self.cell_clicked.emit(cell[0], cell[1], event.button() == Qt.MouseButton.LeftButton)
        super().mousePressEvent(event)


class LedPreviewWidget(QWidget):
    # Signal to emit frame info: (current_frame, total_frames, interval_ms)
    frame_info_changed = pyqtSignal(int, int, int)

    def __init__(self, editor: AnimationEditor, parent=None):
        super().__init__(parent)

        self.editor = editor
        self.renderer = FrameRenderer()
        self.playback = PlaybackController(editor, self)
        self.playback.frame_changed.connect(lambda _: self.refresh())
        self.playback.playing_changed.connect(self.on_playing_changed)

        self.init_ui()
        self.refresh()

    def init_ui(self):
        layout = QVBoxLayout()
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(8)

        control_layout = QHBoxLayout()

        self.play_button = QPushButton("▶ Play")
        self.play_button.clicked.connect(self.playback.toggle)
        control_layout.addWidget(self.play_button)

        self.prev_button = QPushButton("⏮ Prev")
        self.prev_button.clicked.connect(self.prev_frame)
        control_layout.addWidget(self.prev_button)

        self.next_button = QPushButton("⏭ Next")
        self.next_button.clicked.connect(self.next_frame)
        control_layout.addWidget(self.next_button)

        self.frame_label = QLabel("")
        control_layout.addWidget(self.frame_label)

        layout.addLayout(control_layout)

        self.preview_label = MatrixLabel(self.renderer)
        self.preview_label.setText("No Preview")
        self.preview_label.cell_clicked.connect(self.on_cell_clicked)
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setStyleSheet("QLabel { background-color: #111; border: 2px solid #333; }")
        layout.addWidget(self.preview_label)

        self.setLayout(layout)

    def set_editor(self, editor: AnimationEditor):
        self.playback.pause()
        self.editor = editor
        self.playback.editor = editor
        self.refresh()

    def refresh(self):
        """Render the merged current frame"""
        image = self.renderer.render_grid(self.editor.merged())
        self.preview_label.setPixmap(self.pil_to_pixmap(image))
        self.update_info()

    def pil_to_pixmap(self, pil_image: Image.Image) -> QPixmap:
        if pil_image.mode != 'RGBA':
            pil_image = pil_image.convert('RGBA')

        data = pil_image.tobytes('raw', 'RGBA')
        qimage = QImage(
            data,
            pil_image.width,
            pil_image.height,
            QImage.Format.Format_RGBA8888
        )
        # QImage does not own `data`
        return QPixmap.fromImage(qimage.copy())

    def on_cell_clicked(self, x: int, y: int, value: bool):
        if self.editor.paint(x, y, value):
            self.refresh()

    def next_frame(self):
        self.editor.step_forward()
        self.refresh()

    def prev_frame(self):
        self.editor.step_back()
        self.refresh()

    def on_playing_changed(self, playing: bool):
        self.play_button.setText("⏸ Pause" if playing else "▶ Play")

    def update_info(self):
        total = self.editor.frames_count
        current = self.editor.current + 1
        self.frame_label.setText(f"Frame {current}/{total}")
        self.frame_info_changed.emit(current, total, self.editor.playback_interval_ms)
