from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..core.animation_editor import AnimationEditor
from ..core.config import playback_interval_ms


class PlaybackController(QObject):
    """Advances the editor's frame cursor on a timer while playing."""

    # Emits the new current frame index after every tick
    frame_changed = pyqtSignal(int)
    playing_changed = pyqtSignal(bool)

    def __init__(self, editor: AnimationEditor, parent=None):
        super().__init__(parent)
        self.editor = editor
        self.is_playing = False

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.tick)

    def interval_ms(self) -> int:
        return playback_interval_ms(self.editor.fps)

    def play(self):
        if self.is_playing:
            return
        self.is_playing = True
        self.timer.start(self.interval_ms())
        self.playing_changed.emit(True)

    def pause(self):
        if not self.is_playing:
            return
        self.is_playing = False
        self.timer.stop()
        self.playing_changed.emit(False)

    def toggle(self):
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def set_fps(self, fps: int):
        """Change the rate; a running timer picks up the new interval immediately"""
        self.editor.set_fps(fps)
        if self.is_playing:
            self.timer.setInterval(self.interval_ms())

    def set_frames_count(self, count: int):
        self.editor.set_frames_count(count)
        self.frame_changed.emit(self.editor.current)

    def tick(self):
        if not self.is_playing:
            return
        self.editor.advance()
        self.frame_changed.emit(self.editor.current)
