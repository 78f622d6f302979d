from .playback_controller import PlaybackController
from .preview_widget import LedPreviewWidget, MatrixLabel

__all__ = [
    'PlaybackController',
    'LedPreviewWidget',
    'MatrixLabel',
]
