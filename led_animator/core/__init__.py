from .config import GridConfig, DEFAULT_CONFIG, playback_interval_ms
from .grid import Grid
from .keyframes import Offset, Keyframe, resolve_offset
from .layer_system import Layer, LayerKind, LayerCompositor
from .project import Project
from .bitcodec import pack_bytes, pack_words, unpack_bytes, unpack_words
from .header_codec import HeaderParseError, HeaderAnimation, generate_header, parse_header
from .project_codec import ProjectCodec, ProjectFormatError
from .animation_editor import AnimationEditor
from .frame_renderer import FrameRenderer

__all__ = [
    'GridConfig',
    'DEFAULT_CONFIG',
    'playback_interval_ms',
    'Grid',
    'Offset',
    'Keyframe',
    'resolve_offset',
    'Layer',
    'LayerKind',
    'LayerCompositor',
    'Project',
    'pack_bytes',
    'pack_words',
    'unpack_bytes',
    'unpack_words',
    'HeaderParseError',
    'HeaderAnimation',
    'generate_header',
    'parse_header',
    'ProjectCodec',
    'ProjectFormatError',
    'AnimationEditor',
    'FrameRenderer',
]
