"""
Animation editor - owns the current project snapshot and the frame cursor

Every edit replaces `self.project` with a new Project built from the old one;
layers and grids already handed out are never modified.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Tuple

from .bitcodec import pack_words
from .config import (DEFAULT_CONFIG, DEFAULT_FPS, DEFAULT_FRAMES_COUNT, HEADER_FILE_NAME,
                     PROJECT_FILE_NAME, RAW_FRAMES_FILE_NAME, GridConfig, playback_interval_ms)
from .grid import Grid
from .header_codec import HeaderParseError, generate_header, looks_like_header, parse_header
from .keyframes import Offset
from .layer_system import Layer, LayerKind
from .project import Project
from .project_codec import ProjectCodec, ProjectFormatError

logger = logging.getLogger(__name__)

HEADER_EXTENSIONS = ('.h',)
PROJECT_EXTENSIONS = ('.json', '.ledproj')

# (suggested file name, file content)
Artifact = Tuple[str, str]


class AnimationEditor:
    """Applies editing operations to a project one at a time."""

    def __init__(self, config: GridConfig = DEFAULT_CONFIG, project: Optional[Project] = None):
        self.project: Project = project or Project.create_default(config)
        self.current: int = 0
        self.clipboard: Optional[Dict[str, Tuple[Grid, frozenset, Offset]]] = None

    @property
    def config(self) -> GridConfig:
        return self.project.config

    @property
    def frames_count(self) -> int:
        return self.project.frames_count

    @property
    def fps(self) -> int:
        return self.project.fps

    @property
    def playback_interval_ms(self) -> int:
        return playback_interval_ms(self.project.fps)

    def merged(self, frame: Optional[int] = None) -> Grid:
        return self.project.merge(self.current if frame is None else frame)

    def selected_layer(self) -> Optional[Layer]:
        return self.project.selected_layer()

    # ----- Timebase -----
    def set_frames_count(self, count: int):
        """Grow or shrink every layer to `count` frames; counts below one reset to the default"""
        if count is None or count < 1:
            count = DEFAULT_FRAMES_COUNT
        self.project = self.project.resized(count)
        self._move_cursor(min(self.current, max(0, count - 1)))

    def set_fps(self, fps: int):
        if fps is None or fps < 1:
            fps = DEFAULT_FPS
        self.project = replace(self.project, fps=fps)

    def set_current(self, index: int):
        self._move_cursor(max(0, min(index, self.frames_count - 1)))

    def advance(self):
        """Playback tick: move to the next frame, wrapping to the first"""
        self._move_cursor((self.current + 1) % max(self.frames_count, 1))

    def step_forward(self):
        """Move to the next frame, stopping at the last one"""
        self._move_cursor(min(self.current + 1, self.frames_count - 1))

    def step_back(self):
        self._move_cursor(max(0, self.current - 1))

    def _move_cursor(self, index: int):
        if index == self.current:
            return
        self.current = index
        if index > 0:
            self.project = self.project.update_all_layers(lambda layer: layer.carried_forward(index))

    # ----- Layers -----
    def select_layer(self, layer_id: str):
        if self.project.layer(layer_id) is not None:
            self.project = replace(self.project, selected_layer_id=layer_id)

    def add_layer(self, name: str, kind: LayerKind = LayerKind.DRAW) -> Layer:
        """Append a new empty layer on top and select it"""
        layer = Layer.create(name, LayerKind.parse(kind), self.frames_count, self.config)
        self.project = self.project.with_layers(self.project.layers + (layer,))
        self.select_layer(layer.id)
        return layer

    def remove_layer(self, layer_id: str):
        self.project = self.project.with_layers(l for l in self.project.layers if l.id != layer_id)

    def move_layer(self, from_index: int, to_index: int):
        layers = list(self.project.layers)
        if 0 <= from_index < len(layers) and 0 <= to_index < len(layers):
            layer = layers.pop(from_index)
            layers.insert(to_index, layer)
            self.project = self.project.with_layers(layers)

    def toggle_visibility(self, layer_id: str):
        self.project = self.project.update_layer(
            layer_id, lambda layer: replace(layer, visible=not layer.visible))

    def rename_layer(self, layer_id: str, name: str):
        if name:
            self.project = self.project.update_layer(
                layer_id, lambda layer: replace(layer, name=name))

    # ----- Drawing -----
    def paint(self, gx: int, gy: int, value: bool = True) -> bool:
        """
        Paint a matrix cell on the selected draw layer at the current frame

        Returns False when there is no visible draw layer selected.
        """
        layer = self.selected_layer()
        if layer is None or not layer.visible or layer.kind != LayerKind.DRAW:
            return False
        frame = self.current
        self.project = self.project.update_layer(
            layer.id, lambda l: l.paint_at(frame, gx, gy, value, self.config))
        return True

    def apply_text(self, text: str) -> bool:
        layer = self.selected_layer()
        if layer is None or layer.kind != LayerKind.TEXT or not text:
            return False
        frame = self.current
        self.project = self.project.update_layer(
            layer.id, lambda l: l.with_text(frame, text, self.config))
        return True

    def stamp_number(self, digit: str) -> bool:
        layer = self.selected_layer()
        if layer is None or layer.kind != LayerKind.NUMBER:
            return False
        frame = self.current
        self.project = self.project.update_layer(
            layer.id, lambda l: l.with_number(frame, str(digit), self.config))
        return True

    def clear_frame(self):
        """Clear the current frame on every layer"""
        frame = self.current
        self.project = self.project.update_all_layers(lambda l: l.cleared(frame, self.config))

    # ----- Offsets and keyframes -----
    def nudge(self, dx: int, dy: int):
        layer = self.selected_layer()
        if layer is None:
            return
        frame = self.current
        self.project = self.project.update_layer(
            layer.id, lambda l: l.nudged(frame, dx, dy, self.config))

    def add_keyframe(self):
        """Pin the selected layer's offset at the current frame"""
        layer = self.selected_layer()
        if layer is None:
            return
        frame = self.current
        self.project = self.project.update_layer(layer.id, lambda l: l.with_keyframe_here(frame))

    def remove_keyframe(self, frame: int, layer_id: Optional[str] = None):
        layer = self.project.layer(layer_id) if layer_id else self.selected_layer()
        if layer is None:
            return
        self.project = self.project.update_layer(layer.id, lambda l: l.without_keyframe(frame))

    # ----- Frames -----
    def duplicate_to_next(self):
        """Copy the current frame of every layer over the next frame and move there"""
        if self.current >= self.frames_count - 1:
            return
        src = self.current
        self.project = self.project.update_all_layers(lambda l: l.copied_to(src, src + 1))
        self._move_cursor(src + 1)

    def delete_current_frame(self):
        """Remove the current frame from every layer, keeping at least one frame"""
        count = self.frames_count
        if count <= 1:
            return
        frame = self.current
        removed = self.project.update_all_layers(lambda l: l.without_frame(frame))
        self.project = replace(removed, frames_count=count - 1)
        self._move_cursor(max(0, min(self.current, count - 2)))

    def copy_frame(self):
        """Remember the current frame of every layer, keyed by layer name"""
        frame = self.current
        self.clipboard = {
            layer.name: (layer.frames[frame].copy(), layer.ext_at(frame), layer.raw_offset_at(frame))
            for layer in self.project.layers
        }

    def paste_frame(self) -> bool:
        if not self.clipboard:
            return False
        frame = self.current
        clipboard = self.clipboard

        def _paste(layer: Layer) -> Layer:
            entry = clipboard.get(layer.name)
            if entry is None:
                return layer
            grid, ext, offset = entry
            return layer.with_frame(frame, grid=grid, ext=ext, offset=offset)

        self.project = self.project.update_all_layers(_paste)
        return True

    # ----- Export -----
    def export_project(self) -> Artifact:
        return PROJECT_FILE_NAME, ProjectCodec.dumps(ProjectCodec.serialize(self.project))

    def export_header(self) -> Artifact:
        frames = [pack_words(grid) for grid in self.project.merged_frames()]
        return HEADER_FILE_NAME, generate_header(frames, self.fps, self.config)

    def export_raw_frames(self) -> Artifact:
        return RAW_FRAMES_FILE_NAME, ProjectCodec.dumps(ProjectCodec.serialize_raw(self.project))

    @staticmethod
    def save_artifact(artifact: Artifact, output_path: str) -> str:
        """Write an exported artifact; a directory path gets the suggested file name"""
        name, content = artifact
        target = Path(output_path)
        if target.is_dir():
            target = target / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding='utf-8')
        logger.info("Saved %s", target)
        return str(target)

    def save_project(self, output_path: str) -> str:
        return self.save_artifact(self.export_project(), output_path)

    def save_header(self, output_path: str) -> str:
        return self.save_artifact(self.export_header(), output_path)

    def save_raw_frames(self, output_path: str) -> str:
        return self.save_artifact(self.export_raw_frames(), output_path)

    # ----- Import -----
    def decode(self, text: str, filename: str = "") -> Project:
        """
        Turn an imported document into a project without touching editor state

        The file extension picks the codec when it is known; otherwise the content
        is sniffed for the header array and size macros.

        Raises:
            HeaderParseError, ProjectFormatError
        """
        suffix = Path(filename).suffix.lower() if filename else ""
        if suffix in HEADER_EXTENSIONS:
            use_header = True
        elif suffix in PROJECT_EXTENSIONS:
            use_header = False
        else:
            use_header = looks_like_header(text)

        if use_header:
            animation = parse_header(text, self.config, default_fps=self.fps)
            layer = Layer.create("Imported Draw", LayerKind.DRAW, animation.frames_count, self.config)
            layer = replace(layer, frames=tuple(animation.frames))
            return Project.from_single_layer(layer, animation.fps, self.config)
        return ProjectCodec.loads(text, self.config, default_fps=self.fps)

    def load_project(self, project: Project):
        """Replace the whole project and rewind the cursor"""
        self.project = project
        self.current = 0

    def import_text(self, text: str, filename: str = "") -> bool:
        """
        Import a header, project or raw bitmap document

        Returns False and leaves the project unchanged when the document is malformed.
        """
        try:
            project = self.decode(text, filename)
        except (HeaderParseError, ProjectFormatError) as e:
            logger.warning("Import of %s failed: %s", filename or "document", e)
            return False
        self.load_project(project)
        logger.info("Imported %s: %d layers, %d frames",
                    filename or "document", len(project.layers), project.frames_count)
        return True

    def import_file(self, file_path: str) -> bool:
        try:
            text = Path(file_path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", file_path, e)
            return False
        return self.import_text(text, Path(file_path).name)

    def __repr__(self):
        return f"AnimationEditor(frame={self.current}/{self.frames_count}, fps={self.fps})"
