"""
Layer system for multi-layer LED matrix animation
Each layer is an independent track with one grid, overflow set and offset per frame
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from .config import GridConfig, DEFAULT_CONFIG
from .fonts import (CHAR_HEIGHT, CHAR_SPACING, CHAR_WIDTH, DIGIT_HEIGHT, DIGIT_WIDTH,
                    DIGITS_3X6, GLYPH_TOP, SPACE_ADVANCE, glyph_for)
from .grid import EMPTY_OVERFLOW, Grid, Overflow
from .keyframes import (ZERO_OFFSET, Keyframe, Offset, clamp_offset, remove_keyframe,
                        resolve_offset, sort_keyframes, truncate_keyframes, upsert_keyframe,
                        drop_frame_keyframes)
from .utils import generate_layer_id

logger = logging.getLogger(__name__)


class LayerKind(str, Enum):
    DRAW = "draw"
    TEXT = "text"
    NUMBER = "number"

    @classmethod
    def parse(cls, value) -> 'LayerKind':
        """Unknown or missing kinds fall back to draw"""
        try:
            return cls(value)
        except ValueError:
            if value is not None:
                logger.warning("Unknown layer kind %r, using draw", value)
            return cls.DRAW


@dataclass(frozen=True)
class Layer:
    """
    An animation track composited with the other layers

    Attributes:
        id: Stable identifier
        name: Display name, also the clipboard key for copy/paste
        kind: Which content operation applies (draw, text or number)
        visible: Hidden layers are skipped by the compositor
        frames: One grid per frame
        frames_ext: One overflow point set per frame
        offsets: One raw offset per frame, used only while there are no keyframes
        keyframes: Offset anchors sorted by frame

    Every operation returns a new Layer; grids held by an existing layer are never
    written to.
    """
    id: str
    name: str
    kind: LayerKind = LayerKind.DRAW
    visible: bool = True
    frames: Tuple[Grid, ...] = field(default_factory=tuple)
    frames_ext: Tuple[Overflow, ...] = field(default_factory=tuple)
    offsets: Tuple[Offset, ...] = field(default_factory=tuple)
    keyframes: Tuple[Keyframe, ...] = field(default_factory=tuple)

    @classmethod
    def create(cls, name: str, kind: LayerKind = LayerKind.DRAW, frames_count: int = 1,
               config: GridConfig = DEFAULT_CONFIG, layer_id: Optional[str] = None) -> 'Layer':
        return cls(
            id=layer_id or generate_layer_id(name),
            name=name,
            kind=LayerKind.parse(kind),
            frames=tuple(Grid.empty(config) for _ in range(frames_count)),
            frames_ext=tuple(EMPTY_OVERFLOW for _ in range(frames_count)),
            offsets=tuple(ZERO_OFFSET for _ in range(frames_count)),
        )

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def offset_at(self, frame: int) -> Offset:
        return resolve_offset(self, frame)

    def grid_at(self, frame: int) -> Optional[Grid]:
        if 0 <= frame < len(self.frames):
            return self.frames[frame]
        return None

    def ext_at(self, frame: int) -> Overflow:
        if 0 <= frame < len(self.frames_ext):
            return self.frames_ext[frame]
        return EMPTY_OVERFLOW

    def raw_offset_at(self, frame: int) -> Offset:
        if 0 <= frame < len(self.offsets):
            return self.offsets[frame]
        return ZERO_OFFSET

    # ----- Frame count -----
    def resized(self, frames_count: int, config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        """Pad with empty frames or drop trailing ones so every sequence has frames_count items"""
        frames = list(self.frames[:frames_count])
        frames_ext = list(self.frames_ext[:frames_count])
        offsets = list(self.offsets[:frames_count])
        while len(frames) < frames_count:
            frames.append(Grid.empty(config))
        while len(frames_ext) < frames_count:
            frames_ext.append(EMPTY_OVERFLOW)
        while len(offsets) < frames_count:
            offsets.append(ZERO_OFFSET)
        return replace(
            self,
            frames=tuple(frames),
            frames_ext=tuple(frames_ext),
            offsets=tuple(offsets),
            keyframes=truncate_keyframes(self.keyframes, frames_count),
        )

    def without_frame(self, frame: int) -> 'Layer':
        if not 0 <= frame < len(self.frames):
            return self
        return replace(
            self,
            frames=self.frames[:frame] + self.frames[frame + 1:],
            frames_ext=self.frames_ext[:frame] + self.frames_ext[frame + 1:],
            offsets=self.offsets[:frame] + self.offsets[frame + 1:],
            keyframes=drop_frame_keyframes(self.keyframes, frame),
        )

    # ----- Per-frame content -----
    def with_frame(self, frame: int, grid: Optional[Grid] = None, ext: Optional[Iterable] = None,
                   offset: Optional[Offset] = None) -> 'Layer':
        """Replace any of the grid, overflow set or raw offset at a frame"""
        if not 0 <= frame < len(self.frames):
            return self
        frames = list(self.frames)
        frames_ext = list(self.frames_ext)
        offsets = list(self.offsets)
        if grid is not None:
            frames[frame] = grid.copy()
        if ext is not None:
            frames_ext[frame] = frozenset(ext)
        if offset is not None:
            offsets[frame] = offset
        return replace(self, frames=tuple(frames), frames_ext=tuple(frames_ext), offsets=tuple(offsets))

    def cleared(self, frame: int, config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        return self.with_frame(frame, grid=Grid.empty(config), ext=EMPTY_OVERFLOW)

    def copied_to(self, src: int, dst: int) -> 'Layer':
        if not (0 <= src < len(self.frames) and 0 <= dst < len(self.frames)):
            return self
        return self.with_frame(dst, grid=self.frames[src], ext=self.frames_ext[src], offset=self.offsets[src])

    def is_frame_blank(self, frame: int) -> bool:
        grid = self.grid_at(frame)
        return grid is not None and grid.is_blank() and not self.ext_at(frame)

    def carried_forward(self, frame: int) -> 'Layer':
        """
        Fill a blank frame with a clone of the previous one

        Runs every time the cursor lands on a frame, so a frame cleared by hand is
        refilled on the next visit.
        """
        if frame <= 0 or not self.is_frame_blank(frame):
            return self
        return self.copied_to(frame - 1, frame)

    def paint_at(self, frame: int, gx: int, gy: int, value: bool,
                 config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        """
        Paint at a matrix coordinate

        The layer's offset is subtracted first; coordinates that end up outside the
        layer's own grid are kept in the frame's overflow set instead.
        """
        grid = self.grid_at(frame)
        if grid is None:
            return self
        off = self.offset_at(frame)
        lx, ly = gx - off.x, gy - off.y
        if 0 <= lx < config.width and 0 <= ly < config.height:
            painted = grid.copy()
            painted.set(lx, ly, value)
            return self.with_frame(frame, grid=painted)
        ext = set(self.ext_at(frame))
        if value:
            ext.add((lx, ly))
        else:
            ext.discard((lx, ly))
        return self.with_frame(frame, ext=ext)

    # ----- Offsets and keyframes -----
    def nudged(self, frame: int, dx: int, dy: int, config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        """Shift the layer at a frame, through a keyframe when the layer is keyframed"""
        if self.keyframes:
            off = self.offset_at(frame)
            moved = clamp_offset(Offset(off.x + dx, off.y + dy), config)
            return replace(self, keyframes=upsert_keyframe(self.keyframes, frame, moved.x, moved.y))
        if not 0 <= frame < len(self.offsets):
            return self
        raw = self.offsets[frame]
        return self.with_frame(frame, offset=clamp_offset(Offset(raw.x + dx, raw.y + dy), config))

    def with_keyframe(self, frame: int, x: int, y: int) -> 'Layer':
        return replace(self, keyframes=upsert_keyframe(self.keyframes, frame, x, y))

    def with_keyframe_here(self, frame: int) -> 'Layer':
        """Pin the currently resolved offset as a keyframe"""
        off = self.offset_at(frame)
        return self.with_keyframe(frame, off.x, off.y)

    def without_keyframe(self, frame: int) -> 'Layer':
        return replace(self, keyframes=remove_keyframe(self.keyframes, frame))

    def with_keyframes(self, keyframes: Iterable[Keyframe]) -> 'Layer':
        return replace(self, keyframes=sort_keyframes(keyframes))

    # ----- Content stamping -----
    def with_text(self, frame: int, text: str, config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        """Render text with the 5x7 font from the left edge; characters that do not fit are dropped"""
        grid = self.grid_at(frame)
        if grid is None or not text:
            return self
        stamped = grid.copy()
        cursor_x = 0
        for ch in text:
            if ch == ' ':
                cursor_x += SPACE_ADVANCE
                continue
            bitmap = glyph_for(ch)
            if bitmap is None:
                cursor_x += CHAR_WIDTH + CHAR_SPACING
                continue
            if cursor_x + CHAR_WIDTH > config.width:
                break
            for y in range(CHAR_HEIGHT):
                for x in range(CHAR_WIDTH):
                    if bitmap[y][x] == '1':
                        stamped.set(cursor_x + x, GLYPH_TOP + y, True)
            cursor_x += CHAR_WIDTH + CHAR_SPACING
        return self.with_frame(frame, grid=stamped)

    def with_number(self, frame: int, digit: str, config: GridConfig = DEFAULT_CONFIG) -> 'Layer':
        """Stamp a 3x6 digit against the right edge, overwriting both lit and unlit cells"""
        grid = self.grid_at(frame)
        pattern = DIGITS_3X6.get(str(digit))
        if grid is None or pattern is None:
            return self
        stamped = grid.copy()
        start_x = config.width - DIGIT_WIDTH
        for y in range(DIGIT_HEIGHT):
            for x in range(DIGIT_WIDTH):
                stamped.set(start_x + x, GLYPH_TOP + y, pattern[y][x] == '1')
        return self.with_frame(frame, grid=stamped)

    def __repr__(self):
        return f"Layer(name={self.name!r}, kind={self.kind.value}, frames={len(self.frames)}, visible={self.visible})"


class LayerCompositor:
    """Handles compositing multiple layers into a single grid"""

    @staticmethod
    def place(out: Grid, layer: Layer, frame_index: int):
        """OR one layer's content at a frame into `out`, translated by its offset"""
        grid = layer.grid_at(frame_index)
        if grid is None:
            return
        off = layer.offset_at(frame_index)
        for x, y in grid.lit_cells():
            out.set(x + off.x, y + off.y, True)
        for x, y in layer.ext_at(frame_index):
            out.set(x + off.x, y + off.y, True)

    @staticmethod
    def merge(layers: Iterable[Layer], frame_index: int, config: GridConfig = DEFAULT_CONFIG) -> Grid:
        """
        Composite all visible layers at a frame into a fresh grid

        Args:
            layers: Layers in project order
            frame_index: Frame to composite
            config: Output grid dimensions

        Returns:
            Merged grid; a cell is lit when any visible layer lights it
        """
        out = Grid.empty(config)
        for layer in layers:
            if not layer.visible:
                continue
            LayerCompositor.place(out, layer, frame_index)
        return out
