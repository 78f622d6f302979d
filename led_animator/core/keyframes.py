"""
Offset and keyframe engine

A layer's translation at a frame comes from its raw per-frame offsets until the
first keyframe is placed. From then on keyframes are authoritative: frames between
two keyframes are linearly interpolated, frames outside the keyed range hold the
nearest keyframe's value.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from .config import GridConfig, DEFAULT_CONFIG


@dataclass(frozen=True)
class Offset:
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Keyframe:
    """
    User-placed offset anchor

    Attributes:
        frame: Frame index the anchor sits on
        x: Horizontal offset at that frame
        y: Vertical offset at that frame
    """
    frame: int
    x: int = 0
    y: int = 0

    @property
    def offset(self) -> Offset:
        return Offset(self.x, self.y)


ZERO_OFFSET = Offset(0, 0)

Keyframes = Tuple[Keyframe, ...]


def round_half_away(value: float) -> int:
    """Round to nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)"""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_offset(offset: Offset, config: GridConfig = DEFAULT_CONFIG) -> Offset:
    return Offset(
        clamp(offset.x, -config.max_offset_x, config.max_offset_x),
        clamp(offset.y, -config.max_offset_y, config.max_offset_y),
    )


def sort_keyframes(keyframes: Iterable[Keyframe]) -> Keyframes:
    return tuple(sorted(keyframes, key=lambda k: k.frame))


def resolve_offset(layer, frame_index: int) -> Offset:
    """
    Offset of a layer at a frame index

    Args:
        layer: Any object with `offsets` (per-frame Offset sequence) and `keyframes`
        frame_index: Frame to resolve

    Returns:
        Raw offset when the layer has no keyframes, otherwise the keyframe value,
        held or interpolated
    """
    if layer is None:
        return ZERO_OFFSET

    keys = sort_keyframes(layer.keyframes)
    if not keys:
        if 0 <= frame_index < len(layer.offsets):
            return layer.offsets[frame_index]
        return ZERO_OFFSET

    before = None
    after = None
    for key in keys:
        if key.frame == frame_index:
            return key.offset
        if key.frame < frame_index:
            before = key
        elif after is None:
            after = key

    if before is None and after is not None:
        return after.offset
    if before is not None and after is None:
        return before.offset
    if before is not None and after is not None:
        t = (frame_index - before.frame) / (after.frame - before.frame)
        return Offset(
            round_half_away(before.x + (after.x - before.x) * t),
            round_half_away(before.y + (after.y - before.y) * t),
        )
    return ZERO_OFFSET


def upsert_keyframe(keyframes: Iterable[Keyframe], frame: int, x: int, y: int) -> Keyframes:
    """Insert a keyframe, replacing any existing one on the same frame"""
    kept = [k for k in keyframes if k.frame != frame]
    kept.append(Keyframe(frame, x, y))
    return sort_keyframes(kept)


def remove_keyframe(keyframes: Iterable[Keyframe], frame: int) -> Keyframes:
    return sort_keyframes(k for k in keyframes if k.frame != frame)


def drop_frame_keyframes(keyframes: Iterable[Keyframe], frame: int) -> Keyframes:
    """
    Renumber keyframes after the frame at `frame` is deleted

    Keys on the deleted frame are dropped and later keys move down by one, so the
    key that was at frame + 1 takes the deleted frame's index.
    """
    kept = []
    for key in keyframes:
        if key.frame < frame:
            kept.append(key)
        elif key.frame > frame:
            kept.append(Keyframe(key.frame - 1, key.x, key.y))
    return sort_keyframes(kept)


def truncate_keyframes(keyframes: Iterable[Keyframe], frames_count: int) -> Keyframes:
    return sort_keyframes(k for k in keyframes if 0 <= k.frame < frames_count)
