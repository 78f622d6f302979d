"""
Configuration constants for the LED matrix animator
Grid dimensions are fixed per build; everything else reads them through GridConfig
"""

from dataclasses import dataclass
from typing import List, Tuple


GRID_WIDTH = 27
GRID_HEIGHT = 9

# Layers may be shifted this far past the grid edge in either direction
OFFSET_MARGIN = 64

DEFAULT_FRAMES_COUNT = 8
DEFAULT_FPS = 4
MIN_PLAYBACK_INTERVAL_MS = 20

PROJECT_FILE_NAME = "project.ledproj"
HEADER_FILE_NAME = "led_animation.h"
RAW_FRAMES_FILE_NAME = "frames.json"

SEED_LAYERS: List[Tuple[str, str]] = [
    ("Draw Layer", "draw"),
    ("Text Layer", "text"),
    ("Number Layer", "number"),
]


@dataclass(frozen=True)
class GridConfig:
    """
    Matrix dimensions shared by every grid in a project

    Attributes:
        width: Number of columns
        height: Number of rows
    """
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT

    @property
    def max_offset_x(self) -> int:
        return self.width + OFFSET_MARGIN

    @property
    def max_offset_y(self) -> int:
        return self.height + OFFSET_MARGIN

    @property
    def cell_count(self) -> int:
        return self.width * self.height


DEFAULT_CONFIG = GridConfig()


def playback_interval_ms(fps: int) -> int:
    """Timer interval for a playback rate, never faster than MIN_PLAYBACK_INTERVAL_MS"""
    return max(MIN_PLAYBACK_INTERVAL_MS, int(round(1000 / max(1, fps))))
