import os
from dataclasses import replace

import pytest

from led_animator.core.animation_editor import AnimationEditor
from led_animator.core.config import DEFAULT_CONFIG, GridConfig
from led_animator.core.grid import Grid
from led_animator.core.keyframes import Keyframe, Offset
from led_animator.core.layer_system import Layer, LayerKind
from led_animator.core.project import Project

# Qt widgets in integration tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture()
def config() -> GridConfig:
    return DEFAULT_CONFIG


@pytest.fixture()
def origin_grid(config) -> Grid:
    # Only the top-left cell lit
    grid = Grid.empty(config)
    grid.set(0, 0, True)
    return grid


@pytest.fixture()
def pattern_grid(config) -> Grid:
    grid = Grid.empty(config)
    for x, y in [(0, 0), (1, 0), (26, 0), (3, 3), (13, 4), (26, 8), (0, 8), (7, 5)]:
        grid.set(x, y, True)
    return grid


@pytest.fixture()
def editor() -> AnimationEditor:
    return AnimationEditor()


@pytest.fixture()
def rich_project(config, pattern_grid) -> Project:
    """Two-layer project exercising offsets, keyframes, overflow and visibility"""
    draw = Layer.create("Draw Layer", LayerKind.DRAW, 4, config, layer_id="draw-1")
    draw = draw.with_frame(0, grid=pattern_grid, ext={(30, 2), (-3, -1)}, offset=Offset(2, -1))
    draw = draw.with_frame(2, offset=Offset(-5, 3))

    text = Layer.create("Text Layer", LayerKind.TEXT, 4, config, layer_id="text-1")
    text = text.with_text(1, "Hi", config)
    text = text.with_keyframes([Keyframe(0, 0, 0), Keyframe(3, 6, -2)])

    number = Layer.create("Number Layer", LayerKind.NUMBER, 4, config, layer_id="number-1")
    number = number.with_number(2, "7", config)
    number = replace(number, visible=False)

    return Project(config=config, frames_count=4, fps=6,
                   layers=(draw, text, number), selected_layer_id="text-1")


@pytest.fixture()
def make_text_file(tmp_path):
    def _make(name: str, content: str) -> str:
        p = tmp_path / name
        p.write_text(content, encoding='utf-8')
        return str(p)
    return _make
