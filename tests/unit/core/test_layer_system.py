from dataclasses import replace

from led_animator.core.grid import Grid
from led_animator.core.keyframes import Keyframe, Offset
from led_animator.core.layer_system import Layer, LayerCompositor, LayerKind


def test_create_layer_sequences(config):
    layer = Layer.create("Draw Layer", LayerKind.DRAW, 5, config)
    assert layer.frame_count == 5
    assert len(layer.frames_ext) == 5 and len(layer.offsets) == 5
    assert layer.id.startswith("Draw Layer-")
    assert layer.keyframes == ()
    assert all(grid.is_blank() for grid in layer.frames)


def test_kind_parse_falls_back_to_draw():
    assert LayerKind.parse("text") is LayerKind.TEXT
    assert LayerKind.parse("sprite") is LayerKind.DRAW
    assert LayerKind.parse(None) is LayerKind.DRAW


def test_paint_returns_new_layer(config):
    layer = Layer.create("L", LayerKind.DRAW, 2, config)
    painted = layer.paint_at(0, 3, 4, True, config)
    assert painted.frames[0].get(3, 4)
    assert layer.frames[0].is_blank()


def test_paint_outside_grid_goes_to_overflow(config):
    layer = Layer.create("L", LayerKind.DRAW, 1, config).with_frame(0, offset=Offset(5, 0))
    painted = layer.paint_at(0, 2, 0, True, config)
    assert painted.frames[0].is_blank()
    assert painted.frames_ext[0] == frozenset({(-3, 0)})

    merged = LayerCompositor.merge([painted], 0, config)
    assert list(merged.lit_cells()) == [(2, 0)]

    erased = painted.paint_at(0, 2, 0, False, config)
    assert erased.frames_ext[0] == frozenset()


def test_paint_subtracts_offset(config):
    layer = Layer.create("L", LayerKind.DRAW, 1, config).with_frame(0, offset=Offset(1, 2))
    painted = layer.paint_at(0, 4, 4, True, config)
    assert list(painted.frames[0].lit_cells()) == [(3, 2)]


def test_nudge_raw_offset_is_clamped(config):
    layer = Layer.create("L", LayerKind.DRAW, 2, config)
    nudged = layer.nudged(1, 1000, -3, config)
    assert nudged.offsets[1] == Offset(config.max_offset_x, -3)
    assert nudged.offsets[0] == Offset(0, 0)
    assert nudged.keyframes == ()


def test_nudge_keyframed_layer_writes_keyframe(config):
    layer = Layer.create("L", LayerKind.DRAW, 5, config)
    layer = layer.with_keyframes([Keyframe(4, 4, 0), Keyframe(0, 0, 0)])
    nudged = layer.nudged(2, 0, 1, config)
    assert nudged.keyframes == (Keyframe(0, 0, 0), Keyframe(2, 2, 1), Keyframe(4, 4, 0))
    assert nudged.offsets == layer.offsets


def test_keyframe_here_pins_resolved_offset(config):
    layer = Layer.create("L", LayerKind.DRAW, 3, config).with_frame(1, offset=Offset(-2, 5))
    pinned = layer.with_keyframe_here(1)
    assert pinned.keyframes == (Keyframe(1, -2, 5),)
    # keyframes now win over the raw offsets
    assert pinned.offset_at(0) == Offset(-2, 5)
    assert pinned.without_keyframe(1).offset_at(0) == Offset(0, 0)


def test_carry_forward_only_fills_blank_frames(config, origin_grid):
    layer = Layer.create("L", LayerKind.DRAW, 3, config)
    layer = layer.with_frame(0, grid=origin_grid, ext={(40, 1)}, offset=Offset(3, 1))

    carried = layer.carried_forward(1)
    assert carried.frames[1] == origin_grid
    assert carried.frames_ext[1] == frozenset({(40, 1)})
    assert carried.offsets[1] == Offset(3, 1)

    assert layer.carried_forward(0) is layer
    assert carried.carried_forward(1) is carried


def test_frame_with_only_overflow_is_not_blank(config):
    layer = Layer.create("L", LayerKind.DRAW, 2, config).with_frame(1, ext={(-1, 0)})
    assert not layer.is_frame_blank(1)
    assert layer.carried_forward(1) is layer


def test_resize_keeps_sequences_aligned(config, origin_grid):
    layer = Layer.create("L", LayerKind.DRAW, 8, config).with_frame(1, grid=origin_grid)
    layer = layer.with_keyframes([Keyframe(0, 1, 1), Keyframe(6, 2, 2)])

    shrunk = layer.resized(3, config)
    assert len(shrunk.frames) == len(shrunk.frames_ext) == len(shrunk.offsets) == 3
    assert shrunk.frames[1] == origin_grid
    assert shrunk.keyframes == (Keyframe(0, 1, 1),)

    grown = shrunk.resized(5, config)
    assert len(grown.frames) == len(grown.frames_ext) == len(grown.offsets) == 5
    assert grown.frames[4].is_blank()


def test_without_frame_shifts_content(config, origin_grid):
    layer = Layer.create("L", LayerKind.DRAW, 3, config).with_frame(2, grid=origin_grid)
    layer = layer.with_keyframes([Keyframe(2, 7, 0)])
    removed = layer.without_frame(1)
    assert removed.frame_count == 2
    assert removed.frames[1] == origin_grid
    assert removed.keyframes == (Keyframe(1, 7, 0),)


def test_text_renders_from_left_edge(config):
    layer = Layer.create("T", LayerKind.TEXT, 1, config).with_text(0, "H", config)
    grid = layer.frames[0]
    # 'H' top row is 10001, one row below the top edge
    assert grid.get(0, 1) and grid.get(4, 1)
    assert not grid.get(1, 1)
    assert not any(grid.get(x, 0) for x in range(config.width))


def test_text_drops_characters_that_do_not_fit(config):
    layer = Layer.create("T", LayerKind.TEXT, 1, config).with_text(0, "HELLO", config)
    cells = list(layer.frames[0].lit_cells())
    assert cells
    assert max(x for x, _ in cells) < 24


def test_number_overwrites_right_edge(config):
    layer = Layer.create("N", LayerKind.NUMBER, 1, config)
    pre = Grid.empty(config)
    pre.set(24, 2, True)
    pre.set(0, 0, True)
    layer = layer.with_frame(0, grid=pre).with_number(0, "7", config)
    grid = layer.frames[0]
    assert grid.get(24, 1) and grid.get(25, 1) and grid.get(26, 1)
    assert not grid.get(24, 2)
    assert grid.get(26, 2)
    assert grid.get(0, 0)


def test_number_ignores_non_digits(config):
    layer = Layer.create("N", LayerKind.NUMBER, 1, config)
    assert layer.with_number(0, "x", config) is layer


def test_merge_skips_hidden_and_clips_offsets(rich_project):
    merged = rich_project.merge(0)
    assert set(merged.lit_cells()) == {(5, 2), (15, 3), (2, 7), (9, 4)}


def test_merge_uses_interpolated_offset(rich_project):
    merged = rich_project.merge(1)
    # 'H' cell (0, 1) moved by the offset interpolated a third of the way to (6, -2)
    assert merged.get(2, 0)
    assert not merged.get(0, 1)


def test_merge_is_or_of_layers(config, origin_grid):
    a = Layer.create("A", LayerKind.DRAW, 1, config).with_frame(0, grid=origin_grid)
    b = Layer.create("B", LayerKind.DRAW, 1, config).with_frame(0, grid=origin_grid, offset=Offset(1, 0))
    merged = LayerCompositor.merge([a, b], 0, config)
    assert set(merged.lit_cells()) == {(0, 0), (1, 0)}
    assert LayerCompositor.merge([a, b], 5, config).is_blank()


def test_shared_cell_survives_hiding_either_layer(config):
    a = Layer.create("A", LayerKind.DRAW, 1, config).paint_at(0, 3, 3, True, config)
    b = Layer.create("B", LayerKind.DRAW, 1, config).paint_at(0, 3, 3, True, config)
    assert LayerCompositor.merge([a, b], 0, config).get(3, 3)
    assert LayerCompositor.merge([replace(a, visible=False), b], 0, config).get(3, 3)
    assert LayerCompositor.merge([a, replace(b, visible=False)], 0, config).get(3, 3)
    assert LayerCompositor.merge([replace(a, visible=False), replace(b, visible=False)], 0, config).is_blank()


def test_with_frame_keeps_its_own_grid_copy(config, origin_grid):
    layer = Layer.create("L", LayerKind.DRAW, 1, config).with_frame(0, grid=origin_grid)
    origin_grid.set(5, 5, True)
    assert not layer.frames[0].get(5, 5)
