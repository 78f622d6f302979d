import pytest

from led_animator.core.frame_renderer import FrameRenderer
from led_animator.core.layer_system import Layer, LayerKind
from led_animator.core.project import Project


@pytest.fixture()
def moving_dot_project(config) -> Project:
    # Every frame differs so the GIF writer cannot merge any of them
    layer = Layer.create("Dot", LayerKind.DRAW, 4, config)
    for f in range(4):
        layer = layer.paint_at(f, f, 0, True, config)
    return Project.from_single_layer(layer, fps=4, config=config)


def test_image_size(origin_grid):
    renderer = FrameRenderer()
    assert renderer.image_size(origin_grid) == (27 * 26 - 8, 9 * 26 - 8)
    renderer.set_cell_size(2, 1)
    assert renderer.image_size(origin_grid) == (80, 26)


def test_render_grid_colors(origin_grid):
    renderer = FrameRenderer()
    image = renderer.render_grid(origin_grid)
    assert image.mode == 'RGB'
    assert image.getpixel((9, 9)) == (255, 255, 255)
    assert image.getpixel((26 + 9, 9)) == (40, 40, 40)
    assert image.getpixel((21, 9)) == (0, 0, 0)


def test_preview_frames_carry_interval(moving_dot_project):
    frames = FrameRenderer().get_preview_frames(moving_dot_project)
    assert len(frames) == 4
    assert all(duration == 250 for _, duration in frames)


def test_save_gif(tmp_path, moving_dot_project):
    renderer = FrameRenderer()
    renderer.set_cell_size(2, 1)
    out = tmp_path / "preview" / "anim.gif"
    renderer.save_gif(moving_dot_project, str(out))

    info = renderer.get_gif_info(str(out))
    assert info['frame_count'] == 4
    assert info['size'] == (80, 26)
    assert info['total_duration_ms'] == 1000
    assert info['file_size_bytes'] > 0


def test_gif_info_rejects_non_images(make_text_file):
    path = make_text_file("not_a.gif", "hello")
    with pytest.raises(ValueError):
        FrameRenderer().get_gif_info(path)
