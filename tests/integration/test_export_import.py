from led_animator.core import AnimationEditor
from led_animator.core.layer_system import LayerKind


def _build_editor() -> AnimationEditor:
    editor = AnimationEditor()
    editor.set_fps(6)
    editor.paint(0, 0)
    editor.paint(26, 8)
    editor.nudge(-1, 0)
    editor.add_keyframe()
    editor.set_current(4)
    editor.nudge(5, 2)
    editor.select_layer(editor.project.layers[1].id)
    editor.apply_text("OK")
    editor.add_layer("Sparkle", LayerKind.DRAW)
    editor.paint(13, 4)
    return editor


def test_project_file_keeps_everything(tmp_path):
    editor = _build_editor()
    path = editor.save_project(str(tmp_path / "anim.ledproj"))

    restored = AnimationEditor()
    assert restored.import_file(path)
    assert restored.project == editor.project
    for f in range(editor.frames_count):
        assert restored.merged(f) == editor.merged(f)


def test_header_and_raw_keep_merged_frames(tmp_path):
    editor = _build_editor()
    header_path = editor.save_header(str(tmp_path))
    raw_path = editor.save_raw_frames(str(tmp_path))

    for path in (header_path, raw_path):
        restored = AnimationEditor()
        assert restored.import_file(path)
        assert restored.fps == 6
        assert restored.frames_count == editor.frames_count
        assert len(restored.project.layers) == 3
        for f in range(editor.frames_count):
            assert restored.merged(f) == editor.merged(f)
