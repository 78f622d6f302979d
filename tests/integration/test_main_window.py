import pytest

pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtWidgets import QApplication

from led_animator.main import MainWindow


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


def test_layer_list_reflects_project(qapp):
    window = MainWindow()
    assert window.layer_list.count() == 3
    assert window.layer_list.item(0).text() == "Draw Layer (draw)"

    window.layer_list.setCurrentRow(1)
    assert window.editor.selected_layer().name == "Text Layer"


def test_spinboxes_drive_editor(qapp):
    window = MainWindow()
    window.frames_spinbox.setValue(5)
    assert window.editor.frames_count == 5
    window.fps_spinbox.setValue(10)
    assert window.editor.fps == 10


def test_delete_frame_syncs_spinbox(qapp):
    window = MainWindow()
    window.on_delete_frame()
    assert window.editor.frames_count == 7
    assert window.frames_spinbox.value() == 7


def test_keyframe_label(qapp):
    window = MainWindow()
    window.editor.set_current(2)
    window.editor_action(lambda e: e.add_keyframe())()
    assert window.keyframe_label.text() == "Keyframes: 3"


def test_remove_keyframe_button(qapp):
    window = MainWindow()
    window.editor.set_current(2)
    window.add_key_button.click()
    assert window.keyframe_label.text() == "Keyframes: 3"

    window.remove_key_button.click()
    assert window.editor.selected_layer().keyframes == ()
    assert window.keyframe_label.text() == "Keyframes: -"


def test_save_gif_reports_file_info(qapp, tmp_path):
    window = MainWindow()
    window.editor.paint(0, 0)
    out = tmp_path / "preview.gif"
    window.save_gif(str(out))
    assert out.exists()
    message = window.statusBar().currentMessage()
    assert message.startswith("Saved preview.gif: ")
    assert "694x226" in message
