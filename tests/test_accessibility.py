import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip(
    "PySide6.QtWidgets",
    reason="PySide6 Qt bindings required for accessibility tests",
    exc_type=ImportError,
)

from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from jpeg_compressor.widgets import ControlPanel, ResultsPanel  # noqa: E402


@pytest.fixture
def app():
    if not QApplication.instance():
        return QApplication([])
    return QApplication.instance()


def test_controls_have_accessible_names(app):
    panel = ControlPanel()
    assert panel.max_width_spin.accessibleName() == "Max Width"
    assert panel.max_height_spin.accessibleName() == "Max Height"
    assert panel.quality_slider.accessibleName() == "Quality"
    assert panel.open_button.text() == "Select JPG/JPEG Image…"


def test_controls_are_keyboard_focusable(app):
    panel = ControlPanel()
    for widget in (panel.max_width_spin, panel.quality_slider, panel.open_button):
        assert widget.focusPolicy() != Qt.NoFocus


def test_quality_slider_snaps_to_step(app):
    panel = ControlPanel()
    emitted = []
    panel.settingsChanged.connect(emitted.append)

    panel.quality_slider.setValue(63)

    assert panel.quality_slider.value() == 65
    assert panel.quality_label.text() == "Quality (0.65)"
    assert emitted[-1].quality == pytest.approx(0.65)


def test_busy_disables_inputs(app):
    panel = ControlPanel()
    panel.set_busy(True)
    assert not panel.max_width_spin.isEnabled()
    assert not panel.open_button.isEnabled()
    panel.set_busy(False)
    assert panel.quality_slider.isEnabled()


def test_base64_output_is_read_only(app):
    results = ResultsPanel()
    assert results.base64_edit.isReadOnly()
    assert results.base64_edit.accessibleName() == "Processed Base64 String"
    assert not results.copy_button.isEnabled()
