import os
from collections.abc import Callable
from pathlib import Path
from typing import List

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip(
    "PySide6.QtWidgets",
    reason="PySide6 Qt bindings required for MainWindow tests",
    exc_type=ImportError,
)

from PySide6.QtCore import QMimeData, QPoint, QPointF, Qt, QUrl  # noqa: E402
from PySide6.QtGui import (  # noqa: E402
    QDragEnterEvent,
    QDragLeaveEvent,
    QDropEvent,
    QGuiApplication,
)
from PySide6.QtTest import QTest  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

import jpeg_compressor.main as main_module  # noqa: E402
from jpeg_compressor.cache import ResultCache, override_cache  # noqa: E402
from jpeg_compressor.workers import InlineRunner  # noqa: E402
from utils.image_processor import run_pipeline  # noqa: E402


class CountingRunner(InlineRunner):
    """Inline runner that records which callables were submitted."""

    def __init__(self) -> None:
        self.submitted: List[object] = []

    def submit(self, fn, *args, **callbacks):
        self.submitted.append(fn)
        return super().submit(fn, *args, **callbacks)

    def count(self, fn) -> int:
        return sum(1 for submitted in self.submitted if submitted is fn)


@pytest.fixture(scope="module")
def qt_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture()
def main_window_factory(
    monkeypatch: pytest.MonkeyPatch, qt_app: QApplication
) -> Callable[..., main_module.MainWindow]:
    class StubPerformanceMonitor:
        def __init__(self, parent):
            self.parent = parent
            self.timer = None

        def check_memory(self):
            return False

        def stop(self):
            return None

    monkeypatch.setattr(main_module, "PerformanceMonitor", StubPerformanceMonitor)

    created: List[main_module.MainWindow] = []

    def factory(runner=None) -> main_module.MainWindow:
        window = main_module.MainWindow(runner=runner or InlineRunner(), debounce_ms=10)
        created.append(window)
        return window

    with override_cache(ResultCache(max_entries=8)):
        yield factory

    for window in created:
        window.close()


def _write_jpeg(tmp_path: Path, name: str = "photo.jpg", size=(1600, 1200)) -> Path:
    path = tmp_path / name
    Image.new("RGB", size, color=(120, 60, 30)).save(path, format="JPEG")
    return path


def test_initial_window_shows_defaults_and_no_results(main_window_factory) -> None:
    window = main_window_factory()

    panel = window.control_panel
    assert panel.max_width_spin.value() == 800
    assert panel.max_height_spin.value() == 600
    assert panel.quality_label.text() == "Quality (0.80)"
    assert window.results_panel.isHidden()
    assert window.error_label.isHidden()
    assert window.busy_frame.isHidden()


def test_loading_jpeg_shows_results(main_window_factory, tmp_path) -> None:
    window = main_window_factory()

    assert window.load_path(_write_jpeg(tmp_path)) is True

    results = window.results_panel
    assert not results.isHidden()
    assert results.file_label.text() == "Original File: photo.jpg"
    assert results.dimensions_label.text() == "Actual Dimensions: 800px × 600px"
    assert results.preview_title.text() == "Preview (Max 800x600px, Q: 0.80):"
    assert results.base64_edit.toPlainText().startswith("data:image/jpeg;base64,")
    length = len(results.base64_edit.toPlainText())
    assert results.length_label.text() == f"Processed Base64 Length: {length:,}"
    assert results.copy_button.isEnabled()


def test_rejected_file_keeps_previous_result(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    window.load_path(_write_jpeg(tmp_path))
    data_url = window.results_panel.base64_edit.toPlainText()

    png = tmp_path / "logo.png"
    Image.new("RGB", (8, 8)).save(png)
    assert window.load_path(png) is False

    assert window.error_label.text() == "Error: Please select or drop a JPG/JPEG image file."
    assert not window.error_label.isHidden()
    assert not window.results_panel.isHidden()
    assert window.results_panel.base64_edit.toPlainText() == data_url


def test_settings_change_reprocesses_after_debounce(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    window.load_path(_write_jpeg(tmp_path))

    window.control_panel.max_width_spin.setValue(100)
    assert window.settings_debouncer.pending
    window.settings_debouncer.flush()

    results = window.results_panel
    assert results.dimensions_label.text() == "Actual Dimensions: 100px × 75px"
    assert results.preview_title.text() == "Preview (Max 100x600px, Q: 0.80):"


def test_decode_failure_hides_results(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    window.load_path(_write_jpeg(tmp_path))

    broken = tmp_path / "broken.jpg"
    broken.write_bytes(b"not really a jpeg")
    window.load_path(broken)

    assert window.results_panel.isHidden()
    assert window.results_panel.base64_edit.toPlainText() == ""
    assert window.error_label.text() == "Error: Failed to load the image data for processing."


def test_copy_places_data_url_on_clipboard(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    copied: List[int] = []
    window.results_panel.copied.connect(copied.append)

    assert window.results_panel.copy_to_clipboard() is False
    window.load_path(_write_jpeg(tmp_path, size=(40, 30)))
    assert window.results_panel.copy_to_clipboard() is True

    data_url = window.results_panel.base64_edit.toPlainText()
    assert QGuiApplication.clipboard().text() == data_url
    assert copied == [len(data_url)]


def test_preload_uses_first_argument(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    first = _write_jpeg(tmp_path, "first.jpg", size=(20, 10))
    second = _write_jpeg(tmp_path, "second.jpg", size=(20, 10))

    main_module._preload(window, [str(first), str(second)])

    assert window.controller.state.source.file_name == "first.jpg"


def test_three_quick_edits_reprocess_once(main_window_factory, tmp_path) -> None:
    runner = CountingRunner()
    window = main_window_factory(runner)
    window.load_path(_write_jpeg(tmp_path))
    assert runner.count(run_pipeline) == 1

    panel = window.control_panel
    panel.max_width_spin.setValue(400)
    panel.max_width_spin.setValue(300)
    panel.max_width_spin.setValue(200)
    assert runner.count(run_pipeline) == 1

    QTest.qWait(window.settings_debouncer.delay_ms * 10)

    assert runner.count(run_pipeline) == 2
    assert window.results_panel.dimensions_label.text() == "Actual Dimensions: 200px × 150px"


def _file_mime(path: Path) -> QMimeData:
    mime = QMimeData()
    mime.setUrls([QUrl.fromLocalFile(str(path))])
    return mime


def test_drag_over_toggles_dragging_property(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    mime = _file_mime(_write_jpeg(tmp_path))
    assert window.dragging is False

    enter = QDragEnterEvent(QPoint(5, 5), Qt.CopyAction, mime, Qt.LeftButton, Qt.NoModifier)
    window.dragEnterEvent(enter)
    assert enter.isAccepted()
    assert window.dragging is True
    assert window.drop_area.property("dragging") is True

    window.dragLeaveEvent(QDragLeaveEvent())
    assert window.dragging is False


def test_drag_without_local_file_is_ignored(main_window_factory) -> None:
    window = main_window_factory()
    mime = QMimeData()
    mime.setText("just some text")

    enter = QDragEnterEvent(QPoint(5, 5), Qt.CopyAction, mime, Qt.LeftButton, Qt.NoModifier)
    window.dragEnterEvent(enter)

    assert not enter.isAccepted()
    assert window.dragging is False


def test_drop_loads_file_and_clears_highlight(main_window_factory, tmp_path) -> None:
    window = main_window_factory()
    mime = _file_mime(_write_jpeg(tmp_path, "dropped.jpg", size=(64, 32)))
    window.dragEnterEvent(
        QDragEnterEvent(QPoint(5, 5), Qt.CopyAction, mime, Qt.LeftButton, Qt.NoModifier)
    )

    window.dropEvent(
        QDropEvent(QPointF(5, 5), Qt.CopyAction, mime, Qt.LeftButton, Qt.NoModifier)
    )

    assert window.dragging is False
    assert window.results_panel.file_label.text() == "Original File: dropped.jpg"
    assert window.results_panel.dimensions_label.text() == "Actual Dimensions: 64px × 32px"


def test_drop_highlight_rule_is_installed(main_window_factory) -> None:
    window = main_window_factory()
    assert 'QFrame#dropArea[dragging="true"]' in window.styleSheet()
