# main.py
"""
Entry point and main application window for the JPEG compressor.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Sequence, Union

from PySide6.QtCore import QStandardPaths, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QProgressBar,
    QScrollArea,
    QVBoxLayout,
)

from . import config
from .controllers import ProcessingController
from .debounce import Debouncer
from .ingestion import FileCandidate
from .managers.performance import PerformanceMonitor
from .models import ProcessedResult, ProcessingState
from .widgets import ControlPanel, ResultsPanel, SettingsDefaults
from .workers import TaskRunner, ThreadPoolRunner

LOGGER_NAME = "jpeg_compressor"
# Pipeline helpers live in the top-level ``utils`` package.
_HANDLED_LOGGERS = (LOGGER_NAME, "utils")

# Outline shown while a file is dragged over the window.
DROP_AREA_STYLE = """
QFrame#dropArea { border: 3px dashed transparent; border-radius: 6px; }
QFrame#dropArea[dragging="true"] { border-color: palette(highlight); }
"""


def configure_logging() -> logging.Logger:
    """Configure and return the application logger.

    The handler setup is idempotent to avoid duplicate handlers when the module
    is imported multiple times (e.g., in tests). A rotating file handler limits
    on-disk log growth while mirroring output to stdout for developer visibility.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    log_path = Path(__file__).resolve().parents[1] / config.LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    for name in _HANDLED_LOGGERS:
        target = logging.getLogger(name)
        target.setLevel(logging.INFO)
        target.addHandler(file_handler)
        target.addHandler(stream_handler)
        target.propagate = False

    return logger


logger = configure_logging()


def global_exception_handler(exc_type, value, tb):
    logger.error("Uncaught exception", exc_info=(exc_type, value, tb))
    sys.__excepthook__(exc_type, value, tb)


sys.excepthook = global_exception_handler


class MainWindow(QMainWindow):
    def __init__(
        self,
        *,
        runner: Optional[TaskRunner] = None,
        defaults: SettingsDefaults = SettingsDefaults(),
        debounce_ms: int = config.DEBOUNCE_MS,
    ):
        super().__init__()
        self.setWindowTitle(config.WINDOW_TITLE)
        self.resize(760, 820)

        central = QFrame()
        central.setObjectName("dropArea")
        self.drop_area = central
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(12, 10, 12, 10)
        main_layout.setSpacing(10)

        title = QLabel(config.WINDOW_TITLE)
        title.setObjectName("title")
        title.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(title)

        self.control_panel = ControlPanel(defaults=defaults, parent=self)
        main_layout.addWidget(self.control_panel)

        hint = QLabel("…or drop a JPG/JPEG image anywhere in this window.")
        hint.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(hint)

        # Busy indicator
        self.busy_frame = QFrame()
        busy_layout = QHBoxLayout(self.busy_frame)
        busy_layout.setContentsMargins(0, 0, 0, 0)
        self.busy_bar = QProgressBar()
        self.busy_bar.setRange(0, 0)
        self.busy_bar.setTextVisible(False)
        self.busy_bar.setMaximumWidth(160)
        busy_layout.addStretch()
        busy_layout.addWidget(self.busy_bar)
        busy_layout.addWidget(QLabel("Processing image..."))
        busy_layout.addStretch()
        main_layout.addWidget(self.busy_frame)

        self.error_label = QLabel()
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.setAccessibleName("Error")
        main_layout.addWidget(self.error_label)

        self.results_panel = ResultsPanel()
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(self.results_panel)
        main_layout.addWidget(scroll, stretch=1)

        self.setCentralWidget(central)
        self.setStyleSheet(DROP_AREA_STYLE)
        self.setAcceptDrops(True)
        self._set_dragging(False)

        # Processing state
        self.controller = ProcessingController(
            runner or ThreadPoolRunner(),
            settings=self.control_panel.current_settings(),
        )
        self.settings_debouncer = Debouncer(debounce_ms, self)
        self.control_panel.settingsChanged.connect(self.settings_debouncer.push)
        self.control_panel.openRequested.connect(self.open_file_dialog)
        self.settings_debouncer.settled.connect(self.controller.apply_settings)
        self.results_panel.copied.connect(self._on_copied)
        self._shown_result: Optional[ProcessedResult] = None
        self.controller.subscribe(self._render_state)

        # Managers
        self.performance = PerformanceMonitor(self)

        self._create_shortcuts()
        self._render_state(self.controller.state)

        logger.info("MainWindow initialized.")

    def _create_shortcuts(self):
        QShortcut(QKeySequence(config.OPEN_SHORTCUT), self, activated=self.open_file_dialog)
        QShortcut(
            QKeySequence(config.COPY_SHORTCUT),
            self,
            activated=self.results_panel.copy_to_clipboard,
        )

    # --- File selection ---
    def open_file_dialog(self) -> None:
        if self.controller.is_busy:
            return
        pattern = " ".join(f"*.{ext}" for ext in config.JPEG_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select JPG/JPEG Image",
            QStandardPaths.writableLocation(QStandardPaths.PicturesLocation) or "",
            f"JPEG Images ({pattern})",
        )
        if not path:
            return
        self.load_path(path)

    def load_path(self, path: Union[str, Path]) -> bool:
        """Hand *path* to the controller; return False if it was rejected."""
        candidate = FileCandidate.from_path(path)
        return self.controller.load_file(candidate)

    # --- Drag and drop ---
    def _set_dragging(self, dragging: bool) -> None:
        self.drop_area.setProperty("dragging", dragging)
        style = self.drop_area.style()
        if style:
            style.unpolish(self.drop_area)
            style.polish(self.drop_area)
        self.drop_area.update()

    @property
    def dragging(self) -> bool:
        return bool(self.drop_area.property("dragging"))

    @staticmethod
    def _local_file(mime) -> Optional[str]:
        if not mime.hasUrls():
            return None
        urls = mime.urls()
        if not urls or not urls[0].isLocalFile():
            return None
        return urls[0].toLocalFile()

    def dragEnterEvent(self, event):
        if self._local_file(event.mimeData()):
            self._set_dragging(True)
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if self._local_file(event.mimeData()):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event):
        self._set_dragging(False)
        event.accept()

    def dropEvent(self, event):
        self._set_dragging(False)
        path = self._local_file(event.mimeData())
        if not path:
            event.ignore()
            return
        event.acceptProposedAction()
        self.load_path(path)

    # --- State rendering ---
    def _render_state(self, state: ProcessingState) -> None:
        self.control_panel.set_busy(state.busy)
        self.busy_frame.setVisible(state.busy)

        if state.error:
            self.error_label.setText(f"Error: {state.error}")
            self.error_label.setVisible(True)
        else:
            self.error_label.clear()
            self.error_label.setVisible(False)

        showing = state.result is not None and state.source is not None and not state.busy
        if showing:
            if state.result is not self._shown_result:
                self.results_panel.show_result(
                    state.source.file_name, state.result, state.settings
                )
                self._shown_result = state.result
        elif state.result is None and self._shown_result is not None:
            self.results_panel.clear()
            self._shown_result = None
        self.results_panel.setVisible(showing)

    def _on_copied(self, length: int) -> None:
        self.statusBar().showMessage(f"Copied {length:,} characters to the clipboard.", 3000)

    def closeEvent(self, event):
        self.performance.stop()
        self.settings_debouncer.cancel()
        super().closeEvent(event)


def _preload(window: MainWindow, image_args: Sequence[str]) -> None:
    """Load the first command-line image argument, if any."""
    if not image_args:
        return
    if len(image_args) > 1:
        logger.info("Only one image is processed at a time; ignoring %d extra argument(s).",
                    len(image_args) - 1)
    window.load_path(image_args[0])


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the window, optionally preloading an image path argument."""
    image_args = list(sys.argv[1:] if argv is None else argv)
    app = QApplication.instance() or QApplication([sys.argv[0], *image_args])
    app.setApplicationName(config.APP_NAME)
    app.setStyle("Fusion")

    window = MainWindow()
    _preload(window, image_args)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
