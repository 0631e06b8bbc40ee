"""Results panel: preview, dimensions and the Base64 output."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFontDatabase, QGuiApplication, QPixmap
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
)

from .. import config
from ..models import ProcessedResult, Settings

LOGGER = logging.getLogger(__name__)


class ResultsPanel(QFrame):
    """Shows the processed image and its data URL."""

    copied = Signal(int)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("resultsPanel")
        self._result: Optional[ProcessedResult] = None
        self._build_layout()
        self.clear()

    @property
    def result(self) -> Optional[ProcessedResult]:
        return self._result

    @property
    def file_label(self) -> QLabel:
        return self._file_label

    @property
    def dimensions_label(self) -> QLabel:
        return self._dimensions_label

    @property
    def length_label(self) -> QLabel:
        return self._length_label

    @property
    def preview_title(self) -> QLabel:
        return self._preview_title

    @property
    def preview_label(self) -> QLabel:
        return self._preview

    @property
    def base64_edit(self) -> QPlainTextEdit:
        return self._base64_edit

    @property
    def copy_button(self) -> QPushButton:
        return self._copy_btn

    def _build_layout(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        heading = QLabel("Processed Image Results")
        heading.setObjectName("resultsHeading")
        layout.addWidget(heading)

        self._file_label = QLabel()
        self._dimensions_label = QLabel()
        self._length_label = QLabel()
        for label in (self._file_label, self._dimensions_label, self._length_label):
            label.setTextInteractionFlags(Qt.TextSelectableByMouse)
            layout.addWidget(label)

        self._preview_title = QLabel()
        layout.addWidget(self._preview_title)

        self._preview = QLabel()
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setAccessibleName("Processed Preview")
        layout.addWidget(self._preview, stretch=1)

        layout.addWidget(QLabel("Processed Base64 String:"))
        self._base64_edit = QPlainTextEdit()
        self._base64_edit.setReadOnly(True)
        self._base64_edit.setAcceptDrops(False)
        self._base64_edit.setFont(QFontDatabase.systemFont(QFontDatabase.FixedFont))
        self._base64_edit.setAccessibleName("Processed Base64 String")
        self._base64_edit.setMinimumHeight(120)
        layout.addWidget(self._base64_edit)

        row = QHBoxLayout()
        self._copy_btn = QPushButton("Copy Base64")
        self._copy_btn.setToolTip(f"Copy the data URL ({config.COPY_SHORTCUT})")
        self._copy_btn.clicked.connect(self.copy_to_clipboard)
        row.addWidget(self._copy_btn)
        row.addStretch()
        layout.addLayout(row)

    def show_result(self, file_name: str, result: ProcessedResult, settings: Settings) -> None:
        self._result = result
        self._file_label.setText(f"Original File: {file_name}")
        self._dimensions_label.setText(
            f"Actual Dimensions: {result.width}px × {result.height}px"
        )
        self._length_label.setText(f"Processed Base64 Length: {result.encoded_length:,}")
        self._preview_title.setText(
            f"Preview (Max {settings.max_width}x{settings.max_height}px, "
            f"Q: {settings.quality:.2f}):"
        )

        pixmap = QPixmap()
        if pixmap.loadFromData(result.jpeg_bytes, "JPEG"):
            if max(pixmap.width(), pixmap.height()) > config.PREVIEW_MAX_DISPLAY:
                pixmap = pixmap.scaled(
                    config.PREVIEW_MAX_DISPLAY,
                    config.PREVIEW_MAX_DISPLAY,
                    Qt.KeepAspectRatio,
                    Qt.SmoothTransformation,
                )
            self._preview.setPixmap(pixmap)
        else:
            LOGGER.warning("Preview could not decode the processed JPEG")
            self._preview.clear()

        self._base64_edit.setPlainText(result.data_url)
        self._copy_btn.setEnabled(True)

    def clear(self) -> None:
        self._result = None
        for label in (
            self._file_label,
            self._dimensions_label,
            self._length_label,
            self._preview_title,
        ):
            label.clear()
        self._preview.clear()
        self._base64_edit.clear()
        self._copy_btn.setEnabled(False)

    def copy_to_clipboard(self) -> bool:
        """Put the data URL on the clipboard; return False without a result."""
        if self._result is None:
            return False
        QGuiApplication.clipboard().setText(self._result.data_url)
        LOGGER.info("Copied %d characters to the clipboard", self._result.encoded_length)
        self.copied.emit(self._result.encoded_length)
        return True


__all__ = ["ResultsPanel"]
