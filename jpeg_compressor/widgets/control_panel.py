"""Settings panel for the compressor window."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QSlider,
    QSpinBox,
    QVBoxLayout,
)

from .. import config
from ..models import Settings

# The slider works in hundredths of quality.
_SLIDER_SCALE = 100


@dataclass(frozen=True)
class SettingsDefaults:
    """Initial values for the settings controls."""

    quality: float = config.DEFAULT_QUALITY
    max_width: int = config.DEFAULT_MAX_WIDTH
    max_height: int = config.DEFAULT_MAX_HEIGHT

    def to_settings(self) -> Settings:
        return Settings.sanitized(self.quality, self.max_width, self.max_height)


class ControlPanel(QFrame):
    """Max width/height inputs, the quality slider and the file picker."""

    settingsChanged = Signal(object)
    openRequested = Signal()

    def __init__(self, *, defaults: SettingsDefaults = SettingsDefaults(), parent=None) -> None:
        super().__init__(parent)
        self._defaults = defaults

        self.setObjectName("controlPanel")
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        self._build_layout()
        self._update_quality_label()

    # Public control accessors -------------------------------------------------
    @property
    def max_width_spin(self) -> QSpinBox:
        return self._max_width_spin

    @property
    def max_height_spin(self) -> QSpinBox:
        return self._max_height_spin

    @property
    def quality_slider(self) -> QSlider:
        return self._quality_slider

    @property
    def quality_label(self) -> QLabel:
        return self._quality_label

    @property
    def open_button(self) -> QPushButton:
        return self._open_btn

    def current_settings(self) -> Settings:
        return Settings.sanitized(
            self._quality_slider.value() / _SLIDER_SCALE,
            self._max_width_spin.value(),
            self._max_height_spin.value(),
        )

    def set_settings(self, settings: Settings) -> None:
        """Show *settings* without emitting ``settingsChanged``."""
        for widget, value in (
            (self._max_width_spin, settings.max_width),
            (self._max_height_spin, settings.max_height),
            (self._quality_slider, round(settings.quality * _SLIDER_SCALE)),
        ):
            widget.blockSignals(True)
            widget.setValue(value)
            widget.blockSignals(False)
        self._update_quality_label()

    def set_busy(self, busy: bool) -> None:
        for widget in (
            self._max_width_spin,
            self._max_height_spin,
            self._quality_slider,
            self._open_btn,
        ):
            widget.setEnabled(not busy)

    # Layout builders ---------------------------------------------------------
    def _build_layout(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(8)

        grid = QGridLayout()
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(4)

        grid.addWidget(QLabel("Max Width (px)"), 0, 0)
        self._max_width_spin = self._make_dimension_spin(self._defaults.max_width)
        self._max_width_spin.setAccessibleName("Max Width")
        grid.addWidget(self._max_width_spin, 1, 0)

        grid.addWidget(QLabel("Max Height (px)"), 0, 1)
        self._max_height_spin = self._make_dimension_spin(self._defaults.max_height)
        self._max_height_spin.setAccessibleName("Max Height")
        grid.addWidget(self._max_height_spin, 1, 1)

        self._quality_label = QLabel()
        grid.addWidget(self._quality_label, 0, 2)
        self._quality_slider = QSlider(Qt.Horizontal)
        self._quality_slider.setRange(
            round(config.QUALITY_MIN * _SLIDER_SCALE),
            round(config.QUALITY_MAX * _SLIDER_SCALE),
        )
        step = round(config.QUALITY_STEP * _SLIDER_SCALE)
        self._quality_slider.setSingleStep(step)
        self._quality_slider.setPageStep(step * 2)
        self._quality_slider.setTickInterval(step)
        self._quality_slider.setValue(round(self._defaults.quality * _SLIDER_SCALE))
        self._quality_slider.setAccessibleName("Quality")
        self._quality_slider.valueChanged.connect(self._on_quality_moved)
        grid.addWidget(self._quality_slider, 1, 2)

        grid.setColumnStretch(2, 1)
        layout.addLayout(grid)

        self._open_btn = QPushButton("Select JPG/JPEG Image…")
        self._open_btn.setToolTip(f"Select or drop a JPG/JPEG image ({config.OPEN_SHORTCUT})")
        self._open_btn.clicked.connect(self.openRequested.emit)
        layout.addWidget(self._open_btn)

        self._max_width_spin.valueChanged.connect(lambda _: self._emit_settings_change())
        self._max_height_spin.valueChanged.connect(lambda _: self._emit_settings_change())

    @staticmethod
    def _make_dimension_spin(value: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(config.MIN_DIMENSION, config.MAX_DIMENSION)
        spin.setValue(value)
        spin.setSuffix(" px")
        spin.setKeyboardTracking(True)
        return spin

    def _on_quality_moved(self, value: int) -> None:
        step = round(config.QUALITY_STEP * _SLIDER_SCALE)
        snapped = int(round(value / step) * step)
        if snapped != value:
            # Re-entrant valueChanged emits the snapped value.
            self._quality_slider.setValue(snapped)
            return
        self._update_quality_label()
        self._emit_settings_change()

    def _update_quality_label(self) -> None:
        quality = self._quality_slider.value() / _SLIDER_SCALE
        self._quality_label.setText(f"Quality ({quality:.2f})")

    def _emit_settings_change(self) -> None:
        self.settingsChanged.emit(self.current_settings())


__all__ = [
    "ControlPanel",
    "SettingsDefaults",
]
