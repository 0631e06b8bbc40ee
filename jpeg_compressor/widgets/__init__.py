"""Widgets composing the main window."""

from .control_panel import ControlPanel, SettingsDefaults
from .results_panel import ResultsPanel

__all__ = ["ControlPanel", "ResultsPanel", "SettingsDefaults"]
