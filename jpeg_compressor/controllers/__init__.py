"""Controller layer for decoupling processing state from widgets."""

from .processing import BusyToken, BusyTracker, ProcessingController

__all__ = [
    "BusyToken",
    "BusyTracker",
    "ProcessingController",
]
