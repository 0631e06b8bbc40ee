"""Trailing-edge debouncing of a changing value."""

from __future__ import annotations

from typing import Any, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from . import config

_UNSET = object()


class Debouncer(QObject):
    """Emit ``settled`` once a pushed value has been stable for ``delay_ms``.

    Every :meth:`push` restarts a single-shot timer, so a burst of edits
    produces one emission carrying the last value.
    """

    settled = Signal(object)

    def __init__(self, delay_ms: int = config.DEBOUNCE_MS, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._pending: Any = _UNSET
        self._value: Any = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._emit_pending)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    @property
    def pending(self) -> bool:
        return self._pending is not _UNSET

    @property
    def value(self) -> Any:
        """The last value that settled."""
        return self._value

    def push(self, value: Any) -> None:
        self._pending = value
        if self._timer.isActive():
            self._timer.stop()
        self._timer.start()

    def flush(self) -> None:
        """Emit a waiting value immediately."""
        if self._timer.isActive():
            self._timer.stop()
        self._emit_pending()

    def cancel(self) -> None:
        self._timer.stop()
        self._pending = _UNSET

    def _emit_pending(self) -> None:
        if self._pending is _UNSET:
            return
        value, self._pending = self._pending, _UNSET
        self._value = value
        self.settled.emit(value)


__all__ = ["Debouncer"]
