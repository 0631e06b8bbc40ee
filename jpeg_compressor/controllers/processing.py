"""Processing controller for the single-image compress/encode workflow.

:class:`ProcessingController` owns the current settings, source image and
processed result and is the only place they change.  File reads and pipeline
runs are dispatched through a :class:`~jpeg_compressor.workers.TaskRunner`, so
the controller works the same on a Qt thread pool and inline in tests.

Every read and every processing run is tagged with a monotonically
increasing sequence number.  A completion whose number is no longer the
latest issued is discarded, so a slow run started before a settings edit can
never overwrite the result of a later one.  Each dispatched job holds a busy
token that its ``on_finished`` callback releases on every exit path.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, List, Optional

from utils.errors import ImageProcessingError, ReadError, UnsupportedTypeError
from utils.image_processor import (
    ImageProcessor,
    ProcessingFailure,
    ProcessingOutcome,
    ProcessingRequest,
    run_pipeline,
)
from utils.validation import validate_mime_type

from ..cache import get_cache
from ..ingestion import FileCandidate, read_source
from ..models import ProcessedResult, ProcessingState, Settings, SourceImage
from ..workers import TaskRunner

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[ProcessingState], None]


class BusyToken:
    """Handle for one unit of outstanding work; release is idempotent."""

    def __init__(self, tracker: "BusyTracker") -> None:
        self._tracker = tracker
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._tracker._release()


class BusyTracker:
    """Count outstanding busy tokens.

    ``on_idle`` runs when the last outstanding token is released.  Acquiring
    is silent; the caller publishes the busy state itself.
    """

    def __init__(self, on_idle: Optional[Callable[[], None]] = None) -> None:
        self._outstanding = 0
        self._on_idle = on_idle

    @property
    def is_busy(self) -> bool:
        return self._outstanding > 0

    def acquire(self) -> BusyToken:
        self._outstanding += 1
        return BusyToken(self)

    def _release(self) -> None:
        self._outstanding -= 1
        if self._outstanding == 0 and self._on_idle is not None:
            self._on_idle()


class ProcessingController:
    """Coordinate ingestion, processing and the published state snapshot."""

    def __init__(
        self,
        runner: TaskRunner,
        *,
        settings: Optional[Settings] = None,
        processor: Optional[ImageProcessor] = None,
    ) -> None:
        self._runner = runner
        self._processor = processor or ImageProcessor(get_cache())
        self._settings = settings or Settings()
        self._source: Optional[SourceImage] = None
        self._result: Optional[ProcessedResult] = None
        self._error: Optional[str] = None
        self._listeners: List[StateListener] = []
        self._busy = BusyTracker(on_idle=self._publish)
        self._ingest_sequence = 0
        self._process_sequence = 0

    # Observation -------------------------------------------------------------
    def subscribe(self, listener: StateListener) -> None:
        """Call *listener* with a fresh snapshot after every state change."""

        self._listeners.append(listener)

    @property
    def state(self) -> ProcessingState:
        return ProcessingState(
            settings=self._settings,
            source=self._source,
            result=self._result,
            error=self._error,
            busy=self._busy.is_busy,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_busy(self) -> bool:
        return self._busy.is_busy

    @property
    def latest_request_id(self) -> int:
        """Sequence number of the most recently issued processing run."""

        return self._process_sequence

    def _publish(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    # Ingestion ---------------------------------------------------------------
    def load_file(self, candidate: FileCandidate) -> bool:
        """Start reading *candidate*; return ``False`` if its type is rejected.

        A rejected type leaves the current source and result in place and
        only publishes the error.  An accepted file clears everything derived
        from the previous one before the read begins.
        """

        try:
            validate_mime_type(candidate.mime_type)
        except UnsupportedTypeError as exc:
            LOGGER.warning(
                "Rejected %s with MIME type %s", candidate.name, candidate.mime_type
            )
            self._error = exc.message
            self._publish()
            return False

        self._ingest_sequence += 1
        # Also invalidates any processing run still working on the old file.
        self._process_sequence += 1
        ingest_id = self._ingest_sequence
        self._source = None
        self._result = None
        self._error = None

        token = self._busy.acquire()
        self._publish()
        LOGGER.info("Loading %s", candidate.name)
        self._runner.submit(
            read_source,
            candidate,
            on_result=partial(self._on_source_read, ingest_id),
            on_error=partial(self._on_read_failed, ingest_id),
            on_finished=token.release,
        )
        return True

    def _on_source_read(self, ingest_id: int, source: SourceImage) -> None:
        if ingest_id != self._ingest_sequence:
            LOGGER.debug("Discarding superseded read of %s", source.file_name)
            return
        self._source = source
        self.reprocess()

    def _on_read_failed(self, ingest_id: int, error: BaseException) -> None:
        if ingest_id != self._ingest_sequence:
            return
        if not isinstance(error, ImageProcessingError):
            error = ReadError()
        self._source = None
        self._result = None
        self._error = error.message
        self._publish()

    def clear(self) -> None:
        """Forget the current file and everything derived from it."""

        self._ingest_sequence += 1
        self._process_sequence += 1
        self._source = None
        self._result = None
        self._error = None
        self._publish()

    # Processing --------------------------------------------------------------
    def apply_settings(self, settings: Settings) -> Optional[int]:
        """Adopt *settings* and reprocess the current source, if any."""

        self._settings = settings
        if self._source is None:
            self._publish()
            return None
        return self.reprocess()

    def reprocess(self) -> Optional[int]:
        """Issue a processing run for the current source and settings.

        Returns the run's sequence number, or ``None`` without a source.
        """

        if self._source is None:
            return None
        self._process_sequence += 1
        request = ProcessingRequest(
            request_id=self._process_sequence,
            source=self._source,
            settings=self._settings,
        )
        self._result = None
        self._error = None

        token = self._busy.acquire()
        self._publish()
        self._runner.submit(
            run_pipeline,
            request,
            self._processor,
            on_result=self._on_outcome,
            on_error=partial(self._on_pipeline_crashed, request.request_id),
            on_finished=token.release,
        )
        return request.request_id

    def _on_outcome(self, outcome: ProcessingOutcome) -> None:
        if outcome.request_id != self._process_sequence:
            LOGGER.debug(
                "Discarding stale outcome %d (latest %d)",
                outcome.request_id,
                self._process_sequence,
            )
            return
        if isinstance(outcome, ProcessingFailure):
            self._result = None
            self._error = outcome.message
        else:
            self._result = outcome.result
            self._error = None
        self._publish()

    def _on_pipeline_crashed(self, request_id: int, error: BaseException) -> None:
        if request_id != self._process_sequence:
            return
        message = (
            error.message
            if isinstance(error, ImageProcessingError)
            else f"Error processing image: {error}"
        )
        self._on_outcome(ProcessingFailure(request_id, ImageProcessingError(message)))


__all__ = [
    "BusyToken",
    "BusyTracker",
    "ProcessingController",
]
