# -*- coding: utf-8 -*-
"""
src/capcap/core/scheduler.py

The periodic capture-recognize-reconcile loop.

``CaptureScheduler`` owns the session state machine (IDLE -> RUNNING ->
STOPPING -> IDLE), the transcript and the "last accepted text" marker. Each
tick grabs the configured region, recognizes its text, classifies the text
against the transcript's last line and applies the resulting edit.

Ticks are single-flight: every tick runs under one tick lock, so a slow
recognition on tick N always finishes reconciling before tick N+1 captures.
The periodic trigger is a worker thread that waits ``interval_seconds`` after
each tick completes, so overruns coalesce instead of piling up.

Callbacks (``on_state_change``, ``on_status``, ``on_transcript_changed``)
fire on whichever thread caused the change, usually the worker. The GUI is
responsible for marshalling them onto its own thread.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .errors import (CaptureError, CaptureFailed, InvalidRegion, NoRegionSelected,
                     NoTextFound, PermissionDenied, RecognitionError)
from .interfaces import ScreenCapture, TextRecognizer
from .settings import CaptureConfig, CaptureSettings, Rectangle
from .similarity import classify
from .transcript import Transcript

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"


class StatusKind(str, Enum):
    READY = "ready"
    CAPTURING = "capturing"
    RECOGNIZING = "recognizing"
    PROCESSING = "processing"
    NO_CHANGE = "no_change"
    SUCCESS = "success"
    NO_TEXT = "no_text"
    STOPPED = "stopped"
    CLEARED = "cleared"
    ERROR = "error"


@dataclass(frozen=True)
class Status:
    """A human-readable status line plus its machine-readable kind."""
    kind: StatusKind
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR


# --- Status messages ---
STATUS_READY = Status(StatusKind.READY, "Ready")
STATUS_CAPTURING = Status(StatusKind.CAPTURING, "Capturing...")
STATUS_RECOGNIZING = Status(StatusKind.RECOGNIZING, "Recognizing text...")
STATUS_PROCESSING = Status(StatusKind.PROCESSING, "Processing text...")
STATUS_NO_CHANGE = Status(StatusKind.NO_CHANGE, "Capturing (No Change)")
STATUS_SUCCESS = Status(StatusKind.SUCCESS, "Capture successful.")
STATUS_NO_TEXT = Status(StatusKind.NO_TEXT, "No text found in the region.")
STATUS_STOPPED = Status(StatusKind.STOPPED, "Capture stopped.")
STATUS_CLEARED = Status(StatusKind.CLEARED, "Text cleared.")
STATUS_NO_REGION = Status(StatusKind.ERROR, "Error: Please select an area first.")
STATUS_REGION_LOST = Status(StatusKind.ERROR, "Error: Capture region lost. Stopping.")
STATUS_PERMISSION_DENIED = Status(StatusKind.ERROR, "Error: Screen Recording permission denied.")
STATUS_INVALID_REGION = Status(StatusKind.ERROR, "Error: Invalid capture region.")
STATUS_CAPTURE_FAILED = Status(StatusKind.ERROR, "Error: Screen capture failed.")
STATUS_ANALYSIS_FAILED = Status(StatusKind.ERROR, "Error: Text analysis failed.")

StateCallback = Callable[[SessionState, SessionState], None]
StatusCallback = Callable[[Status], None]
TranscriptCallback = Callable[[str], None]


class CaptureScheduler:
    """
    Drives capture ticks against a region and reconciles the results into a
    Transcript.

    Args:
        capturer (ScreenCapture): Grabs a screen region as an image.
        recognizer (TextRecognizer): Turns an image into a transcript string.
        settings (CaptureSettings): Shared settings, read once per tick.
        transcript (Transcript, optional): The buffer to fill. A new empty
                                           one is created if omitted.
        on_state_change: Called with (from_state, to_state).
        on_status: Called with every new Status.
        on_transcript_changed: Called with the new full transcript text.
    """

    def __init__(
        self,
        capturer: ScreenCapture,
        recognizer: TextRecognizer,
        settings: Optional[CaptureSettings] = None,
        transcript: Optional[Transcript] = None,
        on_state_change: Optional[StateCallback] = None,
        on_status: Optional[StatusCallback] = None,
        on_transcript_changed: Optional[TranscriptCallback] = None,
    ):
        self._capturer = capturer
        self._recognizer = recognizer
        self._settings = settings if settings is not None else CaptureSettings()
        self._transcript = transcript if transcript is not None else Transcript()
        self._on_state_change = on_state_change
        self._on_status = on_status
        self._on_transcript_changed = on_transcript_changed

        self._state_lock = threading.RLock()
        self._tick_lock = threading.Lock()
        self._state = SessionState.IDLE
        self._status = STATUS_READY
        self._session_id = 0
        self._trigger_stop: Optional[threading.Event] = None
        self._worker: Optional[threading.Thread] = None
        self._last_accepted_text = ""
        self._clear_requested = False

    # --- Read-only views ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    @property
    def status(self) -> Status:
        return self._status

    @property
    def settings(self) -> CaptureSettings:
        return self._settings

    @property
    def transcript_text(self) -> str:
        return self._transcript.full_text

    @property
    def last_accepted_text(self) -> str:
        return self._last_accepted_text

    def export_text(self) -> str:
        """The full transcript, for the GUI to write to a file."""
        return self._transcript.export_text()

    # --- Session control ---

    def start(self, region: Optional[Rectangle] = None, interval: Optional[float] = None):
        """
        Starts periodic capture. One tick runs immediately, then one tick per
        interval.

        Args:
            region (Rectangle, optional): Replaces the configured region.
            interval (float, optional): Replaces the configured interval.

        Raises:
            NoRegionSelected: If no region is configured. The session stays
                              IDLE.
        """
        with self._state_lock:
            if region is not None:
                self._settings.region = region
            if interval is not None:
                self._settings.interval_seconds = interval

            if self._state is SessionState.RUNNING:
                logger.debug("start() called while already running; ignoring.")
                return
            if self._settings.region is None:
                logger.warning("Cannot start capture: no region selected.")
                self._set_status(STATUS_NO_REGION)
                raise NoRegionSelected()

            self._session_id += 1
            logger.info(f"Starting capture session {self._session_id} "
                        f"for region {self._settings.region} "
                        f"every {self._settings.interval_seconds:.2f}s.")
            self._transition(SessionState.RUNNING)
            self._set_status(STATUS_CAPTURING)
            self._start_trigger()

    def stop(self):
        """
        Stops periodic capture. Safe to call when already idle.

        The trigger is cancelled immediately; a tick that is already in flight
        finishes and applies its result.
        """
        with self._state_lock:
            if self._state is SessionState.IDLE:
                return
            logger.info(f"Stopping capture session {self._session_id}.")
            self._transition(SessionState.STOPPING)
            self._cancel_trigger()
            self._transition(SessionState.IDLE)
            self._set_status(STATUS_STOPPED)

    def clear(self):
        """
        Clears the transcript and the last accepted text.

        If a tick is in flight the clear is applied as soon as it completes,
        so it never races with a reconciliation.
        """
        with self._state_lock:
            self._clear_requested = True
        self._drain_pending_clear()

    def update_interval(self, seconds: float):
        """
        Stores a new interval. While running, the periodic trigger is
        cancelled and restarted with it; a tick already in flight is not
        affected.
        """
        with self._state_lock:
            self._settings.interval_seconds = seconds
            logger.debug(f"Capture interval updated to {self._settings.interval_seconds:.2f}s.")
            if self._state is SessionState.RUNNING:
                self._cancel_trigger()
                self._start_trigger()

    # --- Ticks ---

    def tick(self) -> CaptureConfig:
        """
        Runs one capture-recognize-reconcile cycle for the current session.

        Blocks until any in-flight tick has finished. Does nothing unless the
        session is running.

        Returns:
            CaptureConfig: The settings snapshot the tick ran with.
        """
        return self._tick(None, None)

    def _tick(self, session_id: Optional[int], trigger_stop: Optional[threading.Event]) -> Optional[CaptureConfig]:
        try:
            with self._tick_lock:
                # A clear that landed after the previous tick's last check.
                self._consume_pending_clear()
                # The trigger may have been cancelled while we waited for the lock.
                if trigger_stop is not None and trigger_stop.is_set():
                    return None
                try:
                    return self._run_cycle(session_id)
                finally:
                    self._consume_pending_clear()
        finally:
            self._drain_pending_clear()

    def _run_cycle(self, session_id: Optional[int]) -> CaptureConfig:
        snapshot = self._settings.snapshot()

        with self._state_lock:
            if session_id is None:
                session_id = self._session_id
            active = self._state is SessionState.RUNNING and session_id == self._session_id
        if not active:
            logger.debug("Skipping tick: capture is not running.")
            return snapshot

        if snapshot.region is None:
            logger.error("Capture region lost while running.")
            self._end_session(session_id, STATUS_REGION_LOST)
            return snapshot

        logger.debug(f"Performing capture cycle for region {snapshot.region}.")
        self._set_tick_status(session_id, STATUS_CAPTURING)

        try:
            image = self._capturer.capture(snapshot.region)
        except CaptureError as e:
            self._handle_capture_error(e, session_id)
            return snapshot
        except Exception as e:
            self._handle_unexpected_error(e, session_id)
            return snapshot

        self._set_tick_status(session_id, STATUS_RECOGNIZING)
        try:
            recognized = self._recognizer.recognize_text(image)
        except RecognitionError as e:
            self._handle_recognition_error(e, session_id)
            return snapshot
        except Exception as e:
            self._handle_unexpected_error(e, session_id)
            return snapshot

        self._reconcile(recognized, snapshot.dedup_threshold, session_id)
        return snapshot

    def _reconcile(self, recognized: str, threshold: float, session_id: int):
        trimmed = recognized.strip()
        if trimmed == self._last_accepted_text:
            logger.debug("No text change detected.")
            self._set_tick_status(session_id, STATUS_NO_CHANGE)
            return

        self._set_tick_status(session_id, STATUS_PROCESSING)
        result = classify(self._transcript.full_text, trimmed, threshold)
        logger.debug(f"Classifier result: {result.kind.value}")
        changed = self._transcript.apply(result)
        # Advances on NO_CHANGE too, so re-observed text skips classification next tick.
        self._last_accepted_text = trimmed
        if changed:
            self._notify_transcript()
        self._set_tick_status(session_id, STATUS_SUCCESS)

    # --- Error handling ---

    def _handle_capture_error(self, error: CaptureError, session_id: int):
        if isinstance(error, PermissionDenied):
            logger.error(f"Capture failed, stopping: {error}")
            self._end_session(session_id, STATUS_PERMISSION_DENIED)
        elif isinstance(error, InvalidRegion):
            logger.error(f"Capture failed, stopping: {error}")
            self._end_session(session_id, STATUS_INVALID_REGION)
        else:
            cause = error.cause if isinstance(error, CaptureFailed) else None
            logger.error(f"Capture failed: {cause or error}")
            self._set_tick_status(session_id, STATUS_CAPTURE_FAILED)

    def _handle_recognition_error(self, error: RecognitionError, session_id: int):
        if isinstance(error, NoTextFound):
            logger.debug("No text found.")
            self._set_tick_status(session_id, STATUS_NO_TEXT)
        else:
            logger.error(f"Text analysis failed: {error}")
            self._set_tick_status(session_id, STATUS_ANALYSIS_FAILED)

    def _handle_unexpected_error(self, error: Exception, session_id: int):
        logger.error(f"Unexpected error during capture cycle: {error}", exc_info=True)
        self._set_tick_status(session_id, Status(StatusKind.ERROR, f"Error: {error}"))

    def _end_session(self, session_id: int, status: Status):
        """Stops the session a tick belongs to, unless it already ended."""
        with self._state_lock:
            if session_id != self._session_id or self._state is not SessionState.RUNNING:
                logger.debug(f"Session {session_id} already ended; dropping '{status.message}'.")
                return
            self._transition(SessionState.STOPPING)
            self._cancel_trigger()
            self._transition(SessionState.IDLE)
            self._set_status(status)

    # --- Clear handling ---

    def _consume_pending_clear(self):
        # Caller holds the tick lock.
        with self._state_lock:
            requested = self._clear_requested
            self._clear_requested = False
        if requested:
            self._transcript.clear()
            self._last_accepted_text = ""
            logger.debug("Transcript cleared.")
            self._notify_transcript()
            self._set_status(STATUS_CLEARED)

    def _drain_pending_clear(self):
        with self._state_lock:
            if not self._clear_requested:
                return
        # If a tick holds the lock it consumes the request when it finishes.
        if not self._tick_lock.acquire(blocking=False):
            return
        try:
            self._consume_pending_clear()
        finally:
            self._tick_lock.release()

    # --- Periodic trigger ---

    def _start_trigger(self):
        # Caller holds the state lock.
        trigger_stop = threading.Event()
        worker = threading.Thread(
            target=self._run_trigger,
            args=(self._session_id, trigger_stop),
            name=f"capcap-capture-{self._session_id}",
            daemon=True,
        )
        self._trigger_stop = trigger_stop
        self._worker = worker
        worker.start()

    def _cancel_trigger(self):
        # Caller holds the state lock. The worker is not joined: an in-flight
        # tick is allowed to drain.
        if self._trigger_stop is not None:
            self._trigger_stop.set()
        self._trigger_stop = None
        self._worker = None

    def _run_trigger(self, session_id: int, trigger_stop: threading.Event):
        logger.debug(f"Capture trigger for session {session_id} started.")
        try:
            while not trigger_stop.is_set():
                snapshot = self._tick(session_id, trigger_stop)
                interval = snapshot.interval_seconds if snapshot else self._settings.interval_seconds
                if trigger_stop.wait(interval):
                    break
        finally:
            # Each restart runs on a fresh thread; its capture handle goes with it.
            try:
                self._capturer.release_thread()
            except Exception as e:
                logger.error(f"Error releasing capture resources: {e}", exc_info=True)
        logger.debug(f"Capture trigger for session {session_id} finished.")

    # --- Notifications ---

    def _transition(self, to_state: SessionState):
        from_state = self._state
        if from_state is to_state:
            return
        self._state = to_state
        logger.debug(f"Session state: {from_state.value} -> {to_state.value}")
        self._emit(self._on_state_change, from_state, to_state)

    def _set_status(self, status: Status):
        self._status = status
        self._emit(self._on_status, status)

    def _set_tick_status(self, session_id: int, status: Status):
        # A tick draining after stop() must not overwrite "Capture stopped.".
        with self._state_lock:
            if session_id != self._session_id or self._state is not SessionState.RUNNING:
                return
            self._set_status(status)

    def _notify_transcript(self):
        self._emit(self._on_transcript_changed, self._transcript.full_text)

    @staticmethod
    def _emit(callback: Optional[Callable[..., Any]], *args):
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Error in scheduler callback: {e}", exc_info=True)
