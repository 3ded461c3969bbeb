# -*- coding: utf-8 -*-
"""
src/capcap/core/errors.py

Exception taxonomy for the capture-recognize-reconcile loop.

Collaborators raise these; the scheduler catches them at its boundary and
turns them into status updates. Nothing here should escape to the GUI as an
uncaught fault.
"""

from typing import Optional


class CapCapError(Exception):
    """Base class for all CapCap errors."""


class NoRegionSelected(CapCapError):
    """Raised by ``start()`` when no capture region has been chosen."""

    def __init__(self, message: str = "No capture region selected"):
        super().__init__(message)


# --- Capture errors ---

class CaptureError(CapCapError):
    """A failure while grabbing the screen region."""

    # Fatal errors stop the session: retrying needs user intervention.
    is_fatal = False


class PermissionDenied(CaptureError):
    is_fatal = True

    def __init__(self, message: str = "Screen recording permission denied"):
        super().__init__(message)


class InvalidRegion(CaptureError):
    is_fatal = True

    def __init__(self, message: str = "Invalid capture region"):
        super().__init__(message)


class CaptureFailed(CaptureError):
    """Transient capture failure; the next tick retries."""

    def __init__(self, cause: Optional[BaseException] = None, message: str = "Screen capture failed"):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


# --- Recognition errors ---

class RecognitionError(CapCapError):
    """A failure while recognizing text in a captured image."""


class NoTextFound(RecognitionError):
    def __init__(self, message: str = "No text found"):
        super().__init__(message)


class AnalysisFailed(RecognitionError):
    """The OCR engine failed; the next tick retries."""

    def __init__(self, cause: Optional[BaseException] = None, message: str = "Text analysis failed"):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
