# -*- coding: utf-8 -*-
"""
The Core Package for CapCap.

This package holds the capture-recognize-reconcile pipeline:

- `similarity`: the Levenshtein-based change classifier.
- `transcript`: the accumulated, line-oriented transcript.
- `settings`: the capture region and the shared, snapshot-able settings.
- `scheduler`: the periodic, single-flight capture loop.
- `screen_capture` / `text_recognizer`: the mss and EasyOCR collaborators.

The collaborators are not imported here, so the pure pipeline can be used
without OpenCV or a display.
"""

from .errors import (AnalysisFailed, CapCapError, CaptureError, CaptureFailed, InvalidRegion,
                     NoRegionSelected, NoTextFound, PermissionDenied, RecognitionError)
from .scheduler import CaptureScheduler, SessionState, Status, StatusKind
from .settings import CaptureConfig, CaptureSettings, Rectangle
from .similarity import ChangeKind, ChangeResult, classify, levenshtein_distance
from .transcript import Transcript

__all__ = [
    "AnalysisFailed",
    "CapCapError",
    "CaptureConfig",
    "CaptureError",
    "CaptureFailed",
    "CaptureScheduler",
    "CaptureSettings",
    "ChangeKind",
    "ChangeResult",
    "InvalidRegion",
    "NoRegionSelected",
    "NoTextFound",
    "PermissionDenied",
    "Rectangle",
    "RecognitionError",
    "SessionState",
    "Status",
    "StatusKind",
    "Transcript",
    "classify",
    "levenshtein_distance",
]
