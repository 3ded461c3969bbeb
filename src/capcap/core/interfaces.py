# -*- coding: utf-8 -*-
"""
src/capcap/core/interfaces.py

Protocols for the platform collaborators the scheduler drives.
"""

from typing import Any, Protocol

from .settings import Rectangle


class ScreenCapture(Protocol):
    def capture(self, region: Rectangle) -> Any:
        """Grabs ``region``; raises PermissionDenied, InvalidRegion or CaptureFailed."""
        ...

    def release_thread(self) -> None:
        """Frees whatever the calling thread acquired in ``capture``."""
        ...


class TextRecognizer(Protocol):
    def recognize_text(self, image: Any) -> str:
        """Recognizes text in ``image``; raises NoTextFound or AnalysisFailed."""
        ...
