# -*- coding: utf-8 -*-
"""
src/capcap/core/screen_capture.py

Grabs a rectangular area of the screen with 'mss'.

The capture runs on the scheduler's worker thread. mss handles hold
platform display connections that must not be shared across threads, so one
handle is created lazily per thread and released by `release_thread()` when
that worker finishes.
"""

import logging
import threading
from typing import List

import mss
import mss.exception
import numpy as np

from .errors import CaptureFailed, InvalidRegion, PermissionDenied
from .settings import Rectangle

logger = logging.getLogger(__name__)

# Substrings in mss error messages that indicate a missing OS permission
# (e.g. macOS Screen Recording, Wayland portals).
_PERMISSION_HINTS = ("permission", "not authorized", "access denied", "denied")


class ScreenCapturer:
    """
    Captures screen regions as NumPy arrays in BGRA format.
    """

    def __init__(self):
        self._local = threading.local()
        self._handles: List = []
        self._handles_lock = threading.Lock()

    def _sct(self):
        sct = getattr(self._local, "sct", None)
        if sct is None:
            sct = mss.mss()
            self._local.sct = sct
            with self._handles_lock:
                self._handles.append(sct)
            logger.debug(f"Created mss instance for thread {threading.current_thread().name}.")
        return sct

    def capture(self, region: Rectangle) -> np.ndarray:
        """
        Captures the specified rectangular area of the screen.

        Args:
            region (Rectangle): The area to capture, in global coordinates.

        Returns:
            np.ndarray: The captured pixels, shape (height, width, 4), BGRA.

        Raises:
            InvalidRegion: If the region is empty or lies outside every monitor.
            PermissionDenied: If the OS refused screen access.
            CaptureFailed: For any other capture failure.
        """
        if region is None or region.is_empty:
            raise InvalidRegion(f"Capture region is empty: {region}")

        try:
            sct = self._sct()
            if not self._on_any_monitor(sct, region):
                logger.error(f"Capture region {region} is outside all screen bounds.")
                raise InvalidRegion(f"Capture region is off-screen: {region}")

            sct_img = sct.grab(region.to_monitor())
            img_array = np.array(sct_img)
        except InvalidRegion:
            raise
        except mss.exception.ScreenShotError as e:
            message = str(e).lower()
            if any(hint in message for hint in _PERMISSION_HINTS):
                logger.error(f"Screen capture permission denied: {e}")
                raise PermissionDenied(str(e)) from e
            logger.error(f"Failed to capture screen: {e}")
            raise CaptureFailed(e) from e
        except Exception as e:
            logger.error(f"Unexpected screen capture failure: {e}")
            raise CaptureFailed(e) from e

        if img_array.size == 0:
            raise CaptureFailed(message="Screen capture returned an empty image")

        logger.debug(f"Image captured with shape: {img_array.shape}")
        return img_array

    @staticmethod
    def _on_any_monitor(sct, region: Rectangle) -> bool:
        # monitors[0] is the virtual union of all screens; the rest are real.
        for monitor in sct.monitors[1:]:
            bounds = Rectangle(monitor["left"], monitor["top"], monitor["width"], monitor["height"])
            if bounds.intersects(region):
                return True
        return False

    def release_thread(self):
        """Closes the calling thread's mss handle, if it has one."""
        sct = getattr(self._local, "sct", None)
        if sct is None:
            return
        self._local.sct = None
        with self._handles_lock:
            if sct in self._handles:
                self._handles.remove(sct)
        try:
            sct.close()
        except Exception as e:
            logger.debug(f"Error closing mss instance: {e}")
        logger.debug(f"Released mss instance for thread {threading.current_thread().name}.")

    def close(self):
        """Releases every mss handle this capturer created."""
        with self._handles_lock:
            handles, self._handles = self._handles, []
        for sct in handles:
            try:
                sct.close()
            except Exception as e:
                logger.debug(f"Error closing mss instance: {e}")
        self._local = threading.local()
