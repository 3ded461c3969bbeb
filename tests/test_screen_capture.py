from __future__ import annotations

import threading
import time
from typing import Callable

import mss.exception
import numpy as np
import pytest

from capcap.core import screen_capture
from capcap.core.errors import CaptureFailed, InvalidRegion, PermissionDenied
from capcap.core.scheduler import CaptureScheduler
from capcap.core.screen_capture import ScreenCapturer
from capcap.core.settings import CaptureSettings, Rectangle


def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


MONITORS = [
    {"left": 0, "top": 0, "width": 3840, "height": 1080},
    {"left": 0, "top": 0, "width": 1920, "height": 1080},
    {"left": 1920, "top": 0, "width": 1920, "height": 1080},
]


class FakeMSS:
    def __init__(self, grab_error: Exception | None = None, image: np.ndarray | None = None) -> None:
        self.monitors = MONITORS
        self.grab_error = grab_error
        self.image = image
        self.grabbed: list[dict] = []
        self.closed = False

    def grab(self, monitor: dict) -> np.ndarray:
        self.grabbed.append(monitor)
        if self.grab_error is not None:
            raise self.grab_error
        if self.image is not None:
            return self.image
        return np.zeros((monitor["height"], monitor["width"], 4), dtype=np.uint8)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_mss(monkeypatch):
    holder: dict[str, FakeMSS] = {"sct": FakeMSS()}
    monkeypatch.setattr(screen_capture.mss, "mss", lambda: holder["sct"])
    return holder


def test_capture_returns_bgra_array_of_region_size(fake_mss) -> None:
    capturer = ScreenCapturer()

    image = capturer.capture(Rectangle(100, 50, 30, 20))

    assert isinstance(image, np.ndarray)
    assert image.shape == (20, 30, 4)
    assert fake_mss["sct"].grabbed == [{"top": 50, "left": 100, "width": 30, "height": 20}]


def test_region_on_second_monitor_is_accepted(fake_mss) -> None:
    image = ScreenCapturer().capture(Rectangle(2000, 10, 5, 5))
    assert image.shape == (5, 5, 4)


def test_empty_region_is_invalid(fake_mss) -> None:
    with pytest.raises(InvalidRegion):
        ScreenCapturer().capture(Rectangle(10, 10, 0, 10))
    assert fake_mss["sct"].grabbed == []


def test_off_screen_region_is_invalid(fake_mss) -> None:
    with pytest.raises(InvalidRegion):
        ScreenCapturer().capture(Rectangle(5000, 5000, 10, 10))
    assert fake_mss["sct"].grabbed == []


def test_permission_error_is_reported_as_permission_denied(fake_mss) -> None:
    fake_mss["sct"] = FakeMSS(grab_error=mss.exception.ScreenShotError("Access denied by the system"))

    with pytest.raises(PermissionDenied):
        ScreenCapturer().capture(Rectangle(0, 0, 10, 10))


def test_other_screenshot_errors_are_transient(fake_mss) -> None:
    error = mss.exception.ScreenShotError("XGetImage() failed")
    fake_mss["sct"] = FakeMSS(grab_error=error)

    with pytest.raises(CaptureFailed) as excinfo:
        ScreenCapturer().capture(Rectangle(0, 0, 10, 10))

    assert excinfo.value.cause is error
    assert not excinfo.value.is_fatal


def test_unexpected_errors_are_wrapped(fake_mss) -> None:
    fake_mss["sct"] = FakeMSS(grab_error=OSError("display gone"))

    with pytest.raises(CaptureFailed):
        ScreenCapturer().capture(Rectangle(0, 0, 10, 10))


def test_empty_image_is_a_capture_failure(fake_mss) -> None:
    fake_mss["sct"] = FakeMSS(image=np.zeros((0, 0, 4), dtype=np.uint8))

    with pytest.raises(CaptureFailed):
        ScreenCapturer().capture(Rectangle(0, 0, 10, 10))


def test_close_releases_handles(fake_mss) -> None:
    capturer = ScreenCapturer()
    capturer.capture(Rectangle(0, 0, 10, 10))

    capturer.close()

    assert fake_mss["sct"].closed


def test_release_thread_closes_only_the_calling_threads_handle(monkeypatch) -> None:
    created: list[FakeMSS] = []

    def new_mss() -> FakeMSS:
        created.append(FakeMSS())
        return created[-1]

    monkeypatch.setattr(screen_capture.mss, "mss", new_mss)
    capturer = ScreenCapturer()
    capturer.capture(Rectangle(0, 0, 10, 10))

    def capture_and_release() -> None:
        capturer.capture(Rectangle(0, 0, 10, 10))
        capturer.release_thread()

    worker = threading.Thread(target=capture_and_release)
    worker.start()
    worker.join(timeout=2.0)

    assert len(created) == 2
    assert created[1].closed
    assert not created[0].closed

    # The next capture on a released thread opens a fresh handle.
    capturer.release_thread()
    capturer.capture(Rectangle(0, 0, 10, 10))
    assert created[0].closed
    assert len(created) == 3


class StaticRecognizer:
    def recognize_text(self, image: np.ndarray) -> str:
        return "text"


def test_restarting_capture_does_not_accumulate_mss_handles(monkeypatch) -> None:
    created: list[FakeMSS] = []

    def new_mss() -> FakeMSS:
        created.append(FakeMSS())
        return created[-1]

    monkeypatch.setattr(screen_capture.mss, "mss", new_mss)
    capturer = ScreenCapturer()
    scheduler = CaptureScheduler(
        capturer=capturer,
        recognizer=StaticRecognizer(),
        settings=CaptureSettings(region=Rectangle(0, 0, 10, 10), interval_seconds=60.0),
    )

    scheduler.start()
    try:
        assert wait_until(lambda: len(created) >= 1)
        for _ in range(20):
            scheduler.update_interval(60.0)
    finally:
        scheduler.stop()

    assert wait_until(lambda: all(sct.closed for sct in created) and capturer._handles == [])
