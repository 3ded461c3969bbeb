from __future__ import annotations

import dataclasses

import pytest

from capcap.core.settings import MIN_INTERVAL_SECONDS, CaptureSettings, Rectangle


def test_rectangle_from_points_normalizes_drag_direction() -> None:
    assert Rectangle.from_points(50, 40, 10, 20) == Rectangle(10, 20, 40, 20)


def test_rectangle_emptiness_and_monitor_dict() -> None:
    assert Rectangle(0, 0, 0, 10).is_empty
    assert not Rectangle(0, 0, 1, 1).is_empty
    assert Rectangle(5, 6, 7, 8).to_monitor() == {"top": 6, "left": 5, "width": 7, "height": 8}


def test_rectangle_intersects() -> None:
    screen = Rectangle(0, 0, 1920, 1080)
    assert screen.intersects(Rectangle(100, 100, 10, 10))
    assert not screen.intersects(Rectangle(1920, 0, 10, 10))
    assert not screen.intersects(Rectangle(-50, -50, 10, 10))


def test_interval_is_floor_clamped_on_every_write() -> None:
    settings = CaptureSettings(interval_seconds=0.01)
    assert settings.interval_seconds == MIN_INTERVAL_SECONDS

    settings.interval_seconds = 2.5
    assert settings.interval_seconds == 2.5
    settings.interval_seconds = -1
    assert settings.interval_seconds == MIN_INTERVAL_SECONDS


def test_threshold_and_transparency_are_clamped_to_unit_range() -> None:
    settings = CaptureSettings(dedup_threshold=3.0, overlay_transparency=-0.5)
    assert settings.dedup_threshold == 1.0
    assert settings.overlay_transparency == 0.0

    settings.dedup_threshold = 0.25
    settings.overlay_transparency = 0.7
    assert settings.dedup_threshold == 0.25
    assert settings.overlay_transparency == 0.7


def test_snapshot_is_immutable_and_not_affected_by_later_writes() -> None:
    settings = CaptureSettings(region=Rectangle(0, 0, 10, 10), interval_seconds=1.0)
    snapshot = settings.snapshot()

    settings.region = Rectangle(5, 5, 20, 20)
    settings.interval_seconds = 3.0

    assert snapshot.region == Rectangle(0, 0, 10, 10)
    assert snapshot.interval_seconds == 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.interval_seconds = 9.0  # type: ignore[misc]


def test_move_and_resize_region() -> None:
    settings = CaptureSettings()
    assert settings.move_region(1, 2) is None
    assert settings.resize_region(3, 4) is None
    assert settings.region is None

    settings.region = Rectangle(10, 10, 100, 50)
    assert settings.move_region(20, 30) == Rectangle(20, 30, 100, 50)
    assert settings.resize_region(200, 80) == Rectangle(20, 30, 200, 80)
    assert settings.snapshot().has_region
