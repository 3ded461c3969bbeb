# -*- coding: utf-8 -*-
"""
The GUI Package for CapCap.

PyQt6 widgets for the presentation layer: the drag-to-select region picker,
the floating region frame and the main transcript window.
"""

from .main_window import MainWindow
from .region_overlay import RegionOverlay
from .region_selector import RegionSelector

__all__ = [
    "MainWindow",
    "RegionOverlay",
    "RegionSelector",
]
