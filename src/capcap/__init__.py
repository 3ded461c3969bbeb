# -*- coding: utf-8 -*-
"""
CapCap Application Package.

CapCap watches a user-selected screen region, recognizes its text at a fixed
interval and keeps a deduplicated, incrementally updated transcript.

The GUI-free pipeline lives in `capcap.core`; the PyQt6 application is
`capcap.app.CapCapApp`.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
