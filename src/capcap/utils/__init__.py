# -*- coding: utf-8 -*-
"""
The Utilities Package for CapCap.

Helpers for the presentation layer: clipboard copy, atomic text export and
the global hotkey listener. Modules are imported directly, e.g.
``from capcap.utils.file_export import save_text``, so that importing the
package does not require a keyboard backend.
"""
