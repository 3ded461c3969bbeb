# -*- coding: utf-8 -*-
"""
src/capcap/utils/clipboard_manager.py

Copies the transcript to the system clipboard with 'pyperclip'.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Puts the whole transcript on the system clipboard.

    Args:
        text (str): The transcript. Nothing is copied when it is empty.

    Returns:
        bool: Whether the clipboard now holds ``text``.
    """
    if not text:
        logger.debug("Nothing to copy: transcript is empty.")
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        # pyperclip found no copy mechanism (xclip/xsel/wl-clipboard on Linux).
        logger.error(f"Clipboard unavailable, transcript not copied: {e}")
        return False
    logger.info(f"Copied {len(text.splitlines())} line(s) to clipboard.")
    return True
