# -*- coding: utf-8 -*-
"""
src/capcap/core/transcript.py

The accumulated, line-oriented transcript buffer.

Only the scheduler mutates a Transcript; the GUI reads ``full_text``.
"""

import logging
from typing import List

from .similarity import LINE_SEPARATOR, ChangeKind, ChangeResult

logger = logging.getLogger(__name__)


class Transcript:
    """
    Owns the multi-line captured text and applies classifier decisions to it.

    Empty lines are preserved when lines are split and re-joined, so replacing
    the last line never collapses structurally empty lines before it.
    """

    def __init__(self, text: str = ""):
        self._full_text = text

    @property
    def full_text(self) -> str:
        return self._full_text

    @property
    def lines(self) -> List[str]:
        """The transcript split on the line separator, empty lines kept."""
        if not self._full_text:
            return []
        return self._full_text.split(LINE_SEPARATOR)

    def is_empty(self) -> bool:
        return not self._full_text

    def append_line(self, text: str):
        if not self._full_text:
            self._full_text = text
        else:
            self._full_text = self._full_text + LINE_SEPARATOR + text

    def replace_last_line(self, text: str):
        lines = self._full_text.split(LINE_SEPARATOR)
        if lines:
            lines[-1] = text
            self._full_text = LINE_SEPARATOR.join(lines)
        else:
            self._full_text = text

    def clear(self):
        self._full_text = ""

    def apply(self, result: ChangeResult) -> bool:
        """
        Applies a classifier result.

        Returns:
            bool: True if the transcript text changed.
        """
        if result.kind is ChangeKind.UPDATE_LAST_LINE:
            logger.debug("Replacing last line.")
            self.replace_last_line(result.text)
            return True
        if result.kind is ChangeKind.ADD_NEW_LINE:
            logger.debug("Adding new line.")
            self.append_line(result.text)
            return True
        return False

    def export_text(self) -> str:
        """The full transcript, for writing to a file by the caller."""
        return self._full_text

    def __len__(self):
        return len(self.lines)
