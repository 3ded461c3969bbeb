# -*- coding: utf-8 -*-
"""
src/capcap/core/similarity.py

Decides how a freshly recognized string relates to the transcript so far.

OCR output for a static or slowly scrolling region jitters from frame to
frame (font hinting, partial redraws). Small deltas against the last line are
treated as in-place corrections; large deltas are genuinely new content.
The decision is a normalized Levenshtein distance compared to a threshold.

Everything in this module is pure and deterministic.
"""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List

# Fraction of edit distance over the longer length below which the new text
# replaces the last line instead of starting a new one.
DEFAULT_DEDUP_THRESHOLD = 0.10

LINE_SEPARATOR = "\n"


class ChangeKind(str, Enum):
    NO_CHANGE = "no_change"
    UPDATE_LAST_LINE = "update_last_line"
    ADD_NEW_LINE = "add_new_line"


@dataclass(frozen=True)
class ChangeResult:
    """The classifier's verdict. ``text`` is empty for NO_CHANGE."""
    kind: ChangeKind
    text: str = ""

    @property
    def is_mutation(self) -> bool:
        return self.kind is not ChangeKind.NO_CHANGE


NO_CHANGE = ChangeResult(ChangeKind.NO_CHANGE)


def _units(text: str) -> List[str]:
    # NFC folds combining sequences so "e" + U+0301 compares equal to "é".
    return list(unicodedata.normalize("NFC", text))


def levenshtein_distance(source: str, target: str) -> int:
    """
    Computes the classic Levenshtein edit distance between two strings.

    Uses the full (m+1) x (n+1) dynamic-programming table with unit costs
    for insertion, deletion and substitution.

    Args:
        source (str): The string to transform.
        target (str): The string to transform into.

    Returns:
        int: The minimum number of single-character edits.
    """
    s = _units(source)
    t = _units(target)
    m, n = len(s), len(t)

    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        table[i][0] = i
    for j in range(n + 1):
        table[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,         # deletion
                table[i][j - 1] + 1,         # insertion
                table[i - 1][j - 1] + cost,  # substitution
            )

    return table[m][n]


def last_non_empty_line(full_text: str) -> str:
    """
    Returns the last non-empty line of ``full_text``, trimmed.

    Empty segments are dropped before picking the last one. A last line made
    only of whitespace trims down to an empty string.
    """
    segments = [segment for segment in full_text.split(LINE_SEPARATOR) if segment]
    if not segments:
        return ""
    return segments[-1].strip()


def classify(previous_full_text: str, new_text: str,
             threshold: float = DEFAULT_DEDUP_THRESHOLD) -> ChangeResult:
    """
    Classifies newly recognized text against the accumulated transcript.

    Args:
        previous_full_text (str): The whole transcript so far.
        new_text (str): The text recognized in the latest capture.
        threshold (float): Difference ratio at or above which the text is
                           treated as a new line.

    Returns:
        ChangeResult: NO_CHANGE, UPDATE_LAST_LINE or ADD_NEW_LINE carrying
                      the trimmed new text.
    """
    trimmed = new_text.strip()
    if not trimmed:
        return NO_CHANGE

    last_line = last_non_empty_line(previous_full_text)
    if not last_line:
        return ChangeResult(ChangeKind.ADD_NEW_LINE, trimmed)

    if last_line == trimmed:
        return NO_CHANGE

    distance = levenshtein_distance(last_line, trimmed)
    max_len = max(len(_units(last_line)), len(_units(trimmed)))
    if max_len == 0:
        return NO_CHANGE

    diff_ratio = distance / max_len
    if diff_ratio < threshold:
        return ChangeResult(ChangeKind.UPDATE_LAST_LINE, trimmed)
    return ChangeResult(ChangeKind.ADD_NEW_LINE, trimmed)
