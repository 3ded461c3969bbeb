from __future__ import annotations

import pyperclip

from capcap.utils import clipboard_manager
from capcap.utils.clipboard_manager import copy_to_clipboard


def test_copy_passes_text_to_pyperclip(monkeypatch) -> None:
    copied: list[str] = []
    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)

    assert copy_to_clipboard("line one\nline two") is True
    assert copied == ["line one\nline two"]


def test_empty_transcript_is_not_copied(monkeypatch) -> None:
    copied: list[str] = []
    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)

    assert copy_to_clipboard("") is False
    assert copied == []


def test_missing_clipboard_mechanism_returns_false(monkeypatch) -> None:
    def no_clipboard(text: str) -> None:
        raise pyperclip.PyperclipException("could not find a copy/paste mechanism")

    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", no_clipboard)

    assert copy_to_clipboard("text") is False
