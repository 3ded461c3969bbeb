from __future__ import annotations

from pathlib import Path

from capcap.utils.file_export import save_text


def test_save_text_writes_utf8_and_preserves_newlines(tmp_path: Path) -> None:
    target = tmp_path / "out" / "transcript.txt"

    assert save_text(target, "first\n\nzweite Zeile äöü") is True

    assert target.read_bytes() == "first\n\nzweite Zeile äöü".encode("utf-8")
    assert [p.name for p in target.parent.iterdir()] == ["transcript.txt"]


def test_save_text_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "transcript.txt"
    target.write_text("old content that is longer", encoding="utf-8")

    assert save_text(str(target), "new") is True
    assert target.read_text(encoding="utf-8") == "new"


def test_save_text_reports_failure(tmp_path: Path) -> None:
    # A directory cannot be replaced by a file.
    target = tmp_path / "taken"
    target.mkdir()
    (target / "child").write_text("x", encoding="utf-8")

    assert save_text(target, "text") is False
    assert sorted(p.name for p in tmp_path.iterdir()) == ["taken"]
