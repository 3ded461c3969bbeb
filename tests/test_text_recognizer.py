from __future__ import annotations

import numpy as np
import pytest

from capcap.core import text_recognizer
from capcap.core.errors import AnalysisFailed, NoTextFound
from capcap.core.text_recognizer import TextRecognizer

BBOX = [[0, 0], [10, 0], [10, 10], [0, 10]]


class FakeReader:
    def __init__(self, results=None, error: Exception | None = None) -> None:
        self.results = results or []
        self.error = error
        self.images: list[np.ndarray] = []

    def readtext(self, image, detail=1, paragraph=False):
        self.images.append(image)
        if self.error is not None:
            raise self.error
        return self.results


def bgra_image(height: int = 12, width: int = 40) -> np.ndarray:
    return np.full((height, width, 4), 255, dtype=np.uint8)


def test_fragments_are_filtered_and_joined_on_one_line() -> None:
    reader = FakeReader([
        (BBOX, "Hello", 0.98),
        (BBOX, "  noise ", 0.05),
        (BBOX, "brave\nnew", 0.8),
        (BBOX, "   ", 0.99),
        (BBOX, "world", 0.3),
    ])
    recognizer = TextRecognizer(reader=reader, min_confidence=0.3)

    assert recognizer.recognize_text(bgra_image()) == "Hello brave new world"


def test_nothing_confident_raises_no_text_found() -> None:
    recognizer = TextRecognizer(reader=FakeReader([(BBOX, "blur", 0.1)]))

    with pytest.raises(NoTextFound):
        recognizer.recognize_text(bgra_image())


def test_reader_failure_raises_analysis_failed() -> None:
    error = RuntimeError("CUDA out of memory")
    recognizer = TextRecognizer(reader=FakeReader(error=error))

    with pytest.raises(AnalysisFailed) as excinfo:
        recognizer.recognize_text(bgra_image())

    assert excinfo.value.cause is error


def test_empty_image_raises_analysis_failed() -> None:
    reader = FakeReader([(BBOX, "x", 1.0)])
    recognizer = TextRecognizer(reader=reader)

    with pytest.raises(AnalysisFailed):
        recognizer.recognize_text(np.zeros((0, 0, 4), dtype=np.uint8))
    assert reader.images == []


def test_preprocess_outputs_upscaled_grayscale() -> None:
    recognizer = TextRecognizer(reader=FakeReader(), upscale_factor=2.0)

    prepared = recognizer.preprocess(bgra_image(height=12, width=40))

    assert prepared.shape == (24, 80)


def test_preprocess_without_upscaling_keeps_size() -> None:
    recognizer = TextRecognizer(reader=FakeReader(), upscale_factor=1.0)

    prepared = recognizer.preprocess(np.zeros((7, 9, 3), dtype=np.uint8))

    assert prepared.shape == (7, 9)


def test_reader_is_built_once_on_first_use(monkeypatch) -> None:
    built: list[tuple[list[str], bool]] = []
    reader = FakeReader([(BBOX, "ok", 0.9)])

    def factory(languages, gpu):
        built.append((list(languages), gpu))
        return reader

    monkeypatch.setattr(text_recognizer, "_create_easyocr_reader", factory)
    recognizer = TextRecognizer(languages=["en", "de"], gpu=False)

    assert recognizer.recognize_text(bgra_image()) == "ok"
    assert recognizer.recognize_text(bgra_image()) == "ok"
    assert built == [(["en", "de"], False)]


def test_reader_construction_failure_is_remembered(monkeypatch) -> None:
    attempts: list[int] = []

    def broken_factory(languages, gpu):
        attempts.append(1)
        raise ImportError("No module named 'easyocr'")

    monkeypatch.setattr(text_recognizer, "_create_easyocr_reader", broken_factory)
    recognizer = TextRecognizer()

    for _ in range(2):
        with pytest.raises(AnalysisFailed):
            recognizer.recognize_text(bgra_image())
    assert attempts == [1]
