# -*- coding: utf-8 -*-
"""
src/capcap/core/text_recognizer.py

Turns a captured screen image into a single line of text with EasyOCR.

The image from mss is BGRA. It is converted to BGR, upscaled (small UI text
recognizes much better at 2x) and converted to grayscale before being handed
to the OCR engine. Recognized fragments below the confidence threshold are
dropped and the rest are joined with single spaces, so the transcript never
receives embedded newlines from one capture.
"""

import logging
import threading
from typing import Any, List, Optional, Sequence

import cv2
import numpy as np

from .errors import AnalysisFailed, NoTextFound

logger = logging.getLogger(__name__)

# --- Module-level defaults ---
DEFAULT_LANGUAGES = ("en",)
DEFAULT_UPSCALE_FACTOR = 2.0
DEFAULT_MIN_CONFIDENCE = 0.3


def _create_easyocr_reader(languages: Sequence[str], gpu: bool):
    # EasyOCR pulls in torch; import it only when a reader is first needed.
    import easyocr

    return easyocr.Reader(list(languages), gpu=gpu)


class TextRecognizer:
    """
    Recognizes text in captured images.

    The EasyOCR model is loaded on first use, on the capture worker thread,
    and then reused for every tick.

    Args:
        languages (Sequence[str]): EasyOCR language codes.
        gpu (bool): Whether EasyOCR may use CUDA.
        upscale_factor (float): Resize factor applied before OCR.
        min_confidence (float): Fragments below this confidence are discarded.
        reader: An object with EasyOCR's ``readtext`` signature. Mostly for
                tests; when omitted an EasyOCR reader is built lazily.
    """

    def __init__(self, languages: Sequence[str] = DEFAULT_LANGUAGES, gpu: bool = False,
                 upscale_factor: float = DEFAULT_UPSCALE_FACTOR,
                 min_confidence: float = DEFAULT_MIN_CONFIDENCE,
                 reader: Optional[Any] = None):
        self.languages = list(languages) or list(DEFAULT_LANGUAGES)
        self.gpu = gpu
        self.upscale_factor = max(1.0, float(upscale_factor))
        self.min_confidence = min_confidence
        self._reader = reader
        self._reader_error: Optional[Exception] = None
        self._reader_lock = threading.Lock()

    def _get_reader(self):
        with self._reader_lock:
            if self._reader is None and self._reader_error is None:
                logger.info(f"Initializing EasyOCR Reader for languages: {self.languages}...")
                try:
                    self._reader = _create_easyocr_reader(self.languages, self.gpu)
                    logger.info("EasyOCR Reader initialized successfully.")
                except Exception as e:
                    logger.critical(f"Failed to initialize EasyOCR Reader: {e}")
                    self._reader_error = e
            if self._reader is None:
                raise AnalysisFailed(self._reader_error, "OCR engine is not available")
            return self._reader

    def preprocess(self, image: np.ndarray) -> np.ndarray:
        """
        Prepares a raw BGRA capture for OCR.

        Returns:
            np.ndarray: An upscaled single-channel grayscale image.
        """
        if image.ndim == 3 and image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        if self.upscale_factor != 1.0:
            h, w = image.shape[:2]
            image = cv2.resize(
                image,
                (int(w * self.upscale_factor), int(h * self.upscale_factor)),
                interpolation=cv2.INTER_CUBIC,
            )
        return image

    def recognize_text(self, image: np.ndarray) -> str:
        """
        Recognizes the text in a captured image.

        Args:
            image (np.ndarray): Raw capture from mss (BGRA) or any BGR /
                                grayscale image.

        Returns:
            str: The recognized fragments joined by single spaces.

        Raises:
            NoTextFound: If nothing was recognized with enough confidence.
            AnalysisFailed: If preprocessing or the OCR engine failed.
        """
        if image is None or getattr(image, "size", 0) == 0:
            raise AnalysisFailed(message="Cannot analyze an empty image")

        reader = self._get_reader()
        try:
            prepared = self.preprocess(image)
            ocr_results = reader.readtext(prepared, detail=1, paragraph=False)
        except Exception as e:
            logger.error(f"An error occurred during OCR processing: {e}")
            raise AnalysisFailed(e) from e

        fragments: List[str] = []
        for (_bbox, text, conf) in ocr_results:
            if conf >= self.min_confidence and text.strip():
                fragments.append(text.strip())
            else:
                logger.debug(f"Rejected fragment: '{text}' with confidence {conf:.2f}")

        if not fragments:
            raise NoTextFound()

        transcript = " ".join(" ".join(fragments).split())
        logger.debug(f"Recognized {len(fragments)} fragment(s): '{transcript}'")
        return transcript
