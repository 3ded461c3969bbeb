# -*- coding: utf-8 -*-
"""
src/capcap/utils/file_export.py

Writes the transcript to a plain UTF-8 text file.

The file is written to a temporary sibling first and then moved into place,
so an interrupted save never leaves a half-written transcript behind.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def save_text(path: Union[str, Path], text: str) -> bool:
    """
    Atomically writes ``text`` to ``path``.

    Args:
        path: Destination file.
        text (str): The transcript to write.

    Returns:
        bool: True if the file was written, False otherwise.
    """
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
        tmp_name = None
        logger.info(f"Text saved to: {path}")
        return True
    except OSError as e:
        logger.error(f"Error saving text to {path}: {e}")
        return False
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
