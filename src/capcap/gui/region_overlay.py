# -*- coding: utf-8 -*-
"""
src/capcap/gui/region_overlay.py

A floating frame that marks the capture region on screen.

The frame sits just outside the region so its border never ends up in the
captured pixels. Dragging the frame moves the region; the size grip in the
bottom-right corner resizes it. Both report back in global coordinates of the
region itself, not of the frame.
"""

import logging

from PyQt6.QtCore import QPoint, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QHBoxLayout, QSizeGrip, QVBoxLayout, QWidget

from ..core.settings import Rectangle

logger = logging.getLogger(__name__)

BORDER_WIDTH = 3
MIN_REGION_SIZE = 20


class RegionOverlay(QWidget):
    """Frameless, always-on-top, draggable and resizable region marker."""
    region_moved = pyqtSignal(int, int)      # new region x, y
    region_resized = pyqtSignal(int, int)    # new region width, height

    def __init__(self, parent: QWidget = None):
        super().__init__(parent)
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setMinimumSize(MIN_REGION_SIZE + 2 * BORDER_WIDTH, MIN_REGION_SIZE + 2 * BORDER_WIDTH)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addStretch(1)
        grip_row = QHBoxLayout()
        grip_row.addStretch(1)
        grip_row.addWidget(QSizeGrip(self), 0, Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignRight)
        layout.addLayout(grip_row)

        self._drag_offset = None
        # Suppresses move/resize signals while geometry is set programmatically.
        self._syncing = False

    def show_region(self, region: Rectangle, opacity: float):
        """Shows (or repositions) the frame around ``region``."""
        self._syncing = True
        try:
            self.setGeometry(
                region.x - BORDER_WIDTH,
                region.y - BORDER_WIDTH,
                region.width + 2 * BORDER_WIDTH,
                region.height + 2 * BORDER_WIDTH,
            )
            self.setWindowOpacity(opacity)
        finally:
            self._syncing = False
        self.show()
        self.raise_()
        logger.debug(f"Overlay shown for region {region} at opacity {opacity:.2f}")

    def set_opacity(self, opacity: float):
        self.setWindowOpacity(opacity)

    def paintEvent(self, event):
        painter = QPainter(self)
        # Nearly invisible fill so the frame still receives mouse events.
        painter.fillRect(self.rect(), QColor(0, 0, 0, 1))
        pen = QPen(QColor(50, 150, 255), BORDER_WIDTH)
        pen.setJoinStyle(Qt.PenJoinStyle.MiterJoin)
        painter.setPen(pen)
        half = BORDER_WIDTH // 2
        painter.drawRect(self.rect().adjusted(half, half, -half - 1, -half - 1))

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()

    def mouseMoveEvent(self, event):
        if self._drag_offset is not None:
            self.move(event.globalPosition().toPoint() - self._drag_offset)

    def mouseReleaseEvent(self, event):
        self._drag_offset = None

    def moveEvent(self, event):
        super().moveEvent(event)
        if not self._syncing:
            origin = self.pos() + QPoint(BORDER_WIDTH, BORDER_WIDTH)
            self.region_moved.emit(origin.x(), origin.y())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if not self._syncing:
            self.region_resized.emit(
                max(1, self.width() - 2 * BORDER_WIDTH),
                max(1, self.height() - 2 * BORDER_WIDTH),
            )
