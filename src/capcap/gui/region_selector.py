# -*- coding: utf-8 -*-
"""
src/capcap/gui/region_selector.py

Defines the RegionSelector widget used to choose the capture area.

A borderless, semi-transparent window covers the whole virtual desktop. The
user drags a rectangle with the left mouse button; on release the selection
is emitted in global screen coordinates and the widget closes. Escape
cancels.
"""

import logging

from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QCursor, QPainter, QPen
from PyQt6.QtWidgets import QApplication, QWidget

from ..core.settings import Rectangle

logger = logging.getLogger(__name__)

# Selections this small are treated as accidental clicks.
MIN_SELECTION_SIZE = 5


class RegionSelector(QWidget):
    """
    A full-screen, semi-transparent overlay for selecting a screen region.
    """
    # Emits a capcap.core.settings.Rectangle in global coordinates.
    region_selected = pyqtSignal(object)
    cancelled = pyqtSignal()

    def __init__(self):
        super().__init__()

        screen = QApplication.primaryScreen()
        if not screen:
            logger.error("No primary screen found. Falling back to a default geometry.")
            self.setGeometry(0, 0, 800, 600)
        else:
            self.setGeometry(screen.virtualGeometry())

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool  # Prevents it from appearing in the taskbar
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))

        self.begin = QPoint()
        self.end = QPoint()
        self.is_selecting = False
        self._finished = False

    def showEvent(self, event):
        super().showEvent(event)
        self.activateWindow()
        self.raise_()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QBrush(QColor(0, 0, 0, 120)))

        if self.is_selecting:
            selection_rect = QRect(self.begin, self.end).normalized()

            # Punch the selection out of the dimmed background.
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
            painter.fillRect(selection_rect, Qt.BrushStyle.SolidPattern)
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)

            painter.setPen(QPen(QColor(50, 150, 255, 220), 1, Qt.PenStyle.SolidLine))
            painter.drawRect(selection_rect)

            painter.setPen(QPen(Qt.GlobalColor.white))
            painter.drawText(
                selection_rect.bottomLeft() + QPoint(4, 16),
                f"{selection_rect.width()} x {selection_rect.height()}",
            )

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.begin = event.position().toPoint()
            self.end = self.begin
            self.is_selecting = True
            self.update()

    def mouseMoveEvent(self, event):
        if self.is_selecting:
            self.end = event.position().toPoint()
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton or not self.is_selecting:
            return
        self.is_selecting = False
        self.hide()

        selection_rect = QRect(self.begin, self.end).normalized()
        if selection_rect.width() < MIN_SELECTION_SIZE or selection_rect.height() < MIN_SELECTION_SIZE:
            logger.warning("Selection was too small, ignoring it.")
            self._finish(None)
            return

        top_left = self.mapToGlobal(selection_rect.topLeft())
        region = Rectangle(top_left.x(), top_left.y(), selection_rect.width(), selection_rect.height())
        logger.info(f"Region selected: {region}")
        self._finish(region)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            logger.info("Region selection cancelled by user (Escape key).")
            self.is_selecting = False
            self._finish(None)

    def closeEvent(self, event):
        if not self._finished:
            self._finished = True
            self.cancelled.emit()
        super().closeEvent(event)

    def _finish(self, region):
        self._finished = True
        if region is None:
            self.cancelled.emit()
        else:
            self.region_selected.emit(region)
        self.close()
