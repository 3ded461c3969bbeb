# -*- coding: utf-8 -*-
"""
src/capcap/gui/main_window.py

Defines the MainWindow widget: the transcript view and capture controls.

The window only renders state and forwards user actions as signals; the
application controller decides what they mean.
"""

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont, QTextCursor
from PyQt6.QtWidgets import (QDoubleSpinBox, QFormLayout, QHBoxLayout, QLabel, QPlainTextEdit,
                             QPushButton, QSlider, QVBoxLayout, QWidget)

from ..core.settings import MIN_INTERVAL_SECONDS

MAX_INTERVAL_SECONDS = 60.0
TRANSPARENCY_STEPS = 20  # slider positions, i.e. 0.05 per step


class MainWindow(QWidget):
    """
    The main CapCap window.
    """
    select_area_requested = pyqtSignal()
    toggle_capture_requested = pyqtSignal()
    clear_requested = pyqtSignal()
    copy_requested = pyqtSignal()
    save_requested = pyqtSignal()
    interval_changed = pyqtSignal(float)
    transparency_changed = pyqtSignal(float)

    def __init__(self, title: str = "CapCap", parent: QWidget = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.resize(480, 520)
        self._setup_ui()
        self.set_running(False)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        # Settings
        form = QFormLayout()
        self.interval_spin = QDoubleSpinBox()
        self.interval_spin.setRange(MIN_INTERVAL_SECONDS, MAX_INTERVAL_SECONDS)
        self.interval_spin.setSingleStep(0.1)
        self.interval_spin.setDecimals(1)
        self.interval_spin.setSuffix(" s")
        self.interval_spin.valueChanged.connect(self.interval_changed.emit)
        form.addRow("Capture interval:", self.interval_spin)

        self.transparency_slider = QSlider(Qt.Orientation.Horizontal)
        self.transparency_slider.setRange(0, TRANSPARENCY_STEPS)
        self.transparency_slider.valueChanged.connect(
            lambda value: self.transparency_changed.emit(value / TRANSPARENCY_STEPS)
        )
        form.addRow("Overlay opacity:", self.transparency_slider)
        layout.addLayout(form)

        # Transcript
        self.text_view = QPlainTextEdit()
        self.text_view.setReadOnly(True)
        self.text_view.setPlaceholderText("Captured text will appear here.")
        font = QFont()
        font.setPointSize(12)
        self.text_view.setFont(font)
        layout.addWidget(self.text_view, 1)

        # Status
        self.status_label = QLabel("Ready")
        self.status_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.status_label)

        # Actions
        buttons = QHBoxLayout()
        self.select_button = QPushButton("Select Area")
        self.select_button.clicked.connect(self.select_area_requested.emit)
        self.toggle_button = QPushButton("Start Capture")
        self.toggle_button.clicked.connect(self.toggle_capture_requested.emit)
        self.clear_button = QPushButton("Clear")
        self.clear_button.clicked.connect(self.clear_requested.emit)
        self.copy_button = QPushButton("Copy")
        self.copy_button.clicked.connect(self.copy_requested.emit)
        self.save_button = QPushButton("Save...")
        self.save_button.clicked.connect(self.save_requested.emit)
        for button in (self.select_button, self.toggle_button, self.clear_button,
                       self.copy_button, self.save_button):
            buttons.addWidget(button)
        layout.addLayout(buttons)

    # --- State rendering ---

    def set_transcript(self, text: str):
        self.text_view.setPlainText(text)
        self.text_view.moveCursor(QTextCursor.MoveOperation.End)

    def set_status(self, message: str, is_error: bool = False):
        self.status_label.setText(message)
        self.status_label.setStyleSheet("color: #D04040;" if is_error else "")

    def set_running(self, running: bool):
        self.toggle_button.setText("Stop Capture" if running else "Start Capture")
        self.select_button.setEnabled(not running)

    def set_interval(self, seconds: float):
        self.interval_spin.blockSignals(True)
        self.interval_spin.setValue(seconds)
        self.interval_spin.blockSignals(False)

    def set_transparency(self, value: float):
        self.transparency_slider.blockSignals(True)
        self.transparency_slider.setValue(round(value * TRANSPARENCY_STEPS))
        self.transparency_slider.blockSignals(False)
