# -*- coding: utf-8 -*-
"""
src/capcap/app.py

Core application controller for CapCap.

This module contains `CapCapApp`, which owns the capture settings, the
scheduler and its mss/EasyOCR collaborators, the system tray icon, the global
hotkey and the windows. Scheduler callbacks arrive on the capture worker
thread and are re-emitted as Qt signals so every widget update happens on the
GUI thread.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QObject, QSize, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QApplication, QFileDialog, QMenu, QSystemTrayIcon

from . import __version__
from .config import APP_NAME, Config, config as default_config, settings_from_config
from .core.errors import NoRegionSelected
from .core.scheduler import CaptureScheduler, SessionState, Status
from .core.screen_capture import ScreenCapturer
from .core.text_recognizer import TextRecognizer
from .gui.main_window import MainWindow
from .gui.region_overlay import RegionOverlay
from .gui.region_selector import RegionSelector
from .utils.clipboard_manager import copy_to_clipboard
from .utils.file_export import save_text
from .utils.hotkey_manager import HotkeyManager

logger = logging.getLogger(__name__)

ICON_IDLE = "#888888"
ICON_RUNNING = "#FF4444"
ICON_ERROR = "#FF8800"

# Delay before showing the overlay, so the selector has left the screen.
OVERLAY_SHOW_DELAY_MS = 100


def _create_icon(color: str, size: int = 22) -> QIcon:
    """Draws a simple circular tray icon in the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


class CapCapApp(QObject):
    """
    The main application controller. Wires the GUI to the capture scheduler.
    """
    # Cross-thread bridges: emitted from the capture worker, handled on the GUI thread.
    status_received = pyqtSignal(object)
    transcript_received = pyqtSignal(str)
    state_received = pyqtSignal(str, str)
    hotkey_pressed = pyqtSignal()

    def __init__(self, app: QApplication, cfg: Config = None):
        super().__init__()
        self.app = app
        self.cfg = cfg if cfg is not None else default_config

        self.settings = settings_from_config(self.cfg)
        self.capturer = ScreenCapturer()
        self.recognizer = TextRecognizer(
            languages=self.cfg.ocr_languages,
            gpu=self.cfg.ocr_gpu,
            upscale_factor=self.cfg.upscale_factor,
            min_confidence=self.cfg.min_confidence,
        )
        self.scheduler = CaptureScheduler(
            capturer=self.capturer,
            recognizer=self.recognizer,
            settings=self.settings,
            on_state_change=lambda f, t: self.state_received.emit(f.value, t.value),
            on_status=self.status_received.emit,
            on_transcript_changed=self.transcript_received.emit,
        )

        self.status_received.connect(self._on_status_ui)
        self.transcript_received.connect(self._on_transcript_ui)
        self.state_received.connect(self._on_state_change_ui)
        self.hotkey_pressed.connect(self.toggle_capture)

        self.region_selector = None
        self.overlay = RegionOverlay()
        self.overlay.region_moved.connect(self._on_region_moved)
        self.overlay.region_resized.connect(self._on_region_resized)

        self.window = MainWindow(title=f"{APP_NAME} {__version__}")
        self.window.set_interval(self.settings.interval_seconds)
        self.window.set_transparency(self.settings.overlay_transparency)
        self.window.select_area_requested.connect(self.select_area)
        self.window.toggle_capture_requested.connect(self.toggle_capture)
        self.window.clear_requested.connect(self.clear_text)
        self.window.copy_requested.connect(self.copy_text)
        self.window.save_requested.connect(self.save_text)
        self.window.interval_changed.connect(self.scheduler.update_interval)
        self.window.transparency_changed.connect(self._on_transparency_changed)

        self.setup_tray_icon()
        self.hotkey_manager = HotkeyManager(self.cfg.hotkey, self.hotkey_pressed.emit)
        if not self.hotkey_manager.start():
            self.window.set_status(f"Hotkey disabled: could not register '{self.cfg.hotkey}'", is_error=True)

        self.window.show()

    def setup_tray_icon(self):
        """Creates and configures the system tray icon and its menu."""
        self.tray_icon = QSystemTrayIcon(_create_icon(ICON_IDLE), self)
        self.tray_icon.setToolTip(f"{APP_NAME} - Ready")

        menu = QMenu()
        show_action = QAction("Show Window", menu)
        show_action.triggered.connect(self.show_window)
        menu.addAction(show_action)

        select_action = QAction("Select Area", menu)
        select_action.triggered.connect(self.select_area)
        menu.addAction(select_action)

        self.toggle_action = QAction(f"Start Capture ({self.cfg.hotkey})", menu)
        self.toggle_action.triggered.connect(self.toggle_capture)
        menu.addAction(self.toggle_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit_app)
        menu.addAction(quit_action)

        self._tray_menu = menu
        self.tray_icon.setContextMenu(menu)
        self.tray_icon.show()

    # --- User actions ---

    def show_window(self):
        self.window.showNormal()
        self.window.raise_()
        self.window.activateWindow()

    def select_area(self):
        if self.scheduler.is_running:
            self.window.set_status("Stop capture before selecting a new area.")
            return
        logger.debug("Initiating area selection...")
        self.window.set_status("Select capture area by dragging...")
        self.overlay.hide()
        self.region_selector = RegionSelector()
        self.region_selector.region_selected.connect(self._on_region_selected)
        self.region_selector.cancelled.connect(self._on_selection_cancelled)
        self.region_selector.show()

    def toggle_capture(self):
        if self.scheduler.is_running:
            self.scheduler.stop()
            return
        try:
            self.scheduler.start()
        except NoRegionSelected:
            # The scheduler has already reported the error status.
            self.show_window()

    def clear_text(self):
        logger.debug("Clear Text action triggered.")
        self.scheduler.clear()

    def copy_text(self):
        if copy_to_clipboard(self.scheduler.export_text()):
            self.window.set_status("Text copied to clipboard.")
        else:
            self.window.set_status("Error: Could not copy text.", is_error=True)

    def save_text(self):
        default_path = str(Path.home() / self.cfg.export_filename)
        path, _ = QFileDialog.getSaveFileName(self.window, "Save Captured Text", default_path,
                                              "Text Files (*.txt);;All Files (*)")
        if not path:
            self.window.set_status("Save cancelled.")
            return
        self.window.set_status(f"Saving to {Path(path).name}...")
        if save_text(path, self.scheduler.export_text()):
            self.window.set_status("Text saved successfully.")
        else:
            self.window.set_status("Error: Failed to save text.", is_error=True)

    # --- Region callbacks ---

    def _on_region_selected(self, region):
        self.region_selector = None
        self.settings.region = region
        self.window.set_status("Area selected. Ready to capture.")
        QTimer.singleShot(OVERLAY_SHOW_DELAY_MS, self._show_overlay)

    def _on_selection_cancelled(self):
        self.region_selector = None
        self.window.set_status("Area selection cancelled.")
        self._show_overlay()

    def _show_overlay(self):
        region = self.settings.region
        if region is not None:
            self.overlay.show_region(region, self.settings.overlay_transparency)

    def _on_region_moved(self, x: int, y: int):
        self.settings.move_region(x, y)

    def _on_region_resized(self, width: int, height: int):
        self.settings.resize_region(width, height)

    def _on_transparency_changed(self, value: float):
        self.settings.overlay_transparency = value
        self.overlay.set_opacity(self.settings.overlay_transparency)

    # --- Scheduler callbacks (GUI thread) ---

    def _on_status_ui(self, status: Status):
        self.window.set_status(status.message, is_error=status.is_error)
        if status.is_error:
            self.tray_icon.setIcon(_create_icon(ICON_ERROR))
        elif self.scheduler.is_running:
            self.tray_icon.setIcon(_create_icon(ICON_RUNNING))

    def _on_transcript_ui(self, text: str):
        self.window.set_transcript(text)

    def _on_state_change_ui(self, from_state: str, to_state: str):
        running = to_state == SessionState.RUNNING.value
        self.window.set_running(running)
        self.toggle_action.setText(
            f"{'Stop' if running else 'Start'} Capture ({self.cfg.hotkey})"
        )
        if running:
            self.tray_icon.setIcon(_create_icon(ICON_RUNNING))
            self.tray_icon.setToolTip(f"{APP_NAME} - Capturing...")
        elif to_state == SessionState.IDLE.value:
            if not self.scheduler.status.is_error:
                self.tray_icon.setIcon(_create_icon(ICON_IDLE))
            self.tray_icon.setToolTip(f"{APP_NAME} - Ready")

    # --- Lifecycle ---

    def quit_app(self):
        """Stops capture and all background threads, then quits."""
        logger.info(f"Quitting {APP_NAME}...")
        self.scheduler.stop()
        self.hotkey_manager.stop()
        self.capturer.close()
        self.overlay.close()
        self.tray_icon.hide()
        self.app.quit()
