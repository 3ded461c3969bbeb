# -*- coding: utf-8 -*-
"""
src/capcap/config.py

Module for handling application configuration.

This module defines default settings for CapCap, such as the global hotkey,
the capture interval and the OCR parameters. It loads user-defined settings
from a configuration file (config.ini), creating one with default values on
the first run.
"""

import configparser
import logging
import platform
from pathlib import Path
from typing import List, Optional

from .core.settings import CaptureSettings

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "CapCap"
DEFAULT_CONFIG_FILENAME = "config.ini"
DEFAULT_HOTKEY = "<ctrl>+<alt>+c"
DEFAULT_EXPORT_FILENAME = "captured_text.txt"


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/CapCap
    - macOS: ~/Library/Application Support/CapCap
    - Linux: ~/.config/CapCap

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":  # macOS
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:  # Linux and other Unix-like
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.

    Args:
        app_dir (Path, optional): Directory holding config.ini. Defaults to
                                  the per-OS application directory.
    """

    def __init__(self, app_dir: Optional[Path] = None):
        self.parser = configparser.ConfigParser()
        self.app_dir = app_dir if app_dir is not None else get_app_dir()
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["General"] = {
            "hotkey": DEFAULT_HOTKEY,
            "log_level": "INFO",
        }
        self.parser["Capture"] = {
            "interval": "1.0",
            "dedup_threshold": "0.10",
            "overlay_transparency": "0.7",
        }
        self.parser["OCR"] = {
            "languages": "en",
            "gpu": "False",
            "upscale_factor": "2.0",
            "min_confidence": "0.3",
        }
        self.parser["Export"] = {
            "default_filename": DEFAULT_EXPORT_FILENAME,
        }

    def _load_from_file(self):
        """
        Loads settings from the config.ini file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self._save_defaults()
            return
        try:
            self.parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            # A malformed file must not keep the app from starting.
            logger.error(f"Could not parse config file {self.config_file_path}: {e}. Using defaults.")
            self._load_defaults()

    def _save_defaults(self):
        """Saves the current (default) configuration to the config file."""
        try:
            with open(self.config_file_path, 'w', encoding="utf-8") as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except IOError as e:
            logger.error(f"Could not write to config file at {self.config_file_path}: {e}")

    def _getfloat(self, section: str, option: str, fallback: float) -> float:
        try:
            return self.parser.getfloat(section, option, fallback=fallback)
        except ValueError:
            logger.warning(f"Invalid value for [{section}] {option}; using {fallback}.")
            return fallback

    def _getboolean(self, section: str, option: str, fallback: bool) -> bool:
        try:
            return self.parser.getboolean(section, option, fallback=fallback)
        except ValueError:
            logger.warning(f"Invalid value for [{section}] {option}; using {fallback}.")
            return fallback

    # --- Properties to access settings easily and with correct types ---

    @property
    def hotkey(self) -> str:
        """The global hotkey combination that toggles capture."""
        return self.parser.get("General", "hotkey", fallback=DEFAULT_HOTKEY)

    @property
    def log_level(self) -> str:
        return self.parser.get("General", "log_level", fallback="INFO").upper()

    @property
    def capture_interval(self) -> float:
        """Seconds between capture ticks."""
        return self._getfloat("Capture", "interval", 1.0)

    @property
    def dedup_threshold(self) -> float:
        """Difference ratio below which new text replaces the last line."""
        return self._getfloat("Capture", "dedup_threshold", 0.10)

    @property
    def overlay_transparency(self) -> float:
        """Opacity of the region overlay (0.0 transparent, 1.0 opaque)."""
        return self._getfloat("Capture", "overlay_transparency", 0.7)

    @property
    def ocr_languages(self) -> List[str]:
        raw = self.parser.get("OCR", "languages", fallback="en")
        languages = [lang.strip() for lang in raw.split(",") if lang.strip()]
        return languages or ["en"]

    @property
    def ocr_gpu(self) -> bool:
        return self._getboolean("OCR", "gpu", False)

    @property
    def upscale_factor(self) -> float:
        """The factor by which to upscale the captured image for better OCR."""
        return self._getfloat("OCR", "upscale_factor", 2.0)

    @property
    def min_confidence(self) -> float:
        """The minimum EasyOCR confidence (0-1) for a fragment to be kept."""
        return self._getfloat("OCR", "min_confidence", 0.3)

    @property
    def export_filename(self) -> str:
        return self.parser.get("Export", "default_filename", fallback=DEFAULT_EXPORT_FILENAME)


def settings_from_config(cfg: Config) -> CaptureSettings:
    """Builds the initial capture settings from the loaded configuration."""
    return CaptureSettings(
        interval_seconds=cfg.capture_interval,
        dedup_threshold=cfg.dedup_threshold,
        overlay_transparency=cfg.overlay_transparency,
    )


# --- Singleton Instance ---
# Other modules can import this instance directly:
# from capcap.config import config
config = Config()
