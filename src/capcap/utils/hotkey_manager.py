# -*- coding: utf-8 -*-
"""
src/capcap/utils/hotkey_manager.py

Listens for the global start/stop hotkey with 'pynput'.

The listener runs on its own thread; the callback is invoked there, so the
GUI should forward it to the Qt thread.
"""

import logging
from typing import Callable, Optional

from pynput import keyboard

logger = logging.getLogger(__name__)


class HotkeyManager:
    """
    Manages a global hotkey listener in a separate thread.

    Attributes:
        hotkey_str (str): The hotkey in pynput format (e.g. '<ctrl>+<alt>+c').
        callback (Callable[[], None]): Called when the hotkey is pressed.
        listener (Optional[keyboard.GlobalHotKeys]): The running listener.
    """

    def __init__(self, hotkey_str: str, callback: Callable[[], None]):
        self.hotkey_str = hotkey_str
        self.callback = callback
        self.listener: Optional[keyboard.GlobalHotKeys] = None

    def _on_activate(self):
        logger.debug(f"Hotkey '{self.hotkey_str}' activated.")
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Error executing hotkey callback: {e}", exc_info=True)

    def start(self) -> bool:
        """
        Starts the listener thread, replacing any running one.

        Returns:
            bool: False if the hotkey string is invalid or the platform
                  refused the listener.
        """
        if self.listener and self.listener.is_alive():
            self.stop()

        try:
            self.listener = keyboard.GlobalHotKeys({self.hotkey_str: self._on_activate})
            self.listener.start()
            logger.info(f"Global hotkey listener started for '{self.hotkey_str}'.")
            return True
        except Exception as e:
            # pynput raises ValueError for bad hotkey strings.
            logger.error(f"Failed to start hotkey listener for '{self.hotkey_str}': {e}", exc_info=True)
            self.listener = None
            return False

    def stop(self):
        if self.listener and self.listener.is_alive():
            logger.info("Stopping global hotkey listener.")
            self.listener.stop()
        self.listener = None
