import logging
import sys

from PyQt6.QtWidgets import QApplication

# The application controller lives in src/capcap/app.py.
try:
    from src.capcap.app import CapCapApp
    from src.capcap.config import config
except ImportError as e:
    print("Error: Could not import the main application class 'CapCapApp'.")
    print("Please ensure the project structure is correct (e.g., src/capcap/app.py exists).")
    print(f"Details: {e}")
    sys.exit(1)


def main():
    """
    The main entry point for the CapCap application.

    Configures logging from config.ini, creates the QApplication and the
    CapCapApp controller, and runs the Qt event loop.
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = QApplication(sys.argv)

    # Closing the main window only hides it; the tray icon's Quit action exits.
    app.setQuitOnLastWindowClosed(False)

    cap_cap_app = CapCapApp(app)

    sys.exit(app.exec())


if __name__ == '__main__':
    main()
