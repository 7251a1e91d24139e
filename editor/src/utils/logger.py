"""Global logging and error handling utilities"""
import logging
import sys
import traceback

from PyQt5.QtWidgets import QApplication, QMessageBox

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_main_window = None


def configure_logging(verbose=False):
    """Configure root logging for the editor and the headless renderer.

    Only warnings and errors are shown unless verbose is set.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def set_main_window(window):
    """Set the main window reference for showing popups"""
    global _main_window
    _main_window = window


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with optional popup in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to show in popup (optional)
        title: Title for the popup dialog

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Shows popup with user message or exception string
        - Logs the full traceback
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    tb = traceback.format_exc()
    logging.getLogger(__name__).error("%s\n%s", user_message or e, tb)

    message = user_message if user_message else str(e)
    if _main_window is not None and QApplication.instance() is not None:
        QMessageBox.critical(_main_window, title, message)
    else:
        print(f"ERROR POPUP (no window): {title} - {message}", file=sys.stderr)

    raise e
