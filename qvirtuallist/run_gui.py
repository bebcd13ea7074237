import logging
import os
import sys
import traceback
import warnings
from datetime import datetime

from PySide6.QtCore import qInstallMessageHandler
from PySide6.QtWidgets import QApplication

from qvirtuallist.utils.settings import settings
from qvirtuallist.widgets.main_window import MainWindow

CRASH_LOG_PATH = os.path.abspath('qvirtuallist_crash.log')


def qt_message_handler(msg_type, msg_context, msg_string):
    """Suppress Qt's QPainter debug messages."""
    if "QPainter" in msg_string or "Paint device returned engine" in msg_string:
        return
    if os.getenv('QVIRTUALLIST_ENVIRONMENT') == 'development':
        print(f"[Qt] {msg_string}")


def _append_crash_log(title: str, exc_info=None):
    """Append a timestamped crash entry to the crash log."""
    ts = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"{ts} | {title}\n")
            f.write("=" * 80 + "\n")
            if exc_info is None:
                f.write(traceback.format_exc())
            else:
                f.writelines(traceback.format_exception(*exc_info))
            f.write("\n")
    except OSError as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def install_crash_handlers():
    def _unhandled_exception(exc_type, exc_value, exc_traceback):
        _append_crash_log("UNHANDLED EXCEPTION", (exc_type, exc_value, exc_traceback))
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = _unhandled_exception


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('QVIRTUALLIST_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        settings.setValue('minimal_trace_logs', False)
        logging.basicConfig(level=logging.DEBUG)
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


def run_gui():
    install_crash_handlers()
    qInstallMessageHandler(qt_message_handler)
    app = QApplication([])
    # The application name is shown in the taskbar.
    app.setApplicationName('qvirtuallist')
    # The application display name is shown in the title bar.
    app.setApplicationDisplayName('Virtual List Demo')
    app.setStyle('Fusion')

    main_window = MainWindow(app)
    main_window.show()
    return int(app.exec())
