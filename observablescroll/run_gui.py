import logging
import os
import sys
import traceback
import warnings
from datetime import datetime

from PySide6.QtCore import qInstallMessageHandler
from PySide6.QtWidgets import QApplication, QMessageBox

from observablescroll.utils.settings import settings
from observablescroll.widgets.main_window import MainWindow


def qt_message_handler(msg_type, msg_context, msg_string):
    """Suppress Qt's QPainter debug messages."""
    if "QPainter" in msg_string or "Paint device returned engine" in msg_string:
        return

qInstallMessageHandler(qt_message_handler)

CRASH_LOG_PATH = os.path.abspath('observablescroll_crash.log')


def write_crash_log(exception: Exception):
    """Append the traceback of an exception that ended the app."""
    ts = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write(f"\n{ts} | {type(exception).__name__}\n")
            f.writelines(traceback.format_exception(exception))
    except OSError as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
        return
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('OBSERVABLESCROLL_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        logging.basicConfig(level=logging.DEBUG)
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


def run_gui():
    app = QApplication([])
    # The application name is shown in the taskbar.
    app.setApplicationName('Observable Scroll')
    app.setApplicationDisplayName('Observable Scroll')
    app.setStyle('Fusion')

    main_window = MainWindow(app)
    main_window.show()
    exit_code = int(app.exec())
    settings.sync()
    return exit_code


def main():
    # Suppress all warnings when not in a development environment.
    suppress_warnings()
    try:
        sys.exit(run_gui())
    except Exception as exception:
        write_crash_log(exception)
        error_message_box = QMessageBox()
        error_message_box.setWindowTitle('Error')
        error_message_box.setIcon(QMessageBox.Icon.Critical)
        error_message_box.setText(str(exception))
        error_message_box.setDetailedText(traceback.format_exc())
        error_message_box.exec()
        sys.exit(1)


if __name__ == '__main__':
    main()
