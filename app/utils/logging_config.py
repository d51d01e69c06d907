"""
Logging setup: console always, rotating files outside debug/testing.
"""
import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'
FILE_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(getattr(h, '_clinic_console', False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._clinic_console = True
        root.addHandler(console)

    if app.debug or app.testing:
        return

    if any(getattr(h, '_clinic_file', False) for h in root.handlers):
        return

    log_dir = app.config.get('LOG_DIR', 'logs')
    if not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=10240000,
        backupCount=10
    )
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    file_handler.setLevel(level)

    error_handler = RotatingFileHandler(
        os.path.join(log_dir, 'error.log'),
        maxBytes=10240000,
        backupCount=10
    )
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    error_handler.setLevel(logging.ERROR)

    file_handler._clinic_file = True
    error_handler._clinic_file = True
    root.addHandler(file_handler)
    root.addHandler(error_handler)
    app.logger.info('Application startup')
