import logging
import logging.handlers
import os

LOG_FORMAT = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'


def setup_logging(app):
    """Sets up centralized logging for the application."""
    level = logging.DEBUG if app.debug else logging.INFO
    logging.getLogger('core').setLevel(level)
    logging.getLogger('handlers').setLevel(level)
    app.logger.setLevel(level)

    if not app.config.get('LOG_TO_FILE', True):
        return

    log_dir = app.config.get('LOG_DIR', 'logs')
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    log_format = logging.Formatter(LOG_FORMAT)

    # File handler for all logs
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=10*1024*1024, # 10MB
        backupCount=10
    )
    file_handler.setFormatter(log_format)
    file_handler.setLevel(logging.INFO)

    # Error-specific log file
    error_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, 'error.log'),
        maxBytes=10*1024*1024,
        backupCount=10
    )
    error_handler.setFormatter(log_format)
    error_handler.setLevel(logging.ERROR)

    # The error stage logs through module loggers under core.* and handlers.*
    for name in ('core', 'handlers'):
        logger = logging.getLogger(name)
        logger.addHandler(file_handler)
        logger.addHandler(error_handler)
    app.logger.addHandler(file_handler)
    app.logger.addHandler(error_handler)

    app.logger.info("Logging system initialized")


def request_line(request) -> str:
    """'METHOD URL' prefix used by every error-level entry of the error stage."""
    return f"{request.method} {request.original_url}"
