"""
Centralized Logging Configuration
Console plus rotating file output for the workflow service
"""
import logging
import logging.handlers
from pathlib import Path

# Marks handlers installed here so a second create_app() replaces them
HANDLER_MARKER = '_premier_handler'

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ('werkzeug', 'sqlalchemy.engine', 'alembic.runtime.migration')


def _install(root_logger, handler, level, formatter):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, HANDLER_MARKER, True)
    root_logger.addHandler(handler)


def setup_logging(app):
    """
    Configure the root logger from LOG_LEVEL, LOG_FORMAT, LOG_DIR and LOG_FILE

    Args:
        app: Flask application instance

    Returns:
        The root logger
    """
    log_level = getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO)
    formatter = logging.Formatter(app.config['LOG_FORMAT'])

    log_dir = Path(app.config.get('LOG_DIR', 'logs'))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / app.config['LOG_FILE']

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    _install(root_logger, logging.StreamHandler(), log_level, formatter)
    _install(
        root_logger,
        logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        ),
        log_level,
        formatter,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.info(f"Logging initialized at {logging.getLevelName(log_level)} level ({log_path})")

    return root_logger
