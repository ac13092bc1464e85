"""
Logging Configuration Module
Centralized logging setup for the text style renderer
"""
import os
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

# Log directory (relative to backend or absolute for production)
LOG_DIR = os.getenv('LOG_DIR', os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs'))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = (
    '%(asctime)s | %(levelname)-8s | %(name)-22s | %(request_id)-16s | %(stage)-9s | %(message)s'
)
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

APP_LOGGER = 'textstyle'


class RenderContextFilter(logging.Filter):
    """Fills in request_id and stage on records logged without render context"""
    def filter(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = 'system'
        if not hasattr(record, 'stage'):
            record.stage = '-'
        return True


class RequestAdapter(logging.LoggerAdapter):
    """Adapter that tags records with the preset being rendered and the pipeline stage"""
    def process(self, msg, kwargs):
        extra = kwargs.setdefault('extra', {})
        extra['request_id'] = self.extra.get('request_id', 'system')
        extra['stage'] = self.extra.get('stage') or '-'
        return msg, kwargs

    def for_stage(self, stage: str) -> 'RequestAdapter':
        """Same logger and request_id, tagged with another stage."""
        return RequestAdapter(self.logger, dict(self.extra, stage=stage))


_initialized = False


def setup_logging(app_name: str = APP_LOGGER, log_to_file: bool = True) -> logging.Logger:
    """
    Set up application logging with file rotation.

    Args:
        app_name: Base name for log files
        log_to_file: Write a rotating log file in LOG_DIR besides the console

    Returns:
        Root logger for the application
    """
    global _initialized

    if _initialized:
        return logging.getLogger(app_name)

    logger = logging.getLogger(app_name)
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if log_to_file:
        Path(LOG_DIR).mkdir(parents=True, exist_ok=True)

        # File handler with 7-day rotation (midnight rotation)
        log_file = os.path.join(LOG_DIR, f'{app_name}.log')
        file_handler = TimedRotatingFileHandler(
            filename=log_file,
            when='midnight',
            interval=1,
            backupCount=7,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(RenderContextFilter())
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(RenderContextFilter())
    logger.addHandler(console_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    _initialized = True
    logger.info(f"Logging initialized: level={LOG_LEVEL}, dir={LOG_DIR if log_to_file else '-'}")

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Args:
        module_name: Name of the module (e.g., 'layout', 'fonts', 'renderer')

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(f'{APP_LOGGER}.{module_name}')


def get_request_logger(module_name: str, request_id: str, stage: Optional[str] = None) -> RequestAdapter:
    """
    Get a logger adapter tagged with the render it belongs to.

    Args:
        module_name: Name of the module
        request_id: Preset name (or 'adhoc' / 'batch') being rendered
        stage: Pipeline stage ('normalize', 'layout', 'composite', 'encode')

    Returns:
        RequestAdapter with request_id and stage injected
    """
    logger = get_logger(module_name)
    return RequestAdapter(logger, {'request_id': request_id, 'stage': stage})
