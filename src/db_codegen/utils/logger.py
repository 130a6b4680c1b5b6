"""
Logging configuration and utilities
"""
import logging
import logging.handlers
import json
from pathlib import Path
from typing import Any, Dict

# Attributes passed through ``extra=`` that the JSON output keeps
CONTEXT_FIELDS = ('template', 'table', 'path', 'language')


class JSONFormatter(logging.Formatter):
    """JSON log formatter, one object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'line': record.lineno
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = str(value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Setup logging configuration

    Args:
        config: Logging configuration dictionary (level, format, file,
            max_bytes, backup_count); without a file only the console
            handler is installed
    """
    level = getattr(logging, str(config.get('level') or 'INFO').upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if config.get('format') == 'json':
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    # Console output goes to stderr, stdout is left to the CLI messages
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.get('file'):
        log_file = Path(config['file'])
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.get('max_bytes', 10485760),
            backupCount=config.get('backup_count', 5)
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Database drivers are chatty at DEBUG
    logging.getLogger('mysql.connector').setLevel(logging.WARNING)

    logging.debug("Logging configured successfully")
