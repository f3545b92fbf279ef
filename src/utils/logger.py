"""
Logging Module for the Proof Ingestor

Provides logging with:
- Plain text console output for operators (pm2 / systemd capture stdout)
- Rotating file handler for unattended 24/7 operation
- Optional JSON formatting of the file sink for log aggregation

Usage:
    logger = get_logger(__name__)
    logger.info("Tx sent", extra={'tx_hash': '0xabc', 'pairs': 12})
"""

import logging
import logging.handlers
import os
import sys
import json
from datetime import datetime, timezone
from typing import Optional

from config.constants import (
    LOG_LEVEL,
    LOG_FILE_PATH,
    MAX_LOG_FILE_SIZE,
    LOG_BACKUP_COUNT,
    STRUCTURED_LOGGING,
)


# Attributes every LogRecord carries; anything else came in through extra={...}
_RESERVED_RECORD_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName',
})


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line_number': record.lineno,
            'process_id': record.process,
        }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS:
                continue
            if isinstance(value, (str, int, float, bool, type(None), dict, list)):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class PlainTextFormatter(logging.Formatter):
    """Simple text formatter for readable console output"""

    def format(self, record: logging.LogRecord) -> str:
        # asctime is only populated by Formatter.format, which we bypass
        record.asctime = self.formatTime(record, self.datefmt)

        line = (
            f"{record.asctime} | {record.levelname:8} | "
            f"{record.name}:{record.funcName}:{record.lineno} | "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    structured: Optional[bool] = None
) -> None:
    """
    Configure logging for the ingestor.

    Sets up:
    - Console handler: Plain text for operator visibility
    - File handler: Rotating files to prevent disk space issues
    - JSON formatting: Structured file logs when enabled

    Args:
        log_level: Logging level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path override. Empty string disables the file sink.
        structured: Use JSON formatting for the file sink

    Raises:
        ValueError: If invalid log level specified
    """
    level = (log_level or LOG_LEVEL).upper()
    filepath = LOG_FILE_PATH if log_file is None else log_file
    use_json = structured if structured is not None else STRUCTURED_LOGGING

    valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
    if level not in valid_levels:
        raise ValueError(f"Invalid log level: {level}. Must be one of {valid_levels}")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    # ========================================================================
    # CONSOLE HANDLER - for operator visibility
    # ========================================================================
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(PlainTextFormatter(datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(console_handler)

    # ========================================================================
    # FILE HANDLER - rotating files for 24/7 operation
    # ========================================================================
    if filepath:
        log_dir = os.path.dirname(filepath)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filepath,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setLevel(getattr(logging, level))
        if use_json:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(PlainTextFormatter(datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    # web3 and urllib3 are chatty at DEBUG
    logging.getLogger('web3').setLevel(max(logging.INFO, getattr(logging, level)))
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    get_logger(__name__).info(
        "Logging initialized",
        extra={
            'log_level': level,
            'log_file': filepath or None,
            'structured_logging': use_json,
        }
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
