"""
Logging for dupsketch.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached to the ``dupsketch`` package logger by ``setup_logging`` (the CLI
does this per command) or lazily by ``get_logger``.

Index operations attach ``document_id`` and ``matches`` to their records, and
``log_operation`` attaches ``operation`` plus free-form context. The JSON
formatter lifts all of these into top-level keys.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = 'dupsketch'

# Record attributes copied into JSON output when present
STRUCTURED_KEYS = ('operation', 'document_id', 'matches', 'threshold')

_PLAIN_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
_MAX_LOG_BYTES = 10 * 1024 * 1024


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for ``dupsketch_*.jsonl`` files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update(getattr(record, 'context', {}))
        for key in STRUCTURED_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Plain format with the level name colored on a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool):
        super().__init__(_PLAIN_FORMAT, datefmt=_DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_color else None
        if color is None:
            return super().format(record)
        # Color a copy so the file handler still sees the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _file_handler(log_dir: Path, json_format: bool) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    suffix = 'jsonl' if json_format else 'log'
    path = log_dir / f"dupsketch_{datetime.now().strftime('%Y%m%d')}.{suffix}"
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding='utf-8'
    )
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT, _DATE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(
    name: str = PACKAGE_LOGGER,
    level: str = 'INFO',
    log_dir: Optional[Path] = None,
    console: bool = True,
    file: bool = False,
    json_format: bool = True,
) -> logging.Logger:
    """
    (Re)configure the handlers of logger ``name``.

    Args:
        name: Logger to configure; children propagate into it
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files, implies ``file`` (default: ./logs)
        console: Log to stderr
        file: Log to a rotating file in ``log_dir``
        json_format: Write the file as JSON lines

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.propagate = False

    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setLevel(numeric_level)
        stream.setFormatter(ConsoleFormatter(use_color=sys.stderr.isatty()))
        logger.addHandler(stream)

    if file or log_dir is not None:
        logger.addHandler(_file_handler(Path(log_dir) if log_dir is not None else Path.cwd() / 'logs', json_format))

    return logger


def get_logger(name: str, **kwargs) -> logging.Logger:
    """
    Logger for ``name``, configuring its top-level package logger on first use.

    ``get_logger('dupsketch.cli')`` sets up ``dupsketch`` (with ``kwargs``
    passed to ``setup_logging``) unless it already has handlers, then returns
    the ``dupsketch.cli`` logger, which propagates into it.
    """
    package = name.partition('.')[0]
    if not logging.getLogger(package).handlers:
        setup_logging(package, **kwargs)
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, **context):
    """Log the start of ``operation``; ``context`` becomes extra JSON keys."""
    logger.info("Starting operation: %s", operation, extra={'operation': operation, 'context': context})
