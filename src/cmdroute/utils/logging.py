"""
Logging system for cmdroute.

Wires the configuration into the standard library logging package: a coloured
console handler on stderr, an optional rotating JSON file handler, and a timing
decorator for slow setup steps such as importing a dispatcher.
"""

import os
import sys
import json
import time
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Optional, Callable
from functools import wraps
from datetime import datetime

RESET = '\033[0m'


class ColoredConsoleFormatter(logging.Formatter):
    """Pipe-separated console lines, coloured by level when stderr is a colour terminal."""

    LEVEL_COLORS = {
        'DEBUG': '\033[90m',
        'INFO': '\033[94m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m\033[1m',
    }

    def __init__(self, use_colors=True):
        super().__init__(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and self._supports_color()

    def _supports_color(self):
        if os.getenv('NO_COLOR'):
            return False
        if os.getenv('FORCE_COLOR'):
            return True
        if not getattr(sys.stderr, 'isatty', None) or not sys.stderr.isatty():
            return False

        term = os.getenv('TERM', '').lower()
        return 'color' in term or term in ('xterm', 'screen', 'linux')

    def format(self, record):
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        return f"{color}{line}{RESET}" if color else line


class JSONFileFormatter(logging.Formatter):
    """One JSON object per line; fields passed with ``extra=`` land under ``"extra"``."""

    _STANDARD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}

    def format(self, record):
        extra = {
            'filename': record.filename,
            'lineno': record.lineno,
            'funcName': record.funcName,
        }
        # root name, invoker, elapsed time...
        extra.update(
            (key, value) for key, value in vars(record).items() if key not in self._STANDARD_ATTRS
        )

        entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'extra': extra,
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class PerformanceTimer:
    """Context manager logging how long an operation took."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        verb = "Completed" if exc_type is None else "Failed"
        self.logger.log(self.level, f"{verb} {self.operation} in {self.duration:.3f}s")

    @property
    def duration(self) -> Optional[float]:
        """Seconds between enter and exit, None while still running."""
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time


def performance_timer(operation: str = None, level: int = logging.DEBUG):
    """Decorator timing each call of the wrapped function with a PerformanceTimer."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            with PerformanceTimer(get_logger(func.__module__), operation or f"{func.__name__}()", level):
                return func(*args, **kwargs)

        return wrapper
    return decorator


class LoggingManager:
    """Owns root logger configuration for the cmdroute process."""

    def __init__(self):
        self._initialized = False
        self._loggers: Dict[str, logging.Logger] = {}

    def setup_logging(self, config, verbose: bool = False):
        """Install the console handler and, when ``app.log_file`` is set, the JSON file handler.

        Only the first call has an effect.

        Args:
            config: CmdRouteConfig instance
            verbose: Log at DEBUG regardless of ``app.log_level``
        """
        if self._initialized:
            return

        if verbose or config.app.verbose_logging:
            log_level = logging.DEBUG
        else:
            log_level = getattr(logging, config.app.log_level.value, logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        self._setup_console_handler(root_logger, log_level)
        if config.app.log_file:
            self._setup_file_handler(root_logger, config, log_level)

        self._initialized = True
        self.get_logger('cmdroute.logging').debug(
            f"Logging initialized at {logging.getLevelName(log_level)}"
        )

    def _setup_console_handler(self, root_logger: logging.Logger, log_level: int):
        # stderr, so log lines never mix with messages sent to the invoker
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ColoredConsoleFormatter(use_colors=True))
        root_logger.addHandler(console_handler)

    def _setup_file_handler(self, root_logger: logging.Logger, config, log_level: int):
        """Rotating JSON log file sized by ``app.max_log_size_mb`` and ``app.backup_count``."""
        log_file = Path(config.app.log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=config.app.max_log_size_mb * 1024 * 1024,
                backupCount=config.app.backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            print(f"Warning: Could not open log file {log_file}: {e}", file=sys.stderr)
            return

        file_handler.setLevel(log_level)
        file_handler.setFormatter(JSONFileFormatter())
        root_logger.addHandler(file_handler)

    def get_logger(self, name: str) -> logging.Logger:
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]


_logging_manager = LoggingManager()


def setup_logging(config, verbose: bool = False):
    """Configure process logging from a CmdRouteConfig (first call wins)."""
    _logging_manager.setup_logging(config, verbose)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return _logging_manager.get_logger(name)
