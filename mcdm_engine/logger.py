# -*- coding: utf-8 -*-
"""
Logging system for the MCDM engine.

Features:
- Colored console output with level-based styling
- Clean file logging (no ANSI codes)
- Log rotation with configurable size limits
- Structured JSON logging for machine parsing
- Hierarchical module logging (``mcdm_engine.mcdm.promethee`` etc.)
- Context tracking (method, problem source)
"""

import logging
import logging.handlers
import json
import sys
import os
import re
import time
import threading
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, Any, Union, Callable
from contextlib import contextmanager
from functools import wraps


# =============================================================================
# Constants
# =============================================================================

LOG_NAME = "mcdm_engine"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


# =============================================================================
# ANSI Color Definitions
# =============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    BRIGHT_RED = "\033[91m"

    ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')

    @classmethod
    def strip(cls, text: str) -> str:
        """Remove all ANSI codes from text."""
        return cls.ANSI_PATTERN.sub('', text)

    @classmethod
    def supports_color(cls) -> bool:
        """Check if terminal supports colors."""
        if os.getenv("NO_COLOR"):
            return False
        if os.getenv("FORCE_COLOR"):
            return True
        if not hasattr(sys.stdout, "isatty"):
            return False
        return sys.stdout.isatty()


# =============================================================================
# Custom Formatters
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """Formatter with ANSI color codes for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and Colors.supports_color()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        # Create a copy to avoid modifying the original
        record = logging.makeLogRecord(record.__dict__)

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            record.levelname = f"{color}{Colors.BOLD}{record.levelname:8}{Colors.RESET}"
            record.msg = f"{color}{record.msg}{Colors.RESET}"

        return super().format(record)


class CleanFormatter(logging.Formatter):
    """Clean formatter for file output without ANSI codes."""

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        if isinstance(record.msg, str):
            record.msg = Colors.strip(record.msg)
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Produces one machine-readable JSON object per log record. Attributes
    added through :class:`LogContext` or ``extra=`` are included.
    """

    _DEFAULT_KEYS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'taskName', 'message'
    }

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": Colors.strip(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            for key, value in record.__dict__.items():
                if key not in self._DEFAULT_KEYS:
                    try:
                        json.dumps(value)
                        log_data[key] = value
                    except (TypeError, ValueError):
                        log_data[key] = str(value)

        return json.dumps(log_data, ensure_ascii=False, default=str)


# =============================================================================
# Context Management
# =============================================================================

class LogContext:
    """Thread-local context attached to every record of the package logger."""
    _local = threading.local()

    @classmethod
    def get(cls) -> Dict[str, Any]:
        if not hasattr(cls._local, 'context'):
            cls._local.context = {}
        return cls._local.context

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        cls.get()[key] = value

    @classmethod
    def remove(cls, key: str) -> None:
        cls.get().pop(key, None)


class ContextFilter(logging.Filter):
    """Filter that adds context information to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in LogContext.get().items():
            setattr(record, key, value)
        return True


# =============================================================================
# Logger Factory
# =============================================================================

class LoggerFactory:
    """Factory for creating and managing the package loggers."""

    _loggers: Dict[str, logging.Logger] = {}
    _configured: bool = False
    _root_logger: Optional[logging.Logger] = None

    @classmethod
    def setup(
        cls,
        name: str = LOG_NAME,
        level: Union[int, str] = logging.INFO,
        log_file: Optional[Path] = None,
        json_file: Optional[Path] = None,
        console: bool = True,
        use_colors: bool = True,
        max_bytes: int = MAX_LOG_SIZE,
        backup_count: int = BACKUP_COUNT,
        console_level: Union[int, str, None] = None,
    ) -> logging.Logger:
        """
        Setup and configure the package logger.

        Parameters
        ----------
        name : str
            Logger name
        level : int or str
            Logging level
        log_file : Path, optional
            Path for plain text log file (always written at DEBUG level)
        json_file : Path, optional
            Path for JSON log file
        console : bool
            Enable console output
        use_colors : bool
            Enable colored console output
        max_bytes : int
            Maximum log file size before rotation
        backup_count : int
            Number of backup files to keep
        console_level : int or str, optional
            Console handler level, defaults to ``level``

        Returns
        -------
        logging.Logger
            Configured logger instance
        """
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        if isinstance(console_level, str):
            console_level = getattr(logging, console_level.upper(), level)

        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG if log_file else level)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.filters.clear()
        logger.propagate = False
        logger.addFilter(ContextFilter())

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(console_level if console_level is not None else level)
            if use_colors:
                console_fmt = ColoredFormatter(
                    fmt='%(asctime)s │ %(levelname)s │ %(message)s',
                    datefmt=CONSOLE_DATE_FORMAT,
                    use_colors=use_colors,
                )
            else:
                console_fmt = CleanFormatter(
                    fmt='%(asctime)s | %(levelname)-8s | %(message)s',
                    datefmt=CONSOLE_DATE_FORMAT
                )
            console_handler.setFormatter(console_fmt)
            logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CleanFormatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt=DEFAULT_DATE_FORMAT
            ))
            logger.addHandler(file_handler)

        if json_file:
            json_file = Path(json_file)
            json_file.parent.mkdir(parents=True, exist_ok=True)
            json_handler = logging.handlers.RotatingFileHandler(
                json_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            json_handler.setLevel(level)
            json_handler.setFormatter(JSONFormatter())
            logger.addHandler(json_handler)

        cls._root_logger = logger
        cls._loggers[name] = logger
        cls._configured = True

        return logger

    @classmethod
    def get_logger(cls, name: str = LOG_NAME) -> logging.Logger:
        """
        Get a logger instance.

        Names outside the package hierarchy are attached below the root
        package logger so that they share its handlers.
        """
        if name in cls._loggers:
            return cls._loggers[name]

        if cls._configured and cls._root_logger:
            root_name = cls._root_logger.name
            if name.startswith(root_name):
                logger = logging.getLogger(name)
            else:
                logger = logging.getLogger(f"{root_name}.{name}")
        else:
            logger = logging.getLogger(name)

        cls._loggers[name] = logger
        return logger

    @classmethod
    def get_module_logger(cls, module_name: str) -> logging.Logger:
        root_name = cls._root_logger.name if cls._root_logger else LOG_NAME
        return cls.get_logger(f"{root_name}.{module_name}")

    @classmethod
    def reset(cls) -> None:
        """Forget cached loggers; handlers of the root logger are closed."""
        if cls._root_logger is not None:
            for handler in list(cls._root_logger.handlers):
                handler.close()
                cls._root_logger.removeHandler(handler)
            cls._root_logger.filters.clear()
            cls._root_logger.propagate = True
        cls._loggers = {}
        cls._configured = False
        cls._root_logger = None


# =============================================================================
# Convenience Functions
# =============================================================================

def setup_logger(
    name: str = LOG_NAME,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    json_file: Optional[Path] = None,
    console: bool = True,
    use_colors: bool = False,
) -> logging.Logger:
    """
    Setup and configure logger (convenience function).

    Console output uses ``level``; the optional text log file always
    captures DEBUG records.
    """
    return LoggerFactory.setup(
        name=name,
        level=level,
        log_file=log_file,
        json_file=json_file,
        console=console,
        use_colors=use_colors,
        console_level=level,
    )


def get_logger(name: str = LOG_NAME) -> logging.Logger:
    return LoggerFactory.get_logger(name)


def get_module_logger(module_name: str) -> logging.Logger:
    return LoggerFactory.get_module_logger(module_name)


# =============================================================================
# Decorators
# =============================================================================

def log_execution(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
) -> Callable:
    """
    Decorator to log function execution and its duration.

    Failures are logged at ERROR level and re-raised.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            log = logger or get_logger()
            func_name = func.__qualname__

            log.log(level, f"Calling {func_name}")

            start = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.time() - start
                log.error(f"{func_name} failed after {elapsed:.3f}s: {e}")
                raise
            elapsed = time.time() - start
            log.log(level, f"{func_name} completed ({elapsed:.3f}s)")
            return result

        return wrapper
    return decorator


# =============================================================================
# Context Managers
# =============================================================================

@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding temporary context to logs.

    Example:
        with log_context(method="promethee"):
            logger.info("Running")  # record carries method="promethee"
    """
    for key, value in kwargs.items():
        LogContext.set(key, value)
    try:
        yield
    finally:
        for key in kwargs:
            LogContext.remove(key)


@contextmanager
def timed_operation(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO
):
    """
    Context manager for timing operations.

    Example:
        with timed_operation(logger, "ELECTRE I"):
            engine.calculate(problem)
    """
    start = time.time()
    logger.log(level, f"Starting: {operation}")
    try:
        yield
    finally:
        elapsed = time.time() - start
        logger.log(level, f"Finished: {operation} ({elapsed:.3f}s)")


__all__ = [
    'setup_logger',
    'get_logger',
    'get_module_logger',
    'LoggerFactory',
    'LogContext',
    'ContextFilter',
    'Colors',
    'ColoredFormatter',
    'CleanFormatter',
    'JSONFormatter',
    'log_execution',
    'log_context',
    'timed_operation',
    'LOG_NAME',
]
