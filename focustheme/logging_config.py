"""
Logging configuration for theme generation.

Provides:
- Minimal root logger setup compatible with module-level get_logger()
- JSON structured logging
- Performance logging
- Request tracking
"""

import asyncio
import logging
import json
import sys
import time
from collections import deque
from typing import Deque, Dict, Any, Optional
from datetime import datetime, timezone
from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
prompt_var: ContextVar[Optional[str]] = ContextVar('prompt', default=None)

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName',
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data['request_id'] = request_id

        prompt = prompt_var.get()
        if prompt:
            log_data['prompt'] = prompt

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Custom attributes passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class PerformanceLogger:
    """Logger for performance metrics"""

    def __init__(self, logger: logging.Logger, max_samples: int = 100):
        self.logger = logger
        self.max_samples = max_samples
        # Most recent durations per operation
        self.metrics: Dict[str, Deque[float]] = {}

    def log_operation(self, operation: str, duration: float, **kwargs):
        """Log an operation's performance"""
        self.logger.info(
            f"Operation {operation} completed",
            extra={
                'operation': operation,
                'duration_ms': round(duration * 1000, 2),
                'performance': True,
                **kwargs
            }
        )
        self.metrics.setdefault(operation, deque(maxlen=self.max_samples)).append(duration)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Minimal logging setup.

    - Sets root logger level
    - Ensures a single StreamHandler is attached
    - fmt='json' switches to the structured formatter
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        root.addHandler(handler)

    for handler in root.handlers:
        if fmt == 'json':
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ))

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reduce noise from third-party libraries
    logging.getLogger('openai').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)


def configure_logging() -> logging.Logger:
    """Configure logging from the LOG_LEVEL / LOG_FORMAT settings."""
    from focustheme.config import get_config

    config = get_config().logging
    setup_logging(config.level, config.format)
    return logging.getLogger()


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with a performance logger attached."""
    logger = logging.getLogger(name)
    if not hasattr(logger, 'perf'):
        logger.perf = PerformanceLogger(logger)
    return logger


@contextmanager
def request_context(request_id: Optional[str] = None, prompt: Optional[str] = None):
    """Tag every log record emitted inside the block with request id / prompt"""
    tokens = []
    if request_id:
        tokens.append((request_id_var, request_id_var.set(request_id)))
    if prompt:
        tokens.append((prompt_var, prompt_var.set(prompt)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def with_context(request_id: Optional[str] = None, prompt: Optional[str] = None):
    """Decorator to set request context variables for an async function"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            with request_context(request_id, prompt):
                return await func(*args, **kwargs)
        return wrapper
    return decorator


def log_performance(operation: str):
    """Decorator to log function performance"""
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
            except Exception:
                duration = time.time() - start_time
                logger.error(
                    f"{operation} failed after {duration:.2f}s",
                    extra={'operation': operation, 'duration': duration},
                    exc_info=True
                )
                raise
            _record(logger, operation, time.time() - start_time)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration = time.time() - start_time
                logger.error(
                    f"{operation} failed after {duration:.2f}s",
                    extra={'operation': operation, 'duration': duration},
                    exc_info=True
                )
                raise
            _record(logger, operation, time.time() - start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def _record(logger: logging.Logger, operation: str, duration: float) -> None:
    from focustheme.config import get_config

    if get_config().logging.enable_performance_logging:
        logger.perf.log_operation(operation, duration)
