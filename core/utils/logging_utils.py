"""
Logging utilities for the project.
Performance decorator plus a helper for structured, context-rich messages.
"""
import time
import logging
import functools
from typing import Any, Callable, Optional
from django.conf import settings

# Specialized loggers
performance_logger = logging.getLogger('core.performance')


def log_performance(threshold_ms: Optional[float] = None):
    """
    Decorator that logs how long a function took.
    Calls slower than ``threshold_ms`` (default: SLOW_OPERATION_THRESHOLD_MS)
    are logged as warnings; the rest at debug level when DEBUG is on.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            limit = threshold_ms if threshold_ms is not None else settings.SLOW_OPERATION_THRESHOLD_MS
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_time = (time.perf_counter() - start_time) * 1000
                if elapsed_time > limit:
                    performance_logger.warning(
                        f"Slow operation: {func.__module__}.{func.__name__} "
                        f"took {elapsed_time:.2f}ms (threshold: {limit}ms)"
                    )
                elif settings.DEBUG:
                    performance_logger.debug(
                        f"{func.__module__}.{func.__name__} took {elapsed_time:.2f}ms"
                    )
        return wrapper
    return decorator


class StructuredLogger:
    """
    Logging helper that appends keyword context to the message.
    Accepts the standard logging kwargs (exc_info, extra, stack_info).
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _format_message(self, message: str, **context) -> str:
        if context:
            context_str = ' | '.join(f"{k}={v}" for k, v in context.items())
            return f"{message} | {context_str}"
        return message

    def _log(self, level_func, message, args, kwargs):
        # Pull out the reserved logging kwargs
        exc_info = kwargs.pop('exc_info', None)
        stack_info = kwargs.pop('stack_info', False)
        extra = kwargs.pop('extra', None)

        # Everything left is message context
        formatted_msg = self._format_message(str(message), **kwargs)
        level_func(formatted_msg, *args, exc_info=exc_info, stack_info=stack_info, extra=extra)

    def debug(self, message: str, *args, **context):
        self._log(self.logger.debug, message, args, context)

    def info(self, message: str, *args, **context):
        self._log(self.logger.info, message, args, context)

    def warning(self, message: str, *args, **context):
        self._log(self.logger.warning, message, args, context)

    def error(self, message: str, *args, **context):
        self._log(self.logger.error, message, args, context)

    def exception(self, message: str, *args, **context):
        context.setdefault('exc_info', True)
        self._log(self.logger.error, message, args, context)
