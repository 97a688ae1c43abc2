"""
Logging utilities for the media-sizes logger and method tracing.
"""
import functools
import logging
import time
from typing import Any, Callable, TypeVar

from media_sizes.config import settings

logger = logging.getLogger("media_sizes")

F = TypeVar("F", bound=Callable[..., Any])


def _summarize(name: str, value: Any) -> str:
    if isinstance(value, (str, int, float, bool, type(None))):
        return f"{name}={value}"
    if isinstance(value, (dict, list, tuple)):
        return f"{name}=<{type(value).__name__}:{len(value)}>"
    return f"{name}=<{type(value).__name__}>"


def trace_calls(func: F) -> F:
    """
    Decorator to log function entry/exit when TRACE_CALLS is enabled.

    Logs function name, a scalar-only args summary, and duration.
    The setting is read at decoration time.
    """
    if not settings.TRACE_CALLS:
        return func

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_name = f"{func.__module__}.{func.__qualname__}"
        args_summary = [_summarize(f"arg{i}", arg) for i, arg in enumerate(args)]
        args_summary.extend(_summarize(key, value) for key, value in kwargs.items())

        logger.debug(f"[TRACE] ENTER {func_name}({', '.join(args_summary)})")
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug(f"[TRACE] EXIT {func_name} durationMs={duration_ms}")
            return result
        except Exception as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug(
                f"[TRACE] EXIT {func_name} durationMs={duration_ms} error={type(e).__name__}"
            )
            raise

    return wrapper  # type: ignore
