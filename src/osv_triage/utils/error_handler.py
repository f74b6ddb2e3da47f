"""
Decorator-based error handling for external command boundaries.

Package manager and scanner calls must never crash the triage workflow: a
failing process maps to a fallback value (None, False, a sentinel string)
that callers already know how to handle.
"""

import functools
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


def handle_command_errors(fallback: Any = None) -> Callable:
    """
    Decorator returning ``fallback`` when the wrapped call raises.

    The exception is logged at warning level with the wrapped function name.

    Args:
        fallback: The value returned instead of propagating the exception.

    Returns:
        Decorator function that wraps command helpers with error handling

    Example:
        @handle_command_errors(fallback=NO_TRANSCRIPT_SENTINEL)
        def get_dependency_chain(self, package_name: str, version: str) -> str:
            result = run_command(["yarn", "why", "--json", package_name])
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"{func.__qualname__} failed: {e}")
                return fallback

        return wrapper

    return decorator
