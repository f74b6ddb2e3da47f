"""
Utility modules for osv-triage.

This package contains shared utilities used across services:
- error_handler: Decorator-based error handling for external command calls
- console: User-facing output and interactive prompts
"""

from .console import (
    ask_confirmation,
    print_error,
    print_info,
    print_success,
    print_warning,
    question,
)
from .error_handler import handle_command_errors

__all__ = [
    "handle_command_errors",
    "ask_confirmation",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "question",
]
