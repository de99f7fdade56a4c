# Centralized error handling utilities
"""
Provides consistent error handling patterns across the application.

This module defines:
- Custom exception classes for different error categories
- An error handling decorator that wraps library failures in AppError
- Utility functions for error logging and user messaging
"""

import functools
import traceback
from typing import Any, Callable, Optional, TypeVar
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)

# Type variable for generic function signatures
F = TypeVar('F', bound=Callable[..., Any])


class ErrorCategory(Enum):
    """Categories of errors for consistent handling."""
    RECOVERABLE = "recoverable"      # Default, nothing more specific applies
    USER_INPUT = "user_input"        # Rejected control point edits
    PROCESSING = "processing"        # Histogram / remap / encode errors
    CONTRACT = "contract"            # Malformed input from a collaborator


class AppError(Exception):
    """Base exception for application-specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.RECOVERABLE,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.original_error = original_error
        self.user_message = user_message or message

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]} (caused by: {type(self.original_error).__name__})"
        return self.args[0]


class ProcessingError(AppError):
    """Image processing errors."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.PROCESSING, **kwargs)
        self.step = step


class PixelBufferError(AppError, ValueError):
    """A pixel buffer whose length does not match its RGBA shape.

    Raised eagerly: a malformed buffer is a bug in whoever produced it,
    so nothing downstream tries to truncate or pad it.
    """

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.CONTRACT, **kwargs)
        self.length = length
        self.width = width
        self.height = height


def handle_errors(
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    log_level: str = "warning",
    user_message: Optional[str] = None,
) -> Callable[[F], F]:
    """
    Decorator for consistent error handling.

    Library exceptions are logged and re-raised as AppError with the given
    category; AppErrors pass through untouched.

    Args:
        category: Error category for logging context.
        log_level: Logging level ('debug', 'info', 'warning', 'error', 'exception').
        user_message: Optional user-friendly message for display.

    Example:
        @handle_errors(category=ErrorCategory.PROCESSING)
        def encode(buffer):
            ...
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AppError:
                # Re-raise our custom errors
                raise
            except Exception as e:
                log_func = getattr(logger, log_level, logger.warning)
                log_func(
                    "%s failed in %s.%s: %s",
                    category.value,
                    func.__module__,
                    func.__name__,
                    str(e),
                )

                if log_level == "exception":
                    logger.debug("Full traceback:\n%s", traceback.format_exc())

                raise AppError(
                    str(e),
                    category=category,
                    original_error=e,
                    user_message=user_message,
                ) from e

        return wrapper  # type: ignore
    return decorator


def log_and_continue(
    message: str,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    level: str = "warning",
) -> None:
    """
    Log an error and continue execution.

    Use this for non-critical errors that shouldn't stop processing.

    Args:
        message: Error message to log.
        category: Error category for context.
        level: Log level.
    """
    log_func = getattr(logger, level, logger.warning)
    log_func("[%s] %s", category.value, message)


def format_user_error(error: AppError, context: Optional[str] = None) -> str:
    """
    Format an error for user display.

    Errors that carry their own user message are shown as is; otherwise the
    technical message is prefixed with the failed operation.

    Args:
        error: The application error.
        context: Optional context about what operation failed.

    Returns:
        User-friendly error message.
    """
    if error.user_message != error.args[0] or not context:
        return error.user_message
    return f"Error {context}: {error.user_message}"
