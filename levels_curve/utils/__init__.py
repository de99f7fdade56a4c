# This file makes the 'utils' directory a Python package.

from .errors import (
    AppError,
    ProcessingError,
    PixelBufferError,
    ErrorCategory,
    handle_errors,
    log_and_continue,
    format_user_error,
)
from .imaging import PixelBuffer, coerce_buffer, validate_buffer_length

__all__ = [
    # Errors
    'AppError',
    'ProcessingError',
    'PixelBufferError',
    'ErrorCategory',
    'handle_errors',
    'log_and_continue',
    'format_user_error',
    # Pixel buffers
    'PixelBuffer',
    'coerce_buffer',
    'validate_buffer_length',
]
