# This file makes the 'utils' directory a Python package.

from .errors import (
    AppError,
    ProcessingError,
    DimensionMismatchError,
    GPUError,
    ConfigurationError,
    InvalidRampError,
    ParameterRangeError,
    ErrorCategory,
    handle_errors,
    handle_gpu_errors,
    log_and_continue,
    format_user_error,
)

__all__ = [
    # Errors
    'AppError',
    'ProcessingError',
    'DimensionMismatchError',
    'GPUError',
    'ConfigurationError',
    'InvalidRampError',
    'ParameterRangeError',
    'ErrorCategory',
    'handle_errors',
    'handle_gpu_errors',
    'log_and_continue',
    'format_user_error',
]
