# Centralized error handling utilities
"""
Provides consistent error handling patterns across the effect pipeline.

This module defines:
- Custom exception classes for different error categories
- Error handling decorators for pipeline stages and GPU backends
- Utility functions for error logging and user messaging
"""

import functools
import traceback
from typing import Any, Callable, Optional, Tuple, TypeVar, Union
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)

# Type variable for generic function signatures
F = TypeVar('F', bound=Callable[..., Any])


class ErrorCategory(Enum):
    """Categories of errors for consistent handling."""
    RECOVERABLE = "recoverable"      # Can continue with fallback
    USER_INPUT = "user_input"        # Out-of-range parameters
    PROCESSING = "processing"        # Pipeline stage errors
    GPU = "gpu"                      # Execution backend errors
    CONFIGURATION = "configuration"  # Ramp/parameter definition errors
    FATAL = "fatal"                  # Unrecoverable errors


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
    """Pipeline stage errors."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.PROCESSING, **kwargs)
        self.step = step


class DimensionMismatchError(ProcessingError):
    """A stage produced a buffer whose shape differs from its input.

    This always indicates a bug in a stage, never bad input.
    """

    def __init__(
        self,
        step: str,
        expected: Tuple[int, ...],
        actual: Tuple[int, ...],
        **kwargs,
    ):
        super().__init__(
            f"{step} produced shape {actual}, expected {expected}",
            step=step,
            **kwargs,
        )
        self.category = ErrorCategory.FATAL
        self.expected = expected
        self.actual = actual


class GPUError(AppError):
    """GPU-related errors."""

    def __init__(self, message: str, fallback_available: bool = True, **kwargs):
        super().__init__(message, category=ErrorCategory.GPU, **kwargs)
        self.fallback_available = fallback_available


class ConfigurationError(AppError):
    """Configuration/settings errors."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.setting_name = setting_name


class InvalidRampError(ConfigurationError):
    """Color ramp definition is empty, unordered or does not span 0..255."""

    def __init__(self, message: str, ramp_name: Optional[str] = None, **kwargs):
        super().__init__(message, setting_name=ramp_name, **kwargs)
        self.category = ErrorCategory.FATAL


class ParameterRangeError(AppError):
    """Effect parameter outside its advisory bounds (strict validation only)."""

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.USER_INPUT, **kwargs)
        self.parameter = parameter
        self.value = value


_WRAPPED_ERROR_TYPES = {
    ErrorCategory.PROCESSING: ProcessingError,
    ErrorCategory.GPU: GPUError,
    ErrorCategory.CONFIGURATION: ConfigurationError,
}


def handle_errors(
    fallback_value: Any = None,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    log_level: str = "warning",
    reraise: bool = False,
    user_message: Optional[str] = None,
) -> Callable[[F], F]:
    """
    Decorator for consistent error handling.

    Args:
        fallback_value: Value to return on error (can be callable for dynamic fallback).
        category: Error category for logging context.
        log_level: Logging level ('debug', 'info', 'warning', 'error', 'exception').
        reraise: If True, re-raise the exception after logging, wrapped in the
                 AppError subclass matching ``category``.
        user_message: Optional user-friendly message for UI display.

    Example:
        @handle_errors(category=ErrorCategory.PROCESSING, reraise=True)
        def apply_palette_style(image, params):
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

                if reraise:
                    error_type = _WRAPPED_ERROR_TYPES.get(category)
                    if error_type is ProcessingError:
                        raise ProcessingError(
                            str(e),
                            step=func.__name__,
                            original_error=e,
                            user_message=user_message,
                        ) from e
                    if error_type is not None:
                        raise error_type(
                            str(e), original_error=e, user_message=user_message
                        ) from e
                    raise AppError(
                        str(e),
                        category=category,
                        original_error=e,
                        user_message=user_message,
                    ) from e

                if callable(fallback_value):
                    return fallback_value()
                return fallback_value

        return wrapper  # type: ignore
    return decorator


def handle_gpu_errors(fallback_func: Optional[Callable] = None) -> Callable[[F], F]:
    """
    Decorator for GPU backend operations.

    Backend exceptions are logged once and either handed to ``fallback_func``
    or re-raised as GPUError so the caller can pick another strategy.

    Args:
        fallback_func: Optional CPU function to call with the same arguments.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except GPUError:
                raise
            except Exception as e:
                logger.warning(
                    "GPU operation %s failed: %s",
                    func.__name__,
                    str(e),
                )

                if fallback_func is not None:
                    return fallback_func(*args, **kwargs)

                raise GPUError(
                    f"GPU operation {func.__name__} failed",
                    original_error=e,
                    user_message="GPU rendering failed; switch to the CPU pipeline.",
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


def format_user_error(error: Union[Exception, str], context: Optional[str] = None) -> str:
    """
    Format an error message for user display.

    Args:
        error: The error or error message.
        context: Optional context about what operation failed.

    Returns:
        User-friendly error message.
    """
    if isinstance(error, AppError):
        return error.user_message

    error_str = str(error)

    if "out of memory" in error_str.lower():
        return "Not enough memory to complete this operation. Try with a smaller image."

    # Generic fallback
    if context:
        return f"Error {context}: {error_str}"
    return f"An error occurred: {error_str}"
