"""Tests for centralized error handling utilities."""

import pytest
import numpy as np
from phosphor_terminal.utils.errors import (
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


class TestAppError:
    """Tests for AppError base class."""

    def test_basic_error(self):
        """Basic error creation should work."""
        error = AppError("Test error")
        assert str(error) == "Test error"
        assert error.category == ErrorCategory.RECOVERABLE
        assert error.user_message == "Test error"

    def test_error_with_category(self):
        error = AppError("Test error", category=ErrorCategory.FATAL)
        assert error.category == ErrorCategory.FATAL

    def test_error_with_original(self):
        """Error wrapping original exception should name its type."""
        original = ValueError("Original error")
        error = AppError("Wrapped error", original_error=original)
        assert error.original_error is original
        assert "ValueError" in str(error)

    def test_error_with_user_message(self):
        error = AppError(
            "Technical error details",
            user_message="Something went wrong. Please try again."
        )
        assert error.user_message == "Something went wrong. Please try again."


class TestSpecificErrors:
    """Tests for specific error types."""

    def test_processing_error(self):
        """ProcessingError should include step info."""
        error = ProcessingError("Processing failed", step="bloom")
        assert error.category == ErrorCategory.PROCESSING
        assert error.step == "bloom"

    def test_dimension_mismatch_error(self):
        """A shape mismatch is a fatal processing error."""
        error = DimensionMismatchError("scanlines", (4, 4, 4), (3, 4, 4))
        assert isinstance(error, ProcessingError)
        assert error.category == ErrorCategory.FATAL
        assert error.step == "scanlines"
        assert error.expected == (4, 4, 4)
        assert error.actual == (3, 4, 4)
        assert "scanlines" in str(error)

    def test_gpu_error(self):
        """GPUError should include fallback info."""
        error = GPUError("GPU operation failed", fallback_available=True)
        assert error.category == ErrorCategory.GPU
        assert error.fallback_available

    def test_configuration_error(self):
        """ConfigurationError should include setting name."""
        error = ConfigurationError("Invalid setting", setting_name="contrast")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.setting_name == "contrast"

    def test_invalid_ramp_error(self):
        error = InvalidRampError("Ramp has no stops", ramp_name="green")
        assert isinstance(error, ConfigurationError)
        assert error.category == ErrorCategory.FATAL
        assert error.setting_name == "green"

    def test_parameter_range_error(self):
        error = ParameterRangeError("too bright", parameter="brightness", value=9.0)
        assert error.category == ErrorCategory.USER_INPUT
        assert error.parameter == "brightness"
        assert error.value == 9.0


class TestHandleErrorsDecorator:
    """Tests for handle_errors decorator."""

    def test_successful_function(self):
        """Decorator should not affect successful functions."""
        @handle_errors(fallback_value=None)
        def successful_func():
            return "success"

        assert successful_func() == "success"

    def test_fallback_on_error(self):
        @handle_errors(fallback_value="fallback")
        def failing_func():
            raise ValueError("Test error")

        assert failing_func() == "fallback"

    def test_callable_fallback(self):
        @handle_errors(fallback_value=lambda: "dynamic fallback")
        def failing_func():
            raise ValueError("Test error")

        assert failing_func() == "dynamic fallback"

    def test_reraise_option(self):
        """Decorator should reraise when configured."""
        @handle_errors(fallback_value=None, reraise=True)
        def failing_func():
            raise ValueError("Test error")

        with pytest.raises(AppError):
            failing_func()

    def test_reraise_wraps_by_category(self):
        """Processing failures are wrapped with the failing function's name."""
        @handle_errors(category=ErrorCategory.PROCESSING, reraise=True)
        def tone_stage():
            raise ZeroDivisionError("division by zero")

        with pytest.raises(ProcessingError) as excinfo:
            tone_stage()
        assert excinfo.value.step == "tone_stage"
        assert isinstance(excinfo.value.original_error, ZeroDivisionError)

    def test_reraise_gpu_category(self):
        @handle_errors(category=ErrorCategory.GPU, reraise=True)
        def dispatch():
            raise RuntimeError("adapter lost")

        with pytest.raises(GPUError):
            dispatch()

    def test_app_errors_pass_through(self):
        """Our own errors are never re-wrapped or swallowed."""
        @handle_errors(fallback_value="fallback")
        def failing_func():
            raise ConfigurationError("bad ramp", setting_name="amber")

        with pytest.raises(ConfigurationError):
            failing_func()

    def test_preserves_function_metadata(self):
        @handle_errors(fallback_value=None)
        def documented_func():
            """This is a docstring."""
            return "result"

        assert documented_func.__name__ == "documented_func"
        assert "docstring" in documented_func.__doc__


class TestHandleGPUErrorsDecorator:
    """Tests for handle_gpu_errors decorator."""

    def test_successful_gpu_operation(self):
        """Decorator should not affect successful GPU operations."""
        @handle_gpu_errors()
        def gpu_func(image):
            return image * 2

        result = gpu_func(np.array([1, 2, 3]))
        assert np.array_equal(result, np.array([2, 4, 6]))

    def test_fallback_to_cpu(self):
        """Decorator should call fallback on GPU error."""
        def cpu_fallback(image):
            return image + 1

        @handle_gpu_errors(fallback_func=cpu_fallback)
        def gpu_func(image):
            raise RuntimeError("GPU error")

        result = gpu_func(np.array([1, 2, 3]))
        assert np.array_equal(result, np.array([2, 3, 4]))

    def test_raises_gpu_error_without_fallback(self):
        """Without fallback the backend failure surfaces as GPUError."""
        @handle_gpu_errors()
        def gpu_func(image, param):
            raise RuntimeError("GPU error")

        with pytest.raises(GPUError) as excinfo:
            gpu_func(np.array([1, 2, 3]), "param")
        assert isinstance(excinfo.value.original_error, RuntimeError)
        assert "gpu_func" in str(excinfo.value)

    def test_gpu_error_passes_through(self):
        @handle_gpu_errors(fallback_func=lambda image: image)
        def gpu_func(image):
            raise GPUError("no adapter")

        with pytest.raises(GPUError, match="no adapter"):
            gpu_func(np.zeros(3))


class TestFormatUserError:
    """Tests for format_user_error function."""

    def test_format_app_error(self):
        """Should use user_message from AppError."""
        error = AppError("Technical details", user_message="User friendly message")
        assert format_user_error(error) == "User friendly message"

    def test_format_memory_error(self):
        error = MemoryError("Out of memory")
        result = format_user_error(error)
        assert "memory" in result.lower()

    def test_format_generic_error(self):
        """Should format generic errors with context."""
        error = RuntimeError("Something went wrong")
        result = format_user_error(error, context="rendering")
        assert "rendering" in result
        assert "Something went wrong" in result

    def test_format_string(self):
        assert "oops" in format_user_error("oops")


class TestLogAndContinue:
    """Tests for log_and_continue function."""

    def test_logs_with_category(self, caplog):
        with caplog.at_level("WARNING"):
            log_and_continue("Test message", ErrorCategory.USER_INPUT)
        assert "[user_input] Test message" in caplog.text

    def test_accepts_all_categories(self):
        for category in ErrorCategory:
            log_and_continue(f"Test {category.value}", category, level="debug")


class TestErrorCategoryEnum:
    """Tests for ErrorCategory enum."""

    def test_all_categories_defined(self):
        names = {category.name for category in ErrorCategory}
        assert names == {
            "RECOVERABLE", "USER_INPUT", "PROCESSING", "GPU", "CONFIGURATION", "FATAL",
        }

    def test_category_values(self):
        for category in ErrorCategory:
            assert isinstance(category.value, str)
