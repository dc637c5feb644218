"""Tests for combinator parameter validation."""

import pytest
from pydantic import ValidationError

from tasksmith.core.errors import ErrorCategory, SignatureError, TaskUsageError
from tasksmith.orchestration.params import (
    DelayParams,
    RetryParams,
    SeriesParams,
    ShellParams,
    validate_params,
)
from tasksmith.orchestration.primitives import ok


class TestValidateParams:
    """Tests for validate_params."""

    def test_valid_values_build_model(self):
        """Test valid values produce a frozen model."""
        params = validate_params("retry", RetryParams, retries=3, taskfunc=lambda i: ok())
        assert params.retries == 3
        assert params.message is None
        with pytest.raises(ValidationError):
            params.retries = 4

    def test_error_names_combinator_and_field(self):
        """Test the error message starts with the combinator and names the field."""
        with pytest.raises(SignatureError) as exc_info:
            validate_params("retry", RetryParams, retries=-1, taskfunc=lambda i: ok())
        error = exc_info.value
        assert str(error).startswith("retry: retries:")
        assert error.combinator == "retry"
        assert error.fields == ["retries"]

    def test_error_is_usage_error(self):
        """Test signature errors are usage errors, not task failures."""
        with pytest.raises(TaskUsageError) as exc_info:
            validate_params("series", SeriesParams, tasks="not a list")
        assert exc_info.value.category is ErrorCategory.USAGE

    def test_unknown_parameter_rejected(self):
        """Test unexpected keyword parameters are rejected."""
        with pytest.raises(SignatureError) as exc_info:
            validate_params("delay", DelayParams, ms=10, retries=2)
        assert "retries" in exc_info.value.fields

    def test_multiple_errors_reported(self):
        """Test every invalid field is reported."""
        with pytest.raises(SignatureError) as exc_info:
            validate_params("retry", RetryParams, retries="three", taskfunc=42)
        assert set(exc_info.value.fields) == {"retries", "taskfunc"}

    def test_cause_is_validation_error(self):
        """Test the pydantic error is chained as the cause."""
        with pytest.raises(SignatureError) as exc_info:
            validate_params("delay", DelayParams, ms=-1)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_float_milliseconds_accepted(self):
        """Test fractional milliseconds are allowed."""
        assert validate_params("delay", DelayParams, ms=2.5).ms == 2.5

    def test_int_milliseconds_accepted(self):
        """Test whole milliseconds are accepted as ints."""
        assert validate_params("delay", DelayParams, ms=10).ms == 10

    def test_string_milliseconds_rejected(self):
        """Test numeric strings are not coerced."""
        with pytest.raises(SignatureError):
            validate_params("delay", DelayParams, ms="10")

    def test_empty_shell_command_rejected(self):
        """Test shell requires a non-empty command."""
        with pytest.raises(SignatureError) as exc_info:
            validate_params("shell", ShellParams, command="")
        assert exc_info.value.fields == ["command"]
