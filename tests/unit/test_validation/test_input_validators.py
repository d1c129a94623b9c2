"""
Unit tests for input validators and error handling helpers.
"""

import logging
from pathlib import Path

import pytest

from diskmon.validation import (
    DiskMonError,
    ErrorSeverity,
    ParseError,
    ProbeError,
    SinkWriteError,
    SpawnError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_command_argv,
    validate_directory,
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_with_handler,
)


@pytest.mark.unit
class TestValidators:
    """Test cases for the basic validators."""

    def test_positive_integer_from_string(self):
        assert validate_positive_integer("12") == 12

    def test_positive_integer_bounds(self):
        with pytest.raises(ValidationError, match=">= 1"):
            validate_positive_integer(0)
        with pytest.raises(ValidationError, match="<= 10"):
            validate_positive_integer(11, max_value=10)

    def test_positive_integer_rejects_bool(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(True)

    def test_positive_float_rejects_nan(self):
        with pytest.raises(ValidationError):
            validate_positive_float(float("nan"))

    def test_enum_choice_returns_canonical_value(self):
        assert validate_enum_choice("TSV", ["tsv", "parquet"], case_sensitive=False) == "tsv"

    def test_enum_choice_case_sensitive(self):
        with pytest.raises(ValidationError):
            validate_enum_choice("TSV", ["tsv", "parquet"])

    def test_path_exists(self, temp_dir):
        assert validate_path_exists(temp_dir) == str(temp_dir)
        with pytest.raises(ValidationError, match="does not exist"):
            validate_path_exists(temp_dir / "nope")

    def test_directory(self, temp_dir):
        assert validate_directory(str(temp_dir)) == Path(temp_dir)

    def test_directory_rejects_file(self, temp_dir):
        file_path = temp_dir / "file.txt"
        file_path.write_text("x")

        with pytest.raises(ValidationError, match="not a directory"):
            validate_directory(file_path, field_name="--path")

    def test_command_argv_copy(self):
        argv = ["du", "-s"]
        result = validate_command_argv(argv)

        assert result == argv
        assert result is not argv


@pytest.mark.unit
class TestErrorTaxonomy:
    """Test cases for the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(SpawnError, DiskMonError)
        assert issubclass(ProbeError, DiskMonError)
        assert issubclass(ParseError, ProbeError)
        assert issubclass(SinkWriteError, DiskMonError)
        assert not issubclass(ValidationError, DiskMonError)

    def test_parse_error_carries_context(self):
        error = ParseError("bad", output="xyz", path="/data", returncode=0)

        assert error.output == "xyz"
        assert error.path == "/data"
        assert error.returncode == 0


@pytest.mark.unit
class TestErrorHandlers:
    """Test cases for handle_error and friends."""

    def test_handle_error_reraises(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("boom"), "testing")

    def test_handle_error_logs_without_reraise(self, caplog):
        test_logger = logging.getLogger("diskmon.tests")
        with caplog.at_level(logging.WARNING):
            handle_error(
                ValueError("boom"),
                "testing",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=test_logger,
            )

        assert "Error in testing: boom" in caplog.text

    def test_handle_error_string_severity(self, caplog):
        with caplog.at_level(logging.INFO):
            handle_error(ValueError("boom"), "testing", severity="INFO", reraise=False)

        assert "boom" in caplog.text

    def test_handle_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad flag"), "argument parsing", exit_code=125)

        assert exc_info.value.code == 125

    def test_validate_with_handler_wraps(self):
        with pytest.raises(ValidationError, match="Validation failed for size"):
            validate_with_handler(int, "twelve", field_name="size", context="test")

    def test_validate_with_handler_passes_value(self):
        assert validate_with_handler(int, "12", field_name="size", context="test") == 12
