"""
Tests for custom exception hierarchy.
"""

import pytest

from ostn02.core.errors import (
    ConfigurationError,
    DataSourceError,
    MalformedRecordError,
    OSTN02Exception,
    OutOfRangeError,
    ProjectionError,
    RecordNotFoundError,
)


class TestOSTN02Exception:
    """Tests for base OSTN02Exception class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = OSTN02Exception(message="Test error", error_code="TEST_ERROR")

        assert str(exc) == "TEST_ERROR: Test error"
        assert exc.message == "Test error"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {}
        assert exc.suggestions == []

    def test_to_dict(self):
        """Test conversion to dictionary."""
        exc = OSTN02Exception(
            message="Test error",
            error_code="TEST_ERROR",
            details={"key": "value"},
            suggestions=["suggestion"],
        )

        assert exc.to_dict() == {
            "error_code": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
            "suggestions": ["suggestion"],
        }

    def test_repr(self):
        """Test detailed representation."""
        exc = OSTN02Exception(message="Oops", error_code="X")
        assert repr(exc) == "OSTN02Exception(error_code='X', message='Oops')"


class TestOutOfRangeError:
    """Tests for OutOfRangeError."""

    def test_coordinates_in_details(self):
        """Test the offending coordinate is recorded."""
        exc = OutOfRangeError("Outside", easting=-1.0, northing=2.0)

        assert exc.error_code == "OUT_OF_RANGE"
        assert exc.details == {"easting": -1.0, "northing": 2.0}
        assert exc.suggestions

    def test_is_base_exception(self):
        """Test it can be caught as the package base exception."""
        with pytest.raises(OSTN02Exception):
            raise OutOfRangeError("Outside")


class TestRecordNotFoundError:
    """Tests for RecordNotFoundError."""

    def test_node_ids_sorted(self):
        """Test missing ids are recorded in sorted order."""
        exc = RecordNotFoundError("Missing", node_ids=[9, 3])

        assert exc.error_code == "RECORD_NOT_FOUND"
        assert exc.node_ids == [3, 9]
        assert exc.details["node_ids"] == [3, 9]

    def test_without_ids(self):
        """Test construction without ids."""
        exc = RecordNotFoundError("Missing")

        assert exc.node_ids == []
        assert "node_ids" not in exc.details


class TestMalformedRecordError:
    """Tests for MalformedRecordError."""

    def test_line_details(self):
        """Test line information is recorded and truncated."""
        exc = MalformedRecordError("Bad", line_number=12, line="x" * 500)

        assert exc.error_code == "MALFORMED_RECORD"
        assert exc.details["line_number"] == 12
        assert len(exc.details["line"]) == 120


class TestOtherErrors:
    """Tests for ambient error types."""

    def test_data_source_error(self):
        """Test DataSourceError records the file path."""
        exc = DataSourceError("Missing", file_path="/data/grid.txt")

        assert exc.error_code == "DATA_SOURCE_ERROR"
        assert exc.details["file_path"] == "/data/grid.txt"

    def test_projection_error(self):
        """Test ProjectionError defaults."""
        exc = ProjectionError("Failed")

        assert exc.error_code == "PROJECTION_ERROR"
        assert exc.details == {}
        assert len(exc.suggestions) == 2

    def test_configuration_error(self):
        """Test ConfigurationError records the key."""
        exc = ConfigurationError("Missing", config_key="grid_path")

        assert exc.error_code == "CONFIGURATION_ERROR"
        assert exc.details["config_key"] == "grid_path"

    def test_custom_suggestions(self):
        """Test custom suggestions replace the defaults."""
        exc = DataSourceError("Missing", suggestions=["Try again"])
        assert exc.suggestions == ["Try again"]
