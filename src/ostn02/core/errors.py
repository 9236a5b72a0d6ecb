"""
Custom exception hierarchy for the OSTN02 transformation.

This module defines the errors raised by grid lookup, dataset parsing
and projection so that callers can tell "outside the grid" apart from
"inside the grid but no data" and from a corrupt dataset.
"""

from typing import Any, Dict, Iterable, List, Optional


class OSTN02Exception(Exception):
    """
    Base exception for all ostn02 errors.

    Attributes:
        error_code: String identifier for the error type
        message: User-friendly error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize OSTN02Exception.

        Args:
            message: User-friendly error message
            error_code: String identifier for the error type
            details: Technical details for logging
            suggestions: List of suggestions for resolution
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        """Detailed string representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}')"
        )


class OutOfRangeError(OSTN02Exception):
    """
    Raised when a coordinate falls outside the grid rectangle.

    Expected for coordinates far outside Great Britain.
    """

    def __init__(
        self,
        message: str,
        easting: Optional[float] = None,
        northing: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize OutOfRangeError.

        Args:
            message: User-friendly error message
            easting: Offending easting, if known
            northing: Offending northing, if known
            details: Technical details about the range failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if easting is not None:
            error_details["easting"] = easting
        if northing is not None:
            error_details["northing"] = northing

        default_suggestions = [
            "Check the coordinate is an ETRS89 position projected to the National Grid",
            "Coordinates must lie within 0-700 km east and 0-1250 km north",
        ]

        super().__init__(
            message=message,
            error_code="OUT_OF_RANGE",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class RecordNotFoundError(OSTN02Exception):
    """
    Raised when a grid node inside the grid rectangle has no record.

    Distinct from OutOfRangeError: the coordinate is within the nominal
    extent but the dataset has no coverage there (e.g. offshore cells).
    """

    def __init__(
        self,
        message: str,
        node_ids: Optional[Iterable[int]] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize RecordNotFoundError.

        Args:
            message: User-friendly error message
            node_ids: Node ids that could not be resolved
            details: Technical details about the lookup
            suggestions: List of suggestions for resolution
        """
        self.node_ids = sorted(node_ids) if node_ids is not None else []
        error_details = details or {}
        if self.node_ids:
            error_details["node_ids"] = self.node_ids

        super().__init__(
            message=message,
            error_code="RECORD_NOT_FOUND",
            details=error_details,
            suggestions=suggestions or ["The coordinate lies in an area without grid coverage"],
        )


class MalformedRecordError(OSTN02Exception):
    """
    Raised when a dataset line cannot be decoded into a grid node record.
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize MalformedRecordError.

        Args:
            message: User-friendly error message
            line_number: 1-based line number in the dataset, if known
            line: Offending line content
            details: Technical details about the parse failure
            suggestions: List of suggestions for fixing the dataset
        """
        error_details = details or {}
        if line_number:
            error_details["line_number"] = line_number
        if line is not None:
            error_details["line"] = line[:120]

        default_suggestions = [
            "Verify the dataset is the OSTN02_OSGM02_GB.txt distribution",
            "Re-download the correction grid if it may be corrupt",
        ]

        super().__init__(
            message=message,
            error_code="MALFORMED_RECORD",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class DataSourceError(OSTN02Exception):
    """
    Raised when the correction dataset cannot be opened or read.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize DataSourceError.

        Args:
            message: User-friendly error message
            file_path: Path of the dataset involved in the error
            details: Technical details about the I/O failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if file_path:
            error_details["file_path"] = file_path

        super().__init__(
            message=message,
            error_code="DATA_SOURCE_ERROR",
            details=error_details,
            suggestions=suggestions or ["Check the grid file path and permissions"],
        )


class ProjectionError(OSTN02Exception):
    """
    Raised when projecting geographic coordinates to the grid fails.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ProjectionError.

        Args:
            message: User-friendly error message
            details: Technical details about the projection failure
            suggestions: List of suggestions for resolution
        """
        default_suggestions = [
            "Check latitude and longitude are in decimal degrees",
            "Verify the PROJ installation used by pyproj",
        ]

        super().__init__(
            message=message,
            error_code="PROJECTION_ERROR",
            details=details,
            suggestions=suggestions or default_suggestions,
        )


class ConfigurationError(OSTN02Exception):
    """
    Raised when configuration is missing or invalid.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: User-friendly error message
            config_key: Configuration key that is invalid
            details: Technical details about the configuration error
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if config_key:
            error_details["config_key"] = config_key

        default_suggestions = [
            "Check environment variables are set correctly",
            "Set OSTN02_GRID_PATH to the correction grid file",
        ]

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )
