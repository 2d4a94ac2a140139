"""
Custom exceptions for the run analyzer.

The analysis engine itself reports insufficient data through sentinel
results (0.0, None or an empty list). The exceptions defined here cover the
ambient layer: athlete configuration and parsing of user-entered race data.
Each exception carries:
- A descriptive message
- An error code
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_RACE_TIME = "INVALID_RACE_TIME"
    UNKNOWN_RACE_DISTANCE = "UNKNOWN_RACE_DISTANCE"


class RunAnalyzerError(Exception):
    """
    Base exception for all run analyzer errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class ConfigurationError(RunAnalyzerError):
    """Raised when the athlete configuration is invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            details=error_details,
        )


class RaceTimeParseError(RunAnalyzerError, ValueError):
    """Raised when a race time string cannot be parsed."""

    def __init__(self, time_str: str) -> None:
        super().__init__(
            message=f"Invalid time format: {time_str}",
            code=ErrorCode.INVALID_RACE_TIME,
            details={"value": time_str},
        )


class UnknownRaceDistanceError(RunAnalyzerError, ValueError):
    """Raised when a race distance label is not recognized."""

    def __init__(self, distance: str) -> None:
        super().__init__(
            message=f"Unknown race distance: {distance}",
            code=ErrorCode.UNKNOWN_RACE_DISTANCE,
            details={"value": distance},
        )
