"""
Error types for dupsketch.

Only construction and configuration can fail; sketching and index
operations are total over their inputs.
"""

from typing import Optional, Any, Dict


class DupSketchError(Exception):
    """
    Base exception for all dupsketch errors.

    Carries a structured ``details`` mapping alongside the message.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgumentError(DupSketchError, ValueError):
    """
    Raised when a sketcher or configuration is given an out-of-range value.
    """

    def __init__(self, message: str,
                 parameter: Optional[str] = None,
                 value: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize invalid argument error.

        Args:
            message: Error message
            parameter: Name of the offending parameter
            value: Rejected value
            details: Additional error context
        """
        super().__init__(message, details)
        self.parameter = parameter
        self.value = value

        self.details.update({
            'parameter': parameter,
            'value': value
        })


class ConfigError(DupSketchError):
    """
    Raised when a configuration file or environment override can't be used.
    """

    def __init__(self, message: str,
                 source: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.source = source
        self.details['source'] = source


def is_invalid_argument(error: Exception, parameter: Optional[str] = None) -> bool:
    """Check if error is an invalid argument error, optionally for one parameter."""
    if not isinstance(error, InvalidArgumentError):
        return False
    return parameter is None or error.parameter == parameter
