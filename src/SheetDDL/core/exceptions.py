"""
Custom exceptions for the SheetDDL schema generator.

This module defines a hierarchy of domain-specific exceptions raised by the
data source, sinks and CLI plumbing. The inference core never raises; every
column falls back to NVARCHAR instead. Each exception inherits from
`SheetDDLError`, which allows structured error reporting with optional details.
"""
from typing import Optional, Any


class SheetDDLError(Exception):
    """Base exception for all SheetDDL errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize exception with message and optional details."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(SheetDDLError):
    """Raised when configuration is invalid or missing."""
    pass


class FileDiscoveryError(SheetDDLError):
    """Raised when file discovery fails."""
    pass


class SourceNotFoundError(SheetDDLError):
    """Raised when no usable data source can be found or read."""
    pass


class SheetNotFoundError(SourceNotFoundError):
    """Raised when the requested worksheet does not exist in a workbook."""
    pass


class EmptyDatasetError(SheetDDLError):
    """Raised when a data source yields zero rows."""
    pass


class SinkError(SheetDDLError):
    """Raised when the generated SQL cannot be written or executed."""
    pass
