"""
Centralized error handling for the card scanner.

This module provides the exception hierarchy shared by the pipeline and its
collaborators, plus a helper for logging degraded (non-fatal) failures with
consistent structured context.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


class CardScannerError(Exception):
    """Base exception class for all card scanner errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(CardScannerError):
    """Raised when there are configuration or environment variable issues."""
    pass


class ImageError(CardScannerError):
    """Raised when image data is missing or cannot be decoded."""
    pass


class OCRError(CardScannerError):
    """Raised when OCR processing fails or produces invalid results."""
    pass


class ResolutionError(CardScannerError):
    """Raised when card validation fails due to API issues or invalid data."""
    pass


class PricingError(CardScannerError):
    """Raised when pricing data extraction or processing fails."""
    pass


class NetworkError(CardScannerError):
    """Raised when network requests fail."""
    pass


class ScanError(CardScannerError):
    """The single failure a scan reports to its caller.

    ``message`` is always the user-facing text; ``stage`` names the pipeline
    stage that was running when the scan failed.
    """

    def __init__(self, message: str, stage: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.stage = stage


class ScanInProgressError(CardScannerError):
    """Raised when a scan is started on a pipeline that is already scanning."""
    pass


@dataclass
class ErrorContext:
    """Context information for error reporting."""
    operation: str
    module: str
    function: str
    input_data: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None


def handle_error(
    error: BaseException,
    context: ErrorContext,
    logger: Any,
    reraise: bool = True,
    default_return: Any = None
) -> Any:
    """
    Centralized error handling with logging and optional recovery.

    Args:
        error: The exception that occurred
        context: Context information about where the error occurred
        logger: structlog (or stdlib-compatible) logger used for reporting
        reraise: Whether to re-raise the exception after logging
        default_return: Value to return if not re-raising

    Returns:
        The default_return value if not re-raising

    Raises:
        The original exception if reraise is True
    """
    error_msg = f"Error in {context.module}.{context.function} during {context.operation}"

    if isinstance(error, CardScannerError):
        error_msg += f": {error.message}"
        if error.details:
            error_msg += f" | Details: {error.details}"
    else:
        error_msg += f": {str(error) or type(error).__name__}"

    logger.error(
        error_msg,
        error_type=type(error).__name__,
        operation=context.operation,
        error_module=context.module,
        error_function=context.function,
        input_data=context.input_data,
        timestamp=context.timestamp,
    )

    if reraise:
        raise error

    return default_return
