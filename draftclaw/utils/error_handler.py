"""
Centralized error handling for the draft assistant.

Every failure the resolution, sequencing, voting and storage layers can
surface is a subclass of DraftClawError. Resolution failures (AmbiguousMatch,
NoMatch) are local: the batch resolver drops the fragment and carries on.
The rest are returned to the caller, which decides whether to re-poll or to
report back to the user.
"""

import logging
from typing import Any, Dict, List, Optional
from dataclasses import dataclass


class DraftClawError(Exception):
    """Base exception class for all draft assistant errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DraftClawError):
    """Raised when there are configuration or environment variable issues."""
    pass


class CatalogError(DraftClawError):
    """Raised when the card data or ratings file cannot be loaded."""
    pass


class InvalidPick(DraftClawError):
    """Raised when a pick id falls outside 1..48 or cannot be parsed."""
    pass


class ResolutionError(DraftClawError):
    """Raised when a text fragment cannot be resolved to a single card."""

    def __init__(self, message: str, fragment: str, candidates: Optional[List[str]] = None):
        super().__init__(message, details={"fragment": fragment, "candidates": candidates or []})
        self.fragment = fragment
        self.candidates = candidates or []


class AmbiguousMatch(ResolutionError):
    """Raised when a fragment matches more than one catalog entry."""
    pass


class NoMatch(ResolutionError):
    """Raised when a fragment matches nothing, even after correction."""
    pass


class IncompleteObservation(DraftClawError):
    """Raised when fewer cards resolved than the pick should offer."""
    pass


class NoVotes(DraftClawError):
    """Raised when a commit is requested for a pick nobody voted on."""
    pass


class InvalidVoteTarget(DraftClawError):
    """Raised when a vote names an index or card that is not on offer."""
    pass


class AlreadyCommitted(DraftClawError):
    """Raised when a pick already holds a different committed selection."""
    pass


class NotGameOwner(DraftClawError):
    """Raised when someone other than the game's owner tries to commit."""
    pass


class GameNotRegistered(DraftClawError):
    """Raised when a user issues a game command without a registered game."""
    pass


class RecordNotFound(DraftClawError):
    """Raised when no draft record exists for the requested game."""
    pass


class StoreError(DraftClawError):
    """Raised when draft storage operations fail."""
    pass


class UploadError(DraftClawError):
    """Raised when a screenshot upload is rejected."""
    pass


class NetworkError(DraftClawError):
    """Raised when network requests fail; `status` is the HTTP status, if any."""

    def __init__(self, message: str, status: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={"status": status, **(details or {})})
        self.status = status


@dataclass
class ErrorContext:
    """Context information for error reporting."""
    operation: str
    module: str
    function: str
    input_data: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None


def handle_error(
    error: Exception,
    context: ErrorContext,
    logger: logging.Logger,
    reraise: bool = True,
    default_return: Any = None
) -> Any:
    """
    Centralized error handling with logging and optional recovery.

    Args:
        error: The exception that occurred
        context: Context information about where the error occurred
        logger: Logger instance to use for error reporting
        reraise: Whether to re-raise the exception after logging
        default_return: Value to return if not re-raising

    Returns:
        The default_return value if not re-raising

    Raises:
        The original exception if reraise is True
    """
    error_msg = f"Error in {context.module}.{context.function} during {context.operation}"

    if isinstance(error, DraftClawError):
        error_msg += f": {error.message}"
        if error.details:
            error_msg += f" | Details: {error.details}"
    else:
        error_msg += f": {str(error)}"

    logger.error(
        error_msg,
        extra={
            "error_type": type(error).__name__,
            "operation": context.operation,
            "error_module": context.module,
            "error_function": context.function,
            "input_data": context.input_data,
            "timestamp": context.timestamp,
        },
        exc_info=True
    )

    if reraise:
        raise error

    return default_return


def safe_execute(
    func,
    *args,
    context: ErrorContext,
    logger: logging.Logger,
    default_return: Any = None,
    **kwargs
) -> Any:
    """
    Safely execute a function with error handling and logging.

    Args:
        func: Function to execute
        context: Error context information
        logger: Logger instance
        default_return: Value to return on error
        *args, **kwargs: Arguments to pass to the function

    Returns:
        Function result or default_return on error
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        return handle_error(e, context, logger, reraise=False, default_return=default_return)


def validate_required_fields(data: Dict[str, Any], required_fields: list, context: ErrorContext) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Dictionary to validate
        required_fields: List of required field names
        context: Error context for reporting

    Raises:
        ConfigurationError: If required fields are missing
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None]

    if missing_fields:
        raise ConfigurationError(
            f"Missing required fields: {missing_fields}",
            details={
                "missing_fields": missing_fields,
                "available_fields": list(data.keys()),
                "operation": context.operation,
            }
        )
