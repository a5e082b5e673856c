"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger


class BlinkVocabError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(BlinkVocabError):
    """A referenced user, word, dictionary or learning record does not exist."""
    pass


class OwnershipViolationError(BlinkVocabError):
    """A learning record was addressed by a user who does not own it."""
    pass


class ValidationError(BlinkVocabError):
    """Data validation errors."""
    pass


class InvalidStageError(ValidationError):
    """A scheduler stage outside the accepted range."""
    pass


class PersistenceFailure(BlinkVocabError):
    """A unit of work could not be committed and was rolled back."""
    pass


def handle_not_found_error(error: NotFoundError) -> HTTPException:
    """Handle missing resources."""
    logger.info(f"Not found: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message,
    )


def handle_ownership_violation(error: OwnershipViolationError) -> HTTPException:
    """Handle access to another learner's records."""
    logger.warning(f"Ownership violation: {error.message} {error.details}")
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=error.message,
    )


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=422,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_persistence_failure(error: PersistenceFailure) -> HTTPException:
    """Handle rolled back transactions."""
    logger.error(f"Persistence failure: {error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Database operation failed. Please try again later."
    )


def to_http_exception(error: BlinkVocabError) -> HTTPException:
    """Translate a domain error into the matching HTTP response."""
    if isinstance(error, NotFoundError):
        return handle_not_found_error(error)
    if isinstance(error, OwnershipViolationError):
        return handle_ownership_violation(error)
    if isinstance(error, ValidationError):
        return handle_validation_error(error)
    if isinstance(error, PersistenceFailure):
        return handle_persistence_failure(error)
    logger.error(f"Unhandled application error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message
    )
