"""
Custom exceptions for the application.
"""


class StudyLoopException(Exception):
    """Base exception for all StudyLoop application exceptions."""
    pass


class ValidationError(StudyLoopException):
    """Raised when validation fails."""
    pass


class NotFoundError(StudyLoopException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(StudyLoopException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class ProjectorInvariantError(StudyLoopException):
    """Raised when the review projector stops moving due dates forward."""
    pass
