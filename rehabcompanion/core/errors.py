"""Domain errors raised by the rules engine and services."""

from __future__ import annotations


class RehabError(ValueError):
    """Base class for errors the request handlers turn into HTTP responses."""

    status_code = 400


class ValidationError(RehabError):
    """A field is missing or holds an invalid value."""


class DuplicateSubmissionError(RehabError):
    """A mood check already exists for that user and day."""

    status_code = 409


class AlreadyCompletedError(RehabError):
    """The task was completed before."""


class NotFoundError(RehabError):
    """Unknown task, patient, user, message or mood check."""

    status_code = 404


class ForbiddenError(RehabError):
    """The requester does not own the resource or is not assigned to the patient."""

    status_code = 403
