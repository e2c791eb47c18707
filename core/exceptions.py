#!/usr/bin/env python3
"""
Exceptions raised by the matching core and its data layer.
"""


class ServiceException(Exception):
    """Base exception for matching core errors."""
    pass


class NotFoundError(ServiceException):
    """Raised when a referenced seeker, job, skill or language does not exist."""

    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class InvalidRangeError(ServiceException, ValueError):
    """Raised when a proficiency, weight or pagination value is out of bounds."""
    pass


class PreconditionFailed(ServiceException):
    """Raised by callers when a business precondition does not hold.

    The core never raises this itself; it exposes completeness, application
    state and job matchability so the caller can decide.
    """
    pass


class DataAccessError(ServiceException):
    """Raised when a store cannot retrieve the candidate pool or a relation."""
    pass


class RankingCancelledError(ServiceException):
    """Raised when a ranking call is stopped or runs past its deadline."""
    pass
