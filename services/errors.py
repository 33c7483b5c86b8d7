# services/errors.py
"""
Domain errors raised by the service layer.

The HTTP layer maps these to status codes in api/app/main.py; services
never raise HTTPException themselves.
"""
from __future__ import annotations


class ClimbLinkError(Exception):
    """Base class for expected, client-visible failures."""

    status_code = 500


class InvalidInputError(ClimbLinkError):
    status_code = 400


class ProfileNotFoundError(ClimbLinkError):
    status_code = 404

    def __init__(self, reference: str | int):
        self.reference = reference
        super().__init__(f"Profile not found: {reference}")


class InvalidProfileTokenError(InvalidInputError, ValueError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid profile id: {token!r}")
