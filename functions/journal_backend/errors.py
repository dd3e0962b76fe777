"""
Domain errors shared by the HTTP API and the cloud function entry point.

Each error carries the HTTP status it maps to and a human readable message
that is returned to clients as ``{"message": ...}``.
"""

from __future__ import annotations

from typing import Iterable


class JournalApiError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(JournalApiError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(JournalApiError):
    status_code = 404


class AuthError(JournalApiError):
    """Unknown identifier or wrong password."""

    status_code = 401


class StoreError(JournalApiError):
    """The backing store rejected or failed a call."""

    status_code = 500


class MethodNotAllowed(JournalApiError):
    status_code = 405

    def __init__(self, method: str, allowed: Iterable[str]):
        super().__init__(f"Method {method} Not Allowed")
        self.allowed = list(allowed)


def format_validation_errors(errors: Iterable[dict]) -> str:
    """Flatten pydantic error dicts into a single readable line."""
    parts = []
    for error in errors:
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"
