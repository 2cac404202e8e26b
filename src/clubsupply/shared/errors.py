"""Error taxonomy shared by every clubsupply module.

Protean's own exceptions carry the common cases: ``ObjectNotFoundError`` for
missing records and ``ValidationError`` for malformed input. The rest are
defined here so the API layer can map each kind to one HTTP status.
"""

from protean.exceptions import (
    InvalidStateError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)

NotFound = ObjectNotFoundError


class ConflictError(InvalidStateError):
    """A uniqueness rule was violated (catalog name, club, email, cart owner)."""


class AccessDenied(ProteanException):
    """The caller is authenticated but lacks the required role or allow-listing."""


class Unauthenticated(ProteanException):
    """Missing, unknown or expired session, or wrong credentials."""


def unique_violation(exc: ValidationError, *fields: str) -> bool:
    """True when a store-level ``ValidationError`` reports a duplicate on one of ``fields``."""
    messages = exc.messages if isinstance(exc.messages, dict) else {}
    return any(
        field in messages and any("already present" in str(message) for message in messages[field])
        for field in fields
    )


__all__ = [
    "AccessDenied",
    "ConflictError",
    "NotFound",
    "Unauthenticated",
    "ValidationError",
    "unique_violation",
]
