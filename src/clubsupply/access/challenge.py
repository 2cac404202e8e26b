"""VerificationChallenge aggregate: a short-lived code mailed to an address.

There is one challenge per email. Asking again replaces the code and
restarts the clock. The same challenge serves registration and password
reset.
"""

import secrets
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from clubsupply.access.events import VerificationCodeIssued
from clubsupply.domain import clubsupply


def generate_code():
    """Six digits, never starting with zero."""
    return str(100000 + secrets.randbelow(900000))


@clubsupply.aggregate
class VerificationChallenge:
    email: String(required=True, max_length=254, unique=True, sanitize=False)
    code: String(required=True, max_length=6, sanitize=False)
    issued_at: DateTime(required=True)
    expires_at: DateTime(required=True)

    @classmethod
    def issue(cls, email, ttl_seconds):
        now = datetime.now(UTC)
        challenge = cls(
            email=email,
            code=generate_code(),
            issued_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        challenge.raise_(VerificationCodeIssued(email=email, expires_at=challenge.expires_at))
        return challenge

    def reissue(self, ttl_seconds):
        now = datetime.now(UTC)
        self.code = generate_code()
        self.issued_at = now
        self.expires_at = now + timedelta(seconds=ttl_seconds)
        self.raise_(VerificationCodeIssued(email=self.email, expires_at=self.expires_at))

    def is_expired(self, now=None):
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return now >= expires_at

    def verify(self, code, now=None):
        if self.is_expired(now) or not secrets.compare_digest(str(code or ""), self.code):
            raise ValidationError({"code": ["Invalid or expired verification code"]})
