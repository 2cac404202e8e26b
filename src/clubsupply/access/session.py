"""Session aggregate: an opaque bearer token issued at login."""

import secrets
from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, Identifier, String

from clubsupply.access.events import SessionOpened
from clubsupply.domain import clubsupply


@clubsupply.aggregate
class Session:
    token: String(required=True, max_length=128, unique=True, sanitize=False)
    coordinator_id: Identifier(required=True)
    opened_at: DateTime(required=True)
    expires_at: DateTime(required=True)

    @classmethod
    def open(cls, coordinator_id, ttl_seconds):
        now = datetime.now(UTC)
        session = cls(
            token=secrets.token_urlsafe(32),
            coordinator_id=coordinator_id,
            opened_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        session.raise_(
            SessionOpened(
                session_id=str(session.id),
                coordinator_id=str(coordinator_id),
                expires_at=session.expires_at,
            )
        )
        return session

    def is_expired(self, now=None):
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return now >= expires_at


@clubsupply.repository(part_of=Session)
class SessionRepository:
    def find_by_token(self, token) -> Session | None:
        if not token:
            return None
        return self.query.filter(token=token).all().first
