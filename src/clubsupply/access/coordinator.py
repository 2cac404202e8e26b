"""Coordinator aggregate: the requester account behind a cart."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.fields import DateTime, String

from clubsupply.access.credentials import verify_password
from clubsupply.access.events import CoordinatorPasswordReset, CoordinatorPromoted, CoordinatorRegistered
from clubsupply.domain import clubsupply
from clubsupply.shared.email import EmailAddress


class AccessLevel(Enum):
    """The two access tiers. They are distinct grants, not a hierarchy."""

    USER = "user"
    BOSSLEVEL = "bosslevel"


def normalize_email(value):
    return (value or "").strip().lower()


@clubsupply.aggregate
class Coordinator:
    coordinator_name: String(required=True, max_length=100, sanitize=False)
    club_name: String(required=True, max_length=150, unique=True, sanitize=False)
    mobile: String(required=True, max_length=20, sanitize=False)
    email: String(required=True, max_length=254, unique=True, sanitize=False)
    password_hash: String(required=True, max_length=512, sanitize=False)
    access: String(choices=AccessLevel, default=AccessLevel.USER.value)
    registered_at: DateTime()

    @invariant.post
    def email_must_be_an_address(self):
        if self.email:
            EmailAddress(address=self.email)

    @classmethod
    def register(cls, coordinator_name, club_name, mobile, email, password_hash):
        """Self-registration always yields a plain ``user`` account."""
        coordinator = cls(
            coordinator_name=coordinator_name,
            club_name=club_name,
            mobile=mobile,
            email=EmailAddress(address=normalize_email(email)).address,
            password_hash=password_hash,
            access=AccessLevel.USER.value,
            registered_at=datetime.now(UTC),
        )
        coordinator.raise_(
            CoordinatorRegistered(
                coordinator_id=str(coordinator.id),
                email=coordinator.email,
                club_name=coordinator.club_name,
                access=coordinator.access,
            )
        )
        return coordinator

    def check_password(self, password):
        return verify_password(self.password_hash, password)

    def change_password(self, password_hash):
        self.password_hash = password_hash
        self.raise_(CoordinatorPasswordReset(coordinator_id=str(self.id), email=self.email))

    def has_access(self, level):
        value = level.value if isinstance(level, AccessLevel) else level
        return self.access == value

    def promote(self):
        self.access = AccessLevel.BOSSLEVEL.value
        self.raise_(CoordinatorPromoted(coordinator_id=str(self.id), email=self.email, access=self.access))

    def profile(self):
        return {
            "id": str(self.id),
            "coordinator_name": self.coordinator_name,
            "club_name": self.club_name,
            "mobile": self.mobile,
            "email": self.email,
            "access": self.access,
        }
