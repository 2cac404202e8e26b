"""Domain events for coordinator accounts, verification challenges and sessions."""

from protean.fields import DateTime, Identifier, String

from clubsupply.domain import clubsupply


@clubsupply.event(part_of="Coordinator")
class CoordinatorRegistered:
    __version__ = 1

    coordinator_id: Identifier(required=True)
    email: String(required=True, max_length=254, sanitize=False)
    club_name: String(required=True, max_length=150, sanitize=False)
    access: String(required=True, max_length=20)


@clubsupply.event(part_of="Coordinator")
class CoordinatorPasswordReset:
    __version__ = 1

    coordinator_id: Identifier(required=True)
    email: String(required=True, max_length=254, sanitize=False)


@clubsupply.event(part_of="Coordinator")
class CoordinatorPromoted:
    """A coordinator was granted administrator access."""

    __version__ = 1

    coordinator_id: Identifier(required=True)
    email: String(required=True, max_length=254, sanitize=False)
    access: String(required=True, max_length=20)


@clubsupply.event(part_of="VerificationChallenge")
class VerificationCodeIssued:
    """A fresh code was generated for an email. The code itself is not recorded."""

    __version__ = 1

    email: String(required=True, max_length=254, sanitize=False)
    expires_at: DateTime(required=True)


@clubsupply.event(part_of="Session")
class SessionOpened:
    __version__ = 1

    session_id: Identifier(required=True)
    coordinator_id: Identifier(required=True)
    expires_at: DateTime(required=True)
