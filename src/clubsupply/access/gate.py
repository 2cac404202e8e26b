"""Access gate: resolve a bearer token to a coordinator with the required access level."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from clubsupply.access.coordinator import AccessLevel, Coordinator
from clubsupply.access.session import Session
from clubsupply.shared.errors import AccessDenied, Unauthenticated


def authorize(token, required: AccessLevel) -> Coordinator:
    """Return the token's coordinator if their access level is exactly ``required``.

    Raises ``Unauthenticated`` for a missing, unknown or expired token,
    ``AccessDenied`` for any other access level, and ``ObjectNotFoundError``
    when the account was deleted after login.
    """
    if not token:
        raise Unauthenticated("Authentication required")

    session = current_domain.repository_for(Session).find_by_token(token)
    if session is None or session.is_expired():
        raise Unauthenticated("Session is invalid or has expired")

    coordinator = current_domain.repository_for(Coordinator).get_or_none(session.coordinator_id)
    if coordinator is None:
        raise ObjectNotFoundError("Account for this session no longer exists")

    if not coordinator.has_access(required):
        raise AccessDenied(f"This operation requires {required.value} access")

    return coordinator
