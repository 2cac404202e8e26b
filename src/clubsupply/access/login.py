"""Login: verify credentials and open a session."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from clubsupply.access.coordinator import Coordinator, normalize_email
from clubsupply.access.registration import find_coordinator
from clubsupply.access.session import Session
from clubsupply.domain import clubsupply
from clubsupply.settings import get_settings
from clubsupply.shared.errors import Unauthenticated
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="Session")
class OpenSession:
    coordinator_id = Identifier(required=True)


@clubsupply.command_handler(part_of=Session)
class SessionHandler:
    @handle(OpenSession)
    def open_session(self, command):
        coordinator = current_domain.repository_for(Coordinator).get(command.coordinator_id)
        session = Session.open(coordinator.id, get_settings().session_ttl_seconds)
        current_domain.repository_for(Session).add(session)

        logger.info("session_opened", coordinator_id=str(coordinator.id), expires_at=session.expires_at.isoformat())
        return {"token": session.token, "expires_at": session.expires_at, "coordinator": coordinator.profile()}


def login(email, password):
    """Check the password and return ``{token, expires_at, coordinator}``.

    The password is checked here rather than in a command so it never enters
    the command log.
    """
    coordinator = find_coordinator(email)
    if coordinator is None:
        raise ObjectNotFoundError(f"No account found for {normalize_email(email)}")

    if not coordinator.check_password(password):
        logger.warning("login_rejected", coordinator_id=str(coordinator.id))
        raise Unauthenticated("Invalid credentials")

    return current_domain.process(OpenSession(coordinator_id=str(coordinator.id)), asynchronous=False)
