"""Account lifecycle: verification codes, registration, password reset, promotion.

Passwords reach these commands already hashed, so no plaintext ends up in
the command log.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from clubsupply.access.allow_list import is_allowed
from clubsupply.access.challenge import VerificationChallenge
from clubsupply.access.coordinator import Coordinator, normalize_email
from clubsupply.domain import clubsupply
from clubsupply.mail import get_mailer
from clubsupply.settings import get_settings
from clubsupply.shared.errors import AccessDenied, ConflictError, unique_violation
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="VerificationChallenge")
class RequestVerificationCode:
    email: String(required=True, max_length=254, sanitize=False)


@clubsupply.command(part_of="VerificationChallenge")
class RequestPasswordReset:
    email: String(required=True, max_length=254, sanitize=False)


@clubsupply.command(part_of="Coordinator")
class RegisterCoordinator:
    coordinator_name: String(required=True, max_length=100, sanitize=False)
    club_name: String(required=True, max_length=150, sanitize=False)
    mobile: String(required=True, max_length=20, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=512, sanitize=False)
    code: String(required=True, max_length=6)


@clubsupply.command(part_of="Coordinator")
class ResetPassword:
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=512, sanitize=False)
    code: String(required=True, max_length=6)


@clubsupply.command(part_of="Coordinator")
class PromoteCoordinator:
    email: String(required=True, max_length=254, sanitize=False)


def find_coordinator(email):
    return current_domain.repository_for(Coordinator).query.filter(email=normalize_email(email)).all().first


def _find_challenge(email):
    return current_domain.repository_for(VerificationChallenge).query.filter(email=email).all().first


def _issue_code(email, subject):
    settings = get_settings()
    repo = current_domain.repository_for(VerificationChallenge)

    challenge = _find_challenge(email)
    if challenge is None:
        challenge = VerificationChallenge.issue(email, settings.verification_code_ttl_seconds)
    else:
        challenge.reissue(settings.verification_code_ttl_seconds)
    repo.add(challenge)

    minutes = settings.verification_code_ttl_seconds // 60
    result = get_mailer().send(
        to=email,
        subject=subject,
        body=f"Your verification code is {challenge.code}. It expires in {minutes} minutes.",
    )
    if result.get("status") != "sent":
        logger.error("verification_email_failed", email=email, error=result.get("error"))
        raise RuntimeError(f"Could not send verification email: {result.get('error')}")

    logger.info("verification_code_issued", email=email, message_id=result.get("message_id"))
    return challenge


def _consume_challenge(email, code):
    challenge = _find_challenge(email)
    if challenge is None:
        raise ValidationError({"code": ["Invalid or expired verification code"]})
    challenge.verify(code)
    current_domain.repository_for(VerificationChallenge)._dao.delete(challenge)


@clubsupply.command_handler(part_of=VerificationChallenge)
class VerificationCodeHandler:
    @handle(RequestVerificationCode)
    def request_verification_code(self, command):
        email = normalize_email(command.email)
        if not is_allowed(email):
            logger.warning("registration_code_denied", email=email)
            raise AccessDenied("This email is not allowed to register")

        _issue_code(email, subject="Your club supply registration code")

    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        email = normalize_email(command.email)
        if find_coordinator(email) is None:
            raise ObjectNotFoundError(f"No account found for {email}")

        _issue_code(email, subject="Your club supply password reset code")


@clubsupply.command_handler(part_of=Coordinator)
class RegistrationHandler:
    @handle(RegisterCoordinator)
    def register_coordinator(self, command):
        email = normalize_email(command.email)
        repo = current_domain.repository_for(Coordinator)

        _consume_challenge(email, command.code)

        if repo.query.filter(club_name=command.club_name).all().first is not None:
            raise ConflictError(f"A coordinator for club '{command.club_name}' already exists")
        if find_coordinator(email) is not None:
            raise ConflictError(f"An account for {email} already exists")

        coordinator = Coordinator.register(
            coordinator_name=command.coordinator_name,
            club_name=command.club_name,
            mobile=command.mobile,
            email=email,
            password_hash=command.password_hash,
        )
        try:
            repo.add(coordinator)
        except ValidationError as exc:
            if unique_violation(exc, "club_name", "email"):
                raise ConflictError("Club name or email is already registered") from exc
            raise

        logger.info("coordinator_registered", coordinator_id=str(coordinator.id), email=email)
        return coordinator.profile()

    @handle(ResetPassword)
    def reset_password(self, command):
        email = normalize_email(command.email)
        _consume_challenge(email, command.code)

        coordinator = find_coordinator(email)
        if coordinator is None:
            raise ObjectNotFoundError(f"No account found for {email}")

        coordinator.change_password(command.password_hash)
        current_domain.repository_for(Coordinator).add(coordinator)
        logger.info("coordinator_password_reset", coordinator_id=str(coordinator.id))

    @handle(PromoteCoordinator)
    def promote_coordinator(self, command):
        coordinator = find_coordinator(command.email)
        if coordinator is None:
            raise ObjectNotFoundError(f"No account found for {normalize_email(command.email)}")

        coordinator.promote()
        current_domain.repository_for(Coordinator).add(coordinator)
        logger.info("coordinator_promoted", coordinator_id=str(coordinator.id))
        return coordinator.profile()
