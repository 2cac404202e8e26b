from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from clubsupply.access.challenge import VerificationChallenge, generate_code
from clubsupply.access.session import Session


class TestVerificationChallenge:
    def test_codes_are_six_digits(self):
        for _ in range(50):
            code = generate_code()
            assert len(code) == 6
            assert code.isdigit()
            assert code[0] != "0"

    def test_correct_code_verifies(self):
        challenge = VerificationChallenge.issue("asha@example.org", ttl_seconds=600)
        challenge.verify(challenge.code)

    def test_wrong_code_rejected(self):
        challenge = VerificationChallenge.issue("asha@example.org", ttl_seconds=600)
        wrong = "999999" if challenge.code != "999999" else "100000"

        with pytest.raises(ValidationError) as exc:
            challenge.verify(wrong)
        assert "code" in exc.value.messages

    def test_expired_code_rejected(self):
        challenge = VerificationChallenge.issue("asha@example.org", ttl_seconds=600)
        later = datetime.now(UTC) + timedelta(seconds=601)

        assert challenge.is_expired(later)
        with pytest.raises(ValidationError):
            challenge.verify(challenge.code, now=later)

    def test_reissue_restarts_the_clock(self):
        challenge = VerificationChallenge.issue("asha@example.org", ttl_seconds=1)
        first_expiry = challenge.expires_at

        challenge.reissue(ttl_seconds=600)

        assert challenge.expires_at > first_expiry
        assert not challenge.is_expired()

    def test_missing_code_rejected(self):
        challenge = VerificationChallenge.issue("asha@example.org", ttl_seconds=600)
        with pytest.raises(ValidationError):
            challenge.verify(None)


class TestSession:
    def test_tokens_are_unique_and_opaque(self):
        first = Session.open("coordinator-1", ttl_seconds=3600)
        second = Session.open("coordinator-1", ttl_seconds=3600)

        assert first.token != second.token
        assert "coordinator-1" not in first.token

    def test_expiry(self):
        session = Session.open("coordinator-1", ttl_seconds=3600)

        assert not session.is_expired()
        assert session.is_expired(datetime.now(UTC) + timedelta(hours=2))
