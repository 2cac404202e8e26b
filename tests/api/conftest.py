import pytest
from factories import create_coordinator, token_for
from fastapi.testclient import TestClient

from clubsupply.api import create_app
from clubsupply.domain import clubsupply


@pytest.fixture()
def client():
    return TestClient(create_app(clubsupply))


@pytest.fixture()
def requester():
    return create_coordinator()


@pytest.fixture()
def admin():
    return create_coordinator(
        access="bosslevel",
        coordinator_name="Mira Das",
        club_name="Supply Desk",
        mobile="9000000000",
        email="mira@example.org",
    )


@pytest.fixture()
def user_headers(requester):
    return {"Authorization": f"Bearer {token_for(requester)}"}


@pytest.fixture()
def admin_headers(admin):
    return {"Authorization": f"Bearer {token_for(admin)}"}
