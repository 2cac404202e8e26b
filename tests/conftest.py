import os
from dataclasses import replace
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay and mail adapter before any clubsupply module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["EMAIL_ADAPTER"] = "fake"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def clubsupply_bed():
    from clubsupply.domain import clubsupply

    bed = DomainFixture(clubsupply)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(clubsupply_bed):
    with clubsupply_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def mailer():
    """A fresh in-memory mailer for every test."""
    from clubsupply.mail import get_mailer, reset_mailer

    reset_mailer()
    yield get_mailer()
    reset_mailer()


@pytest.fixture
def allow_list(tmp_path, monkeypatch):
    """Point the registration allow-list at a temporary CSV and return a writer for it."""
    import clubsupply.settings as settings_module

    csv_path = tmp_path / "allowed_emails.csv"
    csv_path.write_text("email\n", encoding="utf-8")
    monkeypatch.setattr(
        settings_module,
        "settings",
        replace(settings_module.settings, allowed_emails_csv=str(csv_path)),
    )

    def allow(*emails):
        with csv_path.open("a", encoding="utf-8") as handle:
            for email in emails:
                handle.write(f"{email}\n")
        return csv_path

    return allow
