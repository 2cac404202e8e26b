"""Registration allow-list read from a CSV file with an ``email`` column."""

import csv
from pathlib import Path

from clubsupply.access.coordinator import normalize_email
from clubsupply.settings import get_settings
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


def load_allowed_emails(path=None) -> set[str]:
    """Emails allowed to request a registration code, trimmed and lower-cased.

    A missing file means nobody is allowed.
    """
    csv_path = Path(path or get_settings().allowed_emails_csv)
    if not csv_path.exists():
        logger.warning("allow_list_missing", path=str(csv_path))
        return set()

    with csv_path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        emails = {normalize_email(row.get("email")) for row in reader}

    emails.discard("")
    return emails


def is_allowed(email, path=None) -> bool:
    return normalize_email(email) in load_allowed_emails(path)
