"""Optimistic-concurrency retry for command processing.

Aggregates carry a ``_version``; when two requests read-modify-write the same
aggregate, the loser's commit raises ``ExpectedVersionError``. Re-processing
the command re-reads the aggregate, so accumulated quantities are never lost.
"""

import random
import time

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from clubsupply.settings import get_settings
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)

BASE_DELAY_MS = 20
MAX_DELAY_MS = 500
JITTER_MS = 20


def backoff_delay_ms(attempt: int) -> int:
    return min(BASE_DELAY_MS * (2**attempt) + random.randint(0, JITTER_MS), MAX_DELAY_MS)


def process_with_retry(command, max_retries: int | None = None):
    """Process ``command`` synchronously, retrying on version conflicts.

    Returns the handler's result. After ``max_retries`` retries the last
    ``ExpectedVersionError`` propagates.
    """
    if max_retries is None:
        max_retries = get_settings().conflict_retry_attempts

    attempt = 0
    while True:
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            if attempt >= max_retries:
                logger.error(
                    "concurrent_update_gave_up",
                    command=command.__class__.__name__,
                    attempts=attempt + 1,
                    error=str(exc),
                )
                raise

            delay_ms = backoff_delay_ms(attempt)
            logger.warning(
                "concurrent_update_retry",
                command=command.__class__.__name__,
                attempt=attempt + 1,
                delay_ms=delay_ms,
            )
            time.sleep(delay_ms / 1000.0)
            attempt += 1
