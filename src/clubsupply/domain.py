"""Domain initialization and configuration."""

from protean.domain import Domain

from clubsupply.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="clubsupply")

logger = get_logger(__name__)

# Domain Composition Root
clubsupply = Domain(name="clubsupply")
