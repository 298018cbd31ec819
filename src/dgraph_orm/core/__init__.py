"""Configuration and logging for dgraph-orm."""

from dgraph_orm.core.config import Settings, get_settings
from dgraph_orm.core.logging import (
    JSONFormatter,
    get_logger,
    setup_structured_logging,
)

__all__ = [
    "Settings",
    "get_settings",
    "JSONFormatter",
    "get_logger",
    "setup_structured_logging",
]
