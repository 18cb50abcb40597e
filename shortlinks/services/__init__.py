"""
Services module for business logic separation.

This module contains the link service, the storage contract it depends on
and the short code generator, keeping them separate from API endpoints and
database models.
"""

from shortlinks.services.code_generator import generate_short_code
from shortlinks.services.link_service import LinkService
from shortlinks.services.link_store import (
    DeleteOutcome,
    InMemoryLinkStore,
    LinkStore,
    SQLLinkStore,
)

__all__ = [
    "DeleteOutcome",
    "InMemoryLinkStore",
    "LinkService",
    "LinkStore",
    "SQLLinkStore",
    "generate_short_code",
]
