"""
Link Service

This service handles the core business logic of the link shortener:
- Listing and resolving links
- Validating a submitted URL and creating a link with a generated code
- Deleting links by id

Design Decisions:
- Stateless: one service is built per request around a per-request store
- Validation happens before any storage call
- Generated codes are checked against the store and regenerated a bounded
  number of times; a unique index conflict from a concurrent writer counts
  as a failed attempt
"""

import logging
from typing import Callable, List, Optional

from shortlinks.core.exceptions import ConflictError
from shortlinks.core.setting import Settings
from shortlinks.core.validators import sanitize_short_code, validate_url
from shortlinks.db.models import Link
from shortlinks.services.code_generator import generate_short_code
from shortlinks.services.link_store import DeleteOutcome, LinkStore

logger = logging.getLogger(__name__)

DEFAULT_CODE_LENGTH = 5
DEFAULT_MAX_ATTEMPTS = 5


class LinkService:
    """
    Orchestrates validation, code generation and store calls.
    """

    def __init__(
        self,
        store: LinkStore,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        exact_match: bool = False,
        code_generator: Callable[[int], str] = generate_short_code,
    ):
        """
        Args:
            store: Storage backend for Link records
            code_length: Length of generated short codes
            max_attempts: Candidate codes to try before raising ConflictError
            exact_match: Resolve codes by equality instead of substring
            code_generator: Function producing a code of a given length
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.exact_match = exact_match
        self.code_generator = code_generator

    @classmethod
    def from_settings(cls, store: LinkStore, settings: Settings) -> "LinkService":
        return cls(
            store,
            code_length=settings.SHORT_CODE_LENGTH,
            max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
            exact_match=settings.SHORT_CODE_EXACT_MATCH,
        )

    async def get_all_links(self) -> List[Link]:
        return await self.store.list()

    async def get_link(self, code: str) -> Optional[Link]:
        """
        Resolve a short code to its link.

        Codes containing anything but [0-9a-zA-Z] cannot match a generated
        code, so they resolve to None without a storage round-trip.
        """
        sanitized_code = sanitize_short_code(code)
        if not sanitized_code:
            logger.debug(f"Rejected short code format: {code!r}")
            return None
        return await self.store.find_by_short_code(sanitized_code, exact=self.exact_match)

    async def create_link(self, url: str) -> Link:
        """
        Create a new link for a URL.

        Args:
            url: The long URL to shorten

        Returns:
            The persisted Link with its id and short code

        Raises:
            ValidationError: If the URL fails the format rule
            ConflictError: If no free short code was found within max_attempts
            StorageError: If the database operation fails
        """
        validate_url(url)

        for attempt in range(1, self.max_attempts + 1):
            short_code = self.code_generator(self.code_length)

            if await self.store.short_code_exists(short_code):
                logger.info(f"Short code collision on attempt {attempt}: {short_code}")
                continue

            try:
                link = await self.store.insert(url, short_code)
            except ConflictError:
                logger.info(f"Short code taken concurrently on attempt {attempt}: {short_code}")
                continue

            logger.debug(f"created: id={link.id} short_url={link.short_url}")
            return link

        logger.error(f"No free short code after {self.max_attempts} attempts")
        raise ConflictError(short_code)

    async def delete_link(self, link_id: int) -> DeleteOutcome:
        outcome = await self.store.delete(link_id)
        logger.debug(f"deleted: id={link_id} rows_affected={outcome.rows_affected}")
        return outcome
