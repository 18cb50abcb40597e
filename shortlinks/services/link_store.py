"""
Link Store

The persistence contract for Link records and its implementations:
- SQLLinkStore: async SQLAlchemy session (SQLite or PostgreSQL)
- InMemoryLinkStore: dict-backed substitute used by tests

The store is the only component that performs storage I/O. Every failure
talking to the database is raised as StorageError after the session has
been rolled back; nothing here terminates the process.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import ConflictError, StorageError
from shortlinks.db.models import LINK_ID_MAX, LINK_ID_MIN, Link

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteOutcome:
    """Result of a delete: 0 if no record matched, 1 if one was removed."""
    rows_affected: int


class LinkStore(ABC):
    """
    Abstract storage contract for Link records.

    Implementations must raise StorageError for backend failures and
    ConflictError when a short code is already taken.
    """

    @abstractmethod
    async def list(self) -> List[Link]:
        """Return all links in the store's default order."""

    @abstractmethod
    async def find_by_short_code(self, code: str, exact: bool = False) -> Optional[Link]:
        """
        Return the first link whose short_url contains `code`.

        Matching is a case-sensitive substring test unless `exact` is set,
        in which case short_url must equal `code`.
        """

    @abstractmethod
    async def short_code_exists(self, code: str) -> bool:
        """Return True if a link already uses exactly this short code."""

    @abstractmethod
    async def insert(self, url: str, short_url: str) -> Link:
        """Persist a new link and return it with its assigned id."""

    @abstractmethod
    async def delete(self, link_id: int) -> DeleteOutcome:
        """Remove the link with the given id, if any."""


class SQLLinkStore(LinkStore):
    """LinkStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self) -> List[Link]:
        try:
            result = await self.session.execute(select(Link).order_by(Link.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._failure("list links", e)

    async def find_by_short_code(self, code: str, exact: bool = False) -> Optional[Link]:
        try:
            if exact:
                statement = select(Link).where(Link.short_url == code).limit(1)
                result = await self.session.execute(statement)
                return result.scalars().first()

            # LIKE is case-insensitive on SQLite, so confirm each candidate
            statement = (
                select(Link)
                .where(Link.short_url.contains(code, autoescape=True))
                .order_by(Link.id)
            )
            result = await self.session.execute(statement)
            for link in result.scalars():
                if code in link.short_url:
                    return link
            return None
        except SQLAlchemyError as e:
            raise await self._failure(f"find link by code '{code}'", e)

    async def short_code_exists(self, code: str) -> bool:
        try:
            statement = select(Link.id).where(Link.short_url == code).limit(1)
            result = await self.session.execute(statement)
            return result.first() is not None
        except SQLAlchemyError as e:
            raise await self._failure(f"check short code '{code}'", e)

    async def insert(self, url: str, short_url: str) -> Link:
        link = Link(url=url, short_url=short_url)
        self.session.add(link)
        try:
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(link)
        except IntegrityError as e:
            await self._rollback()
            logger.warning(f"Short code '{short_url}' rejected by unique index")
            raise ConflictError(short_url, original_error=e)
        except SQLAlchemyError as e:
            raise await self._failure("create link", e)

        logger.debug(f"saved: id={link.id} short_url={link.short_url}")
        return link

    async def delete(self, link_id: int) -> DeleteOutcome:
        # Ids outside the column range cannot exist and overflow the driver
        if not LINK_ID_MIN <= link_id <= LINK_ID_MAX:
            logger.debug(f"deleted: id={link_id} out of range, rows_affected=0")
            return DeleteOutcome(rows_affected=0)

        try:
            result = await self.session.execute(delete(Link).where(Link.id == link_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._failure(f"delete link {link_id}", e)

        outcome = DeleteOutcome(rows_affected=result.rowcount or 0)
        logger.debug(f"deleted: id={link_id} rows_affected={outcome.rows_affected}")
        return outcome

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Rollback failed: {e}")

    async def _failure(self, action: str, error: SQLAlchemyError) -> StorageError:
        await self._rollback()
        logger.error(f"Failed to {action}: {error}", exc_info=True)
        return StorageError(f"Failed to {action}", original_error=error)


class InMemoryLinkStore(LinkStore):
    """
    Dict-backed LinkStore.

    Assigns increasing ids and rejects duplicate short codes the same way
    the unique index does. Not shared between processes.
    """

    def __init__(self):
        self._links: dict[int, Link] = {}
        self._next_id = 1

    async def list(self) -> List[Link]:
        return [self._links[link_id] for link_id in sorted(self._links)]

    async def find_by_short_code(self, code: str, exact: bool = False) -> Optional[Link]:
        for link in await self.list():
            matched = link.short_url == code if exact else code in link.short_url
            if matched:
                return link
        return None

    async def short_code_exists(self, code: str) -> bool:
        return self._taken(code)

    async def insert(self, url: str, short_url: str) -> Link:
        if self._taken(short_url):
            raise ConflictError(short_url)

        link = Link(id=self._next_id, url=url, short_url=short_url)
        self._links[link.id] = link
        self._next_id += 1
        return link

    async def delete(self, link_id: int) -> DeleteOutcome:
        if self._links.pop(link_id, None) is None:
            return DeleteOutcome(rows_affected=0)
        return DeleteOutcome(rows_affected=1)

    def _taken(self, code: str) -> bool:
        return any(link.short_url == code for link in self._links.values())
