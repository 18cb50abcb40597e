"""Tests for LinkService against the in-memory store."""

from itertools import chain, repeat

import pytest

from shortlinks.core.exceptions import ConflictError, StorageError, ValidationError
from shortlinks.core.setting import Settings
from shortlinks.services.link_service import LinkService
from shortlinks.services.link_store import InMemoryLinkStore


def codes(*values):
    """A code generator replaying `values`, then repeating the last one."""
    iterator = chain(values, repeat(values[-1]))
    return lambda length: next(iterator)


class CountingLinkStore(InMemoryLinkStore):
    """Counts insert calls, including rejected ones."""

    def __init__(self):
        super().__init__()
        self.insert_calls = 0

    async def insert(self, url, short_url):
        self.insert_calls += 1
        return await super().insert(url, short_url)


@pytest.fixture
def memory_store() -> CountingLinkStore:
    return CountingLinkStore()


class RacingLinkStore(InMemoryLinkStore):
    """Reports every code as free, so conflicts only surface on insert."""

    async def short_code_exists(self, code: str) -> bool:
        return False


class BrokenLinkStore(InMemoryLinkStore):

    async def list(self):
        raise StorageError("list links")

    async def insert(self, url, short_url):
        raise StorageError("create link")


class TestCreateLink:

    @pytest.mark.asyncio
    async def test_create_valid_url(self, link_service, memory_store):
        link = await link_service.create_link("https://google.com")

        assert link.id is not None
        assert link.url == "https://google.com"
        assert len(link.short_url) == 5
        assert link.short_url.isalnum()
        assert link in await link_service.get_all_links()

    @pytest.mark.asyncio
    async def test_invalid_urls_never_reach_the_store(self, link_service, memory_store):
        for url in ["not-a-url", "", "example.com", "http://", "https://.x.com", "https://google.com\n"]:
            with pytest.raises(ValidationError) as exc_info:
                await link_service.create_link(url)
            assert exc_info.value.field == "url"
            assert exc_info.value.message == "Url is not valid"

        assert memory_store.insert_calls == 0
        assert await memory_store.list() == []

    @pytest.mark.asyncio
    async def test_trailing_newline_is_rejected(self, link_service, memory_store):
        with pytest.raises(ValidationError):
            await link_service.create_link("https://google.com\n")

        assert memory_store.insert_calls == 0

    @pytest.mark.asyncio
    async def test_ids_are_assigned_by_the_store(self, link_service):
        first = await link_service.create_link("https://example.com/1")
        second = await link_service.create_link("https://example.com/2")
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_code_length_is_configurable(self, memory_store):
        service = LinkService(memory_store, code_length=8)
        link = await service.create_link("https://example.com")
        assert len(link.short_url) == 8

    @pytest.mark.asyncio
    async def test_existing_code_is_regenerated(self, memory_store):
        await memory_store.insert("https://taken.example.com", "AAAAA")
        service = LinkService(memory_store, code_generator=codes("AAAAA", "BBBBB"))

        link = await service.create_link("https://example.com")

        assert link.short_url == "BBBBB"
        assert memory_store.insert_calls == 2

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_conflict(self, memory_store):
        await memory_store.insert("https://taken.example.com", "AAAAA")
        service = LinkService(memory_store, max_attempts=3, code_generator=codes("AAAAA"))

        with pytest.raises(ConflictError) as exc_info:
            await service.create_link("https://example.com")

        assert exc_info.value.short_code == "AAAAA"
        assert len(await memory_store.list()) == 1

    @pytest.mark.asyncio
    async def test_conflict_on_insert_is_retried(self):
        store = RacingLinkStore()
        await store.insert("https://taken.example.com", "AAAAA")
        service = LinkService(store, code_generator=codes("AAAAA", "CCCCC"))

        link = await service.create_link("https://example.com")

        assert link.short_url == "CCCCC"

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self):
        service = LinkService(BrokenLinkStore())
        with pytest.raises(StorageError):
            await service.create_link("https://example.com")

    def test_max_attempts_must_be_positive(self, memory_store):
        with pytest.raises(ValueError):
            LinkService(memory_store, max_attempts=0)


class TestGetLink:

    @pytest.mark.asyncio
    async def test_substring_match(self, link_service, memory_store):
        stored = await memory_store.insert("https://example.com", "abCDE")

        assert await link_service.get_link("bCD") is stored
        assert await link_service.get_link("abCDE") is stored

    @pytest.mark.asyncio
    async def test_no_match_returns_none(self, link_service, memory_store):
        await memory_store.insert("https://example.com", "abCDE")

        assert await link_service.get_link("zzz") is None
        assert await link_service.get_link("bcd") is None  # case-sensitive

    @pytest.mark.asyncio
    async def test_malformed_code_returns_none(self, link_service, memory_store):
        await memory_store.insert("https://example.com", "abCDE")
        assert await link_service.get_link("b-C") is None

    @pytest.mark.asyncio
    async def test_exact_match_mode(self, memory_store):
        stored = await memory_store.insert("https://example.com", "abCDE")
        service = LinkService(memory_store, exact_match=True)

        assert await service.get_link("bCD") is None
        assert await service.get_link("abCDE") is stored

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self):
        service = LinkService(BrokenLinkStore())
        with pytest.raises(StorageError):
            await service.get_all_links()


class TestDeleteLink:

    @pytest.mark.asyncio
    async def test_delete_twice(self, link_service):
        link = await link_service.create_link("https://example.com")

        first = await link_service.delete_link(link.id)
        second = await link_service.delete_link(link.id)

        assert first.rows_affected == 1
        assert second.rows_affected == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, link_service):
        outcome = await link_service.delete_link(999)
        assert outcome.rows_affected == 0


class TestScenarios:

    @pytest.mark.asyncio
    async def test_create_list_delete_resolve(self, link_service):
        before = len(await link_service.get_all_links())

        link = await link_service.create_link("https://google.com")
        assert len(link.short_url) == 5
        assert len(await link_service.get_all_links()) == before + 1

        outcome = await link_service.delete_link(link.id)
        assert outcome.rows_affected == 1
        assert await link_service.get_link(link.short_url) is None

    @pytest.mark.asyncio
    async def test_rejected_url_leaves_store_unchanged(self, link_service, memory_store):
        await link_service.create_link("https://example.com")
        before = await memory_store.list()

        with pytest.raises(ValidationError, match="Url is not valid"):
            await link_service.create_link("not-a-url")

        assert await memory_store.list() == before

    def test_from_settings(self, memory_store):
        settings = Settings(
            _env_file=None,
            SHORT_CODE_LENGTH=7,
            SHORT_CODE_MAX_ATTEMPTS=2,
            SHORT_CODE_EXACT_MATCH=True,
        )
        service = LinkService.from_settings(memory_store, settings)

        assert service.store is memory_store
        assert service.code_length == 7
        assert service.max_attempts == 2
        assert service.exact_match is True
