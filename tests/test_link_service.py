"""Tests for LinkService: validation, code selection, retries and resolution."""

import pytest

from shortener.core.exceptions import (
    AuthFailedError,
    AuthRequiredError,
    CodeConflictError,
    InvalidInputError,
    LinkNotFoundError,
)
from shortener.services import link_service as link_service_module
from shortener.services.code_generator import CODE_ALPHABET, RESERVED_CODES
from shortener.services.link_service import LinkService
from tests.conftest import TEST_BASE_URL, make_settings, sequence_factory


class TestCreateLink:

    async def test_creates_unprotected_link(self, link_service, store):
        """A link without a password is stored with no hash."""
        created = await link_service.create_link("https://example.com")
        assert len(created.code) == 6
        assert set(created.code) <= set(CODE_ALPHABET)
        assert created.short_url == f"{TEST_BASE_URL}/{created.code}"
        assert created.url == "https://example.com"
        assert not created.protected

        link = await store.find_by_code(created.code)
        assert link.password_hash is None

    async def test_password_is_hashed(self, link_service, store):
        """Only a bcrypt digest of the password is stored."""
        created = await link_service.create_link("https://example.com", "secret")
        assert created.protected

        link = await store.find_by_code(created.code)
        assert link.password_hash
        assert "secret" not in link.password_hash

    async def test_empty_password_means_unprotected(self, link_service):
        """An empty password leaves the link open."""
        created = await link_service.create_link("https://example.com", "")
        assert not created.protected

    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_missing_url(self, link_service, url):
        """A missing or blank url is rejected."""
        with pytest.raises(InvalidInputError, match="required"):
            await link_service.create_link(url)

    async def test_malformed_url(self, link_service):
        """A url without scheme and host is rejected."""
        with pytest.raises(InvalidInputError, match="invalid"):
            await link_service.create_link("not a url")

    async def test_uses_configured_code_length(self, store, settings):
        """CODE_LENGTH controls the generated code length."""
        service = LinkService(store, settings.model_copy(update={"CODE_LENGTH": 10}))
        created = await service.create_link("https://example.com")
        assert len(created.code) == 10

    async def test_skips_taken_candidates(self, store, settings):
        """A candidate the store already has is passed over."""
        await store.insert("taken1", "https://example.com/old", None)
        service = LinkService(
            store, settings, code_factory=sequence_factory("taken1", "fresh1")
        )
        created = await service.create_link("https://example.com/new")
        assert created.code == "fresh1"
        assert (await store.find_by_code("taken1")).url == "https://example.com/old"

    async def test_never_hands_out_reserved_codes(self, store, settings, monkeypatch):
        """A code that names another route is skipped before the store is asked."""
        checked = []
        real_exists = store.code_exists

        async def recording_exists(code):
            checked.append(code)
            return await real_exists(code)

        monkeypatch.setattr(store, "code_exists", recording_exists)
        service = LinkService(
            store, settings, code_factory=sequence_factory("health", "docs", "fresh1")
        )
        created = await service.create_link("https://example.com")
        assert created.code == "fresh1"
        assert checked == ["fresh1"]
        assert created.code not in RESERVED_CODES

    async def test_insert_conflict_retries_with_new_code(self, store, settings, monkeypatch):
        """A conflict on insert backs off and retries with a fresh code."""
        # Simulate a racing request: the existence check says free, the insert disagrees
        await store.insert("raced1", "https://example.com/winner", None)

        async def never_exists(code):
            return False

        monkeypatch.setattr(store, "code_exists", never_exists)

        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr(link_service_module.asyncio, "sleep", fake_sleep)

        service = LinkService(
            store,
            settings.model_copy(update={"INSERT_BACKOFF_SECONDS": 0.01}),
            code_factory=sequence_factory("raced1", "raced2"),
        )
        created = await service.create_link("https://example.com/loser")

        assert created.code == "raced2"
        assert delays == [0.01]
        assert (await store.find_by_code("raced1")).url == "https://example.com/winner"

    async def test_gives_up_after_retry_budget(self, store, monkeypatch):
        """Conflicts beyond INSERT_MAX_RETRIES are raised."""
        await store.insert("same01", "https://example.com", None)

        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr(link_service_module.asyncio, "sleep", fake_sleep)

        calls = []

        def always_same(length):
            calls.append(length)
            return "same01"

        settings = make_settings(
            "sqlite+aiosqlite:///unused.db",
            CODE_PROBE_ATTEMPTS=2,
            INSERT_MAX_RETRIES=2,
            INSERT_BACKOFF_SECONDS=0.1,
        )
        service = LinkService(store, settings, code_factory=always_same)

        with pytest.raises(CodeConflictError):
            await service.create_link("https://example.com/other")

        # 3 insert attempts, each preceded by 2 existence checks
        assert len(calls) == 6
        assert delays == pytest.approx([0.1, 0.2])

    async def test_nothing_persisted_for_invalid_url(self, store, settings):
        """Validation runs before any code is stored."""
        service = LinkService(store, settings, code_factory=sequence_factory("never1"))
        with pytest.raises(InvalidInputError):
            await service.create_link("not a url")
        assert not await store.code_exists("never1")


class TestResolveLink:

    async def test_unprotected_link(self, link_service):
        """An open link resolves to its URL."""
        created = await link_service.create_link("https://example.com/path?q=1")
        resolved = await link_service.resolve_link(created.code)
        assert resolved.url == "https://example.com/path?q=1"

    async def test_unprotected_link_ignores_password(self, link_service):
        """A password sent to an open link is ignored."""
        created = await link_service.create_link("https://example.com")
        resolved = await link_service.resolve_link(created.code, "anything")
        assert resolved.url == "https://example.com"

    async def test_unknown_code(self, link_service):
        """An unknown code is not found."""
        with pytest.raises(LinkNotFoundError):
            await link_service.resolve_link("zzzzzz")

    async def test_malformed_code_is_not_found(self, link_service):
        """A code outside the alphabet is not found."""
        with pytest.raises(LinkNotFoundError):
            await link_service.resolve_link("../../etc")

    async def test_protected_link(self, link_service):
        """A protected link needs the right password."""
        created = await link_service.create_link("https://example.com", "secret")

        with pytest.raises(AuthRequiredError):
            await link_service.resolve_link(created.code)
        with pytest.raises(AuthRequiredError):
            await link_service.resolve_link(created.code, "")
        with pytest.raises(AuthFailedError):
            await link_service.resolve_link(created.code, "wrong")

        resolved = await link_service.resolve_link(created.code, "secret")
        assert resolved.url == "https://example.com"
