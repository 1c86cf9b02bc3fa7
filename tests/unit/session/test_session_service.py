"""Tests for session lifecycle against an in-memory backend."""

import re
from datetime import timedelta

import pytest

from sessiongate.core.modules.session.models import AuthToken, Session
from sessiongate.core.modules.session.service import SessionService, generate_token, session_key
from sessiongate.errors import CorruptSessionError, StoreUnavailableError

LIFETIME = timedelta(hours=24)


@pytest.fixture
def service(backend, clock):
    return SessionService(backend, lifetime=LIFETIME, clock=clock)


class TestGenerateToken:
    """Tests for token generation."""

    def test_token_is_32_url_safe_characters(self):
        token = generate_token()
        assert len(token) == 32
        assert re.fullmatch(r"[A-Za-z0-9_-]{32}", token)

    def test_tokens_do_not_repeat(self):
        assert len({generate_token() for _ in range(1000)}) == 1000


class TestCreateSession:
    """Tests for session creation."""

    @pytest.mark.asyncio
    async def test_create_then_resolve(self, service, user_id):
        token = await service.create_session(user_id)
        session = await service.resolve_session(token)

        assert session is not None
        assert session.token == token
        assert session.user_id == user_id
        assert session.expires_at - session.created_at == LIFETIME

    @pytest.mark.asyncio
    async def test_stored_under_namespaced_key_with_matching_ttl(self, service, backend, user_id):
        token = await service.create_session(user_id)

        assert session_key(token) == f"session:{token}"
        assert session_key(token) in backend.data
        assert backend.ttls[session_key(token)] == LIFETIME

    @pytest.mark.asyncio
    async def test_stored_value_has_no_credentials(self, service, backend, user_id):
        token = await service.create_session(user_id)
        stored = Session.model_validate_json(backend.data[session_key(token)])
        assert set(stored.model_dump()) == {"token", "user_id", "created_at", "expires_at"}

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self, service, backend, user_id):
        backend.available = False
        with pytest.raises(StoreUnavailableError):
            await service.create_session(user_id)

    def test_non_positive_lifetime_rejected(self, backend):
        with pytest.raises(ValueError, match="positive"):
            SessionService(backend, lifetime=timedelta(0))


class TestResolveSession:
    """Tests for session lookup and expiry."""

    @pytest.mark.asyncio
    async def test_unknown_token_is_absent(self, service):
        assert await service.resolve_session(AuthToken("x" * 32)) is None

    @pytest.mark.asyncio
    async def test_repeated_reads_are_equal(self, service, clock, user_id):
        token = await service.create_session(user_id)
        first = await service.resolve_session(token)
        clock.advance(timedelta(hours=1))
        second = await service.resolve_session(token)
        assert first == second

    @pytest.mark.asyncio
    async def test_no_sliding_expiration(self, service, clock, user_id):
        token = await service.create_session(user_id)
        first_read = await service.resolve_session(token)
        clock.advance(timedelta(hours=23))
        await service.resolve_session(token)
        clock.advance(timedelta(hours=1))
        assert await service.resolve_session(token) is None
        assert first_read is not None

    @pytest.mark.asyncio
    async def test_expired_session_is_deleted_even_if_backend_keeps_it(self, service, backend, clock, user_id):
        backend.evict_expired = False
        token = await service.create_session(user_id)
        clock.advance(LIFETIME + timedelta(seconds=1))

        assert await service.resolve_session(token) is None
        assert await backend.get(session_key(token)) is None

    @pytest.mark.asyncio
    async def test_session_dead_exactly_at_expiry(self, service, backend, clock, user_id):
        backend.evict_expired = False
        token = await service.create_session(user_id)
        clock.advance(LIFETIME)
        assert await service.resolve_session(token) is None

    @pytest.mark.asyncio
    async def test_session_live_just_before_expiry(self, service, clock, user_id):
        token = await service.create_session(user_id)
        clock.advance(LIFETIME - timedelta(microseconds=1))
        assert await service.resolve_session(token) is not None

    @pytest.mark.asyncio
    async def test_undecodable_value_is_corrupt(self, service, backend):
        token = AuthToken("t" * 32)
        await backend.set(session_key(token), "{not json", LIFETIME)
        with pytest.raises(CorruptSessionError):
            await service.resolve_session(token)

    @pytest.mark.asyncio
    async def test_value_for_other_token_is_corrupt(self, service, backend, user_id):
        token = await service.create_session(user_id)
        other = AuthToken("o" * 32)
        await backend.set(session_key(other), backend.data[session_key(token)], LIFETIME)
        with pytest.raises(CorruptSessionError):
            await service.resolve_session(other)

    @pytest.mark.asyncio
    async def test_expiry_not_after_creation_is_corrupt(self, service, backend, clock, user_id):
        token = AuthToken("e" * 32)
        created = clock().isoformat()
        data = f'{{"token": "{token}", "user_id": "{user_id}", "created_at": "{created}", "expires_at": "{created}"}}'
        await backend.set(session_key(token), data, LIFETIME)
        with pytest.raises(CorruptSessionError):
            await service.resolve_session(token)


class TestInvalidateSession:
    """Tests for session deletion."""

    @pytest.mark.asyncio
    async def test_resolve_after_invalidate_is_absent(self, service, user_id):
        token = await service.create_session(user_id)
        await service.invalidate_session(token)
        assert await service.resolve_session(token) is None

    @pytest.mark.asyncio
    async def test_invalidate_is_idempotent(self, service, user_id):
        token = await service.create_session(user_id)
        await service.invalidate_session(token)
        await service.invalidate_session(token)
        await service.invalidate_session(AuthToken("never-issued"))
