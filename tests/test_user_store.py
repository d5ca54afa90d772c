"""Tests for the SQLAlchemy credential store against a throwaway SQLite file."""
from contextlib import asynccontextmanager
from datetime import date, timedelta

import pytest

from app.core.clock import utcnow
from app.core.errors import ConflictError
from app.core.security import TokenService, verify_password
from app.db.session import build_engine, build_sessionmaker, create_tables
from app.models import User
from app.repositories.user import SqlAlchemyUserStore
from app.services.auth import AuthService
from app.services.otp import OtpService
from tests.fakes import RecordingMailer, SequenceCodes


@asynccontextmanager
async def user_store(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await create_tables(engine)
    sessionmaker = build_sessionmaker(engine)
    try:
        async with sessionmaker() as session:
            yield SqlAlchemyUserStore(session), sessionmaker
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_save_normalizes_email_and_round_trips(tmp_path):
    async with user_store(tmp_path) as (store, _):
        saved = await store.save(User(email="  Bob@Example.COM ", name="Bob", date_of_birth=date(1990, 2, 3)))

        found = await store.find_by_email("bob@example.com")
        assert found.id == saved.id
        assert found.date_of_birth == date(1990, 2, 3)
        assert found.is_verified is False
        assert found.created_at is not None
        assert await store.find_by_id(saved.id) is found
        assert await store.find_by_id("missing") is None


@pytest.mark.asyncio
async def test_pending_password_is_hashed_on_save(tmp_path):
    async with user_store(tmp_path) as (store, _):
        user = User(email="bob@example.com", name="Bob")
        user.set_password("s3cret-pass")

        saved = await store.save(user)

        assert saved.password_hash and saved.password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", saved.password_hash)
        assert saved.pending_password is None


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(tmp_path):
    async with user_store(tmp_path) as (store, _):
        await store.save(User(email="bob@example.com", name="Bob"))

        with pytest.raises(ConflictError):
            await store.save(User(email="BOB@example.com", name="Other Bob"))


@pytest.mark.asyncio
async def test_duplicate_external_id_conflicts(tmp_path):
    async with user_store(tmp_path) as (store, _):
        await store.save(User(email="a@example.com", name="A", google_id="g-1"))

        with pytest.raises(ConflictError):
            await store.save(User(email="b@example.com", name="B", google_id="g-1"))


@pytest.mark.asyncio
async def test_find_by_external_id(tmp_path):
    async with user_store(tmp_path) as (store, _):
        saved = await store.save(User(email="a@example.com", name="A", google_id="g-1"))

        assert (await store.find_by_external_id("g-1")).id == saved.id
        assert await store.find_by_external_id("g-2") is None


@pytest.mark.asyncio
async def test_otp_expiry_comes_back_timezone_aware(tmp_path):
    expires = utcnow() + timedelta(minutes=10)
    async with user_store(tmp_path) as (store, sessionmaker):
        user = User(email="a@example.com", name="A")
        user.set_otp("123456", expires)
        await store.save(user)

        async with sessionmaker() as other_session:
            reloaded = await SqlAlchemyUserStore(other_session).find_by_email("a@example.com")
            assert reloaded.otp_expires_at.tzinfo is not None
            assert reloaded.otp_expires_at == expires


@pytest.mark.asyncio
async def test_consume_otp_is_compare_and_clear(tmp_path):
    async with user_store(tmp_path) as (store, sessionmaker):
        user = User(email="a@example.com", name="A")
        user.set_otp("123456", utcnow() + timedelta(minutes=10))
        await store.save(user)

        assert await store.consume_otp(user.id, "000000") is False
        assert await store.consume_otp(user.id, "123456") is True
        assert await store.consume_otp(user.id, "123456") is False

        async with sessionmaker() as other_session:
            reloaded = await SqlAlchemyUserStore(other_session).find_by_id(user.id)
            assert reloaded.otp_code is None
            assert reloaded.otp_expires_at is None


@pytest.mark.asyncio
async def test_verify_keeps_code_issued_by_a_concurrent_resend(tmp_path):
    async with user_store(tmp_path) as (store, sessionmaker):
        user = User(email="a@example.com", name="A")
        user.set_otp("111111", utcnow() + timedelta(minutes=10))
        await store.save(user)

        async def resend_from_another_request():
            async with sessionmaker() as other_session:
                other_store = SqlAlchemyUserStore(other_session)
                pending = await other_store.find_by_email("a@example.com")
                await OtpService(other_store, generator=SequenceCodes("222222")).issue(pending)

        class ResendAfterConsume(SqlAlchemyUserStore):
            async def consume_otp(self, user_id, code):
                won = await super().consume_otp(user_id, code)
                await resend_from_another_request()
                return won

        racing_store = ResendAfterConsume(store.session)
        service = AuthService(racing_store, OtpService(racing_store), TokenService("store-test"), RecordingMailer())
        result = await service.verify("a@example.com", "111111")
        assert result.user.is_verified

        async with sessionmaker() as other_session:
            reloaded = await SqlAlchemyUserStore(other_session).find_by_email("a@example.com")
            assert reloaded.is_verified is True
            assert reloaded.otp_code == "222222"
            assert reloaded.otp_expires_at is not None
