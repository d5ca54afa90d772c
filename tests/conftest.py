"""Pytest configuration and shared fixtures."""
import pytest
from fastapi.testclient import TestClient

from app.core.security import TokenService
from app.main import create_app
from app.services.auth import AuthService
from app.services.otp import OtpService
from tests.fakes import FrozenClock, InMemoryUserStore, RecordingMailer
from tests.helpers import TEST_SECRET, make_settings


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def otp_service(store, clock):
    return OtpService(store, ttl_minutes=10, clock=clock)


@pytest.fixture
def auth_service(store, otp_service, tokens, mailer):
    return AuthService(store, otp_service, tokens, mailer)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings, mailer):
    application = create_app(settings)
    application.state.mailer = mailer
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
