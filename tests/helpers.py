"""Shared helpers for API-level tests."""
from app.core.config import Settings

TEST_SECRET = "test-secret-key"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        secret_key=TEST_SECRET,
        email_backend="console",
        frontend_url="http://frontend.test",
        backend_url="http://testserver",
        auth_rate_limit="1000/minute",
        otp_rate_limit="1000/minute",
        google_client_id="",
        google_client_secret="",
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


def signup_and_verify(client, mailer, email="alice@example.com", name="Alice", dob="2000-01-01") -> str:
    """Register ``email`` through the OTP flow and return its session token."""
    res = client.post("/api/auth/signup", json={"name": name, "email": email, "dateOfBirth": dob})
    assert res.status_code == 200, res.text
    res = client.post("/api/auth/verify-otp", json={"email": email, "otp": mailer.last_code(email)})
    assert res.status_code == 200, res.text
    return res.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
