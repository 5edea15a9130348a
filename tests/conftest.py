import pytest

from config import ApplicationConfig

TEST_SESSION_SECRET = "test-session-secret-0123456789abcdef"


@pytest.fixture(autouse=True)
def test_config(monkeypatch, tmp_path):
    """Fast hashing, a valid session secret and a private data dir per test"""
    monkeypatch.setattr(ApplicationConfig, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(ApplicationConfig, "SESSION_SECRET", TEST_SESSION_SECRET)
    monkeypatch.setattr(ApplicationConfig, "DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(ApplicationConfig, "ENVIRONMENT", "test")
    monkeypatch.setattr(ApplicationConfig, "MODE", "single-tenant")
    monkeypatch.setattr(ApplicationConfig, "TRUSTED_PROXY", False)
    monkeypatch.setattr(ApplicationConfig, "APP_URL", "http://test")
    return ApplicationConfig
