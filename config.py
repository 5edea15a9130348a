import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default=None):
    """env.yaml first, then the process environment, then the default"""
    if key in data:
        return data[key]
    return os.environ.get(key, default)


def _get_bool(key, default=False):
    value = _get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _get_list(key, default=None):
    """Lists come from YAML as lists and from the environment comma-separated"""
    value = _get(key, default)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value or [])


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./studio.db")
    API_PORT = int(_get("API_PORT", 8000))
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get_list("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _get_bool("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    ENVIRONMENT = _get("ENVIRONMENT", "development")

    # Deployment
    MODE = _get("MODE", "single-tenant")
    TRUSTED_PROXY = _get_bool("TRUSTED_PROXY", False)
    DATA_DIR = _get("DATA_DIR", os.path.join(ROOT_PATH, "data"))
    APP_URL = _get("APP_URL", "http://localhost:8000")

    # Sessions
    SESSION_SECRET = _get("SESSION_SECRET", "")
    SESSION_TTL_DAYS = int(_get("SESSION_TTL_DAYS", 30))
    SESSION_RENEWAL_DAYS = int(_get("SESSION_RENEWAL_DAYS", 7))

    # Invitations
    INVITATION_TTL_HOURS = int(_get("INVITATION_TTL_HOURS", 24))
    INVITATION_MAX_ATTEMPTS = int(_get("INVITATION_MAX_ATTEMPTS", 3))

    BCRYPT_ROUNDS = int(_get("BCRYPT_ROUNDS", 12))

    # Paths never subject to the CSRF check (prefix match when ending with /)
    CSRF_EXEMPT_PATHS = _get_list(
        "CSRF_EXEMPT_PATHS", ["/static/", "/favicon.ico", "/health"]
    )
