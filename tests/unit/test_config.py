"""Unit tests for the environment settings loader."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from msls.core.config import get_settings

_ENV_VARS = [
    "APP_NAME", "APP_ENV", "APP_DEBUG", "SERVER_HOST", "SERVER_PORT",
    "SERVER_READ_TIMEOUT", "SERVER_WRITE_TIMEOUT", "SERVER_IDLE_TIMEOUT",
    "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_SSLMODE",
    "DB_MAX_OPEN_CONNS", "DB_MAX_IDLE_CONNS", "DB_CONN_MAX_LIFETIME",
    "REDIS_HOST", "REDIS_PORT", "REDIS_PASSWORD", "REDIS_DB",
    "JWT_SECRET", "JWT_ACCESS_EXPIRES_IN", "JWT_REFRESH_EXPIRES_IN", "JWT_ISSUER",
    "MINIO_ENDPOINT", "MINIO_ACCESS_KEY_ID", "MINIO_SECRET_ACCESS_KEY",
    "MINIO_USE_SSL", "MINIO_BUCKET_NAME", "LOG_LEVEL", "LOG_FORMAT",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_unset_environment_gives_documented_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = get_settings()
    assert (s.app.name, s.app.env, s.app.debug) == ("msls-backend", "development", True)
    assert s.server.host == "0.0.0.0"
    assert s.server.port == 8080
    assert s.server.read_timeout == timedelta(seconds=15)
    assert s.server.write_timeout == timedelta(seconds=15)
    assert s.server.idle_timeout == timedelta(seconds=60)
    assert s.database.host == "localhost"
    assert s.database.port == 5432
    assert s.database.user == "msls"
    assert s.database.password.get_secret_value() == "msls_password"
    assert s.database.name == "msls"
    assert s.database.sslmode == "disable"
    assert s.database.max_open_conns == 25
    assert s.database.max_idle_conns == 5
    assert s.database.conn_max_lifetime == timedelta(minutes=5)
    assert (s.redis.host, s.redis.port, s.redis.db) == ("localhost", 6379, 0)
    assert s.redis.password.get_secret_value() == ""
    assert s.jwt.secret.get_secret_value() == "change-me-in-production"
    assert s.jwt.access_expires_in == timedelta(minutes=15)
    assert s.jwt.refresh_expires_in == timedelta(hours=168)
    assert s.jwt.issuer == "msls-backend"
    assert s.minio.endpoint == "localhost:9000"
    assert s.minio.access_key_id == "minioadmin"
    assert s.minio.secret_access_key.get_secret_value() == "minioadmin"
    assert s.minio.use_ssl is False
    assert s.minio.bucket_name == "msls"
    assert (s.log.level, s.log.format) == ("info", "json")


def test_derived_accessors(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SERVER_PORT", "9090")
    clean_env.setenv("APP_ENV", "production")
    s = get_settings()
    assert s.server.address == "0.0.0.0:9090"
    assert s.app.is_production is True
    assert s.app.is_development is False
    assert s.database.dsn == (
        "host=localhost port=5432 user=msls password=msls_password dbname=msls sslmode=disable"
    )
    assert s.redis.address == "localhost:6379"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("30s", timedelta(seconds=30)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("168h", timedelta(hours=168)),
        ("250ms", timedelta(milliseconds=250)),
    ],
)
def test_well_formed_durations_are_parsed(
    clean_env: pytest.MonkeyPatch, raw: str, expected: timedelta
) -> None:
    clean_env.setenv("JWT_ACCESS_EXPIRES_IN", raw)
    assert get_settings().jwt.access_expires_in == expected


def test_malformed_duration_falls_back_to_default(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SERVER_IDLE_TIMEOUT", "soon")
    clean_env.setenv("DB_CONN_MAX_LIFETIME", "5 minutes")
    s = get_settings()
    assert s.server.idle_timeout == timedelta(seconds=60)
    assert s.database.conn_max_lifetime == timedelta(minutes=5)


def test_empty_value_is_treated_as_unset(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SERVER_PORT", "")
    assert get_settings().server.port == 8080


def test_non_numeric_port_fails_fast(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SERVER_PORT", "eighty")
    with pytest.raises(ValidationError):
        get_settings()


def test_boolean_textual_forms(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("MINIO_USE_SSL", "true")
    clean_env.setenv("APP_DEBUG", "0")
    s = get_settings()
    assert s.minio.use_ssl is True
    assert s.app.debug is False


def test_settings_are_frozen(clean_env: pytest.MonkeyPatch) -> None:
    s = get_settings()
    with pytest.raises(ValidationError):
        s.server.port = 1  # type: ignore[misc]


def test_database_pool_limits_follow_connection_settings(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DB_MAX_OPEN_CONNS", "20")
    clean_env.setenv("DB_MAX_IDLE_CONNS", "4")
    db = get_settings().database
    assert db.pool_size == 4
    assert db.max_overflow == 16
    assert db.pool_recycle == 300
