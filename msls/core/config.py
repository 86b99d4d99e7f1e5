"""Application configuration (settings and environment).

Single source of truth for all configuration. Each section reads its own
environment prefix (APP_, SERVER_, DB_, REDIS_, JWT_, MINIO_, LOG_, TENANT_)
with pydantic-settings and .env support. Absent variables take the documented
defaults; integers and booleans that cannot be coerced fail at load time;
malformed durations fall back to the field default with a warning.

Settings are frozen once loaded and shared by every request without locking.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from msls.shared.utils.durations import parse_duration

logger = logging.getLogger(__name__)


class _EnvSection(BaseSettings):
    """Base for env-backed sections: shared .env handling and duration parsing."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _parse_durations(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse duration strings; keep the field default when malformed."""
        field = cls.model_fields.get(info.field_name or "")
        if field is None or field.annotation is not timedelta:
            return value
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(str(value))
        except ValueError:
            env_name = f"{cls.model_config.get('env_prefix', '')}{info.field_name}".upper()
            logger.warning(
                "Invalid duration %r for %s; using default %s",
                value,
                env_name,
                field.default,
            )
            return field.default


class AppSettings(_EnvSection):
    """APP_*: application identity and environment mode."""

    model_config = SettingsConfigDict(env_prefix="APP_")

    name: str = "msls-backend"
    env: str = "development"
    debug: bool = True
    version: str = "1.0.0"
    # Shared secret for platform operations (tenant create / status change). Empty disables them.
    platform_secret: SecretStr = SecretStr("")

    @property
    def is_development(self) -> bool:
        return self.env.lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")


class ServerSettings(_EnvSection):
    """SERVER_*: HTTP listener and timeouts.

    read_timeout and write_timeout are carried for deployments that front the
    app with a proxy; uvicorn has no per-read or per-write timeout, so the
    entry point only reports them. idle_timeout becomes the keep-alive timeout
    and request_timeout is enforced by TimeoutMiddleware.
    """

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080
    read_timeout: timedelta = timedelta(seconds=15)
    write_timeout: timedelta = timedelta(seconds=15)
    idle_timeout: timedelta = timedelta(seconds=60)
    request_timeout: timedelta = timedelta(seconds=60)
    allowed_origins: str = "*"
    request_id_header: str = "X-Request-ID"

    @property
    def address(self) -> str:
        """Listen address as host:port."""
        return f"{self.host}:{self.port}"

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


class DatabaseSettings(_EnvSection):
    """DB_*: PostgreSQL connection and pool limits."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 5432
    user: str = "msls"
    password: SecretStr = SecretStr("msls_password")
    name: str = "msls"
    sslmode: str = "disable"
    max_open_conns: int = 25
    max_idle_conns: int = 5
    conn_max_lifetime: timedelta = timedelta(minutes=5)
    echo: bool = False

    @property
    def dsn(self) -> str:
        """libpq keyword/value connection string."""
        return (
            f"host={self.host} port={self.port} user={self.user} "
            f"password={self.password.get_secret_value()} dbname={self.name} "
            f"sslmode={self.sslmode}"
        )

    @property
    def url(self) -> URL:
        """SQLAlchemy URL for the asyncpg driver (password kept out of str())."""
        query: dict[str, str] = {}
        if self.sslmode and self.sslmode != "disable":
            query["ssl"] = self.sslmode
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.name,
            query=query,
        )

    @property
    def pool_size(self) -> int:
        """Persistent connections kept in the pool (idle limit)."""
        return max(1, min(self.max_idle_conns, self.max_open_conns))

    @property
    def max_overflow(self) -> int:
        """Extra connections allowed above pool_size, up to max_open_conns."""
        return max(0, self.max_open_conns - self.pool_size)

    @property
    def pool_recycle(self) -> int:
        """Seconds after which a pooled connection is replaced (-1 = never)."""
        seconds = int(self.conn_max_lifetime.total_seconds())
        return seconds if seconds > 0 else -1


class RedisSettings(_EnvSection):
    """REDIS_*: cache connection."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    enabled: bool = True
    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    db: int = 0
    max_connections: int = 10

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class JWTSettings(_EnvSection):
    """JWT_*: token signing and lifetimes."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret: SecretStr = SecretStr("change-me-in-production")
    access_expires_in: timedelta = timedelta(minutes=15)
    refresh_expires_in: timedelta = timedelta(hours=168)
    issuer: str = "msls-backend"
    algorithm: str = "HS256"


class MinIOSettings(_EnvSection):
    """MINIO_*: S3-compatible object storage."""

    model_config = SettingsConfigDict(env_prefix="MINIO_")

    endpoint: str = "localhost:9000"
    access_key_id: str = "minioadmin"
    secret_access_key: SecretStr = SecretStr("minioadmin")
    use_ssl: bool = False
    bucket_name: str = "msls"
    region: str = "us-east-1"
    presign_expires_in: timedelta = timedelta(minutes=15)

    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.endpoint}"


class LogSettings(_EnvSection):
    """LOG_*: level and output format (json or text)."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "info"
    format: str = "json"


class TenantSettings(_EnvSection):
    """TENANT_*: tenant resolution and cache lifetimes."""

    model_config = SettingsConfigDict(env_prefix="TENANT_")

    header_name: str = "X-Tenant-ID"
    # Implicit tenant for single-school deployments; empty = none.
    default_id: str = ""
    cache_ttl: timedelta = timedelta(seconds=60)
    feature_cache_ttl: timedelta = timedelta(minutes=5)


class Settings(BaseModel):
    """Application settings composed from per-section environment loaders."""

    model_config = ConfigDict(frozen=True)

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    minio: MinIOSettings = Field(default_factory=MinIOSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    tenant: TenantSettings = Field(default_factory=TenantSettings)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Loading runs on first call, not at import time. In tests, call
    get_settings.cache_clear() after changing env vars so the next call
    sees the new values.

    Raises:
        pydantic.ValidationError: If an integer or boolean variable cannot be coerced.
    """
    return Settings()
