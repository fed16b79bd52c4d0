"""Configuration models for a replicated PostgreSQL client.

- `DatabaseCredentials`: database name and login shared by every host
- `PoolSettings`: pool bounds and timers, in milliseconds
- `RetrySettings`: which connection errors the client retries, and how often
- `ReplicationConfig`: the complete object handed to the database client
"""

from __future__ import annotations

from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from ..core.enums import RetryableError
from ..settings import CredentialSettings


class DatabaseCredentials(BaseModel):
    """Credentials applied to the writer and every reader.

    All three values are required. Use `from_env` to read them from
    ``AURORA_DB_*`` environment variables.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    database: str = Field(min_length=1, description="Database name")
    username: str = Field(min_length=1, description="Login role")
    password: SecretStr = Field(description="Login password")

    @classmethod
    def from_env(cls) -> Self:
        settings = CredentialSettings.load()
        return cls(database=settings.database, username=settings.username, password=settings.password)

    @classmethod
    def resolve(cls, credentials: DatabaseCredentials | None) -> DatabaseCredentials:
        """Return ``credentials`` if given, else load them from the environment."""
        if credentials is not None:
            return credentials
        return cls.from_env()


class PoolSettings(BaseModel):
    """Connection pool bounds. Durations are milliseconds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max: int = Field(default=10, ge=1, le=1000, description="Maximum connections")
    min: int = Field(default=0, ge=0, le=1000, description="Minimum connections")
    idle: int = Field(default=10_000, ge=0, description="Idle time before a connection is released (ms)")
    acquire: int = Field(default=30_000, ge=1, description="Acquire timeout (ms)")
    evict: int = Field(default=15_000, ge=0, description="Stale-connection eviction interval (ms)")

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.min > self.max:
            raise ValueError(f"pool min ({self.min}) exceeds max ({self.max})")
        return self


def _default_retry_match() -> tuple[RetryableError, ...]:
    return tuple(RetryableError)


class RetrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    match: tuple[RetryableError, ...] = Field(
        default_factory=_default_retry_match,
        description="Connection error kinds that trigger a retry",
    )
    max: int = Field(default=5, ge=1, description="Maximum attempts")


class HostConfig(BaseModel):
    """One reachable host of the cluster, with the shared credentials."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=5432, ge=1, le=65535)
    database: str
    username: str
    password: SecretStr

    @classmethod
    def with_credentials(cls, host: str, port: int, credentials: DatabaseCredentials) -> Self:
        return cls(
            host=host,
            port=port,
            database=credentials.database,
            username=credentials.username,
            password=credentials.password,
        )


class ReplicationTopology(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    write: HostConfig
    read: tuple[HostConfig, ...] = Field(default_factory=tuple)


class DialectOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    ssl: bool = Field(default=True, description="Require TLS to every host; False disables it")
    application_name: str = Field(default="aurora-replication")


class ReplicationConfig(BaseModel):
    """Declarative configuration for a read/write-split PostgreSQL client.

    This object only describes the topology; the database client owns the
    connections, the pooling and the retries.

    Examples
    --------
    >>> config = build_config(endpoints, credentials)
    >>> params = config.to_pool_params()
    >>> writer_pool = await asyncpg.create_pool(**params["write"])
    >>> reader_pools = [await asyncpg.create_pool(**p) for p in params["read"]]
    >>> async with writer_pool.acquire(timeout=config.acquire_timeout) as conn:
    ...     await conn.execute("SELECT 1")
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: Literal["postgres"] = Field(default="postgres")
    pool: PoolSettings = Field(default_factory=PoolSettings)
    replication: ReplicationTopology
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: bool = Field(default=False, description="Log every statement in the client")
    dialect_options: DialectOptions = Field(default_factory=DialectOptions)

    def _host_pool_params(self, host: HostConfig) -> dict[str, Any]:
        return {
            "host": host.host,
            "port": host.port,
            "database": host.database,
            "user": host.username,
            "password": host.password.get_secret_value(),
            "min_size": self.pool.min,
            "max_size": self.pool.max,
            "max_inactive_connection_lifetime": self.pool.idle / 1000,
            "ssl": "require" if self.dialect_options.ssl else "disable",
            "server_settings": {"application_name": self.dialect_options.application_name},
        }

    def to_pool_params(self) -> dict[str, Any]:
        """Render ``asyncpg.create_pool()`` keyword arguments per host.

        Returns
        -------
        dict[str, Any]
            ``{"write": {...}, "read": [{...}, ...]}``. Durations are
            converted to seconds. ``acquire`` is not a pool argument in
            asyncpg; pass `acquire_timeout` to ``pool.acquire()`` instead.
            ``evict`` has no asyncpg counterpart and is not rendered.
        """
        return {
            "write": self._host_pool_params(self.replication.write),
            "read": [self._host_pool_params(h) for h in self.replication.read],
        }

    @property
    def acquire_timeout(self) -> float:
        """Seconds to wait for a free pooled connection, for ``pool.acquire(timeout=...)``."""
        return self.pool.acquire / 1000

    @property
    def read_hosts(self) -> tuple[str, ...]:
        return tuple(h.host for h in self.replication.read)
