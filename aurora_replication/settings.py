"""Environment-backed settings.

Values are read from the process environment (and a ``.env`` file when
present) by pydantic-settings. Nothing here carries a credential default.
"""

from __future__ import annotations

from typing import Self

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.enums import ClassificationPolicy
from .core.exceptions import CredentialsNotConfiguredError


class CredentialSettings(BaseSettings):
    """Database credentials from ``AURORA_DB_DATABASE``, ``AURORA_DB_USERNAME`` and ``AURORA_DB_PASSWORD``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AURORA_DB_",
        extra="ignore",
        frozen=True,
    )

    database: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: SecretStr

    @classmethod
    def load(cls) -> Self:
        """Read credentials from the environment.

        Raises
        ------
        CredentialsNotConfiguredError
            If any of the three values is missing or empty.
        """
        try:
            return cls()
        except ValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise CredentialsNotConfiguredError(
                f"Database credentials not configured; set AURORA_DB_{', AURORA_DB_'.join(m.upper() for m in missing)}"
            ) from e


class DiscoverySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AURORA_",
        extra="ignore",
        frozen=True,
    )

    regions: tuple[str, ...] = Field(default=("us-east-1",), min_length=1, description="Regions to scan")
    cluster_id: str | None = Field(default=None, description="Restrict discovery to one cluster")
    engine: str = Field(default="aurora-postgresql", description="Engine filter for unfiltered scans")
    policy: ClassificationPolicy = Field(default=ClassificationPolicy.CLUSTER_MEMBERSHIP)
    include_global_readers: bool = Field(default=False, description="Route reads to global-role endpoints too")
