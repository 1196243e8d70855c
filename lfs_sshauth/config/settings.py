"""Settings using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # SSH client override, same variable git itself honours
    git_ssh: str = ""

    # Local git state; the credential cache lives under <git_dir>/lfs
    git_dir: str = ".git"

    # Cache configuration
    cache_backend: Literal["file", "redis"] = Field(
        "file", validation_alias="lfs_sshauth_cache_backend"
    )
    redis_url: str | None = Field(None, validation_alias="lfs_sshauth_redis_url")
    redis_key_prefix: str = Field(
        "lfs:", validation_alias="lfs_sshauth_redis_key_prefix"
    )

    @field_validator("cache_backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        if isinstance(v, str):
            return v.strip().lower() or "file"
        return v

    @property
    def cache_dir(self) -> Path:
        """Directory holding the ssh-cache-* files."""
        return Path(self.git_dir) / "lfs"

    @property
    def use_redis(self) -> bool:
        """Check if Redis should be used for caching."""
        return self.cache_backend == "redis"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
