"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file.

    All settings are prefixed with GITCENTRAL_ (e.g., GITCENTRAL_CONNECTOR).
    """

    model_config = SettingsConfigDict(
        env_prefix="GITCENTRAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    repo_path: Path = Field(default=Path("."), description="Path to the local git repository")
    remote_id: str = Field(default="default", description="Name of the remote to replay against")
    connector: str = Field(
        default="memory",
        description="Remote connector: built-in name, entry point name or module:attribute",
    )
    quick: bool = Field(default=False, description="Skip rebasing between checkins")

    # Logging
    log_level: str = Field(default="WARNING", description="Log level for diagnostic output")
