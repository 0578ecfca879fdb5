"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables (or a ``.env`` file).
The GitHub token is read here, at the process boundary, and passed to the
release backends explicitly.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portal_data.lib.releases.github import GITHUB_RELEASES_URL
from portal_data.lib.releases.zenodo import ZENODO_RECORD_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Release backends
    github_pat: str | None = Field(
        default=None,
        description="GitHub personal access token; raises the API rate limit when set",
    )
    releases_url: str = Field(
        default=GITHUB_RELEASES_URL,
        description="GitHub releases listing endpoint for the dataset repository",
    )
    archive_url: str = Field(
        default=ZENODO_RECORD_URL,
        description="Zenodo record landing page for the dataset",
    )
    http_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for release listing requests",
        gt=0,
    )

    @field_validator("github_pat")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("releases_url", "archive_url")
    @classmethod
    def validate_https(cls, v: str) -> str:
        if not v.startswith("https://"):
            msg = "release backend URLs must use HTTPS"
            raise ValueError(msg)
        return v

    # Local data
    data_dir: str = Field(
        default="~",
        description="Folder in which the PortalData directory is installed",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files. When set, logs are also written to rotating files.",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
