from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3SrcSettings(BaseSettings):
    """Client configuration for the S3 source.

    The region always comes from the locator; everything here only shapes how
    the client talks to the store.
    """

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "S3SRC_ENDPOINT",
            "AWS_ENDPOINT_URL_S3",
        ),
    )
    access_key: str | None = Field(
        default=None,
        validation_alias="S3SRC_ACCESS_KEY_ID",
    )
    secret_key: str | None = Field(
        default=None,
        validation_alias="S3SRC_SECRET_ACCESS_KEY",
    )
    session_token: str | None = Field(
        default=None,
        validation_alias="S3SRC_SESSION_TOKEN",
    )
    profile: str | None = Field(
        default=None,
        validation_alias="S3SRC_PROFILE",
    )
    anonymous: bool = Field(
        default=False,
        validation_alias="S3SRC_ANONYMOUS",
    )
    addressing_style: Literal["auto", "virtual", "path"] = Field(
        default="auto",
        validation_alias="S3SRC_ADDRESSING_STYLE",
    )
    connect_timeout: float = Field(
        default=60.0,
        validation_alias="S3SRC_CONNECT_TIMEOUT",
    )
    read_timeout: float = Field(
        default=60.0,
        validation_alias="S3SRC_READ_TIMEOUT",
    )


def load_settings_from_env() -> S3SrcSettings:
    """Load S3 source settings from environment variables.

    Returns:
        S3SrcSettings instance populated from environment variables.
    """
    return S3SrcSettings()
