"""Configuration via pydantic-settings with .env support."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailExtractSettings(BaseSettings):
    """Settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_EXTRACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Output
    output_format: Literal["json", "markdown"] = "json"
    json_indent: int = 2

    # Markdown rendering of HTML-only bodies
    markdown_favor_recall: bool = True

    # Logging
    log_level: str = "INFO"
