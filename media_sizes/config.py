"""
Configuration management for the media-sizes plugin.

Environment variable loading precedence:
1. Real environment variables (exported in shell) - highest priority
2. `.env.local` file (for local development only, gitignored)
3. `.env` file
4. Built-in defaults - lowest priority
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables."""

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")
    TRACE_CALLS: bool = Field(default=False, description="Log entry/exit of traced calls")

    # Hook priorities (lower runs first)
    DEFAULT_FILTER_PRIORITY: int = Field(default=10, description="Priority for filters registered without one")
    INJECT_PRIORITY: int = Field(
        default=20, description="Priority of the size injector on the attachment metadata hook"
    )

    # Attachment gating
    IMAGE_MIME_PATTERN: str = Field(default=r"^image/", description="Regex an attachment MIME type must match")

    # Register the default transformer that stops the host writing intermediate files
    SUPPRESS_INTERMEDIATE_FILES: bool = Field(default=True, description="Register skip_intermediate_sizes")

    model_config = SettingsConfigDict(
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
