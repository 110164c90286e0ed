"""Application settings using pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from toon_codec.models import DecodeOptions, EncodeOptions
from toon_codec.models.options import DEFAULT_INDENT, DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    TOON_ prefix, e.g. ``TOON_INDENT=4``. Only the CLI and HTTP service
    read them; codec functions take explicit options.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Formatting defaults
    indent: int = Field(default=DEFAULT_INDENT, ge=1)
    include_size_banner: bool = False
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT)

    # Minimum uniform array size for automatic TOON selection
    min_array_size: int = Field(default=2, ge=1)

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8002

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def encode_options(self) -> EncodeOptions:
        """Encoding options built from these settings."""
        return EncodeOptions(
            indent=self.indent,
            include_size_banner=self.include_size_banner,
            max_depth=self.max_depth,
        )

    @property
    def decode_options(self) -> DecodeOptions:
        """Decoding options built from these settings."""
        return DecodeOptions(indent=self.indent, max_depth=self.max_depth)


# Global settings instance
settings = Settings()
