"""Application configuration via pydantic-settings."""

import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/pageserver/config.py -> .parent.parent = backend/
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ROOT_DIR = _BACKEND_DIR.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Listener
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Files are looked up under this directory
    PUBLIC_DIR: str = str(_ROOT_DIR / "public")

    # Fixed routes
    HOME_LOCATION: str = "/home"
    HOME_PAGE: str = "home/index.html"
    CONTROLLER_PAGE: str = "controller/index.html"

    # Extension (with leading dot) -> MIME type, used for generic file lookups only
    CONTENT_TYPES: Dict[str, str] = {
        ".html": "text/html",
        ".css": "text/css",
        ".js": "text/javascript",
    }

    LOG_LEVEL: str = "INFO"
    STREAM_CHUNK_SIZE: int = 64 * 1024

    @field_validator("HOME_LOCATION")
    @classmethod
    def _location_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("HOME_LOCATION must start with '/'")
        return v

    @field_validator("CONTENT_TYPES")
    @classmethod
    def _extensions_have_dot(cls, v: Dict[str, str]) -> Dict[str, str]:
        bad = [ext for ext in v if not ext.startswith(".")]
        if bad:
            raise ValueError(f"content-type keys must start with '.': {bad}")
        return v

    @field_validator("STREAM_CHUNK_SIZE")
    @classmethod
    def _chunk_size_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("STREAM_CHUNK_SIZE must be positive")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper()

    def content_type_for(self, type_tag: Optional[str]) -> Optional[str]:
        """Return the MIME type for an extension tag, or None if unknown."""
        if not type_tag:
            return None
        return self.CONTENT_TYPES.get(type_tag)


def _build_settings(**overrides) -> Settings:
    """Build settings, fixing a relative PUBLIC_DIR to be absolute from the repo root."""
    s = Settings(
        _env_file=str(_ROOT_DIR / ".env"),
        _env_file_encoding="utf-8",
        **overrides,
    )
    if not os.path.isabs(s.PUBLIC_DIR):
        s.PUBLIC_DIR = str(_ROOT_DIR / s.PUBLIC_DIR)
    return s


settings = _build_settings()
