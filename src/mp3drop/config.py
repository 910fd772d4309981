from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import json
import os

from pydantic import BaseModel, Field, field_validator

from mp3drop.upload_validation import UploadPolicy

ENV_PREFIX = "MP3DROP_"
CONFIG_PATH_ENV = "MP3DROP_CONFIG"


class Settings(BaseModel):
    upload_dir: Path = Path("uploads")
    public_dir: Path = Path("public")
    public_uploads_path: str = "/uploads"
    upload_field_name: str = Field("mp3file", min_length=1)

    expected_mime_type: str = "audio/mpeg"
    expected_extension: str = ".mp3"
    max_file_size_bytes: int = Field(7_000_000, gt=0)
    max_filename_length: int = Field(70, gt=0)
    staging_attempts: int = Field(5, ge=1, le=100)
    sweep_on_startup: bool = True

    rate_limit_requests: int = Field(30, ge=1)
    rate_limit_window_seconds: float = Field(60.0, gt=0.0)

    search_api_key: str | None = None
    search_engine_id: str | None = None
    search_endpoint: str = "https://www.googleapis.com/customsearch/v1"
    search_timeout_seconds: float = Field(10.0, gt=0.0)
    search_max_query_length: int = Field(100, ge=1)

    log_level: str = "INFO"

    @field_validator("public_uploads_path")
    @classmethod
    def _validate_public_uploads_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("public_uploads_path must be root-relative (start with '/').")
        return value.rstrip("/") or "/"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @property
    def search_configured(self) -> bool:
        return bool(self.search_api_key and self.search_engine_id)

    def upload_policy(self) -> UploadPolicy:
        return UploadPolicy(
            expected_mime_type=self.expected_mime_type,
            expected_extension=self.expected_extension,
            max_file_size_bytes=self.max_file_size_bytes,
            max_filename_length=self.max_filename_length,
        )

    def public_path_for(self, name: str) -> str:
        return f"{self.public_uploads_path.rstrip('/')}/{name}"


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load settings from the optional config file, then environment overrides."""

    return build_settings(os.environ)


def build_settings(environ: Mapping[str, str]) -> Settings:
    data: dict[str, Any] = {}
    config_path = environ.get(CONFIG_PATH_ENV)
    if config_path:
        data.update(_load_config_data(Path(config_path)))

    for name in Settings.model_fields:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            data[name] = value

    return Settings.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
