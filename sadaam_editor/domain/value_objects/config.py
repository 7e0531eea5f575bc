"""Configuration value objects with validation."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ...config import (
    API_KEY_ENV,
    API_KEY_ENV_FALLBACK,
    DEFAULT_MODEL_ID,
    EXPORT_QUALITY,
    ExportFormat,
)


class EditorConfig(BaseModel):
    """Editor configuration with validation."""

    model_config = {"validate_assignment": False}

    # Model endpoint
    api_key: str = ""
    model_id: str = DEFAULT_MODEL_ID

    # Download
    export_format: ExportFormat = ExportFormat.PNG
    export_quality: int = Field(default=EXPORT_QUALITY, ge=1, le=100)
    output_dir: Path = Path(".")

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("model_id")
    @classmethod
    def validate_model_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("model_id cannot be empty")
        return v

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, **overrides) -> EditorConfig:
        """Build a config whose API key comes from the process environment."""
        api_key = os.getenv(API_KEY_ENV) or os.getenv(API_KEY_ENV_FALLBACK) or ""
        values = {"api_key": api_key}
        values.update(overrides)
        return cls(**values)


__all__ = [
    'EditorConfig',
    'ExportFormat',
]
