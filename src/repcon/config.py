"""Run configuration for a condense job."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .discovery import IGNORE_FILE_NAME
from .sizing import MEGABYTE
from .upload import DEFAULT_PURPOSE

DEFAULT_OUTPUT_DIRECTORY = "output"
DEFAULT_OUTPUT_NAME = "repcon"
DEFAULT_MAX_FILES = 10
DEFAULT_MAX_FILE_SIZE = 512 * MEGABYTE


class CondenseSettings(BaseModel):
    """Validated options for one condense run."""

    path_to_repo: Path
    output_directory: Path = Field(default=Path(DEFAULT_OUTPUT_DIRECTORY))
    output_name: str = Field(default=DEFAULT_OUTPUT_NAME, min_length=1)
    ignore_patterns: List[str] = Field(default_factory=list)
    ignore_file: Optional[Path] = None
    include_hidden: bool = False
    max_files: int = Field(default=DEFAULT_MAX_FILES, gt=0)
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0, description="Container capacity in bytes.")
    upload: bool = False
    api_key: Optional[str] = None
    purpose: str = DEFAULT_PURPOSE

    @field_validator("output_name")
    @classmethod
    def check_output_name(cls, value: str) -> str:
        if "/" in value or "\\" in value:
            raise ValueError("output_name must not contain path separators")
        return value

    @field_validator("ignore_patterns")
    @classmethod
    def strip_ignore_patterns(cls, value: List[str]) -> List[str]:
        return [pattern.strip() for pattern in value if pattern.strip()]

    @property
    def total_allowed_size(self) -> int:
        return self.max_files * self.max_file_size

    @property
    def resolved_ignore_file(self) -> Path:
        return self.ignore_file or self.path_to_repo / IGNORE_FILE_NAME

    @classmethod
    def from_env(cls, **overrides: Any) -> "CondenseSettings":
        """Build settings from ``REPCON_*`` environment variables and explicit overrides."""

        values: dict[str, Any] = {}
        env_map = {
            "REPCON_OUTPUT_DIR": "output_directory",
            "REPCON_OUTPUT_NAME": "output_name",
            "REPCON_MAX_FILES": "max_files",
            "REPCON_MAX_FILE_SIZE": "max_file_size",
        }
        for env_name, field_name in env_map.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        ignore = os.getenv("REPCON_IGNORE")
        if ignore:
            values["ignore_patterns"] = ignore.split(",")

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
