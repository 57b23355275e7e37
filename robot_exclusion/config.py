# === FILE: robot_exclusion/config.py ===
"""
Loading and validation of the robot exclusion service configuration.
The schema is described and checked with Pydantic.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from robot_exclusion.utils import resolve_charset


class RobotExclusionConfig(BaseModel):
    """Settings for one robot exclusion service instance."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field("RobotExclusion/1.0", min_length=1, description="User-Agent header sent when fetching robots.txt.")
    cache_max_size_records: int = Field(10_000, ge=1, description="Maximum number of cached robots.txt documents.")
    cache_expires_hours: float = Field(24.0, gt=0, description="Hours a cached document stays valid after download.")
    request_timeout: float = Field(30.0, gt=0, description="Timeout for a single robots.txt download (seconds).")
    max_file_size_bytes: int = Field(512_000, ge=1, description="Bytes of a robots.txt that are read; the rest is ignored.")
    default_charset: str = Field("utf-8", description="Charset used when the response does not declare one.")

    @field_validator("default_charset")
    @classmethod
    def _known_charset(cls, v: str) -> str:
        try:
            return resolve_charset(v)
        except LookupError as exc:
            raise ValueError(f"Unknown charset: {v}") from exc

    @property
    def cache_expires_seconds(self) -> float:
        return self.cache_expires_hours * 3600


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> RobotExclusionConfig:
    """
    Read YAML or JSON and return a validated RobotExclusionConfig.
    An explicit path that does not exist raises FileNotFoundError; with no
    path, configs/default.yaml is used when present and defaults otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return RobotExclusionConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return RobotExclusionConfig(**data)
