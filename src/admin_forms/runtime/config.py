"""
Forms configuration.

Parses the [forms] section of a TOML file (``admin_forms.toml`` or a
project's ``pyproject.toml`` under ``[tool.admin_forms]``) into a typed
FormsConfig.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from admin_forms.core.errors import ConfigError

logger = logging.getLogger(__name__)


class FormsConfig(BaseModel):
    """
    Rendering configuration.

    Attributes:
        base_route: Admin route prefix used by dependent-reload fetches
        year_span: Years either side of today offered by year selects
        text_maxlength: Default maxlength of single-line text inputs
        excluded_fields: Fields left out of the default form
        templates_dir: Project templates overriding the built-in ones
    """

    base_route: str = "/admin"
    year_span: int = Field(default=5, ge=0)
    text_maxlength: int = Field(default=255, gt=0)
    excluded_fields: tuple[str, ...] = ("id", "inserted_at", "updated_at")
    templates_dir: Path | None = None

    model_config = ConfigDict(frozen=True)


def _forms_section(data: dict[str, Any]) -> dict[str, Any]:
    if "forms" in data:
        return dict(data["forms"])
    tool = data.get("tool", {})
    if isinstance(tool, dict) and "admin_forms" in tool:
        return dict(tool["admin_forms"])
    return {}


def load_forms_config(path: Path) -> FormsConfig:
    """
    Load FormsConfig from a TOML file.

    A missing file yields the defaults. A relative ``templates_dir`` is
    resolved against the file's directory.

    Raises:
        ConfigError: the file is not valid TOML or the section is invalid.
    """
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return FormsConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    section = _forms_section(data)
    templates_dir = section.get("templates_dir")
    if templates_dir and not Path(templates_dir).is_absolute():
        section["templates_dir"] = path.parent / templates_dir

    try:
        return FormsConfig(**section)
    except ValidationError as e:
        raise ConfigError(f"Invalid [forms] configuration in {path}: {e}") from e
