"""Locating, reading and writing ``catalogctl.toml``.

Lookup order: the ``CATALOGCTL_CONFIG`` env var, then the nearest
``catalogctl.toml`` in the start directory or any of its parents. The
file is sparse: it only holds values that differ from the defaults in
:mod:`catalogctl.config.models`.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from catalogctl.config.models import CatalogConfig

CONFIG_FILENAME = "catalogctl.toml"
CONFIG_ENV_VAR = "CATALOGCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), if any.

    A set-but-dangling ``CATALOGCTL_CONFIG`` disables the walk-up.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> CatalogConfig:
    """Parse and validate a config file into :class:`CatalogConfig`.

    With no *path*, the file is discovered from *cwd*. No file at all
    yields the defaults.

    Raises:
        tomllib.TOMLDecodeError: The file is not valid TOML.
        pydantic.ValidationError: A value is out of range or unknown.
    """
    path = path or find_config(cwd)
    if path is None or not path.is_file():
        return CatalogConfig()
    with path.open("rb") as fh:
        data: dict[str, Any] = tomllib.load(fh)
    return CatalogConfig.model_validate(data)


def render_config(overrides: Mapping[str, Mapping[str, str | int | float | bool]]) -> str:
    """Serialize section overrides as TOML text.

    Only flat scalar values are supported, which covers every section
    in :class:`CatalogConfig`.
    """
    lines = ["# catalogctl configuration: overrides only, defaults are built in.", ""]
    for section, values in overrides.items():
        lines.append(f"[{section}]")
        for key, value in values.items():
            if isinstance(value, bool):
                rendered = "true" if value else "false"
            elif isinstance(value, str):
                rendered = '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
            else:
                rendered = repr(value)
            lines.append(f"{key} = {rendered}")
        lines.append("")
    return "\n".join(lines)
