"""CatalogSettings: one frozen object for CLI flags, env vars and TOML.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CATALOGCTL_*``, nested with ``__``
                    (``CATALOGCTL_STORE__BACKEND=memory``)
  3. TOML file    — ``catalogctl.toml`` found by :func:`find_config`
  4. Code defaults — baked into the section models

The TOML layer is pydantic-settings' own :class:`TomlConfigSettingsSource`;
the file it reads is decided per construction by :meth:`CatalogSettings.from_cli`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from catalogctl.config.discovery import find_config
from catalogctl.config.models import InventoryConfig, ReviewsConfig, StoreConfig

# Config file for the CatalogSettings currently being built.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class CatalogSettings(BaseSettings):
    """Unified settings for the catalogctl CLI.

    Held by ``AppContext`` and handed to :class:`Catalog`.

    Attributes:
        root: Catalog directory. Relative store paths resolve against it.
            Defaults to the directory holding ``catalogctl.toml``, else CWD.
        config_path: The TOML file in effect, or None.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="CATALOGCTL_",
        env_nested_delimiter="__",
    )

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Output and logging flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    store: StoreConfig = Field(default_factory=StoreConfig)
    reviews: ReviewsConfig = Field(default_factory=ReviewsConfig)
    inventory: InventoryConfig = Field(default_factory=InventoryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """CLI kwargs, then env, then the active TOML file. No dotenv or secrets."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> CatalogSettings:
        """Build settings for one CLI invocation.

        *config_path* (``-c``) must name an existing file. Without it the
        config is discovered by walking up from *root* (or CWD).

        Raises:
            click.ClickException: The config file is missing or not valid TOML.
        """
        import click

        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _active_toml.reset(token)
