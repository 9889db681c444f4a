"""InitService — prepare a directory to hold a catalog.

Writes a sparse ``catalogctl.toml`` (only values that differ from the
code-baked defaults) and, for the SQLite backend, creates the database
with its tables. Re-running on an initialized directory is harmless:
an existing config file is left as-is and table creation is idempotent.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from catalogctl.config.discovery import CONFIG_FILENAME, load_config, render_config
from catalogctl.config.models import InventoryConfig, StoreConfig
from catalogctl.infrastructure.database.engine import init_database
from catalogctl.services.result import ErrorCode, ServiceResult
from catalogctl.services.telemetry import traced

logger = logging.getLogger(__name__)


class InitService:
    """Stateless catalog initialization."""

    @staticmethod
    @traced
    def init_catalog(
        path: Path,
        *,
        backend: str | None = None,
        inventory_url: str | None = None,
    ) -> ServiceResult:
        """Initialize a catalog rooted at *path*."""
        op = "init_catalog"
        root = path.resolve()
        store_defaults = StoreConfig()

        overrides: dict[str, dict[str, Any]] = {}
        if backend is not None and backend != store_defaults.backend:
            overrides["store"] = {"backend": backend}
        if inventory_url is not None and inventory_url != InventoryConfig().base_url:
            overrides["inventory"] = {"base_url": inventory_url}

        config_file = root / CONFIG_FILENAME
        warnings: list[str] = []
        try:
            root.mkdir(parents=True, exist_ok=True)
            created_config = not config_file.exists()
            if created_config:
                config_file.write_text(render_config(overrides), encoding="utf-8")
            elif overrides:
                warnings.append(f"{CONFIG_FILENAME} already exists; options were not written")
        except OSError as exc:
            return ServiceResult.failure(
                op, ErrorCode.STORAGE_FAULT, f"Cannot write {config_file}: {exc}"
            )

        try:
            store_cfg = load_config(config_file).store
        except (tomllib.TOMLDecodeError, ValidationError) as exc:
            return ServiceResult.failure(
                op, ErrorCode.VALIDATION_FAILED, f"Invalid {CONFIG_FILENAME}: {exc}"
            )

        database: str | None = None
        if store_cfg.backend == "sqlite":
            try:
                engine = init_database(
                    root,
                    db_path=Path(store_cfg.path),
                    busy_timeout=store_cfg.busy_timeout,
                )
            except (SQLAlchemyError, OSError) as exc:
                return ServiceResult.failure(
                    op, ErrorCode.STORAGE_FAULT, f"Cannot create database: {exc}"
                )
            database = str(engine.url.database)
            engine.dispose()

        logger.info("Initialized catalog at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(root),
                "config": str(config_file),
                "created_config": created_config,
                "backend": store_cfg.backend,
                "database": database,
            },
            warnings=warnings,
        )
