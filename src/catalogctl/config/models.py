"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, catalogctl.toml only contains
overrides. A fresh catalog needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- catalogctl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = ".catalogctl/catalog.db"
    busy_timeout: float = Field(default=5.0, gt=0)


class ReviewsConfig(BaseModel):
    """[reviews] section."""

    model_config = {"frozen": True}

    max_append_attempts: int = Field(default=5, ge=1)
    retry_backoff_ms: int = Field(default=0, ge=0)


class InventoryConfig(BaseModel):
    """[inventory] section."""

    model_config = {"frozen": True}

    base_url: str = "http://localhost:8080/inventory"
    timeout: float = Field(default=5.0, gt=0)


class CatalogConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    reviews: ReviewsConfig = Field(default_factory=ReviewsConfig)
    inventory: InventoryConfig = Field(default_factory=InventoryConfig)
