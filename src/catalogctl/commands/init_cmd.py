"""Command: catalog initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogCommand

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  catalogctl init
  catalogctl init /srv/catalog
  catalogctl init . --backend memory
  catalogctl init --inventory-url http://inventory.internal:8080/inventory"""


@click.command("init", cls=CatalogCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option(
    "--backend",
    type=click.Choice(["sqlite", "memory"], case_sensitive=False),
    default=None,
    help="Storage backend to record in catalogctl.toml.",
)
@click.option("--inventory-url", default=None, help="Inventory Manager base URL.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    backend: str | None,
    inventory_url: str | None,
) -> None:
    """Initialize a catalog: write catalogctl.toml and create the database."""
    from catalogctl.services.init import InitService

    app.emit(
        InitService.init_catalog(
            Path(path),
            backend=backend.lower() if backend else None,
            inventory_url=inventory_url,
        )
    )
