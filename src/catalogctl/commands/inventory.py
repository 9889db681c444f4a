"""Command group: stock lookups against the Inventory Manager."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogGroup

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_INVENTORY_EXAMPLES = """\
  catalogctl inventory get 1
  catalogctl inventory purchase 1 --quantity 2"""


@click.group(cls=CatalogGroup, examples=_INVENTORY_EXAMPLES)
def inventory() -> None:
    """Query and decrement stock in the external Inventory Manager."""


@inventory.command()
@click.argument("product_id", type=int)
@click.pass_obj
def get(app: AppContext, product_id: int) -> None:
    """Show the inventory record for a product."""
    from catalogctl.services.inventory import InventoryService

    app.emit(InventoryService(app.catalog).lookup(product_id))


@inventory.command()
@click.argument("product_id", type=int)
@click.option("--quantity", type=int, required=True, help="Units purchased.")
@click.pass_obj
def purchase(app: AppContext, product_id: int, quantity: int) -> None:
    """Record a purchase, decrementing stock upstream."""
    from catalogctl.services.inventory import InventoryService

    app.emit(InventoryService(app.catalog).purchase(product_id, quantity))
