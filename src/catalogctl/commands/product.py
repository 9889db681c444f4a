"""Command group: versioned product CRUD."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogGroup, if_match_option

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_PRODUCT_EXAMPLES = """\
  catalogctl product create --name Widget --quantity 10
  catalogctl product get 1
  catalogctl product update 1 --if-match '"1"' --quantity 15
  catalogctl product delete 1
  catalogctl --json product list"""


@click.group(cls=CatalogGroup, examples=_PRODUCT_EXAMPLES)
def product() -> None:
    """Read, create, conditionally update, and delete products."""


@product.command()
@click.argument("product_id", type=int)
@click.pass_obj
def get(app: AppContext, product_id: int) -> None:
    """Show a product with its current version (etag)."""
    from catalogctl.services.product import ProductService

    app.emit(ProductService(app.catalog).get(product_id))


@product.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all products."""
    from catalogctl.services.product import ProductService

    app.emit(ProductService(app.catalog).list_all())


@product.command(
    examples="""\
  catalogctl product create --name Widget --quantity 10
  catalogctl --json product create --name Gadget"""
)
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", type=int, default=0, show_default=True, help="Units in stock.")
@click.pass_obj
def create(app: AppContext, name: str, quantity: int) -> None:
    """Create a product at version 1."""
    from catalogctl.services.product import ProductService

    app.emit(ProductService(app.catalog).create({"name": name, "quantity": quantity}))


@product.command(
    examples="""\
  catalogctl product update 1 --if-match '"1"' --name "Widget v2"
  catalogctl product update 1 --if-match 2 --quantity 0"""
)
@click.argument("product_id", type=int)
@if_match_option()
@click.option("--name", default=None, help="New name.")
@click.option("--quantity", type=int, default=None, help="New stock quantity.")
@click.pass_obj
def update(
    app: AppContext,
    product_id: int,
    if_match: str,
    name: str | None,
    quantity: int | None,
) -> None:
    """Update a product if it is still at the given version."""
    from catalogctl.services.product import ProductService

    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if quantity is not None:
        changes["quantity"] = quantity

    app.emit(ProductService(app.catalog).update(product_id, if_match=if_match, changes=changes))


@product.command()
@click.argument("product_id", type=int)
@click.pass_obj
def delete(app: AppContext, product_id: int) -> None:
    """Delete a product (no version check)."""
    from catalogctl.services.product import ProductService

    app.emit(ProductService(app.catalog).delete(product_id))
