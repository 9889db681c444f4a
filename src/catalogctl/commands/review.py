"""Command group: reviews and append-only review entries."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogGroup, entry_option, if_match_option

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_REVIEW_EXAMPLES = """\
  catalogctl review append 7 --username alice --text "Works great"
  catalogctl review get 6a1f0c2e9b4d8e7f01234567
  catalogctl review for-product 7
  catalogctl review create 7 --entry "alice=Works great"
  catalogctl review update 6a1f0c2e9b4d8e7f01234567 --if-match '"2"' --entry "bob=Fine"
  catalogctl --json review list"""


@click.group(cls=CatalogGroup, examples=_REVIEW_EXAMPLES)
def review() -> None:
    """Read and modify per-product reviews."""


@review.command()
@click.argument("review_id")
@click.pass_obj
def get(app: AppContext, review_id: str) -> None:
    """Show a review by its id."""
    from catalogctl.services.review import ReviewService

    app.emit(ReviewService(app.catalog).get(review_id))


@review.command("for-product")
@click.argument("product_id", type=int)
@click.pass_obj
def for_product(app: AppContext, product_id: int) -> None:
    """Show the review attached to a product."""
    from catalogctl.services.review import ReviewService

    app.emit(ReviewService(app.catalog).get_by_product(product_id))


@review.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all reviews."""
    from catalogctl.services.review import ReviewService

    app.emit(ReviewService(app.catalog).list_all())


@review.command()
@click.argument("product_id", type=int)
@entry_option(help="Initial entry (repeatable).")
@click.pass_obj
def create(app: AppContext, product_id: int, entries: list[dict[str, str]]) -> None:
    """Create the review document for a product."""
    from catalogctl.services.review import ReviewService

    app.emit(ReviewService(app.catalog).create({"product_id": product_id, "entries": entries}))


@review.command()
@click.argument("review_id")
@if_match_option()
@entry_option(required=True, help="Replacement entry (repeatable).")
@click.pass_obj
def update(
    app: AppContext,
    review_id: str,
    if_match: str,
    entries: list[dict[str, str]],
) -> None:
    """Replace a review's entries if it is still at the given version."""
    from catalogctl.services.review import ReviewService

    app.emit(
        ReviewService(app.catalog).update(
            review_id, if_match=if_match, changes={"entries": entries}
        )
    )


@review.command()
@click.argument("review_id")
@click.pass_obj
def delete(app: AppContext, review_id: str) -> None:
    """Delete a review (no version check)."""
    from catalogctl.services.review import ReviewService

    app.emit(ReviewService(app.catalog).delete(review_id))


@review.command(
    examples="""\
  catalogctl review append 7 --username alice --text "Works great"
  catalogctl review append 7 --username bob --text "Meh" --date 2024-05-01T12:00:00Z"""
)
@click.argument("product_id", type=int)
@click.option("--username", required=True, help="Reviewer name.")
@click.option("--text", "text", required=True, help="Review text.")
@click.option("--date", "date", default=None, help="ISO 8601 timestamp (default: now).")
@click.pass_obj
def append(
    app: AppContext,
    product_id: int,
    username: str,
    text: str,
    date: str | None,
) -> None:
    """Append an entry to a product's review, creating the review if needed."""
    from catalogctl.services.review import ReviewService

    when: datetime | None = None
    if date is not None:
        try:
            when = datetime.fromisoformat(date)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--date") from exc

    app.emit(
        ReviewService(app.catalog).append_entry(
            product_id, username=username, review=text, date=when
        )
    )
