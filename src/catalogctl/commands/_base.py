"""Click building blocks shared by the catalog command groups.

* :class:`CatalogCommand` / :class:`CatalogGroup` accept an ``examples``
  string and expose it through an eager ``--examples`` flag, so ``--help``
  stays short.
* :func:`if_match_option` and :func:`entry_option` are the options every
  conditional write and every review mutation repeat.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


class _ExamplesMixin:
    """Adds ``--examples`` to any Click command class."""

    params: list[click.Parameter]

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n")
                click.echo(examples)
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_show,
                help="Show usage examples.",
            )
        )


class CatalogCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class CatalogGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`CatalogCommand` by default."""

    command_class = CatalogCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------


def if_match_option() -> Callable[[F], F]:
    """``--if-match``: the version (etag) the caller last read. Required."""
    return click.option(
        "--if-match",
        "if_match",
        required=True,
        metavar="ETAG",
        help='Version you last read, e.g. \'"3"\' or 3; the write fails if it is stale.',
    )


def _parse_entries(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[dict[str, str]]:
    entries: list[dict[str, str]] = []
    for raw in values:
        username, sep, text = raw.partition("=")
        if not sep or not username.strip() or not text.strip():
            raise click.BadParameter(f"expected USER=TEXT, got {raw!r}")
        entries.append({"username": username.strip(), "review": text.strip()})
    return entries


def entry_option(*, required: bool = False, help: str) -> Callable[[F], F]:
    """Repeatable ``--entry USER=TEXT`` parsed into review entry payloads."""
    return click.option(
        "--entry",
        "entries",
        multiple=True,
        required=required,
        metavar="USER=TEXT",
        callback=_parse_entries,
        help=help,
    )
