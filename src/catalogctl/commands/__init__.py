"""Subcommand modules for catalogctl.

Provides register_commands(), which imports each command module only
when the root group is built so ``catalogctl --help`` stays fast.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute) for every top-level command, in help order.
_COMMANDS: tuple[tuple[str, str], ...] = (
    ("catalogctl.commands.product", "product"),
    ("catalogctl.commands.review", "review"),
    ("catalogctl.commands.inventory", "inventory"),
    ("catalogctl.commands.init_cmd", "init_cmd"),
)


def register_commands(cli: click.Group) -> None:
    """Attach the product, review and inventory groups plus ``init``."""
    for module_name, attr in _COMMANDS:
        cli.add_command(getattr(import_module(module_name), attr))
