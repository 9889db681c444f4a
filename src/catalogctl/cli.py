"""Root CLI group: global output/config flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from catalogctl import __version__
from catalogctl.commands import register_commands
from catalogctl.commands._context import AppContext
from catalogctl.config.settings import CatalogSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="catalogctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids and etags).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this config file instead of discovering catalogctl.toml.",
)
@click.option(
    "-C",
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Catalog directory (default: where catalogctl.toml lives, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """catalogctl — products and reviews with optimistic versioning.

    Every write that changes an existing product or review must say which
    version it read (--if-match). A stale version fails with
    VERSION_CONFLICT and exit status 1; re-read and retry.
    """
    # Unset flags stay out of init kwargs so CATALOGCTL_* env vars can supply them.
    flags = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
    }
    settings = CatalogSettings.from_cli(
        config_path=config_path,
        root=root.resolve() if root else None,
        **{name: True for name, value in flags.items() if value},
    )
    ctx.obj = AppContext(settings, command=ctx.invoked_subcommand)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
