"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Catalog initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from catalogctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from catalogctl.config.settings import CatalogSettings
    from catalogctl.infrastructure.catalog import Catalog
    from catalogctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The catalog is lazily
    opened on first use so ``--help`` and ``--version`` never trigger
    database access.
    """

    def __init__(self, settings: CatalogSettings, *, command: str | None = None) -> None:
        self.settings = settings
        self._catalog: Catalog | None = None

        from catalogctl.config.logging import configure_logging

        context = {"command": command} if command else {}
        configure_logging(verbose=settings.verbose, log_json=settings.log_json, **context)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from catalogctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def catalog(self) -> Catalog:
        """The catalog instance (opened lazily on first access)."""
        if self._catalog is None:
            from catalogctl.infrastructure.catalog import Catalog

            self._catalog = Catalog(self.settings)
            click.get_current_context().call_on_close(self.close)
        return self._catalog

    def close(self) -> None:
        """Release the catalog's engine and HTTP session."""
        if self._catalog is not None:
            self._catalog.close()
            self._catalog = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
