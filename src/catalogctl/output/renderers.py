"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catalogctl.output.console import create_console, get_output, style_for_error

if TYPE_CHECKING:
    from rich.console import Console

    from catalogctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Mutations print the new entity tag so scripts can chain the next
    conditional update; lists print one id per line.
    """
    if not result.ok:
        code = result.error.code if result.error else "ERROR"
        msg = result.error.message if result.error else "Unknown error"
        return f"{code}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items)

    if "etag" in result.data:
        return f"{result.data.get('id')} {result.data['etag']}"

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    console.print(Text.assemble(("OK", "cat.ok"), (f"  {result.op}", "cat.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cat.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cat.id")
    elif key == "etag":
        v = Text(str(value), style="cat.etag")
    elif key == "location":
        v = Text(str(value), style="cat.location")
    elif key == "name":
        v = Text(str(value), style="cat.name")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "ERROR"
    label = Text(code, style=style_for_error(code))
    op = Text(f"  {result.op}", style="cat.op")
    console.print(Text.assemble(label, op, " — ", msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Resource renderers ────────────────────────────────────────────────


def _render_product(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single product (get/create/update)."""
    _status_line(console, result)
    for key in ("id", "name", "quantity", "version", "etag", "location"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_product_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cat.id", no_wrap=True)
    table.add_column("Name", style="cat.name")
    table.add_column("Quantity", justify="right")
    table.add_column("Version", justify="right")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("quantity", "")),
            str(item.get("version", "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} products")


def _render_review(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a review as a panel listing its entries in order."""
    d = result.data
    _status_line(console, result)
    for key in ("id", "product_id", "version", "etag", "location"):
        if key in d:
            _field(console, key, d[key])

    entries = d.get("entries", [])
    if entries:
        lines = [f"{e.get('username')} ({e.get('date')}): {e.get('review')}" for e in entries]
        console.print(
            Panel("\n".join(lines), title=f"{len(entries)} entries", border_style="dim", expand=False)
        )
    if verbose:
        _render_meta(console, result)


def _render_review_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cat.id", no_wrap=True)
    table.add_column("Product", justify="right")
    table.add_column("Entries", justify="right")
    table.add_column("Version", justify="right")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("product_id", "")),
            str(len(item.get("entries", []))),
            str(item.get("version", "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} reviews")


def _render_inventory(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("product_id", "product_name", "product_category", "quantity", "location"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Products
    "get_product": _render_product,
    "create_product": _render_product,
    "update_product": _render_product,
    "list_products": _render_product_table,
    # Reviews
    "get_review": _render_review,
    "get_review_by_product": _render_review,
    "create_review": _render_review,
    "update_review": _render_review,
    "append_review_entry": _render_review,
    "list_reviews": _render_review_table,
    # Inventory
    "get_inventory": _render_inventory,
    "record_purchase": _render_inventory,
}
