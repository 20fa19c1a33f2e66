"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from enrolctl.output.console import create_console, get_output, style_for_outcome

if TYPE_CHECKING:
    from rich.console import Console

    from enrolctl.services.result import ServiceResult


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

    A submission prints its identifier alone so scripts can capture it.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op in ("submit", "get") and result.data.get("identifier"):
        return str(result.data["identifier"])

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        val = item.get("identifier")
        return str(val) if val is not None else ""
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="enrol.ok")
    op = Text(f"  {result.op}", style="enrol.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="enrol.key")
    if key == "identifier":
        v = Text(str(value), style="enrol.id")
    elif key.endswith("path") or key == "store":
        v = Text(str(value), style="enrol.path")
    elif key == "email":
        v = Text(str(value), style="enrol.email")
    elif key == "outcome":
        v = Text(str(value), style=style_for_outcome(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _record_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of enrollment summaries."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Identifier", style="enrol.id", no_wrap=True)
    table.add_column("Email", style="enrol.email")
    table.add_column("Cohort")
    if verbose:
        table.add_column("Sequence", justify="right")
        table.add_column("Created", style="dim")

    for item in items:
        row = [
            str(item.get("identifier", "")),
            str(item.get("email", "")),
            f"{item.get('cohort_type', '')}-{item.get('cohort_number', '')}",
        ]
        if verbose:
            sequence = item.get("sequence")
            row.append("" if sequence is None else str(sequence))
            row.append(str(item.get("created", "")))
        table.add_row(*row)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="enrol.error")
    op = Text(f"  {result.op}", style="enrol.op")
    console.print(Text.assemble(label, op, ": ", msg))

    if err and err.detail.get("retryable"):
        console.print(Text("  retryable: yes", style="enrol.warning"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Submission renderer ───────────────────────────────────────────────


def _render_submit(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render an accepted submission (allocated, duplicate, or flagged)."""
    _status_line(console, result)
    d = result.data
    for key in ("identifier", "outcome", "email"):
        if key in d:
            _field(console, key, d[key])
    if "cohort_number" in d:
        cohort = f"{d['cohort_type']}-{d['cohort_number']}" if "cohort_type" in d else None
        _field(console, "cohort", cohort or d["cohort_number"])
    if d.get("flagged"):
        _field(console, "source", "submission flag")
    if verbose:
        _render_meta(console, result)


# ── Cohort renderers ──────────────────────────────────────────────────


def _render_cohort(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render cohort_show and cohort_set as a small panel."""
    d = result.data
    lines = [f"starting number: {d.get('starting_number')}"]
    if "source" in d:
        lines.append(f"source: {d['source']}")
    if "enrolled" in d:
        lines.append(f"enrolled: {d['enrolled']}")
    title = f"{d.get('cohort_type', '?')}-{d.get('cohort_number', '?')}"
    _status_line(console, result)
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))


# ── Query renderers ───────────────────────────────────────────────────


def _render_record(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render query get as a panel with the stored payload."""
    d = result.data
    lines = [
        f"email: {d.get('email')}",
        f"cohort: {d.get('cohort_type')}-{d.get('cohort_number')}",
        f"created: {d.get('created')}",
    ]
    if verbose:
        lines.append(f"sequence: {d.get('sequence')}")
    payload = d.get("payload") or {}
    if payload:
        lines.append("")
        lines.extend(f"{k}: {v}" for k, v in payload.items())
    title = str(d.get("identifier", "?"))
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))


def _render_records(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_cohort and lookup as a table."""
    items = result.data.get("items", [])
    if not items:
        console.print("No enrollments found.")
        return
    console.print(_record_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} enrollments")


# ── Check renderer ────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[enrol.ok]OK[/enrol.ok]  No issues found.")
        return

    severity_styles = {"error": "enrol.error", "warning": "enrol.warning"}

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        cat = str(issue.get("category", "unknown"))
        by_category.setdefault(cat, []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print(f"\n[bold]{cat}[/bold]")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            scope = issue.get("identifier") or issue.get("cohort")
            where = f" \\[{scope}]" if scope else ""
            console.print(f"  {prefix}{where}: {issue.get('message', '')}")

    errors = sum(1 for i in issues if i.get("severity") == "error")
    warnings = count - errors
    console.print(f"\n{errors} errors, {warnings} warnings")


# ── Flag renderers ────────────────────────────────────────────────────


def _render_flags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render flags_show as a table."""
    items = result.data.get("items", [])
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    if not items:
        console.print("  No submission flags recorded.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Cohort")
    table.add_column("Email", style="enrol.email")
    table.add_column("Identifier", style="enrol.id", no_wrap=True)
    table.add_column("Outcome")
    if verbose:
        table.add_column("Recorded", style="dim")
    for item in items:
        row = [
            str(item.get("cohort_number", "")),
            str(item.get("email", "")),
            str(item.get("identifier", "")),
            str(item.get("outcome", "")),
        ]
        if verbose:
            row.append(str(item.get("recorded", "")))
        table.add_row(*row)
    console.print(table)


# ── Lifecycle renderers ───────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init results with workspace details and file manifest."""
    _status_line(console, result)
    d = result.data
    for key in ("root", "store", "cohort_type", "cohort_number", "starting_number"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "cohort_configured", "yes" if d.get("cohort_configured") else "no")
    files = d.get("files_created", [])
    _field(console, "files_created", len(files))
    if verbose:
        for f in files:
            console.print(f"    {f}")


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in ("applied_count", "pending_count", "current", "head", "backup_path", "message"):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "submit": _render_submit,
    "cohort_show": _render_cohort,
    "cohort_set": _render_cohort,
    "get": _render_record,
    "list_cohort": _render_records,
    "lookup": _render_records,
    "check": _render_check,
    "flags_show": _render_flags,
    "init": _render_init,
    "upgrade": _render_upgrade,
}
