"""Report generation (console and JSON)."""

import json
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import ScanResult, Severity

SEVERITY_ORDER = (Severity.SAFE, Severity.LOW, Severity.MEDIUM, Severity.HIGH)

SEVERITY_STYLE = {
    Severity.HIGH: "red bold",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.SAFE: "green",
}


def _severity_rank(s: Severity) -> int:
    return SEVERITY_ORDER.index(s)


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def print_console(result: ScanResult, *, quiet: bool = False, console: Console | None = None) -> None:
    """Print scan result to console with Rich formatting."""
    console = console or Console()
    summary = result.summary
    console.print(Panel(f"[bold]AppGuard - Results for {result.target}[/bold]", box=box.DOUBLE))

    style = _score_style(summary.security_score)
    console.print(Panel(
        f"[{style}]Security score: {summary.security_score}/100[/]  "
        f"[red]High: {summary.high_severity}[/red]  "
        f"[yellow]Medium: {summary.medium_severity}[/yellow]  "
        f"[blue]Low: {summary.low_severity}[/blue]  "
        f"Total: {summary.total_vulnerabilities}",
        title="Summary",
        border_style="blue",
    ))
    console.print(f"\nURLs scanned ({result.scan_level.value}): [cyan]{len(result.scanned_urls)}[/cyan]\n")

    if not result.findings:
        console.print("[green]No issues found.[/green]")
        return

    findings = sorted(result.findings, key=lambda x: (-_severity_rank(x.severity), x.name, x.url))

    table = Table(title="Findings", show_header=True, header_style="bold")
    table.add_column("Severity", style="bold", width=10)
    table.add_column("Category", width=22)
    table.add_column("Name", width=40)
    table.add_column("URL", width=50)
    for f in findings:
        sev_style = SEVERITY_STYLE[f.severity]
        table.add_row(
            f"[{sev_style}]{f.severity.value.upper()}[/]",
            escape(f.category),
            escape(f.name[:38] + ".." if len(f.name) > 40 else f.name),
            escape(f.url[:48] + ".." if len(f.url) > 50 else f.url),
        )
    console.print(table)

    if quiet:
        return

    console.print("\n[bold]Details[/bold]\n")
    for i, f in enumerate(findings, 1):
        sev_style = SEVERITY_STYLE[f.severity]
        body = f"[bold]Description:[/bold] {escape(f.description)}\n"
        body += f"[bold]URL:[/bold] {escape(f.url)}\n"
        for key, value in f.details.items():
            body += f"[bold]{key}:[/bold] {escape(str(value))}\n"
        console.print(Panel(
            body.rstrip(),
            title=f"#{i} [{sev_style}]{f.severity.value.upper()}[/] - {escape(f.name)}",
            border_style="bright_black",
        ))


def to_dict(result: ScanResult) -> dict:
    """Serialize ScanResult to a JSON-serializable dict."""
    return {
        "target": result.target,
        "scanLevel": result.scan_level.value,
        "scannedUrls": result.scanned_urls,
        "summary": result.summary.to_dict(),
        "vulnerabilities": [f.to_dict() for f in result.findings],
    }


def write_json(result: ScanResult, path: str | Path) -> None:
    """Write scan result to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(to_dict(result), f, indent=2, default=str)
