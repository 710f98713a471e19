"""CLI entry point for installguard."""

import json
import logging
import os
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.markup import escape

from installguard.adapters.base import MetadataNotFoundError, MetadataParseError
from installguard.analyzers.aggregator import MalformedScriptError
from installguard.analyzers.pipeline import ScanPipeline
from installguard.analyzers.script import DEFAULT_CONTEXT_RADIUS
from installguard.models.schemas import PackageScanResult, RiskLevel

app = typer.Typer(help="Protect your project from malicious install scripts.")

console = Console()

RISK_STYLES: dict[RiskLevel, str] = {
    RiskLevel.CRITICAL: "bold red",
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "blue",
    RiskLevel.SAFE: "green",
}

# Findings with more matches than this show a count instead of a list
MAX_LISTED_MATCHES = 5


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("INSTALLGUARD_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _context_radius() -> int:
    raw = os.environ.get("INSTALLGUARD_CONTEXT_RADIUS")
    if not raw:
        return DEFAULT_CONTEXT_RADIUS
    try:
        return int(raw)
    except ValueError:
        console.print(f"[red]INSTALLGUARD_CONTEXT_RADIUS must be an integer, got {raw!r}[/red]")
        raise typer.Exit(1)


def exit_code_for(results: list[PackageScanResult]) -> int:
    """Return 1 when any result carries CRITICAL or HIGH overall risk."""
    blocking = sum(1 for r in results if r.has_blocking_risk)
    return 1 if blocking > 0 else 0


def _print_banner() -> None:
    console.print("\n[bold cyan] Install Guard[/bold cyan]\n")
    console.print("[dim]Protect your project from malicious install scripts[/dim]\n")


def _print_result(result: PackageScanResult) -> None:
    style = RISK_STYLES.get(result.overall_risk, "white")

    console.print(f"\n [{style}]{escape(result.package_name)}@{escape(result.version)}[/{style}]", highlight=False)
    console.print(f"   [{style}]Risk Level: {result.overall_risk.value}[/{style}]")
    console.print(f"   [dim]Total Matches: {result.total_matches}[/dim]")

    if not result.findings:
        return

    console.print("\n   [bold]Findings:[/bold]")
    for finding in result.findings:
        console.print(f"   [{style}]• {finding.message}[/{style}]")

        for detail in finding.details:
            console.print(f"     [dim]- {detail}[/dim]")

        if 0 < len(finding.matches) <= MAX_LISTED_MATCHES:
            console.print("     [dim]Suspicious patterns found:[/dim]")
            for match in finding.matches:
                console.print(f"     [dim]→ {escape(match.matched)}[/dim]", highlight=False)
        elif len(finding.matches) > MAX_LISTED_MATCHES:
            console.print(f"     [dim]{len(finding.matches)} suspicious patterns found[/dim]")


def _print_summary(results: list[PackageScanResult], skipped: int = 0) -> None:
    counts = {level: 0 for level in RiskLevel}
    for r in results:
        counts[r.overall_risk] += 1

    console.print("\n[bold] Summary:[/bold]")
    console.print(f"[dim]{'─' * 50}[/dim]")
    console.print(f"   Total packages flagged: {len(results)}")
    if skipped:
        console.print(f"   [dim]Skipped (unreadable): {skipped}[/dim]")

    for level in (RiskLevel.CRITICAL, RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW):
        if counts[level]:
            style = RISK_STYLES[level]
            console.print(f"   [{style}]{level.value}: {counts[level]}[/{style}]")

    console.print(f"[dim]{'─' * 50}[/dim]")

    if counts[RiskLevel.CRITICAL] or counts[RiskLevel.HIGH]:
        console.print("\n[bold red] WARNING: High-risk packages detected![/bold red]")
        console.print("[yellow]   Review these packages immediately before continuing.[/yellow]")
        console.print("[dim]   Consider using alternatives or pinning to known-safe versions.[/dim]\n")
    elif counts[RiskLevel.MEDIUM]:
        console.print("\n[yellow] CAUTION: Medium-risk packages detected.[/yellow]")
        console.print("[dim]   Review these packages when possible.[/dim]\n")
    else:
        console.print("\n[green] No high-risk packages detected.[/green]\n")


def _scan_single(pipeline: ScanPipeline, target: Path) -> PackageScanResult:
    try:
        return pipeline.scan_single(target)
    except (MetadataNotFoundError, MetadataParseError, MalformedScriptError, OSError) as e:
        console.print(f"[red]\n Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)


def _scan_tree(pipeline: ScanPipeline, target: Path) -> list[PackageScanResult]:
    results = pipeline.scan_tree(target)

    if not results:
        console.print("[green] No suspicious packages found![/green]\n")
        return results

    for result in results:
        _print_result(result)
    _print_summary(results, skipped=pipeline.metrics.skipped_packages)
    return results


def _write_output(output: Path | None, results: list[PackageScanResult]) -> None:
    if not output:
        return
    data = [r.model_dump(mode="json") for r in results]
    output.write_text(json.dumps(data, indent=2))
    console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def scan(
    target: Path = typer.Argument(Path("package.json"), help="package.json file or dependency directory"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Scan a package.json or a node_modules directory."""
    _configure_logging(verbose)
    _print_banner()
    pipeline = ScanPipeline(context_radius=_context_radius())

    if target.name == "package.json":
        console.print(f"[dim]Scanning {target}...[/dim]\n")
        results = [_scan_single(pipeline, target)]
        _print_result(results[0])
    else:
        console.print(f"[dim]Scanning packages in {target}...[/dim]\n")
        results = _scan_tree(pipeline, target)

    _write_output(output, results)
    raise typer.Exit(exit_code_for(results))


@app.command()
def check(
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Quick check of the current directory's package.json and node_modules."""
    _configure_logging(verbose)
    _print_banner()
    console.print("[dim]Running quick security check...[/dim]\n")
    pipeline = ScanPipeline(context_radius=_context_radius())
    results: list[PackageScanResult] = []

    package_json = Path("package.json")
    if package_json.exists():
        result = _scan_single(pipeline, package_json)
        _print_result(result)
        results.append(result)

    node_modules = Path("node_modules")
    if node_modules.exists():
        console.print("[dim]\nScanning installed packages...[/dim]\n")
        results.extend(_scan_tree(pipeline, node_modules))

    _write_output(output, results)
    raise typer.Exit(exit_code_for(results))


@app.command()
def version() -> None:
    """Show version information."""
    from installguard import __version__

    console.print(f"installguard v{__version__}")


if __name__ == "__main__":
    app()
