"""
CLI interface for Claude Token Monitor.

Provides command-line access to current usage and period summaries.
"""

import json
import sys
from dataclasses import asdict
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from claude_token_monitor.ccusage.locator import RuntimeLocator
from claude_token_monitor.ccusage.repository import CcusageRepository
from claude_token_monitor.config.loader import MonitorConfig, load_monitor_config
from claude_token_monitor.core.aggregator import UsagePeriod, UsagePeriodSummary, UsageStats
from claude_token_monitor.core.errors import UsageError
from claude_token_monitor.core.thresholds import (
    UsagePattern,
    format_burn_rate,
    format_cost,
    format_tokens,
    should_show_urgent_warning,
    smart_warning_message,
    time_to_limit,
    token_limit,
    usage_percentage,
    warning_level,
)
from claude_token_monitor.logging_config import configure_logging
from claude_token_monitor.sdk.monitor import UsageMonitor

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_FAIL = 1

LEVEL_STYLES = {
    "safe": "cyan",
    "warning": "yellow",
    "critical": "dark_orange",
    "danger": "bold red",
}


def _config(ctx: typer.Context) -> MonitorConfig:
    return (ctx.obj or {}).get("config") or MonitorConfig()


def _build_monitor(config: MonitorConfig) -> UsageMonitor:
    """Create a monitor bound to the executables this config resolves."""
    paths = RuntimeLocator(config=config).resolve()
    return UsageMonitor(CcusageRepository(paths=paths, timeout=config.timeout_seconds))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML config file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show executable discovery and command traces"
    )
):
    """Claude Token Monitor CLI."""
    try:
        config = load_monitor_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = {"config": config}

    if ctx.invoked_subcommand is None:
        console.print("Claude Token Monitor - Use --help to see available commands")


@app.command()
def usage(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON")
):
    """Show the current session and today's usage."""
    monitor = _build_monitor(_config(ctx))
    try:
        stats = monitor.get_current_usage()
        pattern = None if as_json else monitor.get_usage_pattern()
    except UsageError as e:
        console.print(f"[red]Error:[/] {escape(e.message)}")
        sys.exit(EXIT_CODE_FAIL)

    if as_json:
        typer.echo(json.dumps(asdict(stats), indent=2))
    else:
        _display_usage(stats, pattern)
    sys.exit(EXIT_CODE_OK)


@app.command()
def summary(
    ctx: typer.Context,
    period: str = typer.Argument("day", help="day, week or month"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON")
):
    """Summarize usage over a day, week or month."""
    try:
        result = _build_monitor(_config(ctx)).get_usage_summary(period)
    except UsageError as e:
        console.print(f"[red]Error:[/] {escape(e.message)}")
        sys.exit(EXIT_CODE_FAIL)

    if as_json:
        typer.echo(json.dumps(asdict(result), indent=2))
    else:
        _display_summary(result)
    sys.exit(EXIT_CODE_OK)


@app.command()
def paths(ctx: typer.Context):
    """Show which Node.js and ccusage executables will be used."""
    resolved = RuntimeLocator(config=_config(ctx)).resolve()
    table = Table(title="Resolved executables")
    table.add_column("Program")
    table.add_column("Path")
    table.add_column("Source")
    table.add_row(
        "Node.js",
        resolved.runtime_path,
        "system PATH" if resolved.runtime_is_fallback else "located"
    )
    table.add_row(
        "ccusage",
        resolved.tool_path,
        "system PATH" if resolved.tool_is_fallback else "located"
    )
    console.print(table)


@app.command()
def status(ctx: typer.Context):
    """Check whether ccusage can be located."""
    resolved = RuntimeLocator(config=_config(ctx)).resolve()
    if resolved.tool_is_fallback:
        console.print("[yellow]![/] ccusage not found in known locations, relying on PATH")
    else:
        console.print(f"[green]✓[/] ccusage found at {resolved.tool_path}")


def _display_usage(stats: UsageStats, pattern: UsagePattern) -> None:
    """Display the usage snapshot with its warning level and advice."""
    percent = usage_percentage(stats.daily_tokens, UsagePeriod.DAY)
    level = warning_level(percent)
    remaining = time_to_limit(
        stats.daily_tokens,
        token_limit(UsagePeriod.DAY),
        stats.burn_rate
    )

    table = Table(title="Claude Usage")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Session", "active" if stats.active_session else "inactive")
    table.add_row("Model", stats.model)
    table.add_row("Session tokens", format_tokens(stats.current_tokens))
    table.add_row("Session cost", format_cost(stats.session_cost))
    table.add_row("Burn rate", format_burn_rate(stats.burn_rate))
    table.add_row("Today tokens", format_tokens(stats.daily_tokens))
    table.add_row("Today cost", format_cost(stats.cost))
    console.print(table)

    style = LEVEL_STYLES[level.value]
    console.print(f"[{style}]{percent:.1f}% of daily limit ({level.value})[/]")
    if remaining:
        console.print(f"Time to limit: {remaining}")

    message = smart_warning_message(percent, pattern, remaining)
    if message:
        if should_show_urgent_warning(percent, remaining):
            style = "bold red"
        console.print(f"[{style}]{escape(message)}[/]")


def _display_summary(result: UsagePeriodSummary) -> None:
    """Display a period summary."""
    percent = usage_percentage(result.total_tokens, result.period)

    table = Table(title=f"Usage {result.start_date} .. {result.end_date}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Period", f"{result.period.value} ({result.days} days)")
    table.add_row("Total tokens", format_tokens(result.total_tokens))
    table.add_row("Total cost", format_cost(result.total_cost))
    table.add_row("Avg tokens/day", f"{result.avg_tokens_per_day:,.1f}")
    table.add_row("Avg cost/day", format_cost(result.avg_cost_per_day))
    table.add_row("Limit used", f"{percent:.1f}%")
    console.print(table)


if __name__ == "__main__":
    app()
