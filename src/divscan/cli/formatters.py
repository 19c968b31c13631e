"""Rich output formatters for the divscan CLI.

Each function accepts plain data and returns a Rich renderable (Table,
Panel, etc.).  The caller is responsible for printing via
``console.print()``.  This separation keeps the formatters testable
without capturing stdout.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from divscan.signals.divergence.types import (
    DivergencePattern,
    DivergenceSummary,
    PeakLowData,
)
from divscan.signals.price_stats import PriceStats

_STRENGTH_STYLES = {
    "strong": "[red]strong[/red]",
    "moderate": "[yellow]moderate[/yellow]",
    "weak": "[green]weak[/green]",
}


def format_divergence_table(patterns: list[DivergencePattern]) -> Table:
    """Render detected divergences as a Rich Table, one row per pattern.

    Parameters
    ----------
    patterns : list[DivergencePattern]
        Output of ``detect_divergences()``, already ordered by start index.
    """
    table = Table(title="Detected Divergences", show_lines=True)
    table.add_column("Type", justify="center")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Bars", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Indicator", justify="right")
    table.add_column("Strength", justify="center")
    table.add_column("Confidence", justify="right")

    for p in patterns:
        type_styled = (
            "[green]BULLISH[/green]" if p.type == "bullish" else "[red]BEARISH[/red]"
        )
        table.add_row(
            type_styled,
            p.start_date,
            p.end_date,
            str(p.duration),
            f"{p.start_price:.2f} -> {p.end_price:.2f} ({p.price_change:+.2f})",
            f"{p.start_indicator:.2f} -> {p.end_indicator:.2f} "
            f"({p.indicator_change:+.2f})",
            _STRENGTH_STYLES[p.strength],
            f"{p.confidence:.1f}",
        )

    return table


def format_summary_panel(summary: DivergenceSummary) -> Panel:
    """Render type and strength counts as a Rich Panel."""
    lines = [
        f"[bold]Total Divergences:[/bold] {summary.total}",
        f"  Bullish Signals: [green]{summary.bullish}[/green]",
        f"  Bearish Signals: [red]{summary.bearish}[/red]",
        "",
        "[bold]Strength Distribution[/bold]",
        f"  Strong:   {summary.strong}",
        f"  Moderate: {summary.moderate}",
        f"  Weak:     {summary.weak}",
    ]
    border = "blue" if summary.total else "dim"
    return Panel("\n".join(lines), title="Divergence Summary", border_style=border)


def format_extrema_table(data: PeakLowData) -> Table:
    """Render peaks and lows merged in index order.

    Parameters
    ----------
    data : PeakLowData
        Output of ``identify_peaks_lows()``.
    """
    table = Table(title="Local Extrema")
    table.add_column("Index", justify="right", style="dim")
    table.add_column("Kind", justify="center")
    table.add_column("Value", justify="right")

    rows = [(i, "[green]PEAK[/green]", v) for i, v in zip(data.peaks, data.peak_values)]
    rows += [(i, "[red]LOW[/red]", v) for i, v in zip(data.lows, data.low_values)]
    for index, kind, value in sorted(rows, key=lambda r: r[0]):
        table.add_row(str(index), kind, f"{value:.4f}")

    return table


def format_price_stats(stats: PriceStats) -> Panel:
    """Render price statistics as a Rich Panel."""
    lines = [
        f"  Current Price:  {stats.current_price:.2f}",
        f"  All-Time High:  {stats.all_time_high:.2f}  "
        f"({stats.distance_from_high:+.2f}, {stats.distance_from_high_percent:+.2f}%)",
        f"  All-Time Low:   {stats.all_time_low:.2f}  "
        f"({stats.distance_from_low:+.2f}, {stats.distance_from_low_percent:+.2f}%)",
    ]
    return Panel("\n".join(lines), title="Price Statistics", border_style="blue")


def format_error(title: str, message: str) -> Panel:
    """Render a failed command as a red Rich Panel."""
    return Panel(f"[red]{escape(message)}[/red]", title=title, border_style="red")
