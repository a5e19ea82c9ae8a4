"""
Widget builders for the dashboard panels.

Each builder turns one piece of the snapshot into a rich renderable:
- make_gauge: blocked-percentage bar
- make_query_table: recent queries
- make_history_chart: query/blocked history sparklines
- render_status_paragraph: service status and totals
- make_filters_list: configured filter lists
- make_list: ranked top-N list (domains, clients)

prepare_chart_data() derives the chart-ready points from the raw history on
a copy of the statistics; it runs once per draw.
"""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text
from sparklines import sparklines

from guardview.tui.layout import make_panel
from guardview.types import Filter, QueryRecord, ServiceStatus, Statistics

WIDE_TABLE_WIDTH = 120
WIDE_FILTERS_WIDTH = 160


def prepare_chart_data(stats: Statistics) -> Statistics:
    """
    Return a copy of stats with the chart series filled in.

    Points are (bucket index, count), oldest bucket first. The input is not
    modified.
    """
    prepared = stats.model_copy(deep=True)
    prepared.dns_queries_chart = [
        (float(i), float(count)) for i, count in enumerate(stats.dns_queries)
    ]
    prepared.blocked_filtering_chart = [
        (float(i), float(count)) for i, count in enumerate(stats.blocked_filtering)
    ]
    return prepared


def _sparkline(points: list[tuple[float, float]], width: int | None) -> str:
    values = [max(0.1, y) for _, y in points]
    if width is not None:
        values = values[-width:] if width > 0 else []
    if not values:
        return ""
    lines = list(sparklines(values))
    return lines[0] if lines else ""


def _format_duration(seconds: float) -> str:
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def _truncate(value: str, width: int) -> str:
    if width <= 1 or len(value) <= width:
        return value
    return value[: width - 1] + "…"


def make_gauge(stats: Statistics) -> Panel:
    """Blocked share of all queries as a progress bar."""
    percentage = stats.block_percentage
    bar = ProgressBar(
        total=100,
        completed=percentage,
        complete_style="red",
        finished_style="red",
    )
    return Panel(
        bar,
        title=f"[bold]Blocked {percentage:.2f}%[/bold]",
        border_style="red",
        padding=(0, 1),
    )


def make_query_table(queries: list[QueryRecord], width: int) -> Table:
    """
    Table of recent queries, one row per record in delivered order.

    Upstream and elapsed time columns only appear on wide terminals.
    """
    wide = width > WIDE_TABLE_WIDTH
    table = Table(
        title="Query Log",
        expand=True,
        border_style="blue",
        header_style="bold",
    )
    table.add_column("Time", no_wrap=True)
    table.add_column("Domain", ratio=3, overflow="ellipsis", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Client", no_wrap=True)
    if wide:
        table.add_column("Upstream", ratio=2, overflow="ellipsis", no_wrap=True)
        table.add_column("Elapsed", justify="right", no_wrap=True)
    table.add_column("Status", no_wrap=True)

    for query in queries:
        # "2024-03-01T10:15:02.123Z" -> "10:15:02"
        clock = query.time[11:19] if len(query.time) >= 19 else query.time
        if query.is_blocked:
            status = Text("Blocked", style="bold red")
        else:
            status = Text("Allowed", style="green")
        row = [clock, query.domain, query.record_type, query.client]
        if wide:
            row += [query.upstream, f"{query.elapsed_ms} ms"]
        table.add_row(*row, status, style="red" if query.is_blocked else None)

    return table


def make_history_chart(stats: Statistics, width: int | None = None) -> Panel:
    """
    History of all and blocked queries as two sparklines.

    Expects stats prepared by prepare_chart_data().
    """
    if not stats.dns_queries_chart:
        return make_panel("[dim]No history yet...[/dim]", "History", "green")

    inner = max(0, width - 4) if width is not None else None
    peak_all = max(y for _, y in stats.dns_queries_chart)
    peak_blocked = max((y for _, y in stats.blocked_filtering_chart), default=0)
    body = Group(
        Text(f"All queries (peak {peak_all:.0f})", style="dim"),
        Text(_sparkline(stats.dns_queries_chart, inner), style="green"),
        Text(""),
        Text(f"Blocked (peak {peak_blocked:.0f})", style="dim"),
        Text(_sparkline(stats.blocked_filtering_chart, inner), style="red"),
    )
    return make_panel(body, "History", "green")


def render_status_paragraph(status: ServiceStatus, stats: Statistics) -> Panel:
    """Service state, addresses and headline counters."""
    running = "[green]Running[/green]" if status.running else "[bold red]Stopped[/bold red]"
    protection = (
        "[green]Enabled[/green]"
        if status.protection_enabled
        else "[yellow]Disabled[/yellow]"
    )
    lines = [
        f"Version: [bold]{status.version or '?'}[/bold]",
        f"Service: {running}",
        f"Protection: {protection}",
        f"DNS port: {status.dns_port}  HTTP port: {status.http_port}",
    ]
    if status.dns_addresses:
        lines.append(f"Addresses: {', '.join(status.dns_addresses)}")
    if status.uptime is not None:
        lines.append(f"Uptime: {_format_duration(status.uptime)}")
    lines += [
        "",
        f"Queries: [bold]{stats.num_dns_queries}[/bold]",
        f"Blocked: [bold red]{stats.num_blocked_filtering}[/bold red]",
        f"Safe browsing: {stats.num_replaced_safebrowsing}  "
        f"Parental: {stats.num_replaced_parental}",
        f"Avg processing: {stats.avg_processing_time * 1000:.2f} ms",
    ]
    return make_panel("\n".join(lines), "Status", "cyan")


def make_filters_list(filters: list[Filter], width: int) -> Table:
    """Configured filter lists with their enabled state."""
    table = Table(title="Filters", expand=True, show_header=False, border_style="yellow")
    table.add_column("On", no_wrap=True)
    table.add_column("Name", ratio=1, overflow="ellipsis", no_wrap=True)
    table.add_column("Rules", justify="right", no_wrap=True)
    show_url = width > WIDE_FILTERS_WIDTH
    if show_url:
        table.add_column("URL", ratio=1, overflow="ellipsis", no_wrap=True)

    for item in filters:
        marker = Text("✓", style="green") if item.enabled else Text("✗", style="red")
        row = [marker, item.name or item.url, str(item.rules_count)]
        if show_url:
            row.append(item.url)
        table.add_row(*row, style=None if item.enabled else "dim")

    return table


def make_list(title: str, items: list[dict[str, int]], color: str, width: int) -> Table:
    """
    Ranked list of name/count pairs.

    Args:
        title: List title
        items: Single-entry dicts in rank order, as the stats API reports them
        color: Border and name color
        width: Terminal width, used to trim long names
    """
    name_width = max(8, width // 4 - 12)
    table = Table(title=title, expand=True, show_header=False, border_style=color)
    table.add_column("Name", ratio=1, style=color, no_wrap=True)
    table.add_column("Count", justify="right", no_wrap=True)

    for entry in items:
        for name, count in entry.items():
            table.add_row(_truncate(name, name_width), str(count))

    return table
