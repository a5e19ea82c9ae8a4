"""
RenderDispatcher: builds one dashboard frame from a complete snapshot.

Statistics are copied and their chart data derived on every call; nothing is
cached between frames. The bottom band widgets are only placed when the
layout shows the bottom band.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import RenderableType
from rich.layout import Layout

from guardview.exceptions import IncompleteSnapshotError
from guardview.tui.layout import FrameLayout, build_rich_layout, compute_layout
from guardview.tui.snapshot import Snapshot
from guardview.tui.widgets import (
    make_filters_list,
    make_gauge,
    make_history_chart,
    make_list,
    make_query_table,
    prepare_chart_data,
    render_status_paragraph,
)
from guardview.types import FilteringStatus


@dataclass
class Frame:
    """
    One rendered frame.

    Attributes:
        layout: Region geometry used for this frame
        widgets: Widget placed in each visible region, by region name
        renderable: Rich Layout tree with every widget in place
    """

    layout: FrameLayout
    widgets: dict[str, RenderableType] = field(default_factory=dict)
    renderable: Layout | None = None


class RenderDispatcher:
    """
    Places every dashboard widget into the layout for the current size.

    Example:
        dispatcher = RenderDispatcher(filters)
        frame = dispatcher.render(snapshot, *console.size)
        session.draw(frame.renderable)
    """

    def __init__(self, filters: FilteringStatus) -> None:
        """
        Initialize dispatcher.

        Args:
            filters: Filter list fetched once before the loop starts
        """
        self._filters = filters

    def render(self, snapshot: Snapshot, width: int, height: int) -> Frame:
        """
        Build the frame for a terminal of the given size.

        Raises:
            IncompleteSnapshotError: If any facet has not been delivered
        """
        missing = snapshot.missing()
        if missing:
            raise IncompleteSnapshotError([facet.value for facet in missing])

        frame_layout = compute_layout(width, height)
        stats = prepare_chart_data(snapshot.statistics)

        widgets: dict[str, RenderableType] = {
            "status": render_status_paragraph(snapshot.status, stats),
            "gauge": make_gauge(stats),
            "chart": make_history_chart(stats, frame_layout["chart"].width),
            "queries": make_query_table(snapshot.query_log, width),
        }
        if frame_layout.show_bottom:
            widgets["filters"] = make_filters_list(self._filters.filter_items, width)
            widgets["top_queried"] = make_list(
                "Top Queried Domains", stats.top_queried_domains, "green", width
            )
            widgets["top_blocked"] = make_list(
                "Top Blocked Domains", stats.top_blocked_domains, "red", width
            )
            widgets["top_clients"] = make_list(
                "Top Clients", stats.top_clients, "cyan", width
            )

        renderable = build_rich_layout(frame_layout)
        for name, widget in widgets.items():
            renderable[name].update(widget)

        return Frame(layout=frame_layout, widgets=widgets, renderable=renderable)
