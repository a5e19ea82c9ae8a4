"""
Layout engine for the dashboard screen.

This module provides:
- compute_layout(): Pure geometry from terminal size to named regions
- build_rich_layout(): Rich Layout tree with fixed sizes matching the geometry
- make_panel(): Helper for creating styled panels

Layout structure:
+----------------+--------------------------------------+
|  Status (flex) |                                      |
+----------------+  History chart (70% cols)            |  top band, 30% rows
|  Gauge (3 rows)|                                      |
+----------------+--------------------------------------+
|  Query log table (flex, min 1 row)                    |  middle band
+-------------+-------------+-------------+-------------+
|  Filters    | Top queried | Top blocked | Top clients |  bottom band, 20% rows
+-------------+-------------+-------------+-------------+  (only above 42 rows)

The geometry is computed here rather than left to rich's ratio solver so the
bottom-band threshold and the band sizes are explicit and testable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.layout import Layout
from rich.panel import Panel

TOP_BAND_PERCENT = 30
BOTTOM_BAND_PERCENT = 20
LEFT_COLUMN_PERCENT = 30
GAUGE_HEIGHT = 3
# Bottom band is drawn only when the terminal is taller than this
BOTTOM_BAND_MIN_HEIGHT = 42

BOTTOM_REGIONS = ("filters", "top_queried", "top_blocked", "top_clients")
TOP_REGIONS = ("status", "gauge", "chart")


@dataclass(frozen=True)
class Region:
    """Rectangle in terminal cells, origin at the top-left corner."""

    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class FrameLayout:
    """
    Region geometry for one frame.

    Attributes:
        width: Terminal width used for the computation
        height: Terminal height used for the computation
        regions: Region per widget name
        show_bottom: Whether the bottom band widgets are drawn
    """

    width: int
    height: int
    regions: dict[str, Region] = field(default_factory=dict)
    show_bottom: bool = False

    def __getitem__(self, name: str) -> Region:
        return self.regions[name]

    @property
    def visible_regions(self) -> list[str]:
        """Names of the regions that receive a widget this frame."""
        if self.show_bottom:
            return list(self.regions)
        return [name for name in self.regions if name not in BOTTOM_REGIONS]


def _percent(total: int, percent: int) -> int:
    return total * percent // 100


def _split_even(total: int, parts: int) -> list[int]:
    """Split total into equal parts, remainder going to the leftmost parts."""
    base, extra = divmod(total, parts)
    return [base + (1 if i < extra else 0) for i in range(parts)]


def compute_layout(width: int, height: int) -> FrameLayout:
    """
    Partition the terminal into named regions.

    Deterministic and side-effect free; re-evaluated on every draw because the
    terminal may be resized between frames.

    Args:
        width: Terminal width in columns
        height: Terminal height in rows

    Returns:
        FrameLayout with regions status, gauge, chart, queries, filters,
        top_queried, top_blocked and top_clients
    """
    width = max(0, width)
    height = max(0, height)
    show_bottom = height > BOTTOM_BAND_MIN_HEIGHT

    top_h = _percent(height, TOP_BAND_PERCENT)
    bottom_h = _percent(height, BOTTOM_BAND_PERCENT) if show_bottom else 0
    middle_h = height - top_h - bottom_h
    if middle_h < 1 and height > 0:
        # Middle band keeps at least one row, taken from the top band
        top_h = max(0, height - bottom_h - 1)
        middle_h = height - top_h - bottom_h

    left_w = _percent(width, LEFT_COLUMN_PERCENT)
    right_w = width - left_w
    gauge_h = min(GAUGE_HEIGHT, top_h)
    status_h = top_h - gauge_h

    regions = {
        "status": Region(0, 0, left_w, status_h),
        "gauge": Region(0, status_h, left_w, gauge_h),
        "chart": Region(left_w, 0, right_w, top_h),
        "queries": Region(0, top_h, width, middle_h),
    }

    bottom_y = top_h + middle_h
    x = 0
    for name, quarter_w in zip(BOTTOM_REGIONS, _split_even(width, len(BOTTOM_REGIONS))):
        regions[name] = Region(x, bottom_y, quarter_w, bottom_h)
        x += quarter_w

    return FrameLayout(
        width=width,
        height=height,
        regions=regions,
        show_bottom=show_bottom,
    )


def build_rich_layout(frame_layout: FrameLayout) -> Layout:
    """
    Create a rich Layout tree that reproduces the computed geometry.

    Every split uses fixed sizes so rich places widgets exactly where
    compute_layout() put them. Bottom-band regions are left out when hidden.

    Access regions via layout[name], e.g. layout["queries"].

    Args:
        frame_layout: Geometry from compute_layout()

    Returns:
        Layout with one named leaf per visible region
    """
    regions = frame_layout.regions
    layout = Layout(name="root")

    bands = [
        Layout(name="top", size=regions["chart"].height),
        Layout(name="queries", size=regions["queries"].height),
    ]
    if frame_layout.show_bottom:
        bands.append(Layout(name="bottom", size=regions["filters"].height))
    layout.split_column(*bands)

    layout["top"].split_row(
        Layout(name="left", size=regions["status"].width),
        Layout(name="chart", size=regions["chart"].width),
    )
    layout["left"].split_column(
        Layout(name="status", size=regions["status"].height),
        Layout(name="gauge", size=regions["gauge"].height),
    )

    if frame_layout.show_bottom:
        layout["bottom"].split_row(
            *(Layout(name=name, size=regions[name].width) for name in BOTTOM_REGIONS)
        )

    return layout


def make_panel(content, title: str, style: str = "blue") -> Panel:
    """
    Create a styled panel with content.

    Args:
        content: Text or renderable for the panel body
        title: Panel title (will be bolded)
        style: Border style color (default "blue")

    Returns:
        Panel with formatted title and border style
    """
    return Panel(
        content,
        title=f"[bold]{title}[/bold]",
        border_style=style,
        padding=(0, 1),
    )
