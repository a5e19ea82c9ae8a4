"""
TUI module for the live DNS filtering dashboard.

This module provides the building blocks of the render loop:
- TerminalSession: Raw mode / alternate screen ownership with guaranteed release
- Snapshot, Facet: Latest value of each independently updated facet
- FacetChannel: Closable async channel between producers and the dashboard
- FacetAggregator: Round-based merge of the three facet channels
- compute_layout, build_rich_layout, make_panel: Screen geometry and panels
- RenderDispatcher, Frame: Widget construction and placement
- InputPoller, is_quit: Zero-timeout key and resize check
- ShutdownSignal: One-shot broadcast stop notification
- Dashboard: Main loop tying all of the above together
- FacetPoller: Producer task polling one API endpoint into a channel
"""

from guardview.tui.aggregator import FacetAggregator
from guardview.tui.channel import FacetChannel
from guardview.tui.controller import Dashboard
from guardview.tui.keyboard import InputPoller, KeyEvent, ResizeEvent, is_quit
from guardview.tui.layout import (
    FrameLayout,
    Region,
    build_rich_layout,
    compute_layout,
    make_panel,
)
from guardview.tui.poller import FacetPoller
from guardview.tui.render import Frame, RenderDispatcher
from guardview.tui.shutdown import ShutdownSignal
from guardview.tui.snapshot import Facet, Snapshot
from guardview.tui.terminal import TerminalSession

__all__ = [
    "Dashboard",
    "Facet",
    "FacetAggregator",
    "FacetChannel",
    "FacetPoller",
    "Frame",
    "FrameLayout",
    "InputPoller",
    "KeyEvent",
    "Region",
    "RenderDispatcher",
    "ResizeEvent",
    "ShutdownSignal",
    "Snapshot",
    "TerminalSession",
    "build_rich_layout",
    "compute_layout",
    "is_quit",
    "make_panel",
]
