"""
Linear issue burndown to Google Sheets.

Fetches each configured customer project from Linear, keeps the issues whose
title carries the tracking marker, turns them into a cumulative burndown
series and rewrites one worksheet (table + line chart) per project.
"""

from linear_to_sheets.burndown import (
    BurndownPoint,
    Issue,
    filter_marked_issues,
    prepare_burndown,
)
from linear_to_sheets.errors import (
    ConfigurationError,
    RenderError,
    SyncError,
    UpstreamError,
)
from linear_to_sheets.refresh import BurndownRefresher, RefreshSummary

__version__ = "0.1.0"

__all__ = [
    "BurndownPoint",
    "BurndownRefresher",
    "ConfigurationError",
    "Issue",
    "RefreshSummary",
    "RenderError",
    "SyncError",
    "UpstreamError",
    "filter_marked_issues",
    "prepare_burndown",
]
