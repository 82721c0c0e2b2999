"""
Refresh pipeline: fetch -> filter -> aggregate -> render, one project at a time.

refresh_project() lets its error reach the caller (tagged with the project
name); refresh_all() keeps going past a failing project and reports how many
projects succeeded and failed.
"""

import logging
from dataclasses import dataclass, field

from linear_to_sheets.burndown import filter_marked_issues, prepare_burndown
from linear_to_sheets.config import DEFAULT_TITLE_MARKER
from linear_to_sheets.errors import ConfigurationError, RenderError, SyncError, UpstreamError
from linear_to_sheets.sheets import render_burndown

logger = logging.getLogger(__name__)


@dataclass
class RefreshSummary:
    succeeded: int = 0
    failed: int = 0
    failures: dict = field(default_factory=dict)

    @property
    def message(self):
        message = f"Refreshed {self.succeeded} customer(s)"
        if self.failed:
            message += f", {self.failed} failed"
        return message

    def __str__(self):
        return f"{self.succeeded} succeeded, {self.failed} failed"


def _tag(error, project_name):
    return type(error)(f"Failed to refresh {project_name}: {error}", project=project_name)


class BurndownRefresher:

    def __init__(self, client, spreadsheet, projects, marker=DEFAULT_TITLE_MARKER, tz=None, notify=print):
        self.client = client
        self.spreadsheet = spreadsheet
        self.projects = dict(projects)
        self.marker = marker
        self.tz = tz
        self.notify = notify

    def refresh_project(self, project_name):
        """Rebuild one customer's worksheet. Returns the burndown points written."""
        project_id = self.projects.get(project_name)
        if not project_id:
            raise ConfigurationError(f"Invalid project: {project_name}", project=project_name)

        try:
            try:
                project = self.client.fetch_project(project_id)
            except SyncError:
                raise
            except Exception as e:
                raise UpstreamError(str(e)) from e

            tracked = filter_marked_issues(project.issues, self.marker)
            points = prepare_burndown(tracked, tz=self.tz)
            logger.info(
                "%s: %d of %d issues tracked, %d burndown points",
                project_name, len(tracked), len(project.issues), len(points),
            )

            try:
                render_burndown(self.spreadsheet, project_name, points, tz=self.tz)
            except SyncError:
                raise
            except Exception as e:
                raise RenderError(str(e)) from e
        except SyncError as e:
            raise _tag(e, project_name) from e

        return points

    def refresh_all(self):
        self.notify("Fetching data for all customers...")
        summary = RefreshSummary()

        for project_name in self.projects:
            try:
                self.refresh_project(project_name)
                summary.succeeded += 1
            except Exception as e:
                summary.failed += 1
                summary.failures[project_name] = str(e)
                logger.error("Error refreshing %s: %s", project_name, e)

        self.notify(summary.message)
        return summary
