"""
Burndown series built from Linear issues.

Main tasks:
- Turns raw GraphQL issue nodes into Issue records.
- Keeps only the issues whose title carries the tracking marker.
- Buckets creation/completion events per calendar day and accumulates them
  into one BurndownPoint per day, plus a closing point for today.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Issue:
    id: str
    identifier: str
    title: str
    state_name: str
    state_type: str
    created_at: datetime
    completed_at: Optional[datetime] = None

    @property
    def is_open(self):
        return self.completed_at is None

    @classmethod
    def from_node(cls, node):
        """Build an Issue from a Linear `issues.nodes` entry.

        Raises ValueError when a timestamp cannot be parsed.
        """
        state = node.get("state") or {}
        completed_at = node.get("completedAt")
        return cls(
            id=node["id"],
            identifier=node.get("identifier") or "",
            title=node.get("title") or "",
            state_name=state.get("name") or "",
            state_type=state.get("type") or "",
            created_at=isoparse(node["createdAt"]),
            completed_at=isoparse(completed_at) if completed_at else None,
        )


@dataclass
class DailyBucket:
    created: int = 0
    completed: int = 0


@dataclass(frozen=True)
class BurndownPoint:
    date: date
    created: int
    completed: int
    remaining: int

    def as_row(self):
        return [self.date.isoformat(), self.created, self.completed, self.remaining]


def filter_marked_issues(issues, marker="ghissue"):
    """Issues whose title contains `marker`, ignoring case, in input order."""
    marker = marker.lower()
    return [issue for issue in issues if marker in issue.title.lower()]


def calendar_day(moment, tz=None):
    # Naive timestamps are taken as local time, same as astimezone() does
    return moment.astimezone(tz).date()


def prepare_burndown(issues, today=None, tz=None):
    """Cumulative created/completed/remaining counts, one point per event day.

    `tz` picks the zone whose midnight separates days (None: local time).
    The series always ends on `today` (default: the current day in `tz`)
    unless the last event day already is today or lies after it.
    """
    buckets = defaultdict(DailyBucket)

    for issue in issues:
        buckets[calendar_day(issue.created_at, tz)].created += 1

        if issue.completed_at is not None:
            if issue.completed_at < issue.created_at:
                logger.warning(
                    "%s completed (%s) before it was created (%s)",
                    issue.identifier or issue.id,
                    issue.completed_at.isoformat(),
                    issue.created_at.isoformat(),
                )
            buckets[calendar_day(issue.completed_at, tz)].completed += 1

    points = []
    total_created = 0
    total_completed = 0

    for day in sorted(buckets):
        bucket = buckets[day]
        total_created += bucket.created
        total_completed += bucket.completed
        points.append(BurndownPoint(
            date=day,
            created=total_created,
            completed=total_completed,
            remaining=total_created - total_completed,
        ))

    if today is None:
        today = datetime.now(tz).date()

    # Carry the final totals forward so the sheet always reads "as of today"
    if not points or points[-1].date < today:
        points.append(BurndownPoint(
            date=today,
            created=total_created,
            completed=total_completed,
            remaining=total_created - total_completed,
        ))

    return points


def summarize(points):
    """Totals shown in the sheet's summary block (taken from the last point)."""
    if not points:
        return {"total": 0, "completed": 0, "remaining": 0}
    last = points[-1]
    return {"total": last.created, "completed": last.completed, "remaining": last.remaining}
