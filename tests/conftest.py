"""Test configuration ensuring local package import when editable install not active.

If pytest runs outside the project's virtualenv, the project root is still
added to sys.path so `import linear_to_sheets` works.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def make_node(number, title, created_at, completed_at=None, state_type=None):
    state_type = state_type or ("completed" if completed_at else "started")
    return {
        "id": f"uuid-{number}",
        "identifier": f"SQ-{number}",
        "title": title,
        "state": {"name": state_type.title(), "type": state_type},
        "createdAt": created_at,
        "completedAt": completed_at,
    }


@pytest.fixture
def project_nodes():
    # Three issues on Jan 1 (one closed Jan 3), two on Jan 2, one untracked
    return [
        make_node(1, "ghIssue-1 login fails", "2024-01-01T09:00:00.000Z", "2024-01-03T15:30:00.000Z"),
        make_node(2, "ghIssue-2 slow export", "2024-01-01T11:00:00.000Z"),
        make_node(3, "GHISSUE-3 typo", "2024-01-01T17:45:00.000Z"),
        make_node(4, "Internal cleanup", "2024-01-02T08:00:00.000Z"),
        make_node(5, "ghissue-5 crash", "2024-01-02T10:00:00.000Z"),
        make_node(6, "ghissue-6 docs", "2024-01-02T12:00:00.000Z"),
    ]
