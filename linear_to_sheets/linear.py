"""
Linear GraphQL client.

Fetches a project together with its issues (lifecycle timestamps and state)
in a single request. Any `errors` entry in the response envelope, a failed
transport call or an unknown project id is raised as UpstreamError.
"""

import json
import logging
from dataclasses import dataclass, field

import requests

from linear_to_sheets.burndown import Issue
from linear_to_sheets.config import DEFAULT_PAGE_SIZE, LINEAR_API_URL
from linear_to_sheets.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

PROJECT_ISSUES_QUERY = """
query($projectId: String!, $first: Int) {
  project(id: $projectId) {
    id
    name
    issues(first: $first) {
      pageInfo {
        hasNextPage
      }
      nodes {
        id
        identifier
        title
        state {
          name
          type
        }
        createdAt
        completedAt
      }
    }
  }
}
"""


@dataclass
class Project:
    id: str
    name: str
    issues: list = field(default_factory=list)


class LinearClient:

    def __init__(self, token, api_url=LINEAR_API_URL, page_size=DEFAULT_PAGE_SIZE, session=None):
        if not token:
            raise ConfigurationError(
                'Linear API token not set. Run "linear-to-sheets setup-token" first.'
            )
        self.api_url = api_url
        self.page_size = page_size

        # Linear takes the personal API key as-is, no "Bearer" prefix
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": token,
            "Content-Type": "application/json",
        })

    def query(self, query, variables=None):
        payload = {"query": query, "variables": variables or {}}

        try:
            response = self.session.post(self.api_url, json=payload)
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"Linear API request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        # Linear reports GraphQL errors with a 4xx status, so look at the body first
        if isinstance(data, dict) and data.get("errors"):
            raise UpstreamError("Linear API error: " + json.dumps(data["errors"]))

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise UpstreamError(f"Linear API request failed: {e}") from e

        if not isinstance(data, dict) or "data" not in data:
            raise UpstreamError(f"Unexpected Linear API response: {response.text[:200]}")

        return data["data"]

    def fetch_project(self, project_id):
        logger.debug("Fetching issues for Linear project %s", project_id)
        data = self.query(PROJECT_ISSUES_QUERY, {"projectId": project_id, "first": self.page_size})

        project = (data or {}).get("project")
        if not project:
            raise UpstreamError(f"Linear project not found: {project_id}")

        connection = project.get("issues") or {}
        nodes = connection.get("nodes") or []
        if (connection.get("pageInfo") or {}).get("hasNextPage"):
            logger.warning(
                "Project %s has more than %d issues; only the first page is used",
                project.get("name") or project_id,
                self.page_size,
            )

        issues = []
        for node in nodes:
            try:
                issues.append(Issue.from_node(node))
            except (KeyError, TypeError, ValueError) as e:
                raise UpstreamError(
                    f"Malformed issue {node.get('identifier') or node.get('id')}: {e}"
                ) from e

        logger.debug("Fetched %d issues for %s", len(issues), project.get("name"))
        return Project(id=project.get("id", project_id), name=project.get("name") or "", issues=issues)
