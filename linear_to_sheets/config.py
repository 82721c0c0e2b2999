"""
Settings for the Linear burndown sync.

Environment variables (read from a local .env file when present):
- LINEAR_API_TOKEN: Linear personal API key (set it with `linear-to-sheets setup-token`).
- LINEAR_API_URL (optional): GraphQL endpoint, defaults to the public Linear API.
- GOOGLE_APPLICATION_CREDENTIALS (optional): Path to Google service account credentials.
- SPREADSHEET_NAME (optional): Spreadsheet that holds one worksheet per customer.
- PROJECTS_FILE (optional): YAML file mapping customer names to Linear project ids.
- ISSUE_TITLE_MARKER (optional): Title substring that marks tracked issues.
- BURNDOWN_TIMEZONE (optional): IANA zone used to bucket timestamps into days.
- ISSUE_PAGE_SIZE (optional): Number of issues requested per project.
"""

import os
from dataclasses import dataclass

import yaml
from dateutil import tz
from dotenv import find_dotenv, load_dotenv, set_key

from linear_to_sheets.errors import ConfigurationError

# Load environment variables from the .env file in the working directory (where setup-token writes it)
# In GitHub Actions, these will be provided as environment variables
load_dotenv(find_dotenv(usecwd=True))

TOKEN_KEY = "LINEAR_API_TOKEN"
LINEAR_API_URL = "https://api.linear.app/graphql"
DEFAULT_SPREADSHEET_NAME = "Customer Issue Burndown"
DEFAULT_PROJECTS_FILE = "projects.yml"
DEFAULT_TITLE_MARKER = "ghissue"
# Largest page Linear serves for a connection
DEFAULT_PAGE_SIZE = 250


@dataclass
class Settings:
    linear_api_token: str = ""
    linear_api_url: str = LINEAR_API_URL
    service_account_path: str = "service_account.json"
    spreadsheet_name: str = DEFAULT_SPREADSHEET_NAME
    projects_file: str = DEFAULT_PROJECTS_FILE
    title_marker: str = DEFAULT_TITLE_MARKER
    timezone: str = ""
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_env(cls):
        page_size = os.getenv("ISSUE_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
        try:
            page_size = int(page_size)
        except ValueError:
            raise ConfigurationError(f"ISSUE_PAGE_SIZE must be an integer, got {page_size!r}")
        if page_size <= 0:
            raise ConfigurationError(f"ISSUE_PAGE_SIZE must be positive, got {page_size}")

        return cls(
            linear_api_token=os.getenv(TOKEN_KEY, "").strip(),
            linear_api_url=os.getenv("LINEAR_API_URL", LINEAR_API_URL),
            service_account_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "service_account.json"),
            spreadsheet_name=os.getenv("SPREADSHEET_NAME", DEFAULT_SPREADSHEET_NAME),
            projects_file=os.getenv("PROJECTS_FILE", DEFAULT_PROJECTS_FILE),
            title_marker=os.getenv("ISSUE_TITLE_MARKER", DEFAULT_TITLE_MARKER),
            timezone=os.getenv("BURNDOWN_TIMEZONE", "").strip(),
            page_size=page_size,
        )

    def require_token(self):
        if not self.linear_api_token:
            raise ConfigurationError(
                'Linear API token not set. Run "linear-to-sheets setup-token" first.'
            )
        return self.linear_api_token

    def day_zone(self):
        """Zone used to cut timestamps into calendar days; None means local time."""
        if not self.timezone:
            return None
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ConfigurationError(f"Unknown BURNDOWN_TIMEZONE: {self.timezone}")
        return zone


def load_projects(path=DEFAULT_PROJECTS_FILE):
    """Load the customer name -> Linear project id mapping, in file order."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationError(f"Projects file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Projects file {path} is not valid YAML: {e}")

    projects = config.get("projects") if isinstance(config, dict) else None
    if not isinstance(projects, dict) or not projects:
        raise ConfigurationError(f"{path} must define a non-empty 'projects' mapping")

    loaded = {}
    for name, project_id in projects.items():
        if project_id is None or not str(project_id).strip():
            raise ConfigurationError(f"Project {name!r} in {path} has no project id")
        loaded[str(name)] = str(project_id).strip()
    return loaded


def save_token(token, env_file=".env"):
    """Persist the Linear token to the .env file and the running process."""
    token = (token or "").strip()
    if not token:
        raise ConfigurationError("Refusing to save an empty Linear API token")
    if not os.path.exists(env_file):
        open(env_file, "a").close()
    set_key(env_file, TOKEN_KEY, token)
    os.environ[TOKEN_KEY] = token
    return env_file
