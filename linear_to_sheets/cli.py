"""
Command line entry point.

Commands:
- refresh-all (default): rebuild every customer worksheet listed in projects.yml.
- refresh PROJECT: rebuild a single customer worksheet; errors are not swallowed.
- setup-token: prompt for the Linear API token and store it in .env.
- initial-setup: setup-token followed by refresh-all.
- list-projects: print the configured customers and their project ids.
"""

import argparse
import getpass
import logging
import sys

from dotenv import load_dotenv

from linear_to_sheets.config import Settings, load_projects, save_token
from linear_to_sheets.errors import SyncError
from linear_to_sheets.linear import LinearClient
from linear_to_sheets.refresh import BurndownRefresher
from linear_to_sheets.sheets import open_spreadsheet

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="linear-to-sheets",
        description="Sync Linear issue burndown charts into Google Sheets",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", default=".env", help="File the token is saved to and read from")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("refresh-all", help="Refresh every configured customer")
    refresh = subparsers.add_parser("refresh", help="Refresh a single customer")
    refresh.add_argument("project", help="Customer name as listed in projects.yml")
    subparsers.add_parser("setup-token", help="Store the Linear API token")
    subparsers.add_parser("initial-setup", help="Store the token, then refresh every customer")
    subparsers.add_parser("list-projects", help="Show the configured customers")
    return parser


def setup_token(env_file=".env", prompt=None):
    prompt = prompt or getpass.getpass
    token = prompt("Enter your Linear API token (from linear.app/settings/api): ").strip()
    if not token:
        print("No token entered, nothing saved.")
        return False
    save_token(token, env_file)
    print("Linear API token saved!")
    return True


def build_refresher(settings):
    projects = load_projects(settings.projects_file)
    client = LinearClient(
        settings.require_token(),
        api_url=settings.linear_api_url,
        page_size=settings.page_size,
    )
    print("Opening Google Sheet...")
    spreadsheet = open_spreadsheet(settings)
    return BurndownRefresher(
        client,
        spreadsheet,
        projects,
        marker=settings.title_marker,
        tz=settings.day_zone(),
    )


def refresh_all(settings):
    summary = build_refresher(settings).refresh_all()
    for project_name, error in summary.failures.items():
        print(f"- {project_name}: {error}", file=sys.stderr)
    return 1 if summary.failed else 0


def refresh_one(settings, project_name):
    points = build_refresher(settings).refresh_project(project_name)
    print(f"Successfully updated {project_name} burndown ({len(points)} rows)")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Values already in the environment win over the file
    load_dotenv(args.env_file, override=False)
    command = args.command or "refresh-all"

    try:
        if command == "setup-token":
            setup_token(args.env_file)
            return 0

        if command == "initial-setup":
            if not setup_token(args.env_file):
                return 1
            return refresh_all(Settings.from_env())

        settings = Settings.from_env()
        if command == "list-projects":
            for name, project_id in load_projects(settings.projects_file).items():
                print(f"{name}: {project_id}")
            return 0
        if command == "refresh":
            return refresh_one(settings, args.project)
        return refresh_all(settings)
    except SyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
