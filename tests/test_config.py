import os

import pytest
from dotenv import dotenv_values

from linear_to_sheets.config import Settings, load_projects, save_token
from linear_to_sheets.errors import ConfigurationError

ENV_KEYS = [
    "LINEAR_API_TOKEN",
    "LINEAR_API_URL",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "SPREADSHEET_NAME",
    "PROJECTS_FILE",
    "ISSUE_TITLE_MARKER",
    "BURNDOWN_TIMEZONE",
    "ISSUE_PAGE_SIZE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings.linear_api_url == "https://api.linear.app/graphql"
    assert settings.service_account_path == "service_account.json"
    assert settings.projects_file == "projects.yml"
    assert settings.title_marker == "ghissue"
    assert settings.page_size == 250
    assert settings.day_zone() is None


def test_missing_token_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="setup-token"):
        Settings.from_env().require_token()


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("LINEAR_API_TOKEN", "  lin_api_abc ")
    monkeypatch.setenv("SPREADSHEET_NAME", "Burndown")
    monkeypatch.setenv("ISSUE_PAGE_SIZE", "100")
    monkeypatch.setenv("BURNDOWN_TIMEZONE", "Europe/London")

    settings = Settings.from_env()
    assert settings.require_token() == "lin_api_abc"
    assert settings.spreadsheet_name == "Burndown"
    assert settings.page_size == 100
    assert settings.day_zone() is not None


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_bad_page_size(monkeypatch, value):
    monkeypatch.setenv("ISSUE_PAGE_SIZE", value)
    with pytest.raises(ConfigurationError, match="ISSUE_PAGE_SIZE"):
        Settings.from_env()


def test_unknown_timezone():
    with pytest.raises(ConfigurationError, match="BURNDOWN_TIMEZONE"):
        Settings(timezone="Mars/Olympus_Mons").day_zone()


def test_load_projects_keeps_file_order(tmp_path):
    path = tmp_path / "projects.yml"
    path.write_text("projects:\n  Square: 857fa6e14378\n  Intercom: 9eb5c238a630\n  Cohere: ac784cf01e1d\n")
    assert list(load_projects(str(path)).items()) == [
        ("Square", "857fa6e14378"),
        ("Intercom", "9eb5c238a630"),
        ("Cohere", "ac784cf01e1d"),
    ]


def test_bundled_projects_file():
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    projects = load_projects(os.path.join(root, "projects.yml"))
    assert list(projects) == ["Square", "Intercom", "Elevenlabs", "Cohere"]


@pytest.mark.parametrize("content", ["", "teams:\n  - HQ\n", "projects: []\n", "projects:\n  Square:\n"])
def test_invalid_projects_file(tmp_path, content):
    path = tmp_path / "projects.yml"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_projects(str(path))


def test_missing_projects_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_projects(str(tmp_path / "missing.yml"))


def test_save_token_writes_env_file(tmp_path, monkeypatch):
    # recorded so monkeypatch removes the key save_token sets
    monkeypatch.setenv("LINEAR_API_TOKEN", "old")
    env_file = tmp_path / ".env"
    save_token(" lin_api_new ", str(env_file))

    assert dotenv_values(str(env_file))["LINEAR_API_TOKEN"] == "lin_api_new"
    assert os.environ["LINEAR_API_TOKEN"] == "lin_api_new"
    assert Settings.from_env().require_token() == "lin_api_new"


def test_save_token_rejects_blank(tmp_path):
    with pytest.raises(ConfigurationError):
        save_token("   ", str(tmp_path / ".env"))


def test_env_file_in_working_directory_is_loaded_on_import(tmp_path, monkeypatch):
    import importlib

    from linear_to_sheets import config

    (tmp_path / ".env").write_text("LINEAR_API_TOKEN=lin_api_cwd\n")
    monkeypatch.chdir(tmp_path)
    # recorded so monkeypatch removes the key load_dotenv sets
    monkeypatch.setenv("LINEAR_API_TOKEN", "old")
    monkeypatch.delenv("LINEAR_API_TOKEN")

    importlib.reload(config)

    assert os.environ["LINEAR_API_TOKEN"] == "lin_api_cwd"
