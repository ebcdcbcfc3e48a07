from __future__ import annotations

from pathlib import Path

import pytest

from utils.config import ConfigError, load_config

ENV_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "GOOGLE_TOKEN_URI",
    "GMAIL_USER_ID",
    "SERVICE_NAME",
    "LOG_LEVEL",
    "POLL_INTERVAL_MINUTES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path: Path) -> None:
    # Set before deleting so values loaded from .env files are undone too.
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))


def test_load_config_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "GOOGLE_CLIENT_ID=cid\nGOOGLE_CLIENT_SECRET=secret\nGOOGLE_REFRESH_TOKEN=refresh\nPOLL_INTERVAL_MINUTES=5\n",
        encoding="utf-8",
    )
    config = load_config(env_file)
    assert config.client_id == "cid"
    assert config.user_id == "me"
    assert config.service_name == "GmailAssistant"
    assert config.poll_interval_minutes == 5
    assert config.log_dir == tmp_path / "logs"
    assert config.log_dir.is_dir()
    config.ensure_complete()


def test_environment_wins_over_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("GOOGLE_CLIENT_ID=from-file\n", encoding="utf-8")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "from-env")
    assert load_config(env_file).client_id == "from-env"


def test_missing_variables_are_all_reported(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.env")
    assert config.missing_variables() == ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REFRESH_TOKEN"]
    with pytest.raises(ConfigError, match="GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REFRESH_TOKEN"):
        config.ensure_complete()


def test_refresh_token_optional_for_authorization(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "cid")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "secret")
    config = load_config(tmp_path / "absent.env")
    config.ensure_complete(include_refresh_token=False)
    assert config.missing_variables() == ["GOOGLE_REFRESH_TOKEN"]


def test_invalid_integer_setting(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("POLL_INTERVAL_MINUTES", "soon")
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.env")
