from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


class ConfigError(RuntimeError):
    """Raised when required settings are missing or invalid."""


@dataclass(slots=True)
class AppConfig:
    client_id: Optional[str]
    client_secret: Optional[str]
    refresh_token: Optional[str]
    token_uri: str
    user_id: str
    service_name: str
    log_dir: Path
    log_level: str
    poll_interval_minutes: int

    def missing_variables(self, include_refresh_token: bool = True) -> List[str]:
        required: Dict[str, Optional[str]] = {
            "GOOGLE_CLIENT_ID": self.client_id,
            "GOOGLE_CLIENT_SECRET": self.client_secret,
        }
        if include_refresh_token:
            required["GOOGLE_REFRESH_TOKEN"] = self.refresh_token
        return [name for name, value in required.items() if not value]

    def ensure_complete(self, include_refresh_token: bool = True) -> None:
        missing = self.missing_variables(include_refresh_token)
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}. Please check your .env file."
            )


def _resolve_path(value: str | None, fallback: str) -> Path:
    candidate = Path(value or fallback)
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate


def _int_setting(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_config(env_file: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration values from a .env file and environment variables."""

    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    log_dir = _resolve_path(os.getenv("LOG_DIR"), "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    return AppConfig(
        client_id=os.getenv("GOOGLE_CLIENT_ID"),
        client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
        refresh_token=os.getenv("GOOGLE_REFRESH_TOKEN"),
        token_uri=os.getenv("GOOGLE_TOKEN_URI", DEFAULT_TOKEN_URI),
        user_id=os.getenv("GMAIL_USER_ID", "me"),
        service_name=os.getenv("SERVICE_NAME", "GmailAssistant"),
        log_dir=log_dir,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        poll_interval_minutes=_int_setting("POLL_INTERVAL_MINUTES", 15),
    )
