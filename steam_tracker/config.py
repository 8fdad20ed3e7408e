"""Settings read from the environment (and a project-root .env)."""

import os
from dataclasses import dataclass

REQUIRED = ("NOTION_TOKEN", "NOTION_DATABASE_ID", "DISCORD_TOKEN", "DISCORD_CHANNEL_ID")


def _get_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass
class Settings:
    notion_token: str | None
    notion_database_id: str | None
    discord_token: str | None
    discord_channel_id: str | None
    steam_country: str = "jp"
    steam_language: str = "japanese"
    http_timeout: float = 15.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            notion_token=os.environ.get("NOTION_TOKEN"),
            notion_database_id=os.environ.get("NOTION_DATABASE_ID"),
            discord_token=os.environ.get("DISCORD_TOKEN"),
            discord_channel_id=os.environ.get("DISCORD_CHANNEL_ID"),
            steam_country=os.environ.get("STEAM_COUNTRY", "jp"),
            steam_language=os.environ.get("STEAM_LANGUAGE", "japanese"),
            http_timeout=_get_float("HTTP_TIMEOUT_SECONDS", 15.0),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Raise RuntimeError naming every missing required variable."""
        missing = [name for name in REQUIRED if not getattr(self, name.lower())]
        if missing:
            raise RuntimeError(f"Missing required settings: {', '.join(missing)}")
