"""Entry point: one sync pass over the tracked games, then exit."""

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parents[1] / ".env")

from steam_tracker.config import Settings
from steam_tracker.errors import NotifyFailed, StoreUnavailable
from steam_tracker.fetchers.steam import SteamFetcher
from steam_tracker.notifiers.discord import DiscordNotifier
from steam_tracker.storage import NotionStore
from steam_tracker.sync import SyncEngine

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main() -> int:
    """Run one sync pass. Returns the process exit code."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    try:
        settings.validate()
    except RuntimeError as e:
        logger.error("%s", e)
        return 1

    store = NotionStore(settings.notion_token, settings.notion_database_id, timeout=settings.http_timeout)
    fetcher = SteamFetcher(
        country=settings.steam_country,
        language=settings.steam_language,
        timeout=settings.http_timeout,
    )
    notifier = DiscordNotifier(settings.discord_token, settings.discord_channel_id, timeout=settings.http_timeout)
    notifier.start()

    logger.info("🚀 Steam tracker sync started")
    try:
        SyncEngine(store, fetcher, notifier).run()
    except StoreUnavailable as e:
        logger.error("Could not list tracked games, aborting: %s", e)
        return 1
    except NotifyFailed as e:
        logger.error("Discord is unavailable, aborting before any update: %s", e)
        return 1
    finally:
        store.close()
        fetcher.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
