"""Discord bot notifications via the REST API."""

import logging
import threading
from concurrent.futures import Future

import requests

from steam_tracker.errors import NotifyFailed

logger = logging.getLogger(__name__)

DISCORD_API = "https://discord.com/api/v10"


class DiscordNotifier:
    """
    Post plain-text messages to a single Discord channel as a bot.

    ``start()`` logs in on a background thread; ``ready`` is a one-shot
    future resolved with the bot's user name once the login handshake
    succeeds, or with NotifyFailed if it does not.
    """

    def __init__(
        self,
        token: str,
        channel_id: str,
        session: requests.Session | None = None,
        timeout: float = 10,
    ):
        self.channel_id = channel_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bot {token}"})
        self.ready: Future = Future()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._login, name="discord-login", daemon=True)
        self._thread.start()

    def _login(self) -> None:
        try:
            resp = self.session.get(f"{DISCORD_API}/users/@me", timeout=self.timeout)
            resp.raise_for_status()
            user = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Discord login failed: %s", e)
            self.ready.set_exception(NotifyFailed(f"Discord login failed: {e}"))
            return
        name = user.get("username", "unknown")
        logger.info("Discord bot ready as %s", name)
        self.ready.set_result(name)

    def wait_until_ready(self, timeout: float | None = None) -> str:
        """Block until the login handshake completes. Raises NotifyFailed if it failed."""
        self.start()
        return self.ready.result(timeout=timeout)

    def send(self, text: str) -> None:
        if not self.ready.done() or self.ready.exception() is not None:
            raise NotifyFailed("Discord client is not ready")

        url = f"{DISCORD_API}/channels/{self.channel_id}/messages"
        try:
            logger.debug("Discord: sending %d chars to channel %s", len(text), self.channel_id)
            resp = self.session.post(url, json={"content": text}, timeout=self.timeout)
            if resp.status_code >= 400:
                logger.error("Discord API error (status %d): %s", resp.status_code, resp.text)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise NotifyFailed(f"Discord send failed: {e}") from e

    def close(self) -> None:
        """End the session; the notifier cannot be used afterwards."""
        self.session.close()
        logger.debug("Discord session closed")
