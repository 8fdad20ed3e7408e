import pytest
import requests

from conftest import FakeResponse, FakeSession
from steam_tracker.errors import NotifyFailed
from steam_tracker.notifiers.discord import DISCORD_API, DiscordNotifier

ME_URL = f"{DISCORD_API}/users/@me"
MESSAGES_URL = f"{DISCORD_API}/channels/42/messages"


def test_ready_resolves_after_login():
    session = FakeSession({("GET", ME_URL): FakeResponse(payload={"username": "steam-bot"})})
    notifier = DiscordNotifier("tok", "42", session=session)
    assert notifier.wait_until_ready(timeout=5) == "steam-bot"
    assert session.headers["Authorization"] == "Bot tok"


def test_login_failure_raises_notify_failed():
    session = FakeSession({("GET", ME_URL): FakeResponse(status_code=401, payload={"message": "401"})})
    notifier = DiscordNotifier("bad", "42", session=session)
    with pytest.raises(NotifyFailed):
        notifier.wait_until_ready(timeout=5)


def test_send_posts_content():
    session = FakeSession(
        {
            ("GET", ME_URL): FakeResponse(payload={"username": "bot"}),
            ("POST", MESSAGES_URL): FakeResponse(payload={"id": "1"}),
        }
    )
    notifier = DiscordNotifier("tok", "42", session=session)
    notifier.wait_until_ready(timeout=5)
    notifier.send("SALE開始検知")
    method, url, kwargs = session.calls[-1]
    assert (method, url) == ("POST", MESSAGES_URL)
    assert kwargs["json"] == {"content": "SALE開始検知"}


def test_send_before_ready_fails():
    notifier = DiscordNotifier("tok", "42", session=FakeSession())
    with pytest.raises(NotifyFailed):
        notifier.send("hello")


def test_send_error_raises_notify_failed():
    session = FakeSession(
        {
            ("GET", ME_URL): FakeResponse(payload={"username": "bot"}),
            ("POST", MESSAGES_URL): requests.ConnectionError("reset"),
        }
    )
    notifier = DiscordNotifier("tok", "42", session=session)
    notifier.wait_until_ready(timeout=5)
    with pytest.raises(NotifyFailed):
        notifier.send("hello")


def test_close_releases_session():
    session = FakeSession({("GET", ME_URL): FakeResponse(payload={"username": "bot"})})
    notifier = DiscordNotifier("tok", "42", session=session)
    notifier.wait_until_ready(timeout=5)
    notifier.close()
    assert session.closed
