"""Shared fakes for the HTTP adapters and the sync engine."""

import json

import pytest
import requests

from steam_tracker.errors import ItemNotFound, NotifyFailed, WriteFailed
from steam_tracker.models import CatalogEntry, store_url


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """
    Stands in for requests.Session.

    ``routes`` maps (method, url) to a FakeResponse, a list of responses
    consumed in order, or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []
        self.closed = False

    def _dispatch(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        target = self.routes.get((method, url))
        if target is None:
            raise requests.ConnectionError(f"no route for {method} {url}")
        if isinstance(target, list):
            target = target.pop(0)
        if isinstance(target, Exception):
            raise target
        return target

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._dispatch("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self._dispatch("PATCH", url, **kwargs)

    def close(self):
        self.closed = True


def make_entry(app_id="100", **overrides):
    values = dict(
        app_id=app_id,
        page_id=f"page-{app_id}",
        title=f"Game {app_id}",
        store_url=store_url(app_id),
    )
    values.update(overrides)
    return CatalogEntry(**values)


class FakeStore:
    def __init__(self, entries, fail_list=None, fail_update_for=()):
        self.entries = list(entries)
        self.fail_list = fail_list
        self.fail_update_for = set(fail_update_for)
        self.updates = []

    def list_all(self):
        if self.fail_list is not None:
            raise self.fail_list
        yield from self.entries

    def update(self, entry, fields):
        if entry.app_id in self.fail_update_for:
            raise WriteFailed("boom", entry.app_id)
        self.updates.append((entry.app_id, fields))


class FakeFetcher:
    """``states`` maps app id to a FetchedState or an exception to raise."""

    def __init__(self, states):
        self.states = states
        self.calls = []

    def fetch_state(self, app_id):
        self.calls.append(app_id)
        state = self.states.get(app_id)
        if state is None:
            raise ItemNotFound("unknown", app_id)
        if isinstance(state, Exception):
            raise state
        return state


class FakeNotifier:
    def __init__(self, fail_ready=False, fail_send_for=()):
        self.fail_ready = fail_ready
        self.fail_send_for = fail_send_for
        self.sent = []
        self.waited = False
        self.closed = False

    def wait_until_ready(self, timeout=None):
        self.waited = True
        if self.fail_ready:
            raise NotifyFailed("login failed")
        return "bot"

    def send(self, text):
        if any(marker in text for marker in self.fail_send_for):
            raise NotifyFailed("send failed")
        self.sent.append(text)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()
