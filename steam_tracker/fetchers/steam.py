"""Steam storefront client: app details, review summary and store page."""

import logging
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urlsplit, urlunsplit

import requests

from steam_tracker.errors import ItemNotFound, ProviderUnavailable
from steam_tracker.fetchers.reviews import extract_recent_review, summarize_overall
from steam_tracker.models import NO_REVIEW, FetchedState, store_url

logger = logging.getLogger(__name__)

APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"
APP_REVIEWS_URL = "https://store.steampowered.com/appreviews/{app_id}"

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}

# Skip the age gate on mature titles
AGE_GATE_COOKIE = "birthtime=631152000; lastagecheckage=18; mature_content=1; wants_mature_content=1"


def _minor_to_amount(value) -> float | None:
    """Convert Steam's integer minor units (e.g. 198000) to an amount (1980.0)."""
    if value is None:
        return None
    return int(value) / 100


def _clean_image_url(url: str | None) -> str | None:
    """Drop the cache-busting query string from a header image URL."""
    if not url:
        return None
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class SteamFetcher:
    """
    Fetch the live commercial and review state of a Steam app.

    App details are required; the review summary and the recent-review scrape
    are best effort and fall back to NO_REVIEW.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        country: str = "jp",
        language: str = "japanese",
        timeout: float = 15,
        page_session: requests.Session | None = None,
    ):
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)
        # The store page gets its own session so its cookies stay out of the API session
        self.page_session = page_session or requests.Session()
        self.page_session.headers.update(HEADERS)
        self.country = country
        self.language = language
        self.timeout = timeout

    def fetch_state(self, app_id: str) -> FetchedState:
        with ThreadPoolExecutor(max_workers=3) as pool:
            details_job = pool.submit(self._fetch_details, app_id)
            overall_job = pool.submit(self._fetch_overall_review, app_id)
            recent_job = pool.submit(self._fetch_recent_review, app_id)
            details = details_job.result()
            overall_review = overall_job.result()
            recent_review = recent_job.result()

        return FetchedState(
            title=details["title"],
            price=details["price"],
            original_price=details["original_price"],
            sale_percent=details["sale_percent"],
            overall_review=overall_review,
            recent_review=recent_review,
            cover_image=details["cover_image"],
        )

    def _fetch_details(self, app_id: str) -> dict:
        params = {"appids": app_id, "cc": self.country, "l": self.language}
        try:
            resp = self.session.get(APP_DETAILS_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderUnavailable(f"appdetails request failed: {e}", app_id) from e

        if not isinstance(payload, dict):
            raise ProviderUnavailable(f"unexpected appdetails body: {type(payload).__name__}", app_id)
        entry = payload.get(app_id)
        if not entry:
            raise ItemNotFound(f"Steam has no app {app_id}", app_id)
        if not isinstance(entry, dict):
            raise ProviderUnavailable(f"unexpected appdetails entry: {type(entry).__name__}", app_id)
        if not entry.get("success"):
            raise ItemNotFound(f"Steam has no app {app_id}", app_id)

        data = entry.get("data") or {}
        if not isinstance(data, dict):
            raise ProviderUnavailable(f"unexpected appdetails data: {type(data).__name__}", app_id)
        try:
            overview = data.get("price_overview")
            if overview:
                price = _minor_to_amount(overview.get("final"))
                original_price = _minor_to_amount(overview.get("initial"))
                sale_percent = int(overview.get("discount_percent") or 0)
            else:
                price = original_price = sale_percent = None
        except (AttributeError, TypeError, ValueError) as e:
            raise ProviderUnavailable(f"unparseable price_overview: {e}", app_id) from e

        return {
            "title": data.get("name") or "",
            "price": price,
            "original_price": original_price,
            "sale_percent": sale_percent,
            "cover_image": _clean_image_url(data.get("header_image")),
        }

    def _fetch_overall_review(self, app_id: str) -> str:
        params = {"json": 1, "language": "all"}
        try:
            resp = self.session.get(
                APP_REVIEWS_URL.format(app_id=app_id), params=params, timeout=self.timeout
            )
            resp.raise_for_status()
            return summarize_overall(resp.json())
        except (requests.RequestException, ValueError) as e:
            logger.warning("Review summary unavailable for %s: %s", app_id, e)
            return NO_REVIEW

    def _fetch_recent_review(self, app_id: str) -> str:
        params = {"l": self.language, "agecheck": 1}
        headers = {"Cookie": AGE_GATE_COOKIE}
        try:
            resp = self.page_session.get(
                store_url(app_id), params=params, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
            return extract_recent_review(resp.text)
        except requests.RequestException as e:
            logger.warning("Store page unavailable for %s: %s", app_id, e)
            return NO_REVIEW

    def close(self) -> None:
        self.session.close()
        self.page_session.close()
