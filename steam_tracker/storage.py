"""Notion database persistence for tracked games."""

import logging
from typing import Iterator

import requests

from steam_tracker.errors import StoreUnavailable, WriteFailed
from steam_tracker.models import NO_REVIEW, CatalogEntry, store_url

logger = logging.getLogger(__name__)

NOTION_API = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

# Database property names
PROP_NAME = "Name"
PROP_APP_ID = "AppID"
PROP_URL = "URL"
PROP_PRICE = "Price"
PROP_ORIGINAL_PRICE = "OriginalPrice"
PROP_SALE_PERCENT = "SalePercent"
PROP_OVERALL_REVIEW = "OverallReview"
PROP_RECENT_REVIEW = "Review"
PROP_TAGS = "Tags"


def _plain_text(prop: dict | None) -> str:
    """Join the plain text of a title or rich_text property."""
    if not prop:
        return ""
    chunks = prop.get("title") or prop.get("rich_text") or []
    return "".join(c.get("plain_text", "") for c in chunks)


def _number(prop: dict | None) -> float | None:
    if not prop:
        return None
    return prop.get("number")


def _text_value(content: str) -> list:
    return [{"type": "text", "text": {"content": content}}]


def _percent_from_fraction(value: float | None) -> int | None:
    """SalePercent is stored as a fraction of 100 (0.5 == 50%)."""
    if value is None:
        return None
    return int(round(value * 100))


def _fraction_from_percent(value: int | None) -> float | None:
    if value is None:
        return None
    return value / 100


def _cover_url(page: dict) -> str | None:
    cover = page.get("cover") or {}
    kind = cover.get("type")
    if kind in ("external", "file"):
        return (cover.get(kind) or {}).get("url")
    return None


def page_to_entry(page: dict) -> CatalogEntry | None:
    """Build a CatalogEntry from a Notion page; None if it has no page id or AppID."""
    page_id = page.get("id")
    props = page.get("properties") or {}
    app_id = _plain_text(props.get(PROP_APP_ID)).strip()
    if not page_id or not app_id:
        return None
    tags_prop = props.get(PROP_TAGS) or {}
    tags = frozenset(t["name"] for t in tags_prop.get("multi_select") or [] if t.get("name"))
    url_prop = props.get(PROP_URL) or {}
    return CatalogEntry(
        app_id=app_id,
        page_id=page_id,
        title=_plain_text(props.get(PROP_NAME)),
        store_url=url_prop.get("url") or store_url(app_id),
        price=_number(props.get(PROP_PRICE)),
        original_price=_number(props.get(PROP_ORIGINAL_PRICE)),
        sale_percent=_percent_from_fraction(_number(props.get(PROP_SALE_PERCENT))),
        overall_review=_plain_text(props.get(PROP_OVERALL_REVIEW)) or NO_REVIEW,
        recent_review=_plain_text(props.get(PROP_RECENT_REVIEW)) or NO_REVIEW,
        cover_image=_cover_url(page),
        tags=tags,
    )


def build_update_payload(fields: dict) -> dict:
    """
    Translate sync fields into a Notion page update body.

    Only keys present in ``fields`` are written.
    """
    properties: dict = {}
    payload: dict = {"properties": properties}
    if "title" in fields:
        properties[PROP_NAME] = {"title": _text_value(fields["title"] or "")}
    if "price" in fields:
        properties[PROP_PRICE] = {"number": fields["price"]}
    if "original_price" in fields:
        properties[PROP_ORIGINAL_PRICE] = {"number": fields["original_price"]}
    if "sale_percent" in fields:
        properties[PROP_SALE_PERCENT] = {"number": _fraction_from_percent(fields["sale_percent"])}
    if "overall_review" in fields:
        properties[PROP_OVERALL_REVIEW] = {"rich_text": _text_value(fields["overall_review"])}
    if "recent_review" in fields:
        properties[PROP_RECENT_REVIEW] = {"rich_text": _text_value(fields["recent_review"])}
    if fields.get("cover_image"):
        payload["cover"] = {"type": "external", "external": {"url": fields["cover_image"]}}
    return payload


class NotionStore:
    """Read and update the tracked-games database through the Notion REST API."""

    def __init__(
        self,
        token: str,
        database_id: str,
        session: requests.Session | None = None,
        timeout: float = 15,
    ):
        self.database_id = database_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            }
        )

    def _query_page(self, cursor: str | None) -> dict:
        url = f"{NOTION_API}/databases/{self.database_id}/query"
        body = {"start_cursor": cursor} if cursor else {}
        try:
            resp = self.session.post(url, json=body, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise StoreUnavailable(f"Notion query failed: {e}") from e

    def list_all(self) -> Iterator[CatalogEntry]:
        """Yield every entry in the database, following pagination cursors."""
        cursor = None
        page_no = 0
        while True:
            data = self._query_page(cursor)
            page_no += 1
            results = data.get("results") or []
            logger.debug("Notion page %d: %d records", page_no, len(results))
            for page in results:
                entry = page_to_entry(page)
                if entry is None:
                    logger.warning("Skipping Notion page %s: no page id or AppID", page.get("id"))
                    continue
                yield entry
            cursor = data.get("next_cursor") if data.get("has_more") else None
            if not cursor:
                break

    def update(self, entry: CatalogEntry, fields: dict) -> None:
        """Overwrite the given fields on the entry's page."""
        url = f"{NOTION_API}/pages/{entry.page_id}"
        try:
            resp = self.session.patch(url, json=build_update_payload(fields), timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise WriteFailed(f"Notion update failed: {e}", entry.app_id) from e

    def close(self) -> None:
        self.session.close()
