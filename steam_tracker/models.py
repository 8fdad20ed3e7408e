"""Data models for tracked Steam catalog entries."""

from dataclasses import dataclass, field
from enum import Enum

# Entries carrying this tag are synced but never announced.
SUPPRESS_TAG = "非通知"

NO_REVIEW = "評価なし"

STORE_URL_TEMPLATE = "https://store.steampowered.com/app/{app_id}/"


def store_url(app_id: str) -> str:
    """Canonical store page URL for an app id."""
    return STORE_URL_TEMPLATE.format(app_id=app_id)


class Transition(str, Enum):
    """How an entry's commercial state changed since the last sync."""

    SALE_STARTED = "sale_started"
    RELEASE_DETECTED = "release_detected"
    ROUTINE_UPDATE = "routine_update"


@dataclass
class CatalogEntry:
    """One tracked game as stored in the Notion database."""

    app_id: str
    page_id: str
    title: str
    store_url: str
    price: float | None = None
    original_price: float | None = None
    sale_percent: int | None = None
    overall_review: str = NO_REVIEW
    recent_review: str = NO_REVIEW
    cover_image: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)


@dataclass
class FetchedState:
    """Live snapshot of one app from the Steam storefront."""

    title: str
    price: float | None = None
    original_price: float | None = None
    sale_percent: int | None = None
    overall_review: str = NO_REVIEW
    recent_review: str = NO_REVIEW
    cover_image: str | None = None

    def as_fields(self) -> dict:
        """Store fields overwritten by a sync."""
        return {
            "title": self.title,
            "price": self.price,
            "original_price": self.original_price,
            "sale_percent": self.sale_percent,
            "overall_review": self.overall_review,
            "recent_review": self.recent_review,
            "cover_image": self.cover_image,
        }
