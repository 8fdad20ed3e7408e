"""Transition detection and notification policy."""

from steam_tracker.models import SUPPRESS_TAG, CatalogEntry, FetchedState, Transition

SALE_TEMPLATE = "SALE開始検知\nタイトル: {title}\nURL: {url}\n割引率: {sale_percent}%\n価格: {price}円"
RELEASE_TEMPLATE = "リリース検知\nタイトル: {title}\nURL: {url}\n割引率: {sale_percent}%\n価格: {price}円"


def _has_discount(sale_percent: int | None) -> bool:
    return bool(sale_percent)


def classify(previous: CatalogEntry, fresh: FetchedState) -> Transition:
    """
    Compare the stored entry with the fresh snapshot.

    A sale start is checked before a release, so an entry that is both
    released and discounted in the same run produces a single sale event.
    """
    if not _has_discount(previous.sale_percent) and _has_discount(fresh.sale_percent):
        return Transition.SALE_STARTED
    if previous.price is None and fresh.price is not None:
        return Transition.RELEASE_DETECTED
    return Transition.ROUTINE_UPDATE


def is_suppressed(entry: CatalogEntry) -> bool:
    """Return True if the entry carries the do-not-notify tag."""
    return SUPPRESS_TAG in entry.tags


def format_amount(value: float | int | None) -> str:
    """Render a price or percent the way a person would type it: 1980, not 1980.0."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def build_message(transition: Transition, fresh: FetchedState, url: str) -> str | None:
    """Build the Discord text for a transition, or None for routine updates."""
    if transition == Transition.SALE_STARTED:
        template = SALE_TEMPLATE
    elif transition == Transition.RELEASE_DETECTED:
        template = RELEASE_TEMPLATE
    else:
        return None
    return template.format(
        title=fresh.title,
        url=url,
        sale_percent=format_amount(fresh.sale_percent),
        price=format_amount(fresh.price),
    )
