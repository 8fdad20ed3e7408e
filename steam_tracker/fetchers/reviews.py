"""Steam review summaries: descriptor translation, formatting and page scraping."""

import logging
import re

from bs4 import BeautifulSoup

from steam_tracker.models import NO_REVIEW

logger = logging.getLogger(__name__)

REVIEW_SCORE_JA = {
    "Overwhelmingly Positive": "圧倒的に好評",
    "Very Positive": "非常に好評",
    "Positive": "好評",
    "Mostly Positive": "やや好評",
    "Mixed": "賛否両論",
    "Mostly Negative": "やや不評",
    "Negative": "不評",
    "Very Negative": "非常に不評",
    "Overwhelmingly Negative": "圧倒的に不評",
    "No user reviews": "レビューなし",
}

RECENT_LABEL = "最近のレビュー："

# Store page markup for the review summary rows
ROW_SELECTOR = ".user_reviews_summary_row"
LABEL_SELECTOR = ".subtitle"
SUMMARY_SELECTOR = ".game_review_summary"
DESCRIPTION_SELECTOR = ".responsive_reviewdesc"

_PERCENT_RE = re.compile(r"(\d+)%")


def translate_descriptor(descriptor: str) -> str:
    """Map an English review descriptor to its Japanese label; unknown ones pass through."""
    return REVIEW_SCORE_JA.get(descriptor, descriptor)


def format_review(summary: str | None, percent: int | None) -> str:
    if not summary or percent is None or percent < 0:
        return NO_REVIEW
    return f"{summary}({percent}%)"


def summarize_overall(payload: dict) -> str:
    """
    Build the overall review label from an /appreviews JSON payload.

    Payloads without a query summary or with zero reviews yield NO_REVIEW.
    """
    if not isinstance(payload, dict) or payload.get("success") != 1:
        return NO_REVIEW
    summary = payload.get("query_summary")
    if not isinstance(summary, dict):
        return NO_REVIEW
    total = summary.get("total_reviews") or 0
    positive = summary.get("total_positive") or 0
    if not isinstance(total, int) or not isinstance(positive, int) or total <= 0:
        return NO_REVIEW
    percent = int(positive * 100 / total + 0.5)
    return format_review(translate_descriptor(summary.get("review_score_desc", "")), percent)


def extract_recent_review(html: str) -> str:
    """Scrape the 'recent reviews' row from a store page."""
    soup = BeautifulSoup(html, "html.parser")
    for row in soup.select(ROW_SELECTOR):
        label = row.select_one(LABEL_SELECTOR)
        if label is None or label.get_text(strip=True) != RECENT_LABEL:
            continue
        summary = row.select_one(SUMMARY_SELECTOR)
        description = row.select_one(DESCRIPTION_SELECTOR)
        summary_text = summary.get_text(strip=True) if summary else ""
        match = _PERCENT_RE.search(description.get_text(strip=True) if description else "")
        percent = int(match.group(1)) if match else 0
        return format_review(summary_text, percent)
    logger.debug("No recent review row found on store page")
    return NO_REVIEW
