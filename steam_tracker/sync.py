"""One sync pass over the tracked-games database."""

import logging
from dataclasses import dataclass

from steam_tracker.classifier import build_message, classify, is_suppressed
from steam_tracker.errors import ItemNotFound, NotifyFailed, ProviderUnavailable, WriteFailed
from steam_tracker.models import CatalogEntry, Transition, store_url

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    """Per-run counters."""

    total: int = 0
    updated: int = 0
    skipped: int = 0
    write_failures: int = 0
    notified: int = 0
    suppressed: int = 0
    notify_failures: int = 0


class SyncEngine:
    """
    Refresh every entry from Steam, write it back and announce transitions.

    Entries are processed one at a time. Only the initial listing (and the
    notifier login) can abort a run; any per-entry failure is logged and the
    walk moves on.
    """

    def __init__(self, store, fetcher, notifier):
        self.store = store
        self.fetcher = fetcher
        self.notifier = notifier

    def run(self) -> SyncSummary:
        summary = SyncSummary()
        try:
            self.notifier.wait_until_ready()
            entries = list(self.store.list_all())
            summary.total = len(entries)
            logger.info("Syncing %d tracked games", summary.total)
            for entry in entries:
                try:
                    self._process(entry, summary)
                except Exception as e:
                    logger.exception("Unexpected error syncing AppID %s: %s", entry.app_id, e)
                    summary.skipped += 1
        finally:
            self.notifier.close()

        logger.info(
            "Sync finished: %d total, %d updated, %d skipped, %d write failures, "
            "%d notified, %d suppressed, %d notify failures",
            summary.total, summary.updated, summary.skipped, summary.write_failures,
            summary.notified, summary.suppressed, summary.notify_failures,
        )
        return summary

    def _process(self, entry: CatalogEntry, summary: SyncSummary) -> None:
        try:
            fresh = self.fetcher.fetch_state(entry.app_id)
        except ItemNotFound as e:
            logger.warning("AppID %s not found on Steam, skipping: %s", entry.app_id, e)
            summary.skipped += 1
            return
        except ProviderUnavailable as e:
            logger.error("Failed to fetch AppID %s: %s", entry.app_id, e)
            summary.skipped += 1
            return

        # Classify against the stored state before it is overwritten
        transition = classify(entry, fresh)

        try:
            self.store.update(entry, fresh.as_fields())
            summary.updated += 1
        except WriteFailed as e:
            logger.error("Failed to update AppID %s: %s", entry.app_id, e)
            summary.write_failures += 1

        if transition == Transition.ROUTINE_UPDATE:
            logger.info("Updated: %s", fresh.title)
            return

        if is_suppressed(entry):
            logger.info("Notification suppressed (%s) for %s", transition.value, fresh.title)
            summary.suppressed += 1
            return

        message = build_message(transition, fresh, store_url(entry.app_id))
        logger.info("%s", message)
        try:
            self.notifier.send(message)
            summary.notified += 1
        except NotifyFailed as e:
            logger.error("Failed to notify for AppID %s: %s", entry.app_id, e)
            summary.notify_failures += 1
