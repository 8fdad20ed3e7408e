"""Exceptions raised by the store, provider and notifier adapters."""


class TrackerError(Exception):
    """Base class for all sync errors."""

    def __init__(self, message: str, app_id: str | None = None):
        super().__init__(message)
        self.app_id = app_id


class StoreUnavailable(TrackerError):
    """The Notion database could not be listed. Fatal to the run."""


class ItemNotFound(TrackerError):
    """Steam reports the app as unknown or delisted."""


class ProviderUnavailable(TrackerError):
    """Steam could not be reached or returned something unparseable."""


class WriteFailed(TrackerError):
    """Updating one Notion page failed."""


class NotifyFailed(TrackerError):
    """Discord login or message delivery failed."""
