"""Notification backends."""

from steam_tracker.notifiers.discord import DiscordNotifier

__all__ = ["DiscordNotifier"]
