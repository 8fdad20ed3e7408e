"""Fetchers for live game data."""

from steam_tracker.fetchers.steam import SteamFetcher

__all__ = ["SteamFetcher"]
