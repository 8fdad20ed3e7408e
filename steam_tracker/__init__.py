"""Steam catalog tracker: keeps a Notion game list in sync with Steam and announces sales on Discord."""

__version__ = "0.1.0"
