"""On-disk mail store.

This package persists captured mail as one JSON file per message and lists
them back in arrival order.
"""

from .repository import FILENAME_RE, MailLoadResult, MailStore, sort_key

__all__ = ["FILENAME_RE", "MailLoadResult", "MailStore", "sort_key"]
