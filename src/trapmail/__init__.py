"""trapmail - a sendmail stand-in that captures mail instead of sending it.

Captured mail is written to a directory, one JSON file per message, so that
tests and development environments can inspect what would have been sent.
"""

__version__ = "0.1.0"

from trapmail.config import Settings, get_settings
from trapmail.models import InvocationOptions, Mail
from trapmail.store import MailLoadResult, MailStore

__all__ = [
    "InvocationOptions",
    "Mail",
    "MailLoadResult",
    "MailStore",
    "Settings",
    "get_settings",
    "__version__",
]
