"""Directory-backed store for captured mail.

Every mail lives in its own JSON file directly under the store root. There is
no index beyond the directory listing itself, and the store keeps no state
between calls.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from trapmail.config import Settings, get_settings
from trapmail.exceptions import (
    DeserializationError,
    DirEnumerationError,
    LoadError,
    StoreError,
)
from trapmail.models import Mail

logger = structlog.get_logger()


FILENAME_RE = re.compile(r"trapmail_([0-9]+)_([0-9]+)_([0-9]+)\.json")


@dataclass(frozen=True)
class MailLoadResult:
    """Outcome of loading one stored mail file."""

    path: Path
    mail: Mail | None = None
    error: LoadError | DeserializationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Mail:
        """Return the mail or raise the error it failed with."""
        if self.error is not None:
            raise self.error
        if self.mail is None:
            raise ValueError(f"No mail was loaded from {self.path}")
        return self.mail


def sort_key(file_name: str) -> tuple[int, int, int]:
    """Numeric (timestamp, ppid, pid) key for a stored mail's file name.

    Raises:
        ValueError: If the name is not a trapmail file name.
    """
    match = FILENAME_RE.fullmatch(file_name)
    if match is None:
        raise ValueError(f"Not a trapmail file name: {file_name!r}")
    timestamp_us, ppid, pid = match.groups()
    return int(timestamp_us), int(ppid), int(pid)


class MailStore:
    """Repository for writing and reading captured mail."""

    def __init__(self, root: Path) -> None:
        """Create a store. The filesystem is not touched.

        Args:
            root: Directory where all mail in this store gets stored.
        """

        self._root = Path(root)

    @classmethod
    def with_root(cls, root: Path) -> MailStore:
        """Construct a store with an explicit root path."""
        return cls(root)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MailStore:
        """Construct a store rooted at the configured path (``TRAPMAIL_STORE``)."""
        settings = settings or get_settings()
        return cls(settings.store)

    @property
    def root(self) -> Path:
        return self._root

    def __repr__(self) -> str:
        return f"MailStore(root={str(self._root)!r})"

    def add(self, mail: Mail) -> Path:
        """Add a mail to the store.

        Returns:
            The path where the mail has been stored.

        Raises:
            SerializationError: If the mail cannot be encoded.
            StoreError: If the file cannot be created or written.
        """

        data = mail.to_json()
        output_path = self._root / mail.file_name()

        try:
            fh = output_path.open("xb")
        except OSError as exc:
            logger.debug("mail_store_failed", path=str(output_path), error=str(exc))
            raise StoreError(f"Could not store mail: {exc}", path=output_path) from exc

        try:
            with fh:
                fh.write(data)
        except OSError as exc:
            # Only the file created above is removed, never a pre-existing one.
            output_path.unlink(missing_ok=True)
            logger.debug("mail_store_failed", path=str(output_path), error=str(exc))
            raise StoreError(f"Could not store mail: {exc}", path=output_path) from exc

        logger.info(
            "mail_stored",
            path=str(output_path),
            size=len(mail.raw_body),
            addresses=mail.invocation_options.addresses,
        )
        return output_path

    def iter_mails(self) -> Iterator[MailLoadResult]:
        """Iterate over all mails in storage, oldest first.

        The directory is listed immediately; each mail is then loaded lazily
        as the iterator advances. A file that fails to load produces a result
        carrying the error and does not stop the iteration.

        Raises:
            DirEnumerationError: If the store directory cannot be listed.
        """

        names = self._list_mail_names()
        return (self._load_result(self._root / name) for name in names)

    def mails(self) -> list[Mail]:
        """Load every stored mail, oldest first.

        Raises:
            DirEnumerationError: If the store directory cannot be listed.
            LoadError: If a mail file cannot be read.
            DeserializationError: If a mail file cannot be decoded.
        """
        return [result.unwrap() for result in self.iter_mails()]

    def load(self, file_name: str) -> Mail:
        """Load a single mail by its file name."""
        return Mail.load(self._root / file_name)

    def _list_mail_names(self) -> list[str]:
        names: list[str] = []
        skipped = 0

        # Read the entire directory first so the names can be sorted.
        try:
            for entry in self._root.iterdir():
                if FILENAME_RE.fullmatch(entry.name):
                    names.append(entry.name)
                else:
                    skipped += 1
        except OSError as exc:
            raise DirEnumerationError(
                f"Could not open storage directory for reading: {exc}", path=self._root
            ) from exc

        # Sort numerically: timestamps do not all have the same digit count.
        names.sort(key=sort_key)
        logger.debug(
            "mail_store_listed",
            root=str(self._root),
            mail_count=len(names),
            skipped=skipped,
        )
        return names

    def _load_result(self, path: Path) -> MailLoadResult:
        try:
            return MailLoadResult(path=path, mail=Mail.load(path))
        except (LoadError, DeserializationError) as exc:
            logger.debug("mail_load_failed", path=str(path), error=str(exc))
            return MailLoadResult(path=path, error=exc)
