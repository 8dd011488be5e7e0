"""Options a capture was invoked with.

These mirror the sendmail-compatible flags accepted on the command line. The
store never interprets them; they are persisted with each mail so that tests
can check how the mail was "sent".
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class InvocationOptions(BaseModel):
    """Command-line options passed to trapmail at the time of call."""

    model_config = ConfigDict(frozen=True)

    debug: bool = Field(default=False, description="Non-standard debug output")
    ignore_dots: bool = Field(
        default=False,
        description="Ignore dots alone on lines by themselves in incoming message",
    )
    inline_recipients: bool = Field(
        default=False, description="Read message for recipient list"
    )
    addresses: tuple[str, ...] = Field(
        default_factory=tuple, description="Addresses to send mail to"
    )
    dump: Path | None = Field(
        default=None,
        description="Dump the contents of this mail file instead of capturing",
    )
