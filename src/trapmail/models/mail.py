"""A captured ("sent") mail.

Each mail is written to its own JSON file. The file name is derived from the
capture timestamp and the process ids, which makes it both the storage key
and the sort key.
"""

from __future__ import annotations

import base64
import binascii
import os
from pathlib import Path

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic_core import PydanticSerializationError

from trapmail.exceptions import DeserializationError, LoadError, SerializationError
from trapmail.models.invocation import InvocationOptions
from trapmail.timestamps import TimestampSource, default_timestamps


class Mail(BaseModel):
    """A single captured message and the context it was captured in."""

    model_config = ConfigDict(frozen=True)

    invocation_options: InvocationOptions = Field(
        description="Command-line options at the time of the call"
    )
    pid: int = Field(ge=0, description="ID of the trapmail process that stored this mail")
    ppid: int = Field(ge=0, description="ID of the parent process that called trapmail")
    raw_body: bytes = Field(description="The call's raw, unparsed body")
    timestamp_us: int = Field(
        ge=0, description="Microsecond-resolution UNIX timestamp of arrival"
    )

    @classmethod
    def capture(
        cls,
        invocation_options: InvocationOptions,
        raw_body: bytes,
        timestamps: TimestampSource | None = None,
    ) -> Mail:
        """Create a mail stamped with the current time and process ids.

        Args:
            invocation_options: Options the capture was invoked with.
            raw_body: Message content, stored verbatim.
            timestamps: Timestamp strategy. Defaults to the process-wide
                monotonic source, which never repeats a value.

        Raises:
            ClockError: If the system clock reports a time before 1970.
        """
        source = timestamps or default_timestamps()
        return cls(
            invocation_options=invocation_options,
            pid=os.getpid(),
            ppid=os.getppid(),
            raw_body=raw_body,
            timestamp_us=source.next(),
        )

    def file_name(self) -> str:
        """Return the (pathless) file name this mail is stored under."""
        return f"trapmail_{self.timestamp_us}_{self.ppid}_{self.pid}.json"

    def to_json(self) -> bytes:
        """Encode the mail as pretty-printed JSON.

        Raises:
            SerializationError: If the mail cannot be encoded.
        """
        try:
            return self.model_dump_json(indent=2).encode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationError(f"Could not serialize mail: {exc}") from exc

    @classmethod
    def from_json(cls, data: bytes | str) -> Mail:
        """Decode a mail previously produced by :meth:`to_json`.

        Raises:
            DeserializationError: If the data is not a valid encoded mail.
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise DeserializationError(f"Could not deserialize mail: {exc}") from exc

    @classmethod
    def load(cls, source: Path) -> Mail:
        """Load a mail from a file.

        Raises:
            LoadError: If the file cannot be read.
            DeserializationError: If its contents are not a valid mail.
        """
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise LoadError(f"Could not load mail: {exc}", path=path) from exc

        try:
            return cls.from_json(data)
        except DeserializationError as exc:
            exc.path = path
            raise

    @field_serializer("raw_body", when_used="json")
    def _encode_raw_body(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    @field_validator("raw_body", mode="before")
    @classmethod
    def _decode_raw_body(cls, value: object, info: ValidationInfo) -> object:
        # Only JSON input carries the body as base64 text.
        if info.mode == "json" and isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except binascii.Error as exc:
                raise ValueError(f"raw_body is not valid base64: {exc}") from exc
        return value
