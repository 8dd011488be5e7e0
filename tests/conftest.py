"""Pytest configuration and shared fixtures."""

import pytest
import structlog

from trapmail.config import get_settings
from trapmail.models import InvocationOptions


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop cached settings and logging configuration around every test."""
    monkeypatch.delenv("TRAPMAIL_STORE", raising=False)
    monkeypatch.delenv("TRAPMAIL_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def sample_options() -> InvocationOptions:
    """Provide invocation options as a typical sendmail call would."""
    return InvocationOptions(
        ignore_dots=True,
        addresses=["alice@example.com", "bob@example.com"],
    )


@pytest.fixture
def sample_body() -> bytes:
    """Provide a raw message body."""
    return (
        b"From: app@example.com\r\n"
        b"To: alice@example.com\r\n"
        b"Subject: Your password reset link\r\n"
        b"\r\n"
        b"Click here to reset your password.\r\n"
    )


class FakeClock:
    """Clock returning a fixed sequence of microsecond readings."""

    def __init__(self, *readings: int) -> None:
        self.readings = list(readings)
        self.calls = 0

    def __call__(self) -> int:
        value = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def fake_clock():
    """Factory for fake clocks."""
    return FakeClock
