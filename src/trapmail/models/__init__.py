"""Data models for trapmail.

This module contains Pydantic models for captured mail and the options it was
captured with.
"""

from trapmail.models.invocation import InvocationOptions
from trapmail.models.mail import Mail

__all__ = ["InvocationOptions", "Mail"]
