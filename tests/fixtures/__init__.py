"""Shared pytest fixtures and helpers for identity sync tests."""

from .core import *  # noqa: F401,F403
from .webhooks import *  # noqa: F401,F403
