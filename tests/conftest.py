"""Pytest configuration shared by all test modules."""

import os

# Must run before any application module reads config.yaml
os.environ["APP_ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from tests.fixtures import *  # noqa: E402,F401,F403
