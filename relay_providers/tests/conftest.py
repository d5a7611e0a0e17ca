"""Pytest configuration for the relay provider test suite.

Keeps every test hermetic: provider environment variables and the parsed
config file cache are cleared, pooled HTTP clients are closed afterwards and
retry back-off sleeps are skipped on request.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Iterator

import pytest

from relay_providers.base.http import close_all_clients
from relay_providers.base.logging import get_logger
from relay_providers.config import reset_config_cache
from relay_providers.config.env import ENV_ALIASES, ENV_MAP

_FIELD_SUFFIXES = ("MODEL", "BASE_URL", "SYSTEM_MESSAGE")


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove provider credentials and overrides from the environment."""
    for provider, var in ENV_MAP.items():
        monkeypatch.delenv(var, raising=False)
        for alias in ENV_ALIASES.get(provider, ()):
            monkeypatch.delenv(alias, raising=False)
        for suffix in _FIELD_SUFFIXES:
            monkeypatch.delenv(f"{provider.upper()}_{suffix}", raising=False)
    monkeypatch.delenv("PROVIDERS_CONFIG_FILE", raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()


@pytest.fixture()
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list:
    """Record requested sleeps instead of sleeping."""
    slept: list = []
    monkeypatch.setattr(time, "sleep", lambda seconds: slept.append(seconds))
    return slept


class _ListHandler(logging.Handler):
    """Capture log messages into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())

    def events(self) -> list[dict]:
        out = []
        for msg in self.messages:
            try:
                out.append(json.loads(msg))
            except ValueError:
                continue
        return out


@pytest.fixture()
def relay_log(monkeypatch: pytest.MonkeyPatch) -> Iterator[_ListHandler]:
    """Attach a capturing handler to the shared ``relay`` logger at DEBUG level."""
    monkeypatch.setenv("PROVIDERS_LOG_LEVEL", "DEBUG")
    base = get_logger()
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield handler
    finally:
        base.removeHandler(handler)
