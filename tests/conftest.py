"""Shared fixtures: a small policy document, a store and a deterministic clock."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from entitlecore import InMemoryAccessStore, PolicyDocument

RAW_POLICY: dict[str, Any] = {
    "data": {
        "app": {"permission_all": "ALL"},
        "domains": {
            "acme": {
                "title": "Acme Corp",
                "versions": ["v1", "v2"],
                "network": ["globex", "ghost"],
                "signup": True,
            },
            "globex": {"title": "Globex", "versions": ["v2"], "signup": False},
            "initech": {"title": "Initech", "versions": ["v3"], "signup": True},
            "empty": {"title": "Empty", "versions": []},
        },
        "versions": {
            "v1": {
                "tag": "basic",
                "title": "Basic",
                "features": ["billing", "reports"],
                "modules": ["invoicing"],
                "roles": ["roleA", "roleB"],
            },
            "v2": {
                "tag": "pro-monthly",
                "title": "Pro",
                "features": ["billing", "reports", "audit"],
                "modules": ["invoicing", "analytics"],
                "roles": ["roleA", "roleB", "roleC"],
            },
            "v3": {"tag": "pro-annual", "title": "Pro Annual"},
        },
        "roles": {
            "roleA": {"title": "Clerk"},
            "roleB": {"title": "Administrator"},
            "roleC": {"title": "Auditor"},
        },
        "access": {
            "billing": {"roleA": ["view"], "roleB": ["ALL"], "roleC": []},
            "reports": {"roleA": ["view", "export"], "roleC": ["view"]},
            "audit": {"roleC": ["view"]},
            "archive": {"roleA": ["view"]},
        },
    }
}

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a time one second later on every call."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def raw_policy() -> dict[str, Any]:
    return copy.deepcopy(RAW_POLICY)


@pytest.fixture
def policy(raw_policy: dict[str, Any]) -> PolicyDocument:
    return PolicyDocument.from_mapping(raw_policy)


@pytest.fixture
def store() -> InMemoryAccessStore:
    return InMemoryAccessStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield root
    root.setLevel(level)
    root.handlers[:] = handlers
