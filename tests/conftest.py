"""Test harness configuration.

This repo uses a `src/` layout. An older installed `cordkit` can shadow the
local sources, so make sure tests always import the in-repo code.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS = 60


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    src_path = str(src_dir)
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: list[pytest.Item]
) -> None:
    """
    Apply a default per-test timeout to non-integration tests.

    This relies on `pytest-timeout`; without it the marker is inert but still
    documents the intent.
    """
    _ = session, config
    for item in items:
        if item.get_closest_marker("integration") is not None:
            continue
        item.add_marker(pytest.mark.timeout(DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS))


@pytest.fixture()
def guild_payload() -> dict[str, Any]:
    """A guild with @everyone, a moderator role and two text channels."""
    return {
        "id": "100",
        "name": "Test Guild",
        "owner_id": "1",
        "roles": [
            {"id": "100", "name": "@everyone", "position": 0, "permissions": "1024"},
            {
                "id": "200",
                "name": "mods",
                "position": 2,
                "permissions": str(1 << 13),
                "color": 0xFF0000,
            },
        ],
        "channels": [
            {"id": "300", "type": 0, "name": "general", "permission_overwrites": []},
            {
                "id": "301",
                "type": 0,
                "name": "staff",
                "permission_overwrites": [
                    {"id": "100", "type": 0, "allow": "0", "deny": "1024"},
                    {"id": "200", "type": 0, "allow": "1024", "deny": "0"},
                ],
            },
        ],
        "members": [
            {"user": {"id": "42", "username": "mod"}, "roles": ["200"]},
            {"user": {"id": "43", "username": "member"}, "roles": []},
        ],
    }


@pytest.fixture()
def anyio_backend() -> str:
    """The package is built on stdlib asyncio; run anyio tests on that backend."""
    return "asyncio"
