"""Shared test fixtures for gitlab-servers.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from gitlab_servers.servers import ServerProfile, ServerRegistry
from gitlab_servers.storage import MemoryStore


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "gitlab_servers"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def gitlab_com() -> ServerProfile:
    return ServerProfile(name="gitlab", server_url="https://gitlab.com", credentials_id="token-1")


@pytest.fixture()
def corp() -> ServerProfile:
    return ServerProfile(name="corp", server_url="https://git.corp.example", manage_web_hooks=True)


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def registry(memory_store: MemoryStore) -> ServerRegistry:
    """An empty registry backed by ``memory_store``."""
    return ServerRegistry(memory_store)
