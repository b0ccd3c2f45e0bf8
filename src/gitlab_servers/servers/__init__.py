"""Server profiles and the registry that owns them.

Exports the profile value types, the registry, its error types, and the
serializer used by the file store.
"""
from __future__ import annotations

from gitlab_servers.servers.errors import (
    DuplicateNameError,
    MutationResult,
    NotFoundError,
    PersistenceError,
    RegistryError,
)
from gitlab_servers.servers.models import GITLAB_SERVER_URL, DisplayItem, ServerProfile
from gitlab_servers.servers.registry import ServerRegistry, build_index, dedup_first_wins
from gitlab_servers.servers.serializer import ProfileFormatError, ProfileSerializer

__all__ = [
    # Models
    "GITLAB_SERVER_URL",
    "ServerProfile",
    "DisplayItem",
    # Registry
    "ServerRegistry",
    "MutationResult",
    "build_index",
    "dedup_first_wins",
    # Errors
    "RegistryError",
    "DuplicateNameError",
    "NotFoundError",
    "PersistenceError",
    # Serializer
    "ProfileSerializer",
    "ProfileFormatError",
]
