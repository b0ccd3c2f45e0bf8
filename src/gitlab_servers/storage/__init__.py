"""Persistence collaborators for the server registry.

The registry only talks to the :class:`ServerStore` interface.  Two
implementations ship with the package: :class:`FileStore` for a YAML or
JSON document on disk, and :class:`MemoryStore` for tests and embedding.
"""
from __future__ import annotations

from gitlab_servers.storage.base import ServerStore
from gitlab_servers.storage.file import FileStore
from gitlab_servers.storage.memory import MemoryStore

__all__ = ["ServerStore", "FileStore", "MemoryStore"]
