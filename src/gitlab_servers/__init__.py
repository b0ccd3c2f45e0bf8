"""gitlab-servers — a registry of named GitLab server connection profiles.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import gitlab_servers

    registry = gitlab_servers.open_registry("servers.yml")
    registry.add_server(gitlab_servers.ServerProfile(name="corp", server_url="https://git.corp"))
    registry.configure([...])          # bulk replace, first name wins
    registry.lookup_display_items()    # [(label, value), ...]

    gitlab_servers.__version__
    '0.1.0'
"""
from __future__ import annotations

import os

from gitlab_servers.servers import (
    GITLAB_SERVER_URL,
    DisplayItem,
    DuplicateNameError,
    MutationResult,
    NotFoundError,
    PersistenceError,
    ProfileFormatError,
    ProfileSerializer,
    RegistryError,
    ServerProfile,
    ServerRegistry,
)
from gitlab_servers.storage import FileStore, MemoryStore, ServerStore

__version__: str = "0.1.0"


def open_registry(path: str | os.PathLike[str]) -> ServerRegistry:
    """Create a registry backed by the YAML or JSON file at ``path``.

    The file is read immediately; a missing file yields an empty registry.

    Raises
    ------
    PersistenceError
        If the file exists but cannot be read as a server document.
    """
    return ServerRegistry(FileStore(path))


__all__ = [
    "__version__",
    "open_registry",
    "GITLAB_SERVER_URL",
    "ServerProfile",
    "DisplayItem",
    "ServerRegistry",
    "MutationResult",
    "RegistryError",
    "DuplicateNameError",
    "NotFoundError",
    "PersistenceError",
    "ProfileSerializer",
    "ProfileFormatError",
    "ServerStore",
    "FileStore",
    "MemoryStore",
]
