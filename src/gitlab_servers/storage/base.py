"""Abstract persistence collaborator for the server registry."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from gitlab_servers.servers.models import ServerProfile


class ServerStore(ABC):
    """Loads and saves the registry's list of profiles.

    Implementations own the durable format entirely.  Both methods must
    raise :class:`~gitlab_servers.servers.errors.PersistenceError` on
    failure; the registry relies on that to keep its in-memory state
    unchanged when a save does not go through.
    """

    @abstractmethod
    def load(self) -> list[ServerProfile]:
        """Return the persisted profiles, in order.  Empty when nothing is stored."""

    @abstractmethod
    def save(self, servers: Sequence[ServerProfile]) -> None:
        """Persist ``servers``, replacing whatever was stored before."""
