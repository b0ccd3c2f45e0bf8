"""In-process store, for tests and for embedding the registry without a file."""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from gitlab_servers.servers.errors import PersistenceError
from gitlab_servers.servers.models import ServerProfile
from gitlab_servers.storage.base import ServerStore


class MemoryStore(ServerStore):
    """Keeps a copy of the last saved list.

    Parameters
    ----------
    initial:
        Profiles returned by the first :meth:`load`.
    fail_on_save:
        When ``True``, every :meth:`save` raises ``PersistenceError``.
    """

    def __init__(
        self,
        initial: Iterable[ServerProfile] = (),
        fail_on_save: bool = False,
    ) -> None:
        self._servers: list[ServerProfile] = list(initial)
        self.fail_on_save = fail_on_save
        self.save_count = 0

    def load(self) -> list[ServerProfile]:
        return list(self._servers)

    def save(self, servers: Sequence[ServerProfile]) -> None:
        if self.fail_on_save:
            raise PersistenceError("MemoryStore is configured to fail on save")
        self._servers = list(servers)
        self.save_count += 1

    def __repr__(self) -> str:
        return f"MemoryStore(servers={len(self._servers)}, saves={self.save_count})"
