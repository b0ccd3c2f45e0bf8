"""Server registry for GitLab connection profiles.

Holds the ordered list of :class:`ServerProfile` objects and a derived
name → profile index.  Names are unique: bulk replacement drops later
duplicates, and single-profile mutators refuse to create one.

Every change goes through one primitive that builds the new list and a
freshly rebuilt index, persists the list, and only then publishes both
together under the registry lock.  Readers take the same lock, so they
never see a list and an index that disagree, and a failed save leaves
the registry exactly as it was.

Example
-------
::

    from gitlab_servers.servers import ServerProfile, ServerRegistry
    from gitlab_servers.storage import FileStore

    registry = ServerRegistry(FileStore("servers.yml"))
    if not registry.add_server(ServerProfile(name="corp", server_url="https://git.corp")):
        print("corp is already registered")

    for label, value in registry.lookup_display_items():
        print(label, value)
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING

from gitlab_servers.servers.errors import DuplicateNameError, MutationResult, NotFoundError
from gitlab_servers.servers.models import DisplayItem, ServerProfile

if TYPE_CHECKING:
    from gitlab_servers.storage.base import ServerStore

logger = logging.getLogger(__name__)


def dedup_first_wins(servers: Iterable[ServerProfile]) -> list[ServerProfile]:
    """Return ``servers`` without repeated names, keeping the first of each.

    Order is otherwise preserved.  Blank names are compared like any
    other value, so two blank-named profiles collapse into one.
    """
    seen: set[str] = set()
    result: list[ServerProfile] = []
    for server in servers:
        if server.name in seen:
            continue
        seen.add(server.name)
        result.append(server)
    return result


def build_index(servers: Iterable[ServerProfile]) -> dict[str, ServerProfile]:
    """Return a fresh name → profile mapping; later duplicates overwrite earlier ones."""
    index: dict[str, ServerProfile] = {}
    for server in servers:
        index[server.name] = server
    return index


class ServerRegistry:
    """Thread-safe registry of GitLab server profiles.

    Construct one per process and pass it to whatever needs it.

    Parameters
    ----------
    store:
        Persistence collaborator.  When given, the registry is hydrated
        from it immediately and every successful mutation is saved to
        it.  Without a store the registry is purely in-memory.
    """

    display_name = "GitLab Servers"

    def __init__(self, store: "ServerStore | None" = None) -> None:
        self._store = store
        self._servers: tuple[ServerProfile, ...] = ()
        self._index: dict[str, ServerProfile] = {}
        self._lock = threading.RLock()
        if store is not None:
            self.load()

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _publish(self, servers: Sequence[ServerProfile], persist: bool) -> None:
        """Swap in ``servers`` and its index.  Caller holds the lock.

        The store is written before anything is published, so a
        ``PersistenceError`` leaves the current state untouched.  A
        published index dict is never mutated afterwards.
        """
        new_servers = tuple(servers)
        new_index = build_index(new_servers)
        if persist and self._store is not None:
            self._store.save(new_servers)
        self._servers = new_servers
        self._index = new_index
        logger.debug("Rebuilt server index: %s", list(new_index))

    def replace_all(self, servers: Iterable[ServerProfile] | None) -> None:
        """Replace the whole list and rebuild the index.

        ``None`` is treated as empty.  The input is copied.  Duplicate
        names are *not* removed from the list; in the index the last
        one wins.  Nothing is persisted; use :meth:`configure` for a
        de-duplicated, persisted bulk replace.
        """
        with self._lock:
            self._publish(list(servers or ()), persist=False)

    def configure(self, servers: Iterable[ServerProfile] | None) -> tuple[ServerProfile, ...]:
        """Replace the whole list, dropping repeated names, and persist it.

        The first profile with a given name wins; the others are
        dropped.

        Returns
        -------
        tuple[ServerProfile, ...]
            The de-duplicated list now held by the registry.

        Raises
        ------
        PersistenceError
            If the store fails; the previous state is kept.
        """
        incoming = list(servers or ())
        unique = dedup_first_wins(incoming)
        if len(unique) != len(incoming):
            logger.warning(
                "Dropped %d server(s) with duplicate names", len(incoming) - len(unique)
            )
        with self._lock:
            self._publish(unique, persist=True)
            for server in self._servers:
                logger.debug("Server: %s", server.name)
            logger.info("Configured %d server(s)", len(self._servers))
            return self._servers

    def load(self) -> tuple[ServerProfile, ...]:
        """Hydrate the registry from its store.

        Repeated names in the stored data are dropped, keeping the
        first.  Without a store this is a no-op.

        Raises
        ------
        PersistenceError
            If the store cannot be read; the previous state is kept.
        """
        if self._store is None:
            return self.get_servers()
        loaded = self._store.load()
        unique = dedup_first_wins(loaded)
        if len(unique) != len(loaded):
            logger.warning(
                "Stored data held %d server(s) with duplicate names; keeping the first of each",
                len(loaded) - len(unique),
            )
        with self._lock:
            self._publish(unique, persist=False)
            logger.info("Loaded %d server(s) from %r", len(self._servers), self._store)
            return self._servers

    # ------------------------------------------------------------------
    # Single-profile mutators
    # ------------------------------------------------------------------

    def add_server(self, server: ServerProfile) -> MutationResult:
        """Append ``server`` unless its name is already registered.

        Returns
        -------
        MutationResult
            Truthy when the server was added; otherwise carries a
            :class:`DuplicateNameError`.

        Raises
        ------
        PersistenceError
            If the store fails; the previous state is kept.
        """
        with self._lock:
            if server.name in self._index:
                logger.debug("Refusing to add duplicate server %r", server.name)
                return MutationResult.rejected(DuplicateNameError(server.name))
            self._publish([*self._servers, server], persist=True)
        logger.info("Added server %r (%s)", server.name, server.server_url)
        return MutationResult.ok()

    def update_server(self, server: ServerProfile) -> MutationResult:
        """Replace the registered profile that has ``server.name``, in place.

        Returns
        -------
        MutationResult
            Truthy when the server was replaced; otherwise carries a
            :class:`NotFoundError`.

        Raises
        ------
        PersistenceError
            If the store fails; the previous state is kept.
        """
        with self._lock:
            if server.name not in self._index:
                return MutationResult.rejected(NotFoundError(server.name))
            updated = [server if old.name == server.name else old for old in self._servers]
            self._publish(updated, persist=True)
        logger.info("Updated server %r", server.name)
        return MutationResult.ok()

    def remove_server(self, name: str | None) -> MutationResult:
        """Remove every profile named ``name``.

        Returns
        -------
        MutationResult
            Truthy when at least one profile was removed; otherwise
            carries a :class:`NotFoundError`.

        Raises
        ------
        PersistenceError
            If the store fails; the previous state is kept.
        """
        with self._lock:
            if name not in self._index:
                return MutationResult.rejected(NotFoundError(name))
            remaining = [server for server in self._servers if server.name != name]
            self._publish(remaining, persist=True)
        logger.info("Removed server %r", name)
        return MutationResult.ok()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_servers(self) -> tuple[ServerProfile, ...]:
        """Return a read-only snapshot of the registered profiles, in order."""
        with self._lock:
            return self._servers

    @property
    def index(self) -> Mapping[str, ServerProfile]:
        """Read-only view of the derived name → profile index."""
        with self._lock:
            return MappingProxyType(self._index)

    def snapshot(self) -> tuple[tuple[ServerProfile, ...], Mapping[str, ServerProfile]]:
        """Return the list and its index as one consistent pair."""
        with self._lock:
            return self._servers, MappingProxyType(self._index)

    def get_server(self, name: str) -> ServerProfile | None:
        """Return the profile registered under ``name``, or ``None``."""
        with self._lock:
            return self._index.get(name)

    def has_server(self, name: str) -> bool:
        with self._lock:
            return name in self._index

    def server_names(self) -> tuple[str, ...]:
        """Return the registered names in list order."""
        with self._lock:
            return tuple(server.name for server in self._servers)

    def lookup_display_items(self) -> list[DisplayItem]:
        """Return ``(label, value)`` pairs for presenting the servers.

        The value is the server URL.  The label is the name, or the URL
        when the name is blank.
        """
        return [
            DisplayItem(label=server.display_label, value=server.server_url)
            for server in self.get_servers()
        ]

    def __contains__(self, name: object) -> bool:
        """Support ``"gitlab" in registry`` membership test."""
        with self._lock:
            return name in self._index

    def __len__(self) -> int:
        with self._lock:
            return len(self._servers)

    def __iter__(self) -> Iterator[ServerProfile]:
        return iter(self.get_servers())

    def __repr__(self) -> str:
        return f"ServerRegistry(servers={list(self.server_names())}, store={self._store!r})"
