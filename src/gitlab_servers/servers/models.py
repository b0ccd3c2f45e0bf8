"""Value types for GitLab server connection profiles.

Every profile held by the registry is a frozen dataclass, so a snapshot
handed out by :meth:`ServerRegistry.get_servers` can be shared freely
without any caller being able to corrupt registry state.

Only ``name`` and ``server_url`` carry meaning for the registry.  The
remaining fields are payload that is stored and returned unchanged.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

GITLAB_SERVER_URL = "https://gitlab.com"
"""Endpoint used when a profile does not name one."""


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ServerProfile:
    """Connection details for one GitLab server.

    Parameters
    ----------
    name:
        Unique key of the profile inside a registry.  May be blank in
        input; blank names are unique like any other value.
    server_url:
        The connection endpoint.  A blank value becomes
        :data:`GITLAB_SERVER_URL`.  Used as the display label when
        ``name`` is blank.
    credentials_id:
        Reference to credentials held by the host.  Never resolved here.
    manage_web_hooks:
        Whether the host manages project web hooks on this server.
    manage_system_hooks:
        Whether the host manages system hooks on this server.
    hooks_root_url:
        Root URL GitLab should call back into, if different from the
        host's own.
    extra:
        Any further fields, kept read-only and passed through unchanged.
    """

    name: str = ""
    server_url: str = GITLAB_SERVER_URL
    credentials_id: str = ""
    manage_web_hooks: bool = False
    manage_system_hooks: bool = False
    hooks_root_url: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.server_url.strip():
            object.__setattr__(self, "server_url", GITLAB_SERVER_URL)
        # Freeze a private copy so the caller's dict cannot leak in.
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def url(self) -> str:
        """Alias of :attr:`server_url`."""
        return self.server_url

    @property
    def display_label(self) -> str:
        """Return ``name`` when it is non-blank, otherwise ``server_url``."""
        return self.name if self.name.strip() else self.server_url

    def with_changes(self, **changes: Any) -> "ServerProfile":
        """Return a copy of this profile with ``changes`` applied."""
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DisplayItem:
    """A ``(label, value)`` pair for list-box style presentation."""

    label: str
    value: str

    def __iter__(self) -> Iterator[str]:
        yield self.label
        yield self.value
