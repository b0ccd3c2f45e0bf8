"""Error types for the server registry.

Precondition failures (:class:`DuplicateNameError`,
:class:`NotFoundError`) are not raised by the registry's mutators.  They
are returned inside a :class:`MutationResult` so callers can branch on
the outcome.  :class:`PersistenceError` is the only error the registry
raises, and it always propagates.
"""
from __future__ import annotations

from dataclasses import dataclass


class RegistryError(Exception):
    """Base class for every error reported by the server registry."""

    def __init__(self, message: str, server_name: str | None = None) -> None:
        self.server_name = server_name
        super().__init__(message)


class DuplicateNameError(RegistryError, ValueError):
    """An add referenced a name that is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Server {name!r} is already registered. "
            "Use a unique name or update the existing entry instead.",
            server_name=name,
        )


class NotFoundError(RegistryError, KeyError):
    """An update or remove referenced a name that is not registered."""

    def __init__(self, name: str | None) -> None:
        super().__init__(f"Server {name!r} is not registered.", server_name=name)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class PersistenceError(RegistryError):
    """The persistence collaborator failed to load or save."""


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a single-profile mutation.

    ``bool(result)`` is ``True`` exactly when the registry was modified.

    Parameters
    ----------
    modified:
        Whether the registry state changed and was persisted.
    error:
        Why the mutation was rejected, when ``modified`` is ``False``.
    """

    modified: bool
    error: RegistryError | None = None

    @classmethod
    def ok(cls) -> "MutationResult":
        return cls(modified=True)

    @classmethod
    def rejected(cls, error: RegistryError) -> "MutationResult":
        return cls(modified=False, error=error)

    def __bool__(self) -> bool:
        return self.modified
