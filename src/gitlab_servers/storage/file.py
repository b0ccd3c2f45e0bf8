"""File-backed store writing the registry as a YAML or JSON document.

The format is chosen from the file suffix: ``.json`` selects JSON,
anything else (normally ``.yml`` or ``.yaml``) selects YAML.  Saves are
atomic: the document is written to a sibling temporary file which then
replaces the target, so a crash never leaves a half-written file behind.

Example
-------
::

    from gitlab_servers.storage import FileStore

    store = FileStore("~/.config/gitlab-servers/servers.yml")
    registry = ServerRegistry(store)
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

import yaml

from gitlab_servers.servers.errors import PersistenceError
from gitlab_servers.servers.models import ServerProfile
from gitlab_servers.servers.serializer import ProfileFormatError, ProfileSerializer
from gitlab_servers.storage.base import ServerStore

logger = logging.getLogger(__name__)


class FileStore(ServerStore):
    """Persist profiles to a single YAML or JSON file.

    Parameters
    ----------
    path:
        Location of the document.  ``~`` is expanded.  The file and its
        parent directories are created on the first save.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path).expanduser()
        self._serializer = ProfileSerializer()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def file_type(self) -> str:
        """``"json"`` or ``"yaml"``, derived from the file suffix."""
        return "json" if self._path.suffix.lower() == ".json" else "yaml"

    # ------------------------------------------------------------------
    # ServerStore
    # ------------------------------------------------------------------

    def load(self) -> list[ServerProfile]:
        """Read the document.  A missing file is an empty registry.

        Raises
        ------
        PersistenceError
            If the file cannot be read or does not hold server profiles.
        """
        if not self._path.exists():
            logger.debug("No server file at %s; starting empty", self._path)
            return []
        try:
            text = self._path.read_text(encoding="utf-8")
            if self.file_type == "json":
                servers = self._serializer.from_json(text) if text.strip() else []
            else:
                servers = self._serializer.from_yaml(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError, ProfileFormatError) as exc:
            raise PersistenceError(f"Cannot load servers from {self._path}: {exc}") from exc
        logger.debug("Read %d server(s) from %s", len(servers), self._path)
        return servers

    def save(self, servers: Sequence[ServerProfile]) -> None:
        """Write ``servers`` atomically.

        Raises
        ------
        PersistenceError
            If the profiles cannot be encoded or the document cannot be
            written.
        """
        try:
            if self.file_type == "json":
                content = self._serializer.to_json(servers) + "\n"
            else:
                content = self._serializer.to_yaml(servers)
        except (TypeError, ValueError, yaml.YAMLError) as exc:
            raise PersistenceError(f"Cannot encode servers for {self._path}: {exc}") from exc

        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            if os.name == "nt" and self._path.exists():  # Windows rename safety
                self._path.unlink()
            tmp_path.replace(self._path)
        except OSError as exc:
            raise PersistenceError(f"Cannot save servers to {self._path}: {exc}") from exc
        logger.debug("Wrote %d server(s) to %s", len(servers), self._path)

    def __repr__(self) -> str:
        return f"FileStore(path={str(self._path)!r})"
