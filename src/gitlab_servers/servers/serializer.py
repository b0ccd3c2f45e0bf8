"""Profile serialization to and from JSON and YAML.

The serialized form is a plain dict/list structure that maps naturally
to both formats.  A whole registry is stored as a document with a single
``servers`` key holding a list of profile dicts.

Usage
-----
::

    from gitlab_servers.servers.serializer import ProfileSerializer

    serializer = ProfileSerializer()
    yaml_text = serializer.to_yaml(registry.get_servers())
    servers = serializer.from_yaml(yaml_text)
    assert tuple(servers) == registry.get_servers()
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

import yaml

from gitlab_servers.servers.models import ServerProfile

# Keys as written by the host's own configuration form.
_CAMEL_CASE_KEYS = {
    "serverUrl": "server_url",
    "credentialsId": "credentials_id",
    "manageWebHooks": "manage_web_hooks",
    "manageSystemHooks": "manage_system_hooks",
    "hooksRootUrl": "hooks_root_url",
}

_KNOWN_KEYS = (
    "name",
    "server_url",
    "credentials_id",
    "manage_web_hooks",
    "manage_system_hooks",
    "hooks_root_url",
)


class ProfileFormatError(ValueError):
    """Raised when serialized data does not describe server profiles."""


class ProfileSerializer:
    """Converts between ``ServerProfile`` objects and plain Python dicts.

    Unknown keys are preserved in ``ServerProfile.extra`` and written
    back at the top level, so a document survives a load/save cycle
    unchanged.
    """

    # ------------------------------------------------------------------
    # Serialization (profiles → dict)
    # ------------------------------------------------------------------

    def to_dict(self, profile: ServerProfile) -> dict[str, Any]:
        """Serialize one profile to a JSON-compatible dict."""
        data: dict[str, Any] = dict(profile.extra)
        data.update(
            {
                "name": profile.name,
                "server_url": profile.server_url,
                "credentials_id": profile.credentials_id,
                "manage_web_hooks": profile.manage_web_hooks,
                "manage_system_hooks": profile.manage_system_hooks,
                "hooks_root_url": profile.hooks_root_url,
            }
        )
        return data

    def list_to_dict(self, servers: Iterable[ServerProfile]) -> dict[str, Any]:
        """Serialize a sequence of profiles to a ``{"servers": [...]}`` document."""
        return {"servers": [self.to_dict(p) for p in servers]}

    # ------------------------------------------------------------------
    # Deserialization (dict → profiles)
    # ------------------------------------------------------------------

    def from_dict(self, data: Mapping[str, Any]) -> ServerProfile:
        """Deserialize one profile dict.

        Raises
        ------
        ProfileFormatError
            If ``data`` is not a mapping, or a hook flag is not a
            recognisable boolean.
        """
        if not isinstance(data, Mapping):
            raise ProfileFormatError(
                f"Expected a mapping for a server profile, got {type(data).__name__}"
            )
        fields: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            key = _CAMEL_CASE_KEYS.get(key, key)
            if key in _KNOWN_KEYS:
                fields[key] = value
            else:
                extra[key] = value

        return ServerProfile(
            name=_as_str(fields.get("name")),
            server_url=_as_str(fields.get("server_url")),
            credentials_id=_as_str(fields.get("credentials_id")),
            manage_web_hooks=_as_bool(fields.get("manage_web_hooks"), "manage_web_hooks"),
            manage_system_hooks=_as_bool(fields.get("manage_system_hooks"), "manage_system_hooks"),
            hooks_root_url=_as_str(fields.get("hooks_root_url")),
            extra=extra,
        )

    def list_from_dict(self, data: Mapping[str, Any] | list[Any] | None) -> list[ServerProfile]:
        """Deserialize a document into a list of profiles.

        Accepts the ``{"servers": [...]}`` document, a bare list of
        profile dicts, or ``None`` (an empty document).

        Raises
        ------
        ProfileFormatError
            If the document has any other shape.
        """
        if data is None:
            return []
        if isinstance(data, Mapping):
            entries = data.get("servers") or []
        else:
            entries = data
        if not isinstance(entries, list):
            raise ProfileFormatError(
                f"Expected a list of server profiles, got {type(entries).__name__}"
            )
        return [self.from_dict(entry) for entry in entries]

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, servers: Iterable[ServerProfile], indent: int = 2) -> str:
        """Serialize profiles to a JSON document string."""
        return json.dumps(self.list_to_dict(servers), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> list[ServerProfile]:
        """Deserialize profiles from a JSON document string."""
        return self.list_from_dict(json.loads(text))

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, servers: Iterable[ServerProfile]) -> str:
        """Serialize profiles to a YAML document string."""
        return yaml.safe_dump(
            self.list_to_dict(servers),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def from_yaml(self, text: str) -> list[ServerProfile]:
        """Deserialize profiles from a YAML document string."""
        return self.list_from_dict(yaml.safe_load(text))


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def _as_bool(value: Any, key: str) -> bool:
    """Read a flag that a form-bound host may have written as a string."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ProfileFormatError(f"Expected a boolean for {key!r}, got {value!r}")
