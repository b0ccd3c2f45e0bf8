#!/usr/bin/env python3
"""Example: Quickstart — gitlab-servers

Minimal working example: open a file-backed registry, bulk-configure
it, add, update and remove servers, and print the display items.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install gitlab-servers
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import gitlab_servers
from gitlab_servers import ServerProfile


def main() -> None:
    print(f"gitlab-servers version: {gitlab_servers.__version__}")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "servers.yml"
        registry = gitlab_servers.open_registry(path)

        # Step 1: Bulk replace; the second "corp" entry is dropped
        servers = registry.configure(
            [
                ServerProfile(name="gitlab", server_url="https://gitlab.com"),
                ServerProfile(name="corp", server_url="https://git.corp.example"),
                ServerProfile(name="corp", server_url="https://ignored.example"),
            ]
        )
        print(f"Configured: {[s.name for s in servers]}")

        # Step 2: Add a server without a name; it is labelled by its URL
        registry.add_server(ServerProfile(name="", server_url="https://lab.example"))

        # Step 3: Adding an existing name is rejected, not raised
        result = registry.add_server(ServerProfile(name="corp"))
        print(f"Add duplicate 'corp': modified={result.modified} ({result.error})")

        # Step 4: Update in place and remove
        registry.update_server(ServerProfile(name="corp", server_url="https://git2.corp.example"))
        registry.remove_server("gitlab")

        # Step 5: Display items
        for label, value in registry.lookup_display_items():
            print(f"  {label:<30} {value}")

        print("\nStored document:")
        print(path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    main()
