"""Command-line interface for gitlab-servers.

``gitlab_servers.cli.main`` holds the Click application.  Commands go
through the public ``gitlab_servers`` API and receive the registry via
the Click context object, so tests can inject their own.
"""
from __future__ import annotations
