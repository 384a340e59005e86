"""
Interfaces for package registries.
"""

from __future__ import annotations

from typing import Protocol

from .models import RegistryRecord


class PackageRegistry(Protocol):
    """Look up the latest published metadata of a package."""

    def fetch_latest(self, package_name: str) -> RegistryRecord:
        ...
