"""
Errors raised while building a dependency report.
"""

from __future__ import annotations


class DependencyReporterError(Exception):
    """Base class for all reporter errors."""


class ManifestError(DependencyReporterError):
    """The manifest could not be read or parsed."""


class FetchError(DependencyReporterError):
    """Registry metadata for a package could not be fetched."""

    def __init__(self, package: str, cause: object) -> None:
        self.package = package
        self.cause = cause
        super().__init__(f"Failed to fetch package info for {package}: {cause}")
