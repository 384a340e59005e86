"""
Core data models for dependency reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


DEPENDENCY = "dependency"
DEV_DEPENDENCY = "devDependency"
PEER_DEPENDENCY = "peerDependency"

UNKNOWN = "unknown"


@dataclass(frozen=True)
class DependencyDeclaration:
    """A dependency as declared in the manifest."""

    name: str
    version_range: str
    dependency_type: str


@dataclass(frozen=True)
class RegistryRecord:
    """Latest published metadata for a package."""

    name: str
    latest_version: str
    description: str = ""
    license: str = UNKNOWN
    author: str = UNKNOWN
    homepage: str = ""
    repository_url: str = ""
    keywords: Tuple[str, ...] = ()
    maintainer_count: int = 0
    created_at: str = ""
    modified_at: str = ""


@dataclass(frozen=True)
class PackageAnalysis:
    """A declared dependency merged with its registry metadata."""

    name: str
    installed_version: str
    latest_version: str
    dependency_type: str
    is_outdated: bool
    description: str = ""
    license: str = UNKNOWN
    author: str = UNKNOWN
    homepage: str = ""
    repository_url: str = ""
    keywords: Tuple[str, ...] = ()
    maintainer_count: int = 0
    created_at: str = ""
    modified_at: str = ""


@dataclass(frozen=True)
class AuthorCount:
    name: str
    packages: int


@dataclass(frozen=True)
class AnalysisReport:
    """Aggregated view over every analyzed package."""

    total_packages: int
    outdated_packages: int
    license_distribution: Dict[str, int]
    top_authors: List[AuthorCount]
    packages: List[PackageAnalysis] = field(default_factory=list)
    packages_with_security_issues: int = 0
