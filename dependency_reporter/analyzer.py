"""
Analyze the dependencies declared in a manifest against the registry.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .exceptions import FetchError
from .interfaces import PackageRegistry
from .manifest import load_dependencies
from .models import UNKNOWN, AnalysisReport, AuthorCount, DependencyDeclaration, PackageAnalysis
from .versions import is_outdated


logger = logging.getLogger(__name__)

TOP_AUTHORS_LIMIT = 10


class DependencyAnalyzer:
    """Sequentially analyze every dependency of a manifest."""

    def __init__(self, registry: PackageRegistry):
        """Initialize dependency analyzer.

        Args:
            registry: Registry used to look up the latest package metadata
        """
        self.registry = registry
        self.packages: List[PackageAnalysis] = []

    def analyze(self, manifest_path: Union[str, Path]) -> AnalysisReport:
        """Run the complete analysis for a manifest.

        A package whose metadata cannot be fetched is recorded with unknown
        fields and the analysis continues with the next dependency.

        Raises:
            ManifestError: If the manifest cannot be read
        """
        dependencies = load_dependencies(manifest_path)
        logger.info("Found %d total dependencies", len(dependencies))

        self.packages = []
        for index, dependency in enumerate(dependencies, start=1):
            logger.info("[%d/%d] Analyzing %s...", index, len(dependencies), dependency.name)
            try:
                analysis = self.analyze_package(dependency)
            except FetchError as e:
                logger.error("Error analyzing %s: %s", dependency.name, e)
                analysis = self.failed_package(dependency)
            self.packages.append(analysis)

        return build_report(self.packages)

    def analyze_package(self, dependency: DependencyDeclaration) -> PackageAnalysis:
        record = self.registry.fetch_latest(dependency.name)
        return PackageAnalysis(
            name=dependency.name,
            installed_version=dependency.version_range,
            latest_version=record.latest_version,
            dependency_type=dependency.dependency_type,
            is_outdated=is_outdated(dependency.version_range, record.latest_version),
            description=record.description,
            license=record.license,
            author=record.author,
            homepage=record.homepage,
            repository_url=record.repository_url,
            keywords=record.keywords,
            maintainer_count=record.maintainer_count,
            created_at=record.created_at,
            modified_at=record.modified_at,
        )

    @staticmethod
    def failed_package(dependency: DependencyDeclaration) -> PackageAnalysis:
        return PackageAnalysis(
            name=dependency.name,
            installed_version=dependency.version_range,
            latest_version=UNKNOWN,
            dependency_type=dependency.dependency_type,
            is_outdated=False,
            description="Failed to fetch information",
        )


def build_report(packages: Iterable[PackageAnalysis]) -> AnalysisReport:
    """Aggregate analyzed packages into a report.

    Ties between authors keep the order in which they were first seen.
    """
    packages = list(packages)

    license_distribution: Dict[str, int] = {}
    for pkg in packages:
        license_name = pkg.license or UNKNOWN
        license_distribution[license_name] = license_distribution.get(license_name, 0) + 1

    author_counts = Counter(
        pkg.author for pkg in packages if pkg.author and pkg.author != UNKNOWN
    )
    top_authors = [
        AuthorCount(name=name, packages=count)
        for name, count in author_counts.most_common(TOP_AUTHORS_LIMIT)
    ]

    return AnalysisReport(
        total_packages=len(packages),
        outdated_packages=sum(1 for pkg in packages if pkg.is_outdated),
        license_distribution=license_distribution,
        top_authors=top_authors,
        packages=packages,
        # Security advisories are not looked up.
        packages_with_security_issues=0,
    )
