"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .models import AnalysisReport
from .time_utils import format_timestamp


logger = logging.getLogger(__name__)

AUTHOR_WIDTH = 20
OUTDATED_ICON = "⚠️"
CURRENT_ICON = "✅"

PACKAGE_COLUMNS = [
    "name",
    "installed_version",
    "latest_version",
    "dependency_type",
    "is_outdated",
    "license",
    "author",
    "description",
    "homepage",
    "repository_url",
    "keywords",
    "maintainer_count",
    "created_at",
    "modified_at",
]


def format_percentage(count: int, total: int) -> str:
    """Percentage of ``total`` with one decimal, or N/A when there is nothing to divide by."""
    if total == 0:
        return "N/A"
    return f"{count / total * 100:.1f}%"


def truncate_author(author: str, width: int = AUTHOR_WIDTH) -> str:
    if len(author) > width:
        return author[:width] + "..."
    return author


def render_markdown(report: AnalysisReport, generated_at: Optional[datetime] = None) -> str:
    """Render the report as a markdown document."""
    total = report.total_packages
    lines: List[str] = [
        "# Package Dependency Analysis Report",
        "",
        f"Generated on: {format_timestamp(generated_at)}",
        "",
        "## Summary",
        "",
        f"- **Total Packages**: {total}",
        f"- **Outdated Packages**: {report.outdated_packages} "
        f"({format_percentage(report.outdated_packages, total)})",
        "",
        "## License Distribution",
        "",
    ]

    licenses = sorted(report.license_distribution.items(), key=lambda item: item[1], reverse=True)
    for license_name, count in licenses:
        lines.append(
            f"- **{license_name}**: {count} packages ({format_percentage(count, total)})"
        )

    if report.top_authors:
        lines += ["", "## Top Package Authors", ""]
        for author in report.top_authors:
            lines.append(f"- **{author.name}**: {author.packages} packages")

    outdated = [pkg for pkg in report.packages if pkg.is_outdated]
    if outdated:
        lines += [
            "",
            "## Outdated Packages",
            "",
            "| Package | Installed | Latest | Type |",
            "|---------|-----------|--------|------|",
        ]
        for pkg in outdated:
            lines.append(
                f"| {pkg.name} | {pkg.installed_version} | {pkg.latest_version} | {pkg.dependency_type} |"
            )

    lines += [
        "",
        "## All Packages",
        "",
        "| Package | Version | Latest | License | Author | Outdated |",
        "|---------|---------|--------|---------|--------|----------|",
    ]
    for pkg in sorted(report.packages, key=lambda p: (p.name.lower(), p.name)):
        icon = OUTDATED_ICON if pkg.is_outdated else CURRENT_ICON
        lines.append(
            f"| {pkg.name} | {pkg.installed_version} | {pkg.latest_version} | {pkg.license} "
            f"| {truncate_author(pkg.author)} | {icon} |"
        )

    return "\n".join(lines) + "\n"


def write_report(
    report: AnalysisReport,
    output_path: Union[str, Path],
    generated_at: Optional[datetime] = None,
) -> Path:
    output_path = Path(output_path)
    logger.info("Generating analysis report...")
    content = render_markdown(report, generated_at)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info("Report saved to: %s", output_path)
    return output_path


def packages_dataframe(report: AnalysisReport) -> pd.DataFrame:
    rows = []
    for pkg in report.packages:
        row = asdict(pkg)
        row["keywords"] = ", ".join(str(keyword) for keyword in pkg.keywords)
        rows.append(row)
    return pd.DataFrame(rows, columns=PACKAGE_COLUMNS)


def save_results_json(report: AnalysisReport, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding="utf-8") as f:
        json.dump(asdict(report), f, indent=2, default=str)
    return output_path


def export_packages_csv(report: AnalysisReport, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    packages_dataframe(report).to_csv(output_path, index=False)
    return output_path


def export_worksheets(report: AnalysisReport, output_path: Union[str, Path]) -> Path:
    """Write the package table and the license distribution to an Excel workbook."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    licenses_df = pd.DataFrame(
        list(report.license_distribution.items()), columns=["license", "packages"]
    ).sort_values("packages", ascending=False, kind="stable")
    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        packages_dataframe(report).to_excel(writer, sheet_name="Packages", index=False)
        licenses_df.to_excel(writer, sheet_name="Licenses", index=False)
    return output_path
