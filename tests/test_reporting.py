import json
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from dependency_reporter.analyzer import build_report
from dependency_reporter.models import PackageAnalysis
from dependency_reporter.reporting import (
    export_packages_csv,
    export_worksheets,
    format_percentage,
    render_markdown,
    save_results_json,
    truncate_author,
    write_report,
)


GENERATED_AT = datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=timezone.utc)


def make_package(name, installed, latest, is_outdated, license="MIT", author="unknown",
                 dependency_type="devDependency"):
    return PackageAnalysis(
        name=name,
        installed_version=installed,
        latest_version=latest,
        dependency_type=dependency_type,
        is_outdated=is_outdated,
        license=license,
        author=author,
        keywords=("cli", "build"),
    )


def sample_report():
    return build_report([
        make_package("typescript", "^5.0.0", "5.9.2", True, license="Apache-2.0",
                     author="Microsoft Corporation and contributors"),
        make_package("@types/node", "^20.0.0", "24.3.0", True),
        make_package("tsx", "^4.0.0", "4.20.5", True),
        make_package("left-pad", "1.3.0", "1.3.0", False, author="azer",
                     dependency_type="dependency"),
    ])


def test_render_markdown_summary_and_tables():
    content = render_markdown(sample_report(), generated_at=GENERATED_AT)

    assert content.startswith("# Package Dependency Analysis Report\n")
    assert "Generated on: 2024-05-01T12:30:00.123Z" in content
    assert "- **Total Packages**: 4" in content
    assert "- **Outdated Packages**: 3 (75.0%)" in content
    assert "- **MIT**: 3 packages (75.0%)" in content
    assert "- **Apache-2.0**: 1 packages (25.0%)" in content
    assert content.index("**MIT**") < content.index("**Apache-2.0**")
    assert "## Top Package Authors" in content
    assert "- **azer**: 1 packages" in content
    assert "| typescript | ^5.0.0 | 5.9.2 | devDependency |" in content
    assert "| @types/node | ^20.0.0 | 24.3.0 | devDependency |" in content
    assert "| left-pad | 1.3.0 | 1.3.0 | dependency |" not in content
    assert "| Microsoft Corporatio... |" in content
    assert "| left-pad | 1.3.0 | 1.3.0 | MIT | azer | ✅ |" in content
    assert "| tsx | ^4.0.0 | 4.20.5 | MIT | unknown | ⚠️ |" in content


def test_render_markdown_all_packages_sorted_by_name():
    content = render_markdown(sample_report(), generated_at=GENERATED_AT)
    all_packages = content.split("## All Packages")[1]

    positions = [all_packages.index(f"| {name} |") for name in
                 ["@types/node", "left-pad", "tsx", "typescript"]]
    assert positions == sorted(positions)


def test_render_markdown_all_outdated_percentage():
    report = build_report([
        make_package("a", "^1.0.0", "2.0.0", True),
        make_package("b", "^1.0.0", "2.0.0", True),
        make_package("c", "^1.0.0", "2.0.0", True),
    ])

    content = render_markdown(report, generated_at=GENERATED_AT)

    assert "- **Outdated Packages**: 3 (100.0%)" in content


def test_render_markdown_omits_empty_sections():
    report = build_report([make_package("a", "1.0.0", "1.0.0", False)])

    content = render_markdown(report, generated_at=GENERATED_AT)

    assert "## Top Package Authors" not in content
    assert "## Outdated Packages" not in content
    assert "## All Packages" in content


def test_render_markdown_empty_report_uses_na():
    content = render_markdown(build_report([]), generated_at=GENERATED_AT)

    assert "- **Total Packages**: 0" in content
    assert "- **Outdated Packages**: 0 (N/A)" in content
    assert "NaN" not in content


def test_format_helpers():
    assert format_percentage(1, 3) == "33.3%"
    assert format_percentage(0, 0) == "N/A"
    assert truncate_author("x" * 20) == "x" * 20
    assert truncate_author("x" * 21) == "x" * 20 + "..."


def test_reporting_exports(tmp_path: Path):
    output_dir = tmp_path / "out"
    report = sample_report()

    report_file = write_report(report, output_dir / "report.md", generated_at=GENERATED_AT)
    results_file = save_results_json(report, output_dir / "report.json")
    csv_file = export_packages_csv(report, output_dir / "packages.csv")
    excel_file = export_worksheets(report, output_dir / "packages.xlsx")

    assert report_file.read_text(encoding="utf-8") == render_markdown(report, GENERATED_AT)

    data = json.loads(results_file.read_text(encoding="utf-8"))
    assert data["total_packages"] == 4
    assert data["outdated_packages"] == 3
    assert data["top_authors"][0] == {"name": "Microsoft Corporation and contributors", "packages": 1}

    df = pd.read_csv(csv_file)
    assert list(df["name"]) == ["typescript", "@types/node", "tsx", "left-pad"]
    assert df.loc[0, "keywords"] == "cli, build"

    sheets = pd.read_excel(excel_file, sheet_name=None)
    assert set(sheets) == {"Packages", "Licenses"}
    assert list(sheets["Licenses"]["license"]) == ["MIT", "Apache-2.0"]


def test_export_csv_with_registry_keyword_shapes(tmp_path: Path):
    from dependency_reporter.registry import parse_registry_record

    string_keywords = parse_registry_record("a", {"version": "1.0.0", "keywords": "cli tool"})
    mixed_keywords = parse_registry_record("b", {"version": "1.0.0", "keywords": ["x", None, "y"]})
    report = build_report([
        PackageAnalysis(name=record.name, installed_version="1.0.0", latest_version="1.0.0",
                        dependency_type="dependency", is_outdated=False, keywords=record.keywords)
        for record in (string_keywords, mixed_keywords)
    ])

    df = pd.read_csv(export_packages_csv(report, tmp_path / "packages.csv"))

    assert list(df["keywords"]) == ["cli tool", "x, y"]
