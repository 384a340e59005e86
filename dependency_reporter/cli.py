"""
Command-line interface for the dependency reporter.
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from .analyzer import DependencyAnalyzer
from .exceptions import ManifestError
from .registry import (
    DEFAULT_PAUSE_SECONDS,
    DEFAULT_REGISTRY_URL,
    DEFAULT_REQUEST_DELAY,
    DEFAULT_REQUESTS_PER_PAUSE,
    NpmRegistryClient,
    RequestThrottle,
)
from .reporting import export_packages_csv, export_worksheets, save_results_json, write_report


DEFAULT_MANIFEST = "./package.json"
DEFAULT_OUTPUT = "./dependency-analysis-report.md"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report version currency, licenses and authors of npm dependencies"
    )

    parser.add_argument(
        "manifest",
        nargs="?",
        default=DEFAULT_MANIFEST,
        help=f"Path to package.json. Default: {DEFAULT_MANIFEST}"
    )

    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_OUTPUT,
        help=f"Path of the markdown report. Default: {DEFAULT_OUTPUT}"
    )

    parser.add_argument(
        "--registry-url",
        default=DEFAULT_REGISTRY_URL,
        help=f"Base URL of the npm registry. Default: {DEFAULT_REGISTRY_URL}"
    )

    parser.add_argument(
        "--requests-per-pause",
        type=int,
        default=DEFAULT_REQUESTS_PER_PAUSE,
        help="Pause after this many registry requests (0 disables). "
             f"Default: {DEFAULT_REQUESTS_PER_PAUSE}"
    )

    parser.add_argument(
        "--pause-seconds",
        type=float,
        default=DEFAULT_PAUSE_SECONDS,
        help=f"Length of the periodic pause in seconds. Default: {DEFAULT_PAUSE_SECONDS:g}"
    )

    parser.add_argument(
        "--request-delay",
        type=float,
        default=DEFAULT_REQUEST_DELAY,
        help=f"Delay after every request in seconds. Default: {DEFAULT_REQUEST_DELAY:g}"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds. Default: no timeout"
    )

    parser.add_argument(
        "--json",
        dest="json_path",
        type=Path,
        default=None,
        help="Also save the full report as JSON to this path"
    )

    parser.add_argument(
        "--csv",
        dest="csv_path",
        type=Path,
        default=None,
        help="Also export the package table as CSV to this path"
    )

    parser.add_argument(
        "--xlsx",
        dest="xlsx_path",
        type=Path,
        default=None,
        help="Also export the package and license tables to an Excel file"
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. Default: INFO"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.requests_per_pause < 0:
        parser.error("--requests-per-pause must not be negative")
    if args.pause_seconds < 0 or args.request_delay < 0:
        parser.error("--pause-seconds and --request-delay must not be negative")

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s: %(message)s")

    print("Analysis starting...")
    if args.requests_per_pause:
        print(
            f"(The registry may rate-limit; pausing {args.pause_seconds:g} seconds "
            f"after every {args.requests_per_pause} requests. Be patient!)"
        )

    client = NpmRegistryClient(
        registry_url=args.registry_url,
        throttle=RequestThrottle(
            requests_per_pause=args.requests_per_pause,
            pause_seconds=args.pause_seconds,
            request_delay=args.request_delay,
        ),
        timeout=args.timeout,
    )
    analyzer = DependencyAnalyzer(client)

    try:
        report = analyzer.analyze(args.manifest)
        report_file = write_report(report, args.output)

        if args.json_path:
            print(f"JSON results saved to: {save_results_json(report, args.json_path)}")
        if args.csv_path:
            print(f"Package table saved to: {export_packages_csv(report, args.csv_path)}")
        if args.xlsx_path:
            print(f"Worksheets saved to: {export_worksheets(report, args.xlsx_path)}")

        print("\nAnalysis complete!")
        print(f"Total packages analyzed: {report.total_packages}")
        print(f"Outdated packages: {report.outdated_packages}")
        print(f"Full report saved to: {report_file}")

    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"\nError during analysis: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
