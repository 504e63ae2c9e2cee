#!/usr/bin/env python3
"""
lib4bin CLI

Bundles ELF executables and their shared libraries into a relocatable
directory tree driven by the sharun launcher.
"""

import argparse
import logging
import sys
from pathlib import Path

from common.exceptions import ConfigError
from common.logging_config import setup_logging
from utils.atomic_write import atomic_write_json

from .batch import BatchDriver
from .config import DEFAULT_DST_DIR, DEFAULT_LAUNCHER, DEFAULT_PROBER, BundleConfig
from .models import BatchReport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lib4bin",
        description="Bundle ELF binaries with their shared libraries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lib4bin /usr/bin/curl                      # Bundle into ./output
  lib4bin -d AppDir /usr/bin/curl /bin/jq    # Bundle several binaries
  lib4bin --strip /usr/bin/curl              # Strip debug symbols
  lib4bin --report report.json /usr/bin/curl # Write a JSON run report
        """,
    )
    parser.add_argument("binaries", nargs="*", metavar="BINARY",
                        help="ELF executables to bundle")
    parser.add_argument("-d", "--dst-dir", default=DEFAULT_DST_DIR,
                        help=f"Destination directory (default: {DEFAULT_DST_DIR})")

    parser.add_argument("-s", "--strip", action="store_true", default=False,
                        help="Strip debug symbols from copied files")
    parser.add_argument("--no-strip", dest="strip", action="store_false")
    parser.add_argument("--one-dir", action="store_true", default=True,
                        help="Use one directory for output (default)")
    parser.add_argument("--no-one-dir", dest="one_dir", action="store_false")
    parser.add_argument("--create-links", action="store_true", default=True,
                        help="Create launcher symlinks in bin/ (default)")
    parser.add_argument("--no-create-links", dest="create_links", action="store_false")

    parser.add_argument("--launcher", default=DEFAULT_LAUNCHER,
                        help=f"Launcher executable looked up in PATH (default: {DEFAULT_LAUNCHER})")
    parser.add_argument("--ldd", default=DEFAULT_PROBER,
                        help=f"Linkage prober command (default: {DEFAULT_PROBER})")
    parser.add_argument("--report", type=Path,
                        help="Write a JSON report of the run to this path")

    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--log-file", type=Path, help="Also log to this file")
    parser.add_argument("--json-logs", action="store_true",
                        help="Use JSON lines in the log file")
    return parser


def print_summary(report: BatchReport) -> None:
    """Print the per-binary outcome table."""
    for result in report.results:
        if result.success:
            print(f"Processed {result.linkage.value} binary: {result.name}")
        else:
            print(f"  [failed] {result.path}: {result.reason}")
    for path in report.skipped:
        print(f"  [skip]   {path}")

    print(
        f"\n{len(report.succeeded)} processed, {len(report.failed)} failed"
        + (f", {len(report.skipped)} skipped" if report.skipped else "")
        + f" -> {report.destination}"
    )


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=level, log_file=args.log_file, json_logs=args.json_logs)

    if not args.binaries:
        print("Error: Specify the ELF binary executable!")
        return 1

    try:
        config = BundleConfig(
            dst_dir=args.dst_dir,
            strip=args.strip,
            one_dir=args.one_dir,
            create_links=args.create_links,
            launcher_name=args.launcher,
            prober_tool=args.ldd,
        )
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    report = BatchDriver(config).run(args.binaries)
    print_summary(report)

    if args.report:
        atomic_write_json(args.report, report.to_dict())
        logger.debug(f"Report written to {args.report}")

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
