#!/usr/bin/env python3
"""
promoloader CLI: Command line interface for promo code extraction.
Runs the same core engine as library callers: filter → sort → merge.
Intermediate files are kept in the temporary directory for inspection.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from promoloader.core.errors import PromoLoaderError
from promoloader.core.models import PipelineConfig, PipelineParams, PipelineStats
from promoloader.commands import ExtractionCommand
from promoloader.utils.convert_utils import ConvertUtils
from promoloader.aliases import (
    FILES_HELP_TEXT, TMP_DIR_HELP_TEXT, OUTPUT_HELP_TEXT, SORT_BIN_HELP_TEXT,
    PARALLELISM_HELP_TEXT, TIMEOUT_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.command: Optional[ExtractionCommand] = None

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments. Flags accept one or two leading dashes."""
        parser = argparse.ArgumentParser(
            description="promoloader: find promo codes present in at least two gzip files",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "-files", "--files",
            dest="files",
            default="",
            type=str,
            help=FILES_HELP_TEXT
        )
        parser.add_argument(
            "-tmp-dir", "--tmp-dir",
            dest="tmp_dir",
            default=PipelineConfig.DEFAULT_TMP_DIR,
            type=str,
            help=TMP_DIR_HELP_TEXT
        )
        parser.add_argument(
            "-output", "--output",
            dest="output",
            default=PipelineConfig.DEFAULT_OUTPUT,
            type=str,
            help=OUTPUT_HELP_TEXT
        )
        parser.add_argument(
            "-sort-bin", "--sort-bin",
            dest="sort_bin",
            default=PipelineConfig.DEFAULT_SORT_BIN,
            type=str,
            help=SORT_BIN_HELP_TEXT
        )
        parser.add_argument(
            "-parallelism", "--parallelism",
            dest="parallelism",
            default=str(PipelineConfig.DEFAULT_PARALLELISM),
            type=str,
            help=PARALLELISM_HELP_TEXT
        )
        parser.add_argument(
            "-timeout", "--timeout",
            dest="timeout",
            default="0s",
            type=str,
            help=TIMEOUT_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "-quiet", "--quiet", "-q",
            dest="quiet",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "-verbose", "--verbose", "-v",
            dest="verbose",
            action="store_true",
            help="Show progress, stage logs and statistics"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if not args.files.strip():
            self.error_exit("missing -files (comma-separated list of gzip files)")

        if not [item for item in args.files.split(",") if item.strip()]:
            self.error_exit("no files provided after parsing -files")

        try:
            int(args.parallelism)
        except ValueError:
            self.error_exit(f"invalid parallelism: '{args.parallelism}'")

        if not ConvertUtils.is_valid_duration_format(args.timeout):
            self.error_exit(f"invalid timeout: '{args.timeout}'")

    def create_params(self, args: argparse.Namespace) -> PipelineParams:
        """Create PipelineParams from CLI arguments."""
        try:
            return PipelineParams.from_human_readable(
                files_str=args.files,
                tmp_dir=args.tmp_dir,
                output=args.output,
                sort_bin=args.sort_bin,
                parallelism=int(args.parallelism),
                timeout_str=args.timeout,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} processed...")
            sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_extraction(self, params: PipelineParams) -> PipelineStats:
        """Execute extraction workflow."""
        self.command = ExtractionCommand()
        if self.verbose:
            print(f"Filtering {len(params.files)} files with {params.parallelism} workers...")

        try:
            stats = self.command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except PromoLoaderError as e:
            if self.verbose:
                sys.stderr.write("\n")
                self.report_artifacts()
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print("\nExtraction Statistics:")
            print(stats.print_summary())

        return stats

    def report_artifacts(self) -> None:
        """List intermediate files left on disk."""
        artifacts = self.command.get_artifacts() if self.command else []
        if not artifacts:
            return
        print(f"Intermediate files kept for inspection ({len(artifacts)}):", file=sys.stderr)
        for path in artifacts:
            print(f"   {path}", file=sys.stderr)

    def output_results(self, stats: PipelineStats) -> None:
        """Print where the result was written."""
        if self.quiet:
            return
        print(f"✅ {stats.valid_codes} valid promo codes written to {stats.output_path}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet and not args.verbose

        if self.verbose:
            logging.getLogger("promoloader").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if int(args.parallelism) <= 0:
            self.warning(f"parallelism {args.parallelism} normalized to 1")

        stats = self.run_extraction(params)
        self.output_results(stats)

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {ConvertUtils.seconds_to_human(elapsed)}")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
