"""
CLI script to index JSON transcripts.

Usage:
    python scripts/run_indexer.py                  # Incremental index
    python scripts/run_indexer.py --reset          # Full rebuild
    python scripts/run_indexer.py --data-dir path/to/transcripts
    python scripts/run_indexer.py --config path/to/config.json
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from jsonsearch.core import (
    get_config,
    get_logger,
    set_console_level,
    Config,
    ConfigurationError,
    JsonSearchError,
)
from jsonsearch.core.config_loader import reload_config
from jsonsearch.indexer import IndexBuilder, IndexingStats, progress_printer

MAX_ERRORS_SHOWN = 20


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Index JSON transcript files for phrase search"
    )
    parser.add_argument("--reset", action="store_true",
                        help="Drop existing index and rebuild from scratch")
    parser.add_argument("--yes", action="store_true",
                        help="Do not ask for confirmation before a reset")
    parser.add_argument("--config", type=str,
                        help="Path to custom config.json file")
    parser.add_argument("--data-dir", type=str,
                        help="Directory containing the JSON transcripts (overrides config)")
    parser.add_argument("--quiet", action="store_true",
                        help="No progress bar, only warnings and errors on stderr")
    return parser.parse_args()


def load_config(config_arg: str = None) -> Config:
    """Load the configuration or exit with status 1."""
    try:
        if config_arg:
            return reload_config(Path(config_arg))
        return get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)


def confirm_reset(database_path: Path) -> bool:
    answer = input(f"Delete every indexed segment in {database_path}? [y/N] ")
    return answer.strip().lower() == "y"


def print_summary(stats: IndexingStats) -> None:
    """Print the counters of a finished run and its first errors."""
    rows = [
        ("Files scanned", stats.files_scanned),
        ("Files indexed", stats.files_indexed),
        ("Files updated", stats.files_updated),
        ("Files unchanged", stats.files_skipped),
        ("Files failed", stats.files_failed),
        ("Segments stored", stats.segments_indexed),
        ("Searchable segments", stats.searchable_segments),
        ("Dictionary words", stats.dictionary_words),
    ]
    width = max(len(label) for label, _ in rows) + 2

    print("-" * 60)
    for label, value in rows:
        print(f"{label + ':':<{width}} {value:,}")
    print("-" * 60)

    if not stats.errors:
        return

    print(f"Errors ({len(stats.errors)}):")
    for error in stats.errors[:MAX_ERRORS_SHOWN]:
        print(f"  - {error}")
    hidden = len(stats.errors) - MAX_ERRORS_SHOWN
    if hidden > 0:
        print(f"  ... {hidden} more in the log file")


def main():
    """Main entry point for the indexer CLI."""
    args = parse_args()
    config = load_config(args.config)

    logger = get_logger(__name__)
    if args.quiet:
        set_console_level("WARNING")

    data_dir = Path(args.data_dir) if args.data_dir else config.paths.data_directory
    print(f"Indexing {data_dir} into {config.paths.database_path}"
          f"{' (full rebuild)' if args.reset else ''}")

    if args.reset and not args.yes and not confirm_reset(config.paths.database_path):
        print("Aborted.")
        sys.exit(0)

    builder = IndexBuilder(
        reset=args.reset,
        progress_callback=None if args.quiet else progress_printer,
        data_directory=data_dir
    )

    try:
        stats = builder.build()
    except JsonSearchError as e:
        logger.error(f"Indexing aborted: {e}")
        print(f"\nIndexing aborted: {e.message}")
        sys.exit(1)

    if not args.quiet:
        print()

    print_summary(stats)
    sys.exit(1 if stats.files_failed else 0)


if __name__ == "__main__":
    main()
