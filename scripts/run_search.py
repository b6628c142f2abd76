"""
CLI script to search the transcript index for a phrase.

Usage:
    python scripts/run_search.py "hyper space"
    python scripts/run_search.py "lightsab*" --max-search 50 --min-occur 5
    python scripts/run_search.py "wookie~" --fuzzy-edits 1 --rebuild-dictionary
    python scripts/run_search.py "hyper space" --verbose
    python scripts/run_search.py            # Prompts for the phrase
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from jsonsearch.core import (
    get_config,
    get_logger,
    set_console_level,
    apply_overrides,
    ConfigurationError,
    IndexUnavailableError,
)
from jsonsearch.core.config_loader import reload_config
from jsonsearch.search import create_orchestrator
from jsonsearch.utils import truncate_text

# CLI option -> SearchSettings field
OVERRIDE_OPTIONS = {
    "boost_exact": "--boost-exact",
    "boost_phonetic": "--boost-phonetic",
    "boost_wildcard": "--boost-wildcard",
    "boost_fuzzy": "--boost-fuzzy",
    "boost_prefix": "--boost-prefix",
    "phrase_slop": "--slop",
    "min_should_match": "--min-should-match",
    "fuzzy_edits": "--fuzzy-edits",
    "min_occur": "--min-occur",
    "max_search": "--max-search",
    "max_expansions": "--max-expansions",
    "spell_suggestions_per_term": "--suggestions-per-term",
    "max_suggestion_combos": "--max-combos",
    "significance_policy": "--significance",
}


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search indexed transcripts and rank bookmark tags"
    )

    parser.add_argument(
        "phrase",
        nargs="*",
        help="Phrase to search; supports ~ (fuzzy) and * ? (wildcard) markers"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    # Values are validated by the settings layer so bad input only warns
    for name, option in OVERRIDE_OPTIONS.items():
        parser.add_argument(
            option,
            dest=name,
            type=str,
            default=None,
            help=f"Override search.{name}"
        )

    parser.add_argument(
        "--parallel",
        dest="parallel_suggestions",
        action="store_true",
        default=None,
        help="Run suggestion retries concurrently"
    )

    parser.add_argument(
        "--rebuild-dictionary",
        action="store_true",
        help="Rebuild the spelling dictionary before searching"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log how each clause is translated and executed"
    )

    parser.add_argument(
        "--show-hits",
        action="store_true",
        help="Print every hit of every step"
    )

    return parser.parse_args()


def print_separator(char: str = "=", width: int = 75) -> None:
    print(char * width)


def main():
    """Main entry point for the search CLI."""
    args = parse_args()

    try:
        config = reload_config(Path(args.config)) if args.config else get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    logger = get_logger(__name__)
    # Results go to stdout, keep stderr for real problems unless asked
    set_console_level("DEBUG" if args.verbose else "ERROR")

    overrides = {name: getattr(args, name) for name in OVERRIDE_OPTIONS}
    overrides["parallel_suggestions"] = args.parallel_suggestions
    settings, warnings = apply_overrides(config.search, overrides)

    for warning in warnings:
        print(f"[WARN] {warning}")

    phrase = " ".join(args.phrase).strip()
    if not phrase:
        phrase = input("Enter search phrase: ").strip()
    if not phrase:
        print("Error: empty search phrase")
        sys.exit(1)

    try:
        orchestrator = create_orchestrator(settings, rebuild_dictionary=args.rebuild_dictionary)
        report = orchestrator.run_search(phrase)
    except IndexUnavailableError as e:
        logger.error(f"Search aborted: {e}")
        print(f"Error: index unavailable: {e.message}")
        sys.exit(2)

    print_separator()
    print(f"Search phrase: \"{report.phrase}\"")
    print_separator()

    for step in report.steps:
        label = step.state.value.replace("_", " ")
        if step.error:
            print(f"[{label}] \"{step.phrase}\": skipped ({step.error})")
        else:
            print(f"[{label}] \"{step.phrase}\": {step.total_hits} matches, "
                  f"bookmark tags: {step.bookmark_scores}")
        if args.show_hits:
            for hit in step.hits:
                print(f"    #{hit.doc_id} {hit.bookmark_tag or '-'} "
                      f"[{hit.start}-{hit.end}] {hit.score:.3f}: {truncate_text(hit.contents or '', 80)}")
        print_separator("-")

    if report.suggestions:
        print(f"Suggestions tried: {', '.join(report.suggestions)}")

    print(f"Total hits: {report.total_hits} ({report.execution_time_ms}ms)")
    print_separator()

    if report.significant:
        print(f"Top results for phrase: \"{report.phrase}\"")
        for position, (tag, score) in enumerate(report.ranked_bookmarks, 1):
            print(f"  {position:>3}. {tag:<40} {score:10.4f}")
    else:
        op = ">=" if settings.significance_policy == "inclusive" else ">"
        print(f"No significant results with MIN_OCCUR {op} {report.min_occur}")

    sys.exit(0)


if __name__ == "__main__":
    main()
