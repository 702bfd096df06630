# =============================================================================
# nbayes Command-Line Interface
# =============================================================================
# Trains and queries a classifier stored as a JSON model file:
#
#   nbayes train spam "Buy cheap pills now!!!"
#   nbayes train ham "Lunch at noon?"
#   nbayes classify "cheap lunch pills"
#   nbayes purge 2
#   nbayes stats
#   nbayes db push        # copy the model into the SQLite store
#   nbayes db pull        # restore the model from the SQLite store
#
# Text arguments go through the Tokenizer unless --tokens is given, in
# which case each argument is used as a token verbatim.
# =============================================================================

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from nbayes import __app_name__, __version__
from nbayes.classifier import NBayes
from nbayes.config import Config, ConfigError, print_paths
from nbayes.core import ProbabilityError
from nbayes.serialization import SnapshotError
from nbayes.storage import Database, Repository
from nbayes.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


# =============================================================================
# Model Helpers
# =============================================================================

def load_model(config: Config, model_path: Path) -> NBayes:
    """Load the model file, or start a new classifier from config if there is none."""
    if model_path.exists():
        return NBayes.load(model_path)
    logger.info(f"No model at {model_path}, starting a new one")
    return NBayes.from_config(config.classifier)


def get_tokens(args: argparse.Namespace, config: Config) -> list[str]:
    """Turn the command's text arguments into tokens."""
    if args.tokens:
        return list(args.text)
    return Tokenizer(config.tokenizer).tokenize_many(args.text)


async def push_to_database(model: NBayes, db_path: Path) -> None:
    async with Database(db_path) as db:
        await Repository(db).save_classifier(model)


async def pull_from_database(db_path: Path) -> NBayes:
    async with Database(db_path) as db:
        return await Repository(db).load_classifier()


# =============================================================================
# Commands
# =============================================================================

def cmd_train(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    model.train(get_tokens(args, config), args.category)
    model.dump(model_path)
    return 0


def cmd_untrain(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    model.untrain(get_tokens(args, config), args.category)
    model.dump(model_path)
    return 0


def cmd_classify(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    result = model.classify(get_tokens(args, config))
    if not result:
        print("No categories trained yet.")
        return 0

    for category, score in result.ranked():
        print(f"{category}\t{score:.4f}")
    print(f"=> {result.max_class()}")
    return 0


def cmd_purge(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    removed = model.purge_less_than(args.threshold)
    model.dump(model_path)
    print(f"Removed {removed} tokens")
    return 0


def cmd_delete_category(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    remaining = model.delete_category(args.category)
    model.dump(model_path)
    print(f"Categories: {', '.join(remaining) if remaining else '(none)'}")
    return 0


def cmd_stats(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    model = load_model(config, model_path)
    stats = model.stats
    print(
        f"{stats.categories} categories, {stats.examples} examples, "
        f"{stats.vocabulary_size} distinct tokens, {stats.total_tokens} token occurrences"
    )
    summary = model.category_stats()
    if summary:
        print(summary)
    return 0


def cmd_paths(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    print_paths(config)
    return 0


def cmd_db(args: argparse.Namespace, config: Config, model_path: Path) -> int:
    db_path = config.database_path()
    if args.action == "push":
        asyncio.run(push_to_database(load_model(config, model_path), db_path))
        print(f"Saved {model_path} to {db_path}")
    else:
        model = asyncio.run(pull_from_database(db_path))
        model.dump(model_path)
        print(f"Restored {model_path} from {db_path}")
    return 0


# =============================================================================
# CLI Entry Point
# =============================================================================

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="nbayes: a Naive Bayes classifier for tokens and text",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--model",
        type=Path,
        help="Path to model file (default: from config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("train", cmd_train, "Learn an example"),
        ("untrain", cmd_untrain, "Forget a previously learned example"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("category", help="Category label")
        sub.add_argument("text", nargs="+", help="Example text")
        sub.add_argument("--tokens", action="store_true", help="Use arguments as tokens verbatim")
        sub.set_defaults(handler=handler)

    sub = subparsers.add_parser("classify", help="Score text against every category")
    sub.add_argument("text", nargs="+", help="Text to classify")
    sub.add_argument("--tokens", action="store_true", help="Use arguments as tokens verbatim")
    sub.set_defaults(handler=cmd_classify)

    sub = subparsers.add_parser("purge", help="Drop tokens seen fewer than THRESHOLD times")
    sub.add_argument("threshold", type=float)
    sub.set_defaults(handler=cmd_purge)

    sub = subparsers.add_parser("delete-category", help="Remove a category")
    sub.add_argument("category")
    sub.set_defaults(handler=cmd_delete_category)

    sub = subparsers.add_parser("stats", help="Show per-category statistics")
    sub.set_defaults(handler=cmd_stats)

    sub = subparsers.add_parser("paths", help="Print configuration paths")
    sub.set_defaults(handler=cmd_paths)

    sub = subparsers.add_parser("db", help="Copy the model to or from the SQLite store")
    sub.add_argument("action", choices=["push", "pull"])
    sub.set_defaults(handler=cmd_db)

    return parser.parse_args(argv)


def setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for nbayes.

    This function:
        1. Parses command-line arguments
        2. Loads configuration and sets up logging
        3. Runs the requested command

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    try:
        config = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    setup_logging(logging.DEBUG if args.debug else config.log_level)
    model_path = args.model or config.model_path()

    try:
        return args.handler(args, config, model_path)
    except (SnapshotError, ProbabilityError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
