"""Command-line front door for histsift.

Parses filter flags and query tokens, opens the history store, and runs either
the interactive picker or the batch filter pipeline.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .batch import HistoryFilter, resolve_cwd, run_batch
from .errors import HistsiftError
from .log import configure_logging
from .session.loop import select_history
from .settings import Settings, load_settings
from .store import HistoryStore, SqliteStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="histsift",
        description="Search shell history, interactively or with filters.",
    )
    parser.add_argument("-c", "--cwd", default=None, help="Filter search result by directory ('.' for current).")
    parser.add_argument("--exclude-cwd", default=None, help="Exclude directory from results.")
    parser.add_argument("-e", "--exit", type=int, default=None, help="Filter search result by exit code.")
    parser.add_argument("--exclude-exit", type=int, default=None, help="Exclude results with this exit code.")
    parser.add_argument("-b", "--before", default=None, help="Only include results added before this date.")
    parser.add_argument("--after", default=None, help="Only include results after this date.")
    parser.add_argument("-i", "--interactive", action="store_true", help="Open interactive search UI.")
    parser.add_argument("--human", action="store_true", help="Use human-readable formatting for time.")
    parser.add_argument("--cmd-only", action="store_true", help="Show only the text of the command.")
    parser.add_argument("query", nargs="*", help="Search query tokens, joined by single spaces.")
    return parser


def run(args: argparse.Namespace, settings: Settings, store: HistoryStore) -> None:
    """Dispatch parsed arguments to the interactive or batch path."""
    cwd = resolve_cwd(args.cwd)

    if args.interactive:
        chosen = select_history(args.query, settings, store)
        # stdout stays free for callers capturing the shell integration output.
        sys.stderr.write(f"{chosen}\n")
        sys.stderr.flush()
        return

    filters = HistoryFilter(
        exit=args.exit,
        exclude_exit=args.exclude_exit,
        cwd=cwd,
        exclude_cwd=args.exclude_cwd,
        before=args.before,
        after=args.after,
    )
    run_batch(store, settings, args.query, filters, human=args.human, cmd_only=args.cmd_only)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one search."""
    configure_logging()
    args = build_parser().parse_args(argv)
    settings = load_settings()
    logger.debug("settings: %s", settings)
    try:
        with SqliteStore(settings.db_path) as store:
            run(args, settings, store)
    except HistsiftError as exc:
        logger.error("%s", exc)
        raise SystemExit(f"histsift: {exc}") from exc


if __name__ == "__main__":
    main()
