"""
Interest Guesser - Main Application Entry Point

Loads the document database, asks for search terms, and walks the user
through every resulting link: open, analyze, guess, judge.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.cli import TerminalPresenter  # noqa: E402
from src.config import DEFAULT_LINKS_FILE, REPOSITORY_FILE  # noqa: E402
from src.errors import CorpusLoadError, SearchError  # noqa: E402
from src.logging_config import close_debug_log, critical, error, info  # noqa: E402
from src.reader import DocumentReader  # noqa: E402
from src.search import SearchEngine  # noqa: E402
from src.triage import LinkSession, TriageContext, run_queue  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interest Guesser - triage search results and learn what you find interesting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive run with the default repository and results file
  interest-guesser

  # Skip the search prompt
  interest-guesser --query "online learning"

  # Use another repository and results file
  interest-guesser --repository ./repository.json --links ./links.json

  # Debug mode (verbose logging on stderr)
  DEBUG=true interest-guesser
        """
    )
    parser.add_argument(
        '--repository', type=Path, default=REPOSITORY_FILE,
        help=f"Corpus repository file (default: {REPOSITORY_FILE})",
    )
    parser.add_argument(
        '--links', type=Path, default=DEFAULT_LINKS_FILE,
        help="JSON file of search results: [{\"title\": ..., \"href\": ...}]",
    )
    parser.add_argument(
        '--query', default=None,
        help="Search terms; asked interactively when omitted",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, presenter: TerminalPresenter) -> int:
    """
    One complete triage run.

    Returns:
        Process exit status
    """
    presenter.banner()

    presenter.show('LOADING')
    try:
        context = await presenter.wait(asyncio.to_thread(TriageContext.load, args.repository))
    except CorpusLoadError as e:
        critical(f"[MAIN] {e}")
        presenter.report_failure(str(e))
        return 1

    with context:
        terms = args.query if args.query is not None else await presenter.ask_search_terms()

        presenter.show('SEARCHING')
        try:
            links = await presenter.wait(SearchEngine(args.links).search(terms))
        except SearchError as e:
            error(f"[MAIN] {e}")
            presenter.report_failure(str(e))
            return 1

        if not links:
            presenter.show('NO-LINKS')
            return 0

        presenter.show('ANALYZE-PHASE')
        reader = DocumentReader()
        results = await run_queue(
            links,
            lambda link: LinkSession(link, context, presenter, reader),
        )

        presenter.show('FINISHED')
        info(f"[MAIN] Run complete: {len(results)} links triaged")

    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Interest Guesser command line.
    """
    args = parse_args(argv)
    presenter = TerminalPresenter()

    try:
        return asyncio.run(run(args, presenter))
    except (KeyboardInterrupt, EOFError):
        info("[MAIN] Interrupted by user")
        return 130
    finally:
        close_debug_log()


if __name__ == "__main__":
    sys.exit(main())
