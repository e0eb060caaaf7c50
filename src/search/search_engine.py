"""
Search Engine

Produces the queue of candidate links for a search. Results are read from a
JSON file of {"title": ..., "href": ...} entries (href may be null), which
stands in for a live search provider.
"""

import asyncio
import json
from pathlib import Path

from src.config import DEFAULT_LINKS_FILE
from src.errors import SearchError
from src.logging_config import debug_log, info
from src.triage.collaborators import Link


class SearchEngine:
    """
    Link source backed by a results file.

    Example:
        engine = SearchEngine(Path("links.json"))
        links = await engine.search("winnow classifier")
    """

    def __init__(self, results_file: Path = DEFAULT_LINKS_FILE):
        self.results_file = Path(results_file)

    async def search(self, terms: str) -> list[Link]:
        """
        Return the candidate links for `terms`.

        Raises:
            SearchError: If the results file is missing or malformed
        """
        info(f"[SEARCH] Searching for: {terms.strip()!r}")
        return await asyncio.to_thread(self.load_links)

    def load_links(self) -> list[Link]:
        """Read and validate the results file."""
        try:
            with open(self.results_file, encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise SearchError(f"Results file not found: {self.results_file}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise SearchError(f"Cannot read results file {self.results_file}: {e}") from e

        if not isinstance(data, list):
            raise SearchError(f"Results file {self.results_file} must hold a JSON list")

        links = []
        for position, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise SearchError(f"Result #{position} in {self.results_file} is not an object")
            href = entry.get("href")
            if href is not None and not isinstance(href, str):
                raise SearchError(f"Result #{position} in {self.results_file} has a non-string href")
            links.append(Link(title=str(entry.get("title", "")), href=href or None))

        debug_log(f"[SEARCH] Loaded {len(links)} links from {self.results_file}")
        return links
