# fastcd/resolver.py
"""
Query resolution.

Turns a free-text query into exactly one saved project:
1. An empty query lists every project and asks again
2. An exact name match wins outright
3. Otherwise names containing the query are candidates; one candidate
   wins, several are listed and the next query narrows among them

Typing nothing at a narrowed prompt goes back to the full list.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .console import Console
from .errors import NotFoundError
from .registry import Entry, Registry

logger = logging.getLogger(__name__)

NO_PROJECTS_ERROR = "No saved projects found"
NO_MATCH_ERROR = "No matching project found"
INPUT_PROMPT = "\nEnter project: "
GUTTER = 2


def tilde_path(path: Path, home: Optional[Path]) -> str:
    """Path string with the user's home directory replaced by ~."""
    text = str(path)
    if home is None:
        return text
    home_text = str(home).rstrip("/")
    if home_text and (text == home_text or text.startswith(home_text + "/")):
        return "~" + text[len(home_text):]
    return text


def format_listing(
    entries: List[Entry],
    prompt: str,
    console: Console,
    home: Optional[Path] = None,
) -> List[str]:
    """
    Lines for a project listing.

    Header is the prompt, or a project count if there is none. Names are
    padded to the longest name plus a gutter and sorted.
    """
    if prompt:
        header = prompt
    else:
        count = len(entries)
        suffix = "s" if count != 1 else ""
        header = f"{count} project{suffix} found"

    lines = [header, ""]
    width = max((len(e.name) for e in entries), default=0) + GUTTER
    for entry in sorted(entries, key=lambda e: e.name):
        name = console.bold(entry.name.ljust(width))
        lines.append(f"{name}{tilde_path(entry.path, home)}")
    return lines


class Resolver:
    """
    Resolves queries against a registry, prompting to disambiguate.

    Args:
        console: Where listings are shown and queries are read
        home: Home directory, abbreviated to ~ in listings
    """

    def __init__(self, console: Console, home: Path = None):
        self.console = console
        self.home = home

    def _ask(self, candidates: Registry, prompt: str) -> str:
        for line in format_listing(candidates.entries(), prompt, self.console, self.home):
            self.console.print(line)
        return self.console.ask(INPUT_PROMPT)

    def resolve(self, query: str, registry: Registry, prompt: str = "") -> Entry:
        """
        Resolve a query to one entry of the registry.

        Args:
            query: User-supplied name or part of a name (may be empty)
            registry: Projects to choose from
            prompt: Header shown above listings

        Returns:
            The selected Entry

        Raises:
            NotFoundError: Registry is empty, or a query matches nothing
            CancelledError: Input ended while prompting
        """
        if len(registry) == 0:
            raise NotFoundError(NO_PROJECTS_ERROR)

        candidates = registry
        while True:
            if not query:
                candidates = registry
                query = self._ask(candidates, prompt)
                continue

            exact = candidates.entry(query)
            if exact is not None:
                logger.debug(f"Exact match for {query!r}")
                return exact

            matches = [name for name in candidates.names() if query in name]
            logger.debug(f"Query {query!r} matched {len(matches)} of {len(candidates)} projects")

            if not matches:
                raise NotFoundError(NO_MATCH_ERROR)
            if len(matches) == 1:
                return candidates.entry(matches[0])

            candidates = candidates.subset(matches)
            query = self._ask(candidates, prompt)
