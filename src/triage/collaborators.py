"""
Collaborator interfaces for link triage.

The session state machine only talks to the outside world through these
abstractions, so tests can drive it with scripted fakes and the terminal
or document-reading implementations can be swapped independently.

- BaseDocumentReader: URL -> filtered term tokens (fetch, strip, annotate)
- BasePresenter: shows information and asks the user to pick an option
- Opener: any callable taking a URL (webbrowser.open by default)
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from src.relevance.tfidf import Keyword

T = TypeVar('T')

Opener = Callable[[str], object]


@dataclass(frozen=True)
class Link:
    """
    A candidate link from the link source.

    Attributes:
        title: Display title
        href: Target URL; None for entries that cannot be opened
    """
    title: str
    href: str | None = None


class Question(Enum):
    """Choice points of a session."""
    LINK = "link"
    DOCUMENT = "document"
    JUDGMENT = "judgment"


class Choice(Enum):
    """Options the user can pick at a choice point."""
    OPEN = "open"
    ANALYZE = "analyze"
    DISCARD = "discard"
    GOOD = "good"
    BAD = "bad"
    GUESS = "guess"


class Guess(Enum):
    """What the classifier had to say about a document."""
    GOOD = "good"
    BAD = "bad"
    INSUFFICIENT_DATA = "insufficient_data"


class BaseDocumentReader(ABC):
    """Turns a URL into the ordered, filtered term tokens of its text."""

    @abstractmethod
    async def read(self, url: str) -> list[str]:
        """
        Fetch and annotate the document at `url`.

        Raises:
            FetchError: On network or HTTP failure
            AnnotationError: When tokenizing/tagging fails or nothing usable is left
        """


class BasePresenter(ABC):
    """
    User-facing side of a session.

    ask() must only return an index into `options`; re-prompting on invalid
    input is the presenter's job.
    """

    @abstractmethod
    async def ask(self, question: Question, options: Sequence[Choice]) -> int:
        """Present the options for `question` and return the selected index."""

    @abstractmethod
    def show_link(self, link: Link):
        """Display a link before the user decides what to do with it."""

    @abstractmethod
    def show_keywords(self, keywords: Sequence[Keyword]):
        """Display the top keywords of an analyzed document."""

    @abstractmethod
    def show_guess(self, guess: Guess):
        """Display the classifier's guess (or that it has too little data)."""

    @abstractmethod
    def report_failure(self, message: str):
        """Display a one-line explanation of a failure."""

    async def wait(self, work: Awaitable[T]) -> T:
        """Await `work`, optionally showing a busy indicator meanwhile."""
        return await work
