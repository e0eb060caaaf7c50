"""
Error taxonomy for Interest Guesser.

FetchError and AnnotationError abort a single link session. CorpusLoadError
aborts startup. PersistenceError is reported while the in-memory state is
kept. Not having enough training data to guess is a session outcome
(Guess.INSUFFICIENT_DATA), not an exception.
"""


class InterestGuesserError(Exception):
    """Base class for application errors."""


class FetchError(InterestGuesserError):
    """A document could not be downloaded (network or HTTP failure)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class AnnotationError(InterestGuesserError):
    """Text could not be tokenized or tagged, or nothing usable was left."""


class CorpusLoadError(InterestGuesserError):
    """The persisted repository exists but cannot be parsed."""


class PersistenceError(InterestGuesserError):
    """The repository could not be written to storage."""


class SearchError(InterestGuesserError):
    """The link source could not produce search results."""


class TfidfError(ValueError):
    """A TF-IDF score was requested for undefined input."""
