"""
Corpus Store for Relevance Feedback

Owns the two durable collections of the application:
1. Documents: token sequences keyed by URL, in insertion order
2. Training log: ordered (feature signature, label) pairs recorded from
   explicit user judgments

Both live in a single JSON record so that a run can be resumed exactly:

    {
        "urls": ["https://..."],
        "documents": [["token", ...]],          # index-aligned with urls
        "trains": [{"input": {"term": 0.3}, "output": 1}]
    }

The store also ranks keywords against its documents (see tfidf.py).

Example:
    store = CorpusStore.load(REPOSITORY_FILE)
    store.upsert_document(url, tokens)
    keywords = store.keywords_for(tokens, 10)
    store.register_training_example(signature, 1)
    store.persist()
"""

import json
import os
import tempfile
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from src.errors import CorpusLoadError, PersistenceError
from src.logging_config import debug_log
from src.relevance.tfidf import Keyword, rank_keywords


@dataclass
class TrainingExample:
    """
    One explicit user judgment.

    Attributes:
        features: Feature signature the judgment was made on (term -> weight)
        label: 1 for "interesting", 0 for "not interesting"
    """
    features: dict[str, float] = field(default_factory=dict)
    label: int = 0

    def __post_init__(self):
        """Validate the label is binary."""
        if self.label not in (0, 1):
            raise ValueError(f"Training label must be 0 or 1, got {self.label!r}")
        self.label = int(self.label)

    def to_record(self) -> dict:
        """Serialize to the persisted {input, output} form."""
        return {"input": dict(self.features), "output": self.label}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TrainingLog:
    """
    Restartable, read-only view over the store's training examples.

    Every iteration walks the log from the beginning in insertion order, so
    the view can be replayed any number of times.
    """

    def __init__(self, examples: list[TrainingExample]):
        self._examples = examples

    def __iter__(self) -> Iterator[TrainingExample]:
        return iter(list(self._examples))

    def __len__(self) -> int:
        return len(self._examples)


class CorpusStore:
    """
    Durable document collection and training log.

    Duplicate URLs overwrite the stored tokens in place, keeping the original
    position. Documents are never removed. The training log is append-only.
    """

    def __init__(self, path: Path | None = None):
        """
        Initialize an empty store.

        Args:
            path: File that persist() writes to. Use CorpusStore.load()
                  to start from previously persisted state.
        """
        self.path = Path(path) if path else None
        self._urls: list[str] = []
        self._documents: list[list[str]] = []
        self._trains: list[TrainingExample] = []

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def load(cls, path: Path) -> "CorpusStore":
        """
        Load the store persisted at `path`.

        A missing file yields an empty store bound to that path.

        Raises:
            CorpusLoadError: If the file exists but is not a valid repository
        """
        store = cls(path)
        path = Path(path)

        if not path.exists():
            debug_log(f"[CORPUS] No repository at {path}, starting empty")
            return store

        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorpusLoadError(f"Cannot read repository {path}: {e}") from e

        urls, documents, trains = cls._validate_record(data, path)

        store._urls = urls
        store._documents = documents
        store._trains = trains

        debug_log(
            f"[CORPUS] Loaded {len(urls)} documents and "
            f"{len(trains)} training examples from {path}"
        )
        return store

    @staticmethod
    def _validate_record(data, path: Path) -> tuple[list, list, list]:
        """Check the persisted structure and convert it to internal form."""
        if not isinstance(data, dict):
            raise CorpusLoadError(f"Repository {path} is not a JSON object")

        missing = [key for key in ("urls", "documents", "trains") if key not in data]
        if missing:
            raise CorpusLoadError(f"Repository {path} lacks keys: {', '.join(missing)}")

        urls = data["urls"]
        documents = data["documents"]
        trains = data["trains"]

        if not all(isinstance(value, list) for value in (urls, documents, trains)):
            raise CorpusLoadError(f"Repository {path} has non-list urls/documents/trains")

        if len(urls) != len(documents):
            raise CorpusLoadError(
                f"Repository {path} has {len(urls)} urls but {len(documents)} documents"
            )

        if not all(isinstance(url, str) for url in urls):
            raise CorpusLoadError(f"Repository {path} has a non-string url")

        if len(set(urls)) != len(urls):
            raise CorpusLoadError(f"Repository {path} has duplicate urls")

        for position, document in enumerate(documents):
            if not isinstance(document, list) or not all(isinstance(token, str) for token in document):
                raise CorpusLoadError(f"Repository {path} has document #{position} that is not a list of strings")

        examples = []
        for position, record in enumerate(trains):
            if not isinstance(record, dict) or not isinstance(record.get("input"), dict):
                raise CorpusLoadError(f"Repository {path} has a malformed training entry #{position}")

            features = record["input"]
            label = record.get("output")
            # JSON true/false would otherwise pass as 1/0
            if not all(_is_number(weight) for weight in features.values()):
                raise CorpusLoadError(f"Repository {path} has non-numeric features in training entry #{position}")
            if isinstance(label, bool) or label not in (0, 1):
                raise CorpusLoadError(
                    f"Repository {path} has an invalid label {label!r} in training entry #{position}"
                )

            examples.append(TrainingExample(
                features={term: float(weight) for term, weight in features.items()},
                label=label,
            ))

        return list(urls), [list(document) for document in documents], examples

    # =========================================================================
    # Documents
    # =========================================================================

    @property
    def urls(self) -> list[str]:
        """Stored URLs in insertion order."""
        return list(self._urls)

    @property
    def documents(self) -> list[list[str]]:
        """Stored token sequences, index-aligned with urls."""
        return [list(document) for document in self._documents]

    @property
    def document_count(self) -> int:
        return len(self._urls)

    def get_document(self, url: str) -> list[str] | None:
        """Tokens stored for `url`, or None if it was never analyzed."""
        try:
            return list(self._documents[self._urls.index(url)])
        except ValueError:
            return None

    def upsert_document(self, url: str, tokens: Sequence[str]):
        """
        Insert the tokens for `url`, or replace them if the URL is known.

        A replaced document keeps its original position.
        """
        tokens = list(tokens)
        try:
            index = self._urls.index(url)
        except ValueError:
            self._urls.append(url)
            self._documents.append(tokens)
            debug_log(f"[CORPUS] Added document #{len(self._urls)}: {url} ({len(tokens)} tokens)")
            return

        self._documents[index] = tokens
        debug_log(f"[CORPUS] Replaced document #{index + 1}: {url} ({len(tokens)} tokens)")

    # =========================================================================
    # Training Log
    # =========================================================================

    def training_examples(self) -> TrainingLog:
        """Restartable view over the training log, oldest first."""
        return TrainingLog(self._trains)

    @property
    def training_example_count(self) -> int:
        return len(self._trains)

    def register_training_example(self, features: Mapping[str, float], label: int):
        """Append a judgment to the training log. Documents are not touched."""
        example = TrainingExample(features=dict(features), label=label)
        self._trains.append(example)
        debug_log(
            f"[CORPUS] Registered training example #{len(self._trains)} "
            f"(label={label}, {len(example.features)} features)"
        )

    # =========================================================================
    # Keywords
    # =========================================================================

    def keywords_for(self, tokens: Sequence[str], n: int | None = None) -> list[Keyword]:
        """
        Top `n` terms of `tokens` by TF-IDF against the stored documents.

        Args:
            tokens: Token sequence to rank (normally a stored document)
            n: Number of keywords to keep; None returns the full ranking
        """
        return rank_keywords(tokens, self._documents, n)

    def top_keywords(self, n: int | None = None) -> list[Keyword]:
        """Corpus-wide "background" keywords: the ranking of all documents joined."""
        words = [word for document in self._documents for word in document]
        return rank_keywords(words, self._documents, n)

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_record(self) -> dict:
        """The persisted form of the whole store."""
        return {
            "urls": list(self._urls),
            "documents": [list(document) for document in self._documents],
            "trains": [example.to_record() for example in self._trains],
        }

    def persist(self):
        """
        Durably write documents and training log to self.path.

        The record is written to a temporary file in the same directory and
        then moved over the target, so a failed write never truncates an
        existing repository.

        Raises:
            PersistenceError: If the store has no path or the write fails
        """
        if self.path is None:
            raise PersistenceError("Corpus store has no repository path")

        tmp_name = None
        try:
            payload = json.dumps(self.to_record(), ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.path.parent,
                prefix=f".{self.path.name}.", suffix=".tmp", delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_name, self.path)
            tmp_name = None

        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write repository {self.path}: {e}") from e

        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        debug_log(
            f"[CORPUS] Persisted {len(self._urls)} documents and "
            f"{len(self._trains)} training examples to {self.path}"
        )
