"""
Triage context: the long-lived state of one run.

Bundles the corpus store and the classifier rebuilt from its training log,
with an explicit lifecycle:

    with TriageContext.load(REPOSITORY_FILE) as context:
        ...run sessions...
    # final persist on exit

Loading a corrupt repository raises CorpusLoadError before anything else
happens.
"""

from pathlib import Path

from src.config import MIN_TRAINING_EXAMPLES_TO_GUESS
from src.errors import PersistenceError
from src.logging_config import Timer, debug_log, error
from src.relevance.classifier import WinnowClassifier
from src.relevance.corpus_store import CorpusStore


class TriageContext:
    """
    Corpus store plus classifier shared by every session of a run.

    Attributes:
        corpus: The durable document collection and training log
        classifier: Winnow classifier, in sync with corpus's training log
        min_training_examples: Training examples needed before guessing
    """

    def __init__(
        self,
        corpus: CorpusStore,
        classifier: WinnowClassifier,
        min_training_examples: int = MIN_TRAINING_EXAMPLES_TO_GUESS,
    ):
        self.corpus = corpus
        self.classifier = classifier
        self.min_training_examples = min_training_examples

    @classmethod
    def load(
        cls,
        repository_path: Path,
        classifier: WinnowClassifier | None = None,
        min_training_examples: int = MIN_TRAINING_EXAMPLES_TO_GUESS,
    ) -> "TriageContext":
        """
        Load the corpus and replay its training log into a fresh classifier.

        Args:
            repository_path: Persisted repository (may not exist yet)
            classifier: Untrained classifier to use; defaults to WinnowClassifier()
            min_training_examples: Training examples needed before guessing

        Raises:
            CorpusLoadError: If the repository exists but is corrupt
        """
        corpus = CorpusStore.load(repository_path)
        classifier = classifier or WinnowClassifier()

        with Timer("ReplayTrainingLog"):
            updates = classifier.train_batch(corpus.training_examples())

        debug_log(
            f"[CONTEXT] Replayed {corpus.training_example_count} training examples "
            f"({updates} updates)"
        )
        return cls(corpus, classifier, min_training_examples)

    def can_guess(self) -> bool:
        """True once the corpus holds enough judgments to offer a guess."""
        return self.corpus.training_example_count >= self.min_training_examples

    def close(self):
        """Persist the corpus one last time. Failures are logged, not raised."""
        try:
            self.corpus.persist()
        except PersistenceError as e:
            error(f"[CONTEXT] Final persist failed: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
