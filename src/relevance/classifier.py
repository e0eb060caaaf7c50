"""
Winnow Relevance Classifier

Online, mistake-driven binary classifier that predicts whether the user
will find a document interesting from its feature signature.

Every term has a positive weight (1.0 until it is first updated). A
signature votes with the weight of each term it contains, positively or
negatively according to the sign of the term's value:

    score = sum(w[t] for t with sig[t] > 0) - sum(w[t] for t with sig[t] < 0)
    predict 1 if score > theta else 0

Weights change only when a prediction is wrong (Littlestone's Winnow):
- missed a positive (label 1): positive terms *= alpha, negative terms *= beta
- missed a negative (label 0): positive terms *= beta,  negative terms *= alpha

Training is deterministic, so replaying the persisted training log in order
from fresh weights reproduces the model exactly. The weights themselves are
never persisted.

Example:
    classifier = WinnowClassifier()
    classifier.train_batch(corpus.training_examples())
    guess = classifier.predict(signature)
"""

import math
from collections.abc import Iterable, Mapping

from src.config import WINNOW_DEMOTION, WINNOW_PROMOTION, WINNOW_THRESHOLD
from src.logging_config import debug_log
from src.relevance.corpus_store import TrainingExample

DEFAULT_WEIGHT = 1.0


class WinnowClassifier:
    """
    Winnow classifier over signed feature signatures.

    Attributes:
        alpha: Promotion factor (> 1)
        beta: Demotion factor (between 0 and 1)
        theta: Decision threshold
    """

    def __init__(
        self,
        alpha: float = WINNOW_PROMOTION,
        beta: float = WINNOW_DEMOTION,
        theta: float = WINNOW_THRESHOLD,
    ):
        """
        Initialize with default weights for every term.

        Raises:
            ValueError: If alpha <= 1 or beta is not strictly between 0 and 1
        """
        if not alpha > 1:
            raise ValueError(f"Winnow promotion factor must be > 1, got {alpha}")
        if not 0 < beta < 1:
            raise ValueError(f"Winnow demotion factor must be in (0, 1), got {beta}")

        self.alpha = float(alpha)
        self.beta = float(beta)
        self.theta = float(theta)
        self._weights: dict[str, float] = {}
        self._mistakes = 0

    @property
    def weights(self) -> dict[str, float]:
        """Copy of the weights that differ from the default."""
        return dict(self._weights)

    @property
    def mistakes(self) -> int:
        """Number of updates applied so far."""
        return self._mistakes

    def weight(self, term: str) -> float:
        return self._weights.get(term, DEFAULT_WEIGHT)

    @staticmethod
    def _split(signature: Mapping[str, float]) -> tuple[list[str], list[str]]:
        """Terms voting for (positive value) and against (negative value)."""
        positive, negative = [], []
        for term, value in signature.items():
            try:
                value = float(value)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(value) or value == 0:
                continue
            (positive if value > 0 else negative).append(term)
        return positive, negative

    def score(self, signature: Mapping[str, float]) -> float:
        """Weighted vote of the signature's terms."""
        positive, negative = self._split(signature)
        return sum(self.weight(t) for t in positive) - sum(self.weight(t) for t in negative)

    def predict(self, signature: Mapping[str, float]) -> int:
        """
        Predict 1 (interesting) or 0 (not interesting).

        Never raises; values that are zero or not finite numbers are ignored.
        """
        return 1 if self.score(signature) > self.theta else 0

    def train_one(self, signature: Mapping[str, float], label: int) -> bool:
        """
        Learn from one judged signature.

        Args:
            signature: Feature signature of the judged document
            label: 1 (interesting) or 0 (not interesting)

        Returns:
            True if the prediction was wrong and the weights were updated
        """
        if label not in (0, 1):
            raise ValueError(f"Training label must be 0 or 1, got {label!r}")

        if self.predict(signature) == label:
            return False

        promote, demote = (self.alpha, self.beta) if label == 1 else (self.beta, self.alpha)
        positive, negative = self._split(signature)

        for term in positive:
            self._weights[term] = self.weight(term) * promote
        for term in negative:
            self._weights[term] = self.weight(term) * demote

        self._mistakes += 1
        debug_log(
            f"[WINNOW] Mistake #{self._mistakes} on label {label}: "
            f"updated {len(positive)} positive and {len(negative)} negative terms"
        )
        return True

    def train_batch(self, examples: Iterable[TrainingExample | tuple[Mapping[str, float], int]]) -> int:
        """
        Apply train_one to each example, in order.

        Args:
            examples: TrainingExample objects or (signature, label) pairs

        Returns:
            Number of examples that caused an update
        """
        updates = 0
        for example in examples:
            if isinstance(example, TrainingExample):
                features, label = example.features, example.label
            else:
                features, label = example
            if self.train_one(features, label):
                updates += 1
        return updates
