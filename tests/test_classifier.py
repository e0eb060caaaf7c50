"""
Tests for WinnowClassifier

Tests cover:
- Default weights and scoring of signed signatures
- Mistake-driven updates (promotion/demotion, mirrored for label 0)
- No update when the prediction is already right
- Deterministic replay of a training log
- Hyperparameter and label validation
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.relevance.classifier import DEFAULT_WEIGHT, WinnowClassifier  # noqa: E402
from src.relevance.corpus_store import TrainingExample  # noqa: E402


@pytest.fixture
def classifier():
    return WinnowClassifier(alpha=1.5, beta=0.5, theta=1.0)


class TestScoring:
    """Tests for score() and predict()."""

    def test_unseen_terms_have_default_weight(self, classifier):
        assert classifier.weight("anything") == DEFAULT_WEIGHT
        assert classifier.weights == {}

    def test_score_is_signed_vote(self, classifier):
        assert classifier.score({"a": 0.5, "b": -0.2, "c": 3.0}) == 1.0

    def test_zero_values_do_not_vote(self, classifier):
        assert classifier.score({"a": 0.0, "b": 0.0}) == 0.0

    def test_predict_requires_score_above_threshold(self, classifier):
        # Two positive terms score 2.0; one scores exactly theta
        assert classifier.predict({"a": 0.1, "b": 0.1}) == 1
        assert classifier.predict({"a": 0.1}) == 0

    def test_predict_ignores_non_finite_values(self, classifier):
        signature = {"a": 0.4, "b": 0.2, "c": math.nan, "d": math.inf}
        assert classifier.score(signature) == 2.0
        assert classifier.predict(signature) == 1

    def test_predict_on_empty_signature(self, classifier):
        assert classifier.predict({}) == 0


class TestTraining:
    """Tests for the mistake-driven update."""

    def test_missed_positive_promotes_and_demotes(self, classifier):
        signature = {"a": 0.5, "b": -0.2}
        assert classifier.predict(signature) == 0

        assert classifier.train_one(signature, 1) is True
        assert classifier.weight("a") == pytest.approx(1.5)
        assert classifier.weight("b") == pytest.approx(0.5)
        assert classifier.mistakes == 1

    def test_repeated_training_converges(self, classifier):
        signature = {"a": 0.5, "b": -0.2}
        classifier.train_one(signature, 1)
        # Score is now 1.5 - 0.5 = 1.0, still not above theta
        assert classifier.train_one(signature, 1) is True
        assert classifier.weight("a") == pytest.approx(2.25)
        assert classifier.weight("b") == pytest.approx(0.25)
        assert classifier.predict(signature) == 1

    def test_missed_negative_is_mirrored(self, classifier):
        signature = {"a": 0.3, "b": 0.7, "c": -0.1}
        # 1 + 1 - 1 = 1.0, not above theta: would predict 0, so make it 1 first
        classifier.train_one(signature, 1)
        assert classifier.predict(signature) == 1

        assert classifier.train_one(signature, 0) is True
        assert classifier.weight("a") == pytest.approx(1.5 * 0.5)
        assert classifier.weight("b") == pytest.approx(1.5 * 0.5)
        assert classifier.weight("c") == pytest.approx(0.5 * 1.5)

    def test_correct_prediction_leaves_weights_alone(self, classifier):
        signature = {"a": 0.5, "b": -0.2}
        assert classifier.predict(signature) == 0

        assert classifier.train_one(signature, 0) is False
        assert classifier.weights == {}
        assert classifier.mistakes == 0

    def test_terms_outside_signature_untouched(self, classifier):
        classifier.train_one({"a": 0.5}, 1)
        assert set(classifier.weights) == {"a"}
        assert classifier.weight("z") == DEFAULT_WEIGHT

    def test_invalid_label_rejected(self, classifier):
        with pytest.raises(ValueError):
            classifier.train_one({"a": 0.5}, 2)


class TestReplay:
    """Training is deterministic, so replays reproduce the weights."""

    LOG = [
        ({"a": 0.5, "b": -0.2}, 1),
        ({"b": 0.4, "c": 0.1}, 0),
        ({"a": 0.2, "c": -0.3, "d": 0.9}, 1),
        ({"a": 0.5, "b": -0.2}, 1),
    ]

    def test_batch_matches_one_by_one(self):
        one_by_one = WinnowClassifier()
        for signature, label in self.LOG:
            one_by_one.train_one(signature, label)

        batch = WinnowClassifier()
        batch.train_batch(self.LOG)

        assert batch.weights == one_by_one.weights
        assert batch.mistakes == one_by_one.mistakes

    def test_batch_accepts_training_examples(self):
        from_tuples = WinnowClassifier()
        from_tuples.train_batch(self.LOG)

        from_examples = WinnowClassifier()
        updates = from_examples.train_batch(TrainingExample(s, l) for s, l in self.LOG)

        assert from_examples.weights == from_tuples.weights
        assert updates == from_tuples.mistakes

    def test_replay_twice_is_identical(self):
        first = WinnowClassifier()
        first.train_batch(self.LOG)
        second = WinnowClassifier()
        second.train_batch(self.LOG)
        assert first.weights == second.weights


class TestHyperparameters:
    """Constructor validation."""

    @pytest.mark.parametrize("alpha,beta", [
        (1.0, 0.5),
        (0.5, 0.5),
        (1.5, 0.0),
        (1.5, 1.0),
        (1.5, -0.5),
    ])
    def test_invalid_factors_rejected(self, alpha, beta):
        with pytest.raises(ValueError):
            WinnowClassifier(alpha=alpha, beta=beta)

    def test_defaults(self):
        classifier = WinnowClassifier()
        assert (classifier.alpha, classifier.beta, classifier.theta) == (1.5, 0.5, 1.0)
