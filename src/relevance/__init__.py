"""
Relevance Feedback Package

Keyword ranking, feature signatures and the online classifier that learns
which documents the user finds interesting.

Main Components:
- tfidf: term frequency / inverse document frequency scoring and ranking
- CorpusStore: durable documents and training log
- build_feature_signature: signed term weights for one document
- WinnowClassifier: mistake-driven online classifier

Usage:
    from src.relevance import CorpusStore, WinnowClassifier, build_feature_signature

    store = CorpusStore.load(path)
    classifier = WinnowClassifier()
    classifier.train_batch(store.training_examples())

    signature = build_feature_signature(store, tokens)
    guess = classifier.predict(signature)
"""

from .tfidf import (
    Keyword,
    inverse_document_frequency,
    rank_keywords,
    term_frequency,
    tfidf,
)
from .corpus_store import CorpusStore, TrainingExample, TrainingLog
from .signature import build_feature_signature
from .classifier import WinnowClassifier

__all__ = [
    'Keyword',
    'term_frequency',
    'inverse_document_frequency',
    'tfidf',
    'rank_keywords',
    'CorpusStore',
    'TrainingExample',
    'TrainingLog',
    'build_feature_signature',
    'WinnowClassifier',
]
