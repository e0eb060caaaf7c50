"""
Feature Signature Builder

Turns one document into the signed term -> weight mapping the classifier
trains and predicts on. Two rankings are combined:

1. Background: the corpus-wide top keywords, seeded with NEGATIVE relevancy.
   Terms that are salient across everything the user has seen are a prior
   toward "not distinctive".
2. Local: the document's own top keywords, ADDED to the seeded value (or
   inserted as-is). What this document emphasizes offsets or reinforces the
   background prior.

The same corpus state and tokens always yield the same signature, which is
what makes the persisted training log replayable.
"""

from collections.abc import Sequence

from src.config import BACKGROUND_KEYWORD_COUNT, DOCUMENT_KEYWORD_COUNT
from src.relevance.corpus_store import CorpusStore


def build_feature_signature(
    corpus: CorpusStore,
    tokens: Sequence[str],
    background_count: int = BACKGROUND_KEYWORD_COUNT,
    keyword_count: int = DOCUMENT_KEYWORD_COUNT,
) -> dict[str, float]:
    """
    Build the feature signature of a document.

    Args:
        corpus: Corpus the document is ranked against (normally containing it)
        tokens: The document's filtered tokens
        background_count: Number of corpus-wide keywords to seed negatively
        keyword_count: Number of document keywords to add

    Returns:
        New dict, background terms first, then document-only terms
    """
    signature: dict[str, float] = {}

    for keyword in corpus.top_keywords(background_count):
        signature[keyword.word] = -keyword.relevancy

    for keyword in corpus.keywords_for(tokens, keyword_count):
        signature[keyword.word] = signature.get(keyword.word, 0.0) + keyword.relevancy

    return signature
