"""
TF-IDF Keyword Scoring

Scores how characteristic a term is for one token blob relative to a corpus
of blobs. Terms that are frequent in the blob but present in few corpus
documents score highest.

How TF-IDF Works:
    TF  = count(term in blob) / len(blob)
    IDF = ln(N / df)    where N = corpus blobs, df = blobs containing the term
    TF-IDF = TF * IDF

A term present in every corpus blob has IDF 0 and therefore scores 0, no
matter how often it occurs in the blob.

Example:
    corpus = [["cat", "dog", "cat"], ["dog", "dog", "fish"]]
    rank_keywords(corpus[0], corpus)
    # [Keyword(word='cat', relevancy=0.462...), Keyword(word='dog', relevancy=0.0)]
"""

import math
from collections import Counter
from collections.abc import Collection, Sequence
from dataclasses import dataclass

from src.errors import TfidfError


@dataclass(frozen=True)
class Keyword:
    """
    A term ranked by TF-IDF.

    Attributes:
        word: The term
        relevancy: Its TF-IDF score within the ranked blob
    """
    word: str
    relevancy: float


def term_frequency(word: str, blob: Sequence[str]) -> float:
    """
    Fraction of the blob's tokens equal to `word`.

    Raises:
        TfidfError: If the blob is empty
    """
    if not blob:
        raise TfidfError("term frequency of an empty blob is undefined")
    return blob.count(word) / len(blob)


def count_containing(word: str, corpus: Sequence[Collection[str]]) -> int:
    """Number of corpus blobs in which `word` occurs at least once."""
    return sum(1 for blob in corpus if word in blob)


def inverse_document_frequency(word: str, corpus: Sequence[Collection[str]]) -> float:
    """
    Natural log of corpus size over the number of blobs containing `word`.

    Raises:
        TfidfError: If the corpus is empty or no blob contains the word
    """
    if not corpus:
        raise TfidfError("inverse document frequency over an empty corpus is undefined")

    containing = count_containing(word, corpus)
    if containing == 0:
        raise TfidfError(f"'{word}' does not occur in any corpus document")

    return math.log(len(corpus) / containing)


def tfidf(word: str, blob: Sequence[str], corpus: Sequence[Collection[str]]) -> float:
    """TF-IDF score of `word` in `blob` relative to `corpus`."""
    return term_frequency(word, blob) * inverse_document_frequency(word, corpus)


def rank_keywords(
    blob: Sequence[str],
    corpus: Sequence[Collection[str]],
    n: int | None = None,
) -> list[Keyword]:
    """
    Rank the distinct terms of a blob by TF-IDF, highest first.

    Equal scores keep the order in which the terms first appear in the blob.
    Counts and corpus membership are computed once per call, since the
    corpus-wide ranking runs over the concatenation of every document.

    Args:
        blob: Token sequence to rank
        corpus: All corpus blobs (should contain every term of `blob`)
        n: Keep only the top n keywords; None keeps all of them

    Returns:
        Ranked keywords. An empty blob ranks to an empty list.
    """
    if not blob:
        return []

    # Counter keeps first-occurrence order of its keys
    counts = Counter(blob)
    document_sets = [set(document) for document in corpus]

    scored = [
        Keyword(word, (count / len(blob)) * inverse_document_frequency(word, document_sets))
        for word, count in counts.items()
    ]

    # sorted() is stable, also with reverse=True
    ranked = sorted(scored, key=lambda keyword: keyword.relevancy, reverse=True)
    return ranked if n is None else ranked[:n]
