"""
Document Reader Pipeline

Reads a web page and reduces it to the ordered term tokens used by the
keyword index. The input is a URL, the output is a list of lowercase tokens
with function words and punctuation removed.

Pipeline steps:
1. Download the page (requests)
2. Extract the body text, dropping scripts, navigation and other boilerplate
   (BeautifulSoup)
3. Tokenize and part-of-speech tag the text (spaCy)
4. Remove tokens that carry no topical signal, joining "42" "%" into "42%"

Steps 1-4 are blocking, so read() runs them in a worker thread.

Example:
    reader = DocumentReader()
    tokens = await reader.read("https://en.wikipedia.org/wiki/Winnow_(algorithm)")
"""

import asyncio
from collections.abc import Iterable

import requests
import spacy
from bs4 import BeautifulSoup

from src.config import (
    DROPPED_POS_TAGS,
    HTTP_TIMEOUT_SECONDS,
    HTTP_USER_AGENT,
    READER_MAX_TEXT_CHARS,
    SPACY_MODEL_NAME,
)
from src.errors import AnnotationError, FetchError
from src.logging_config import Timer, debug_log
from src.triage.collaborators import BaseDocumentReader

# Elements whose text is never part of the document body
BOILERPLATE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form"]


def extract_body_text(html: str) -> str:
    """
    Extract the readable body text of an HTML page.

    Prefers <article>, then <main>, then <body>, then the whole document.

    Args:
        html: Raw page markup

    Returns:
        Text of the chosen element, blocks separated by newlines
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(BOILERPLATE_TAGS):
        tag.decompose()

    container = soup.find("article") or soup.find("main") or soup.body or soup
    return container.get_text("\n", strip=True)


def remove_unwanted_parts(
    tagged: Iterable[tuple[str, str]],
    dropped_tags: frozenset[str] = DROPPED_POS_TAGS,
) -> list[str]:
    """
    Keep only the tokens worth ranking.

    A number directly followed by "%" is joined into one token first, then
    tokens whose POS tag is in `dropped_tags` are removed and the rest are
    lowercased.

    Args:
        tagged: (token text, coarse POS tag) pairs in document order
        dropped_tags: POS tags to remove

    Returns:
        Filtered, lowercased tokens in document order

    Example:
        >>> remove_unwanted_parts([("The", "DET"), ("rate", "NOUN"), ("rose", "VERB"),
        ...                        ("42", "NUM"), ("%", "SYM"), (".", "PUNCT")])
        ['rate', 'rose', '42%']
    """
    pairs = [(text.strip(), pos) for text, pos in tagged]
    pairs = [(text, pos) for text, pos in pairs if text]

    joined: list[tuple[str, str]] = []
    for text, pos in pairs:
        if text == "%" and joined and joined[-1][1] == "NUM":
            previous, _ = joined.pop()
            joined.append((previous + "%", "NUM"))
        else:
            joined.append((text, pos))

    return [text.lower() for text, pos in joined if pos not in dropped_tags]


class DocumentReader(BaseDocumentReader):
    """
    Fetches a URL and turns its body text into filtered term tokens.

    The spaCy model is loaded on first use.
    """

    def __init__(
        self,
        nlp=None,
        model_name: str = SPACY_MODEL_NAME,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        """
        Initialize the reader.

        Args:
            nlp: Pre-loaded spaCy pipeline. If None, loaded on first use.
            model_name: spaCy model to load when nlp is not given
            timeout: HTTP timeout in seconds
            session: requests session to reuse connections; defaults to module-level requests
        """
        self._nlp = nlp
        self.model_name = model_name
        self.timeout = timeout
        self.http = session or requests

    @property
    def nlp(self):
        """Lazy-load spaCy model on first access."""
        if self._nlp is None:
            self._nlp = self._load_spacy_model()
        return self._nlp

    def _load_spacy_model(self):
        try:
            nlp = spacy.load(self.model_name)
        except OSError as e:
            raise AnnotationError(
                f"spaCy model '{self.model_name}' is not installed "
                f"(python -m spacy download {self.model_name})"
            ) from e
        debug_log(f"[READER] Loaded spaCy model: {self.model_name}")
        return nlp

    async def read(self, url: str) -> list[str]:
        return await asyncio.to_thread(self.read_sync, url)

    def read_sync(self, url: str) -> list[str]:
        """Blocking version of read()."""
        with Timer(f"ReadDocument {url}"):
            html = self.download(url)
            text = extract_body_text(html)
            tokens = remove_unwanted_parts(self.tag(text))

        if not tokens:
            raise AnnotationError(f"No usable terms found in {url}")

        debug_log(f"[READER] {url}: {len(text)} chars -> {len(tokens)} tokens")
        return tokens

    def download(self, url: str) -> str:
        """
        Download the page at `url`.

        Raises:
            FetchError: On connection problems, timeouts or non-2xx status
        """
        debug_log(f"[READER] Downloading {url}")
        try:
            response = self.http.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": HTTP_USER_AGENT},
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise FetchError(url, f"timed out after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            raise FetchError(url, f"HTTP {getattr(e.response, 'status_code', 'error')}") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(url, str(e)) from e

        return response.text

    def tag(self, text: str) -> list[tuple[str, str]]:
        """
        Tokenize and POS-tag text.

        Raises:
            AnnotationError: If the model is missing or tagging fails
        """
        if len(text) > READER_MAX_TEXT_CHARS:
            debug_log(f"[READER] Truncating text from {len(text)} to {READER_MAX_TEXT_CHARS} chars")
            text = text[:READER_MAX_TEXT_CHARS]

        nlp = self.nlp
        try:
            doc = nlp(text)
        except (ValueError, RuntimeError) as e:
            raise AnnotationError(f"Tagging failed: {e}") from e

        return [(token.text, token.pos_) for token in doc]
