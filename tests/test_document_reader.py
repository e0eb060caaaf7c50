"""
Tests for the document reader pipeline.

Network access and the spaCy model are replaced with fakes: a stub HTTP
session and a callable that returns pre-tagged tokens.

Tests cover:
- Body text extraction and boilerplate removal
- Token filtering (dropped POS tags, percent joining, lowercasing)
- Mapping of HTTP failures to FetchError
- Annotation failures and empty results
"""

import asyncio
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
import requests

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.errors import AnnotationError, FetchError  # noqa: E402
from src.reader import DocumentReader, document_reader, extract_body_text, remove_unwanted_parts  # noqa: E402

PAGE = """
<html>
  <head><title>Winnow</title><style>body { color: red; }</style></head>
  <body>
    <nav>Home | About</nav>
    <article><h1>Winnow</h1><p>Winnow learns linear classifiers.</p></article>
    <footer>Copyright</footer>
    <script>var tracking = 1;</script>
  </body>
</html>
"""

TAGGED = [
    ("Winnow", "PROPN"), ("learns", "VERB"), ("linear", "ADJ"),
    ("classifiers", "NOUN"), (".", "PUNCT"),
]


def fake_nlp(tagged):
    """A callable standing in for a spaCy pipeline."""
    tokens = [SimpleNamespace(text=text, pos_=pos) for text, pos in tagged]
    return Mock(side_effect=lambda text: tokens)


def fake_http(text=PAGE, exc=None):
    response = Mock()
    response.text = text
    if exc is not None:
        response.raise_for_status.side_effect = exc
    http = Mock()
    http.get.return_value = response
    return http


class TestExtractBodyText:
    """Tests for extract_body_text."""

    def test_prefers_article_and_drops_boilerplate(self):
        text = extract_body_text(PAGE)
        assert "Winnow learns linear classifiers." in text
        assert "Home" not in text
        assert "Copyright" not in text
        assert "tracking" not in text
        assert "color" not in text

    def test_falls_back_to_body(self):
        text = extract_body_text("<html><body><p>Plain body</p><nav>menu</nav></body></html>")
        assert text == "Plain body"

    def test_fragment_without_body(self):
        assert extract_body_text("<p>Just a fragment</p>") == "Just a fragment"


class TestRemoveUnwantedParts:
    """Tests for remove_unwanted_parts."""

    def test_drops_function_words_and_lowercases(self):
        tagged = [("The", "DET"), ("Rate", "NOUN"), ("rose", "VERB"), ("quickly", "ADV"), (".", "PUNCT")]
        assert remove_unwanted_parts(tagged) == ["rate", "rose"]

    def test_joins_number_and_percent(self):
        tagged = [("rose", "VERB"), ("42", "NUM"), ("%", "SYM")]
        assert remove_unwanted_parts(tagged) == ["rose", "42%"]

    def test_lone_percent_is_dropped(self):
        assert remove_unwanted_parts([("%", "SYM"), ("growth", "NOUN")]) == ["growth"]

    def test_whitespace_tokens_removed(self):
        tagged = [("\n", "SPACE"), ("  ", "X"), ("data", "NOUN")]
        assert remove_unwanted_parts(tagged) == ["data"]

    def test_custom_dropped_tags(self):
        tagged = [("big", "ADJ"), ("data", "NOUN")]
        assert remove_unwanted_parts(tagged, frozenset({"ADJ"})) == ["data"]


class TestDownload:
    """HTTP failures become FetchError."""

    def test_returns_page_text(self):
        http = fake_http()
        reader = DocumentReader(nlp=fake_nlp(TAGGED), session=http, timeout=5)

        assert reader.download("http://a") == PAGE
        _, kwargs = http.get.call_args
        assert kwargs["timeout"] == 5
        assert "User-Agent" in kwargs["headers"]

    def test_http_status_error(self):
        response = Mock(status_code=404)
        http = fake_http(exc=requests.exceptions.HTTPError(response=response))
        reader = DocumentReader(nlp=fake_nlp(TAGGED), session=http)

        with pytest.raises(FetchError) as exc_info:
            reader.download("http://a")

        assert exc_info.value.url == "http://a"
        assert "404" in exc_info.value.reason

    @pytest.mark.parametrize("exc", [
        requests.exceptions.Timeout("slow"),
        requests.exceptions.ConnectionError("refused"),
    ])
    def test_network_errors(self, exc):
        http = Mock()
        http.get.side_effect = exc
        reader = DocumentReader(nlp=fake_nlp(TAGGED), session=http)

        with pytest.raises(FetchError):
            reader.download("http://a")


class TestRead:
    """End-to-end read() with fakes."""

    def test_read_returns_filtered_tokens(self):
        nlp = fake_nlp(TAGGED)
        reader = DocumentReader(nlp=nlp, session=fake_http())

        tokens = asyncio.run(reader.read("http://a"))

        assert tokens == ["learns", "linear", "classifiers"]
        tagged_text = nlp.call_args[0][0]
        assert "Home" not in tagged_text

    def test_nothing_usable_raises(self):
        reader = DocumentReader(nlp=fake_nlp([(".", "PUNCT"), ("the", "DET")]), session=fake_http())
        with pytest.raises(AnnotationError):
            asyncio.run(reader.read("http://a"))

    def test_tagger_failure_raises(self):
        nlp = Mock(side_effect=ValueError("text too long"))
        reader = DocumentReader(nlp=nlp, session=fake_http())
        with pytest.raises(AnnotationError):
            reader.read_sync("http://a")

    def test_fetch_failure_propagates(self):
        http = Mock()
        http.get.side_effect = requests.exceptions.ConnectionError("refused")
        reader = DocumentReader(nlp=fake_nlp(TAGGED), session=http)
        with pytest.raises(FetchError):
            asyncio.run(reader.read("http://a"))

    def test_missing_model_raises(self, monkeypatch):
        def missing(name):
            raise OSError(f"[E050] Can't find model '{name}'")

        monkeypatch.setattr(document_reader.spacy, "load", missing)
        reader = DocumentReader(model_name="xx_missing_model", session=fake_http())
        with pytest.raises(AnnotationError):
            reader.tag("some text")
