"""
Link Session: the per-link triage state machine.

States and transitions:

    LINK_SHOWN -> AWAITING_LINK_CHOICE
    AWAITING_LINK_CHOICE --open--> DOCUMENT_OPENED -> AWAITING_DOCUMENT_CHOICE
    AWAITING_DOCUMENT_CHOICE --analyze--> DOCUMENT_ANALYZED -> AWAITING_JUDGMENT
    AWAITING_JUDGMENT --guess--> GUESS_SHOWN -> AWAITING_JUDGMENT (guess removed)
    AWAITING_JUDGMENT --good/bad--> TERMINAL
    any choice point --discard--> TERMINAL
    fetch/annotation failure -> TERMINAL

A single dispatch loop drives the machine; each handler performs the side
effects of its state and returns the next state. The session owns no durable
data: the corpus and classifier live in the TriageContext.

Example:
    session = LinkSession(link, context, presenter, reader)
    result = await session.run()
"""

import asyncio
import webbrowser
from dataclasses import dataclass, field
from enum import Enum

from src.config import DOCUMENT_KEYWORD_COUNT
from src.errors import AnnotationError, FetchError, PersistenceError
from src.logging_config import debug_log, error, info, warning
from src.relevance.signature import build_feature_signature
from src.relevance.tfidf import Keyword
from src.triage.collaborators import (
    BaseDocumentReader,
    BasePresenter,
    Choice,
    Guess,
    Link,
    Opener,
    Question,
)
from src.triage.context import TriageContext


class SessionState(Enum):
    LINK_SHOWN = "link_shown"
    AWAITING_LINK_CHOICE = "awaiting_link_choice"
    DOCUMENT_OPENED = "document_opened"
    AWAITING_DOCUMENT_CHOICE = "awaiting_document_choice"
    DOCUMENT_ANALYZED = "document_analyzed"
    AWAITING_JUDGMENT = "awaiting_judgment"
    GUESS_SHOWN = "guess_shown"
    TERMINAL = "terminal"


class SessionOutcome(Enum):
    DISCARDED = "discarded"
    JUDGED = "judged"
    FAILED = "failed"


@dataclass
class SessionResult:
    """
    How a session ended.

    Attributes:
        url: The link's URL
        outcome: Discarded, judged, or failed
        label: The user's judgment (1 good, 0 bad) when outcome is JUDGED
        guess: The classifier's guess, if the user asked for one
        keywords: Top keywords of the analyzed document
        error: Explanation when outcome is FAILED
    """
    url: str
    outcome: SessionOutcome = SessionOutcome.DISCARDED
    label: int | None = None
    guess: Guess | None = None
    keywords: list[Keyword] = field(default_factory=list)
    error: str | None = None


class LinkSession:
    """
    Runs one link from first display to a terminal state.

    Attributes:
        link: The link under triage (href must not be None)
        context: Shared corpus store and classifier
        state: Current state of the machine
    """

    def __init__(
        self,
        link: Link,
        context: TriageContext,
        presenter: BasePresenter,
        reader: BaseDocumentReader,
        opener: Opener = webbrowser.open,
        keyword_count: int = DOCUMENT_KEYWORD_COUNT,
    ):
        if link.href is None:
            raise ValueError(f"Link '{link.title}' has no href")

        self.link = link
        self.context = context
        self.presenter = presenter
        self.reader = reader
        self.opener = opener
        self.keyword_count = keyword_count

        self.state = SessionState.LINK_SHOWN
        self.result = SessionResult(url=link.href)

        # Transient per-document state
        self._tokens: list[str] = []
        self._signature: dict[str, float] = {}

        self._handlers = {
            SessionState.LINK_SHOWN: self._on_link_shown,
            SessionState.AWAITING_LINK_CHOICE: self._on_awaiting_link_choice,
            SessionState.DOCUMENT_OPENED: self._on_document_opened,
            SessionState.AWAITING_DOCUMENT_CHOICE: self._on_awaiting_document_choice,
            SessionState.DOCUMENT_ANALYZED: self._on_document_analyzed,
            SessionState.AWAITING_JUDGMENT: self._on_awaiting_judgment,
            SessionState.GUESS_SHOWN: self._on_guess_shown,
        }

    @property
    def url(self) -> str:
        return self.link.href

    async def run(self) -> SessionResult:
        """Drive the machine until it reaches TERMINAL."""
        debug_log(f"[SESSION] Start: {self.url}")

        while self.state is not SessionState.TERMINAL:
            handler = self._handlers[self.state]
            next_state = await handler()
            debug_log(f"[SESSION] {self.state.value} -> {next_state.value}")
            self.state = next_state

        debug_log(f"[SESSION] End: {self.url} ({self.result.outcome.value})")
        return self.result

    async def _choose(self, question: Question, options: list[Choice]) -> Choice:
        index = await self.presenter.ask(question, options)
        return options[index]

    # =========================================================================
    # State Handlers
    # =========================================================================

    async def _on_link_shown(self) -> SessionState:
        self.presenter.show_link(self.link)
        return SessionState.AWAITING_LINK_CHOICE

    async def _on_awaiting_link_choice(self) -> SessionState:
        choice = await self._choose(Question.LINK, [Choice.OPEN, Choice.DISCARD])
        if choice is Choice.DISCARD:
            return self._discard()

        try:
            self.opener(self.url)
        except Exception as e:
            # Opening is best-effort; the document can still be analyzed
            warning(f"[SESSION] Could not open {self.url}: {e}")
        return SessionState.DOCUMENT_OPENED

    async def _on_document_opened(self) -> SessionState:
        return SessionState.AWAITING_DOCUMENT_CHOICE

    async def _on_awaiting_document_choice(self) -> SessionState:
        choice = await self._choose(Question.DOCUMENT, [Choice.ANALYZE, Choice.DISCARD])
        if choice is Choice.DISCARD:
            return self._discard()

        try:
            self._tokens = await self.presenter.wait(self.reader.read(self.url))
        except (FetchError, AnnotationError) as e:
            warning(f"[SESSION] Analysis failed for {self.url}: {e}")
            self.presenter.report_failure(str(e))
            self.result.outcome = SessionOutcome.FAILED
            self.result.error = str(e)
            return SessionState.TERMINAL

        corpus = self.context.corpus
        corpus.upsert_document(self.url, self._tokens)
        await self._persist()

        self.result.keywords = corpus.keywords_for(self._tokens, self.keyword_count)
        self._signature = build_feature_signature(corpus, self._tokens, keyword_count=self.keyword_count)
        return SessionState.DOCUMENT_ANALYZED

    async def _on_document_analyzed(self) -> SessionState:
        self.presenter.show_keywords(self.result.keywords)
        return SessionState.AWAITING_JUDGMENT

    async def _on_awaiting_judgment(self) -> SessionState:
        options = [Choice.GOOD, Choice.BAD]
        if self.result.guess is None:
            options.append(Choice.GUESS)

        choice = await self._choose(Question.JUDGMENT, options)

        if choice is Choice.GUESS:
            self.result.guess = self._guess()
            return SessionState.GUESS_SHOWN

        label = 1 if choice is Choice.GOOD else 0
        await self._learn(label)
        return SessionState.TERMINAL

    async def _on_guess_shown(self) -> SessionState:
        self.presenter.show_guess(self.result.guess)
        return SessionState.AWAITING_JUDGMENT

    # =========================================================================
    # Actions
    # =========================================================================

    def _discard(self) -> SessionState:
        self.result.outcome = SessionOutcome.DISCARDED
        return SessionState.TERMINAL

    def _guess(self) -> Guess:
        if not self.context.can_guess():
            debug_log(
                f"[SESSION] No guess: {self.context.corpus.training_example_count} "
                f"training examples < {self.context.min_training_examples}"
            )
            return Guess.INSUFFICIENT_DATA

        prediction = self.context.classifier.predict(self._signature)
        return Guess.GOOD if prediction == 1 else Guess.BAD

    async def _learn(self, label: int):
        """Train on the judgment, log it, and persist."""
        self.context.classifier.train_one(self._signature, label)
        self.context.corpus.register_training_example(self._signature, label)
        self.result.outcome = SessionOutcome.JUDGED
        self.result.label = label
        info(f"[SESSION] Judged {self.url} as {'good' if label == 1 else 'bad'}")
        await self._persist()

    async def _persist(self):
        """Persist the corpus, reporting (not raising) a failure."""
        try:
            await asyncio.to_thread(self.context.corpus.persist)
        except PersistenceError as e:
            error(f"[SESSION] {e}")
            self.presenter.report_failure(str(e))
