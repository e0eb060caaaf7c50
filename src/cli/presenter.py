"""
Terminal Presenter

Handles input and output of the interactive triage: the banner, numbered
option menus (re-prompting until a valid number is entered), link and
keyword display, and a spinner while slow work is awaited.

Input is read with input() in a worker thread so the event loop keeps
running the spinner and any pending I/O.
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable, Sequence
from typing import TextIO, TypeVar

from src.config import LINK_DISPLAY_WIDTH
from src.relevance.tfidf import Keyword
from src.triage.collaborators import BasePresenter, Choice, Guess, Link, Question
from src.utils import ellipsis

T = TypeVar('T')

TERMS = {
    'SEARCH-WHAT': "Search for what?",
    'SEARCHING': "Searching...",
    'LOADING': "Loading the document database...",
    'ANALYZE-PHASE': "Found! Now it's time to analyze the links...",
    'NO-LINKS': "No links to analyze.",
    'FINISHED': "That's all for this search.",
    'LINK-OPTIONS-TEXT': "What should I do with this link?",
    'LINK-OPTIONS-OPEN': "Open the link on browser",
    'LINK-OPTIONS-PASS': "Discard this link",
    'DOCUMENT-OPTIONS-TEXT': "What should I do with this document?",
    'DOCUMENT-OPTIONS-OPEN': "Analyze",
    'DOCUMENT-OPTIONS-PASS': "Discard this document",
    'FOUND-KEYWORDS': "Top keywords to this document, according to our document database:",
    'NO-KEYWORDS': "(no distinctive keywords yet)",
    'ANALYZE-OPTIONS-TEXT': "Is this an interesting document?",
    'ANALYZE-OPTIONS-GOOD': "Of course yes!",
    'ANALYZE-OPTIONS-BAD': "Hell no!",
    'ANALYZE-OPTIONS-GUESS': "I doubt you can guess it!",
    'GUESS-GOOD': "I guess it's an interesting document",
    'GUESS-BAD': "I guess this document is so boring",
    'GUESS-NOTHING': "Me too. I haven't sufficient data to guess!",
    'FAILURE': "Skipping this link:",
}

QUESTION_TERMS = {
    Question.LINK: 'LINK-OPTIONS-TEXT',
    Question.DOCUMENT: 'DOCUMENT-OPTIONS-TEXT',
    Question.JUDGMENT: 'ANALYZE-OPTIONS-TEXT',
}

OPTION_TERMS = {
    (Question.LINK, Choice.OPEN): 'LINK-OPTIONS-OPEN',
    (Question.LINK, Choice.DISCARD): 'LINK-OPTIONS-PASS',
    (Question.DOCUMENT, Choice.ANALYZE): 'DOCUMENT-OPTIONS-OPEN',
    (Question.DOCUMENT, Choice.DISCARD): 'DOCUMENT-OPTIONS-PASS',
    (Question.JUDGMENT, Choice.GOOD): 'ANALYZE-OPTIONS-GOOD',
    (Question.JUDGMENT, Choice.BAD): 'ANALYZE-OPTIONS-BAD',
    (Question.JUDGMENT, Choice.GUESS): 'ANALYZE-OPTIONS-GUESS',
}

GUESS_TERMS = {
    Guess.GOOD: 'GUESS-GOOD',
    Guess.BAD: 'GUESS-BAD',
    Guess.INSUFFICIENT_DATA: 'GUESS-NOTHING',
}

BANNER = [
    "      ___   __    _  _______  _______  ______    _______  _______  _______      ",
    "     |   | |  |  | ||       ||       ||    _ |  |       ||       ||       |     ",
    "     |   | |   |_| ||_     _||    ___||   | ||  |    ___||  _____||_     _|     ",
    "     |   | |       |  |   |  |   |___ |   |_||_ |   |___ | |_____   |   |       ",
    "     |   | |  _    |  |   |  |    ___||    __  ||    ___||_____  |  |   |       ",
    "     |   | | | |   |  |   |  |   |___ |   |  | ||   |___  _____| |  |   |       ",
    "     |___| |_|  |__|  |___|  |_______||___|  |_||_______||_______|  |___|       ",
    "        _______  __   __  _______  _______  _______  _______  ______            ",
    "       |       ||  | |  ||       ||       ||       ||       ||    _ |           ",
    "       |    ___||  | |  ||    ___||  _____||  _____||    ___||   | ||           ",
    "       |   | __ |  |_|  ||   |___ | |_____ | |_____ |   |___ |   |_||_          ",
    "       |   ||  ||       ||    ___||_____  ||_____  ||    ___||    __  |         ",
    "       |   |_| ||       ||   |___  _____| | _____| ||   |___ |   |  | |         ",
    "       |_______||_______||_______||_______||_______||_______||___|  |_|         ",
]

SPINNER_FRAMES = "-\\|/"


class TerminalPresenter(BasePresenter):
    """
    Console implementation of the presenter.

    Args:
        input_fn: Reads one line given a prompt (input() by default)
        output: Stream to write to (sys.stdout by default)
        spinner_interval: Seconds between spinner frames
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
        spinner_interval: float = 0.1,
    ):
        self.input_fn = input_fn
        self.output = output or sys.stdout
        self.spinner_interval = spinner_interval

    def _print(self, text: str = ""):
        print(text, file=self.output, flush=True)

    def banner(self):
        """Print the application banner."""
        self._print("\n".join(BANNER))

    def show(self, term: str):
        """Print a message from TERMS, preceded by a blank line."""
        self._print()
        self._print(TERMS[term])

    async def read_line(self, prompt: str = ": ") -> str:
        return await asyncio.to_thread(self.input_fn, prompt)

    async def ask_search_terms(self) -> str:
        self.show('SEARCH-WHAT')
        return (await self.read_line("> ")).strip()

    async def ask(self, question: Question, options: Sequence[Choice]) -> int:
        """Show a numbered menu until the user enters a listed number."""
        while True:
            self.show(QUESTION_TERMS[question])
            for number, choice in enumerate(options, start=1):
                self._print(f" {number}) {TERMS[OPTION_TERMS[(question, choice)]]}")

            answer = (await self.read_line(": ")).strip()
            if answer.isdecimal() and 1 <= int(answer) <= len(options):
                return int(answer) - 1

    def show_link(self, link: Link):
        self._print()
        self._print("=" * LINK_DISPLAY_WIDTH + "\n")
        self._print(link.title)
        self._print(ellipsis(link.href or "", LINK_DISPLAY_WIDTH))

    def show_keywords(self, keywords: Sequence[Keyword]):
        self.show('FOUND-KEYWORDS')
        if keywords:
            self._print(", ".join(keyword.word for keyword in keywords))
        else:
            self._print(TERMS['NO-KEYWORDS'])

    def show_guess(self, guess: Guess):
        self.show(GUESS_TERMS[guess])

    def report_failure(self, message: str):
        self._print(f"{TERMS['FAILURE']} {message}")

    async def wait(self, work: Awaitable[T]) -> T:
        """Await `work` while drawing a spinner on the current line."""
        spinner = asyncio.create_task(self._spin())
        try:
            return await work
        finally:
            spinner.cancel()
            try:
                await spinner
            except asyncio.CancelledError:
                pass
            self.output.write("\r \r")
            self.output.flush()

    async def _spin(self):
        index = 0
        while True:
            self.output.write(SPINNER_FRAMES[index] + "\r")
            self.output.flush()
            index = (index + 1) % len(SPINNER_FRAMES)
            await asyncio.sleep(self.spinner_interval)
