"""
Link Triage Package

Sequences the interactive fetch -> keywords -> guess/judgment -> learn ->
persist cycle for a queue of candidate links.

Main Components:
- TriageContext: corpus store + classifier with load/close lifecycle
- LinkSession: per-link state machine
- run_queue: strictly sequential queue driver
- collaborators: abstract reader/presenter interfaces and shared enums

Usage:
    with TriageContext.load(REPOSITORY_FILE) as context:
        results = await run_queue(
            links,
            lambda link: LinkSession(link, context, presenter, reader),
        )
"""

from .collaborators import (
    BaseDocumentReader,
    BasePresenter,
    Choice,
    Guess,
    Link,
    Question,
)
from .context import TriageContext
from .session import LinkSession, SessionOutcome, SessionResult, SessionState
from .queue_driver import run_queue

__all__ = [
    'BaseDocumentReader',
    'BasePresenter',
    'Choice',
    'Guess',
    'Link',
    'Question',
    'TriageContext',
    'LinkSession',
    'SessionOutcome',
    'SessionResult',
    'SessionState',
    'run_queue',
]
