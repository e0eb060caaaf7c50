"""
Queue Driver: runs one link session after another.

Sessions never overlap; there is a single user answering prompts. Entries
without an href are skipped without starting a session. An unexpected error
in one session is logged and the queue moves on to the next link.
"""

from collections.abc import Callable, Iterable

from src.logging_config import debug_log, error, info
from src.triage.collaborators import Link
from src.triage.session import LinkSession, SessionResult

SessionFactory = Callable[[Link], LinkSession]


async def run_queue(links: Iterable[Link], session_factory: SessionFactory) -> list[SessionResult]:
    """
    Triage every link in order.

    Args:
        links: Candidate links, in display order
        session_factory: Builds the session for one link

    Returns:
        Results of the sessions that ran to completion, in queue order
    """
    results = []
    skipped = 0
    failed = 0

    for position, link in enumerate(links, start=1):
        if link.href is None:
            debug_log(f"[QUEUE] Skipping #{position} '{link.title}': no href")
            skipped += 1
            continue

        try:
            session = session_factory(link)
            results.append(await session.run())
        except EOFError:
            # Input is gone; no later session could be answered either
            raise
        except Exception as e:
            error(f"[QUEUE] Session for {link.href} crashed: {e}", exc_info=True)
            failed += 1

    info(f"[QUEUE] Finished: {len(results)} sessions, {skipped} skipped, {failed} crashed")
    return results
