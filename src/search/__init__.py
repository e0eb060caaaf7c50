"""
Link source for the triage queue.
"""

from .search_engine import SearchEngine

__all__ = ['SearchEngine']
