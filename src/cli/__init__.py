"""
Terminal user interface.
"""

from .presenter import TERMS, TerminalPresenter

__all__ = ['TERMS', 'TerminalPresenter']
