"""
Utility Modules for Interest Guesser

This package provides shared helper functions used across the application.
Logging lives in src/logging_config.py.
"""

from .text_utils import ellipsis

__all__ = [
    'ellipsis',
]
