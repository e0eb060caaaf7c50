"""
Document reading: URL -> filtered term tokens.
"""

from .document_reader import DocumentReader, extract_body_text, remove_unwanted_parts

__all__ = [
    'DocumentReader',
    'extract_body_text',
    'remove_unwanted_parts',
]
