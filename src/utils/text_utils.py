"""
Text Utility Functions

Common text helpers used by the terminal presenter.
"""


def ellipsis(text: str, length: int) -> str:
    """
    Shorten text to at most `length` characters, ending with "...".

    Lengths of 3 or less leave the text untouched, since nothing but the
    dots would fit.

    Example:
        >>> ellipsis("https://example.com/a/very/long/path", 20)
        'https://example.c...'
    """
    if length <= 3 or len(text) <= length:
        return text
    return text[:length - 3] + "..."
