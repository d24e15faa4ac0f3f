"""
Common utility functions and helpers.
"""
import re


def count_words(text: str) -> int:
    """
    Count whitespace-delimited, non-empty tokens.

    Args:
        text: Text to count

    Returns:
        Number of words
    """
    return len([word for word in re.split(r"\s+", text) if word])


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
