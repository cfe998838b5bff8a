"""
Text utility functions.
"""


def normalize_title(title: str) -> str:
    """
    Normalize a topic title by trimming leading and trailing whitespace.

    Args:
        title: The title to normalize

    Returns:
        Trimmed title (possibly empty)
    """
    if not title:
        return ""
    return title.strip()
