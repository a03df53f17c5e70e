"""
Small string helpers shared by the formatting passes.
"""

# Horizontal whitespace inside a line
SPACES = " \t"
# Any whitespace the segmenter can leave in a literal
WHITESPACE = " \t\n"


def is_blank(text: str) -> bool:
    """True if the text holds nothing but spaces, tabs and newlines."""
    return all(c in WHITESPACE for c in text)


def start_pos(text: str, tag: str) -> int:
    """
    Finds the start of tag after leading spaces/tabs.

    Returns:
        int: index of the tag, or -1 if the text does not start with it.
    """
    i = len(text) - len(text.lstrip(SPACES))
    return i if text.startswith(tag, i) else -1


def end_pos(text: str, tag: str) -> int:
    """
    Finds the tag at the end of the text, before trailing whitespace.

    Returns:
        int: index of the tag start, or -1 if the text does not end with it.
    """
    stripped = text.rstrip(WHITESPACE)
    if stripped.endswith(tag):
        return len(stripped) - len(tag)
    return -1


def leading_spaces(text: str) -> str:
    """Returns the run of spaces/tabs at the start of the text."""
    return text[:len(text) - len(text.lstrip(SPACES))]
