"""
Text layout helpers shared by all formatters.

Indentation, line joining and the fixed single-line vs. multi-line heuristics.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Iterable, Sequence

NEWLINE = "\n"
INDENT = 2

# Layout thresholds
MAX_INLINE_ITEMS = 10
MAX_INLINE_WIDTH = 30


# Methods --------------------------------------------------------------------------------------------------------------


def indent_lines(text: str, by: int = INDENT) -> str:
    """
    Prefix every line of text with `by` spaces.

    Examples:
        >>> indent_lines("a = 1\\nb = 2")
        '  a = 1\\n  b = 2'
    """
    pad = " " * by
    return NEWLINE.join(pad + line for line in text.split(NEWLINE))


def join_lines(lines: Iterable[str]) -> str:
    return NEWLINE.join(lines)


def is_multiline(text: str) -> bool:
    return NEWLINE in text


def items_need_multiline(items: Sequence[str]) -> bool:
    """
    Decide the layout of a formatted item sequence when no preference is set.

    Multi-line for more than MAX_INLINE_ITEMS items, for several items when any
    is wider than MAX_INLINE_WIDTH, or when any item already spans lines.
    """
    if len(items) > MAX_INLINE_ITEMS:
        return True
    if len(items) > 1 and any(len(i) > MAX_INLINE_WIDTH for i in items):
        return True
    return any(is_multiline(i) for i in items)


def lines_need_multiline(lines: Iterable[str]) -> bool:
    """Decide the layout of member lines: any line wider than MAX_INLINE_WIDTH or spanning lines."""
    return any(len(s) > MAX_INLINE_WIDTH or is_multiline(s) for s in lines)
