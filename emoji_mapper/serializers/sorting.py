"""
Sort keys for the serialized mapping views.

Collation follows the Unicode Collation Algorithm (pyuca) so the order does
not depend on the process locale. The raw string is appended to every key so
strings that collate equal still come out in one fixed order.
"""

from functools import lru_cache
from typing import Tuple

import regex
from pyuca import Collator

# One visual emoji: modifier base with optional skin tone, an emoji with
# default emoji presentation, or any emoji forced to emoji presentation.
EMOJI_UNIT_PATTERN = regex.compile(
    r"\p{Emoji_Modifier_Base}\p{Emoji_Modifier}?|\p{Emoji_Presentation}|\p{Emoji}\uFE0F"
)


@lru_cache(maxsize=1)
def get_collator() -> Collator:
    """Shared collator; building the table is expensive."""
    return Collator()


def collation_key(text: str) -> Tuple[Tuple[int, ...], str]:
    """Locale-independent alphabetical sort key."""
    return (get_collator().sort_key(text), text)


def emoji_unit_count(text: str) -> int:
    """
    Number of emoji units in ``text``.

    "➕" and "👍🏽" count as 1, "📄➕" counts as 2, plain text counts as 0.
    """
    return len(EMOJI_UNIT_PATTERN.findall(text))


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units (astral characters count twice)."""
    return len(text.encode("utf-16-le")) // 2


def by_icon_key(item: Tuple[str, str]):
    """Sort (emoji, icon) pairs alphabetically by icon name, then emoji."""
    return (collation_key(item[1]), collation_key(item[0]))


def by_emoji_key(label: str):
    """Sort emoji keys by emoji unit count, then alphabetically."""
    return (emoji_unit_count(label), collation_key(label))


def by_length_key(label: str):
    """Sort tie keys by raw length, then alphabetically."""
    return (utf16_length(label), collation_key(label))
