"""Alphabetic sort keys for display names"""

import unicodedata
from typing import Tuple

from pyuca import Collator

_collator = Collator()


def collation_key(name: str) -> Tuple[int, ...]:
    """
    Sort key for bank/card names using the Unicode Collation Algorithm.

    Accented Latin letters sort with their base letter ("Ärzte" before
    "Zeta"), case is a tertiary difference, and hiragana/katakana interleave
    by reading ("イオン" before "ゆうちょ"). NFKC first folds full-width and
    half-width forms onto their canonical characters.
    """
    return _collator.sort_key(unicodedata.normalize("NFKC", name))
