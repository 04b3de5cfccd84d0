"""Description normalization ahead of string comparison."""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[\W_]+")


def normalize_description(description: str | None) -> str:
    """Normalize a transaction description for similarity comparison.

    Lowercases, strips diacritics (NFD decomposition with combining marks
    removed), collapses every run of non-alphanumeric characters to a single
    space and trims the result.
    """
    if not description:
        return ""

    # 1. Lowercase
    s = description.lower()

    # 2. Canonical decomposition, then drop the combining marks
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))

    # 3. Punctuation and whitespace runs become one space
    s = _NON_ALNUM.sub(" ", s)

    return s.strip()
