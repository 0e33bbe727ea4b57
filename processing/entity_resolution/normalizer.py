"""
Name normalization for cross-form matching.

Produces the comparison key used everywhere names from different forms are
compared: "CO₂ Zero", "co2-zero" and "Cõ2 Zero!" all become "co2 zero".
"""

import re
import unicodedata
from typing import Optional

# Superscript and subscript digits -> ASCII
_DIGIT_GLYPHS = str.maketrans(
    "⁰¹²³⁴⁵⁶⁷⁸⁹₀₁₂₃₄₅₆₇₈₉",
    "01234567890123456789",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(text: Optional[str]) -> str:
    """
    Normalize a display name into a comparison key.

    - Superscript/subscript digits folded to ASCII
    - Unicode canonical decomposition, combining marks dropped
    - Case folded
    - Runs of anything but [a-z0-9] collapsed to one space, then trimmed

    Never raises; None or "" gives "". Idempotent.
    """
    if not text:
        return ""

    folded = str(text).translate(_DIGIT_GLYPHS)
    decomposed = unicodedata.normalize("NFKD", folded)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    lowered = stripped.casefold()

    return _NON_ALNUM.sub(" ", lowered).strip()
