from __future__ import annotations

import re
import unicodedata

# Combining Diacritical Marks block; covers the accents used in Portuguese
# (á à â ã é ê í ó ô õ ú ü ç).
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize_text(text: str) -> str:
    """Lower-case, strip accents and trim ``text`` into its comparison form."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return _COMBINING_MARKS.sub("", decomposed).strip()
