from __future__ import annotations

from itertools import combinations
from typing import FrozenSet, List

from services.search.normalizer import normalize_text

# Portuguese articles/prepositions skipped when pairing significant words.
CONNECTOR_WORDS = frozenset(
    {"de", "com", "e", "ao", "a", "à", "do", "da", "dos", "das", "em", "no", "na"}
)

MAX_SUFFIX_DROP = 3
MIN_SUFFIX_LENGTH = 2


def _prefixes(word: str, start: int) -> List[str]:
    return [word[:end] for end in range(start, len(word) + 1)]


def generate_search_tokens(name: str) -> List[str]:
    """Expand ``name`` into the searchable tokens stored alongside a dish.

    Tokens are returned in generation order without duplicates: the full
    normalized name first, then per-word tokens, word pairs and triples,
    initials, connector-free combinations, and finally the accented
    lower-case variants. Callers that truncate the list keep the most
    specific tokens.
    """
    tokens: dict[str, None] = {}

    def add(token: str) -> None:
        if token:
            tokens.setdefault(token, None)

    normalized = normalize_text(name)
    add(normalized)

    words = normalized.split()

    for word in words:
        add(word)
        min_prefix = 2 if len(word) <= 4 else 3
        for prefix in _prefixes(word, min_prefix):
            add(prefix)
        if len(word) > 3:
            for drop in range(1, min(MAX_SUFFIX_DROP, len(word) - MIN_SUFFIX_LENGTH) + 1):
                add(word[drop:])

    for first, second in zip(words, words[1:]):
        bigram = f"{first} {second}"
        add(bigram)
        for prefix in _prefixes(bigram, 3):
            add(prefix)

    for first, second, third in zip(words, words[1:], words[2:]):
        add(f"{first} {second} {third}")

    if len(words) >= 2:
        initials = "".join(word[0] for word in words)
        if len(initials) >= 2:
            add(initials)

    significant = [word for word in words if word not in CONNECTOR_WORDS and len(word) > 1]
    for word in significant:
        for prefix in _prefixes(word, 2):
            add(prefix)
    for first, second in combinations(significant, 2):
        add(f"{first} {second}")

    for word in name.lower().split():
        add(word)
        for prefix in _prefixes(word, 2):
            add(prefix)

    original_lower = name.lower().strip()
    if original_lower != normalized:
        add(original_lower)

    return list(tokens)


def tokenize(name: str) -> FrozenSet[str]:
    """Unordered token set for ``name``."""
    return frozenset(generate_search_tokens(name))
