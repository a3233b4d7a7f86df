from .dish_search_service import CandidateFetch, DishSearchResult, DishSearchService, SearchPath
from .normalizer import normalize_text
from .ranking import rank_entries
from .tokenizer import generate_search_tokens, tokenize

__all__ = [
    "CandidateFetch",
    "DishSearchResult",
    "DishSearchService",
    "SearchPath",
    "normalize_text",
    "rank_entries",
    "generate_search_tokens",
    "tokenize",
]
