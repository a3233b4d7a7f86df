from .dish_resolver import DishMatch, DishResolver
from .menu_ingestion_service import MenuIngestionService, format_menu_date, parse_menu_date
from .resolution_cache import ResolutionCache, ResolutionCacheEntry, get_shared_resolution_cache

__all__ = [
    "DishMatch",
    "DishResolver",
    "MenuIngestionService",
    "ResolutionCache",
    "ResolutionCacheEntry",
    "format_menu_date",
    "get_shared_resolution_cache",
    "parse_menu_date",
]
