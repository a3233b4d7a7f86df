from .dish import (
    DISH_CATEGORIES,
    DISH_TAGS,
    ApprovalState,
    CatalogEntry,
    DishCreateRequest,
    DishIdResponse,
    DishSearchResponse,
    DishSuggestionRequest,
    DishUpdateRequest,
    TopDishesResponse,
    VoteDirection,
    VoteRequest,
    VoteResult,
)
from .menu import (
    MealJSON,
    MenuDayJSON,
    MenuItem,
    MenuUploadRequest,
    MenuUploadResponse,
    MenuUploadResult,
    ProcessedMeal,
    ProcessedMenu,
    StoredMenu,
)

__all__ = [
    "DISH_CATEGORIES",
    "DISH_TAGS",
    "ApprovalState",
    "CatalogEntry",
    "DishCreateRequest",
    "DishIdResponse",
    "DishSearchResponse",
    "DishSuggestionRequest",
    "DishUpdateRequest",
    "TopDishesResponse",
    "VoteDirection",
    "VoteRequest",
    "VoteResult",
    "MealJSON",
    "MenuDayJSON",
    "MenuItem",
    "MenuUploadRequest",
    "MenuUploadResponse",
    "MenuUploadResult",
    "ProcessedMeal",
    "ProcessedMenu",
    "StoredMenu",
]
