from .dish_catalog_service import DishCatalogService

__all__ = ["DishCatalogService"]
