from __future__ import annotations

import datetime
import logging
import re
from typing import Dict, List, Optional, Sequence

from config import settings
from infrastructure.document_store import DocumentStoreGateway, StoredDocument
from schemas.menu import (
    MealJSON,
    MenuDayJSON,
    MenuItem,
    MenuUploadResult,
    ProcessedMeal,
    ProcessedMenu,
    StoredMenu,
)
from services.catalog.dish_catalog_service import DishCatalogService
from services.ingestion.dish_resolver import DishResolver
from services.search.normalizer import normalize_text

logger = logging.getLogger(__name__)

_MENU_DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_MENU_DATE_FORMAT = "%d/%m/%Y"


def parse_menu_date(value: str) -> Optional[datetime.date]:
    """Parse a DD/MM/YYYY menu date, returning ``None`` when it is invalid."""
    if not value or not _MENU_DATE_PATTERN.match(value):
        return None
    try:
        return datetime.datetime.strptime(value, _MENU_DATE_FORMAT).date()
    except ValueError:
        return None


def format_menu_date(value: datetime.date) -> str:
    return value.strftime(_MENU_DATE_FORMAT)


class MenuIngestionService:
    """Turn uploaded menus into stored menus linked to catalog dishes.

    Items are resolved one at a time so a dish created for an earlier item is
    known to later items of the same upload.
    """

    def __init__(
        self,
        store: DocumentStoreGateway,
        resolver: DishResolver,
        catalog: DishCatalogService,
        *,
        collection: str = settings.MENUS_COLLECTION,
    ):
        self.store = store
        self.resolver = resolver
        self.catalog = catalog
        self.collection = collection

    async def upload(self, days: Sequence[MenuDayJSON]) -> List[MenuUploadResult]:
        processed = await self.process_menu_upload(days)
        if not processed:
            return []
        return await self.save_menus(processed)

    async def process_menu_upload(self, days: Sequence[MenuDayJSON]) -> List[ProcessedMenu]:
        created_in_batch: Dict[str, str] = {}
        processed: List[ProcessedMenu] = []

        for day in days:
            menu_date = parse_menu_date(day.date)
            if menu_date is None:
                logger.warning("Invalid date format: %s. Expected DD/MM/YYYY", day.date)
                continue

            lunch = await self._process_meal(day.lunch, created_in_batch)

            dinner: Optional[ProcessedMeal] = None
            if day.dinner is not None and day.dinner.has_content():
                dinner = await self._process_meal(day.dinner, created_in_batch)
                if not dinner.has_dishes():
                    dinner = None

            processed.append(ProcessedMenu(date=menu_date, lunch=lunch, dinner=dinner))

        return processed

    async def _process_meal(self, meal: MealJSON, created_in_batch: Dict[str, str]) -> ProcessedMeal:
        items: Dict[str, MenuItem] = {}

        for category, dish_name in meal.items_by_category().items():
            if not dish_name.strip():
                items[category] = MenuItem(dish_name="")
                continue

            match = await self.resolver.resolve(dish_name)
            if match is not None:
                logger.info("Linked menu item %r to dish %s (%s)", dish_name, match.id, match.name)
                items[category] = MenuItem(dish_id=match.id, dish_name=match.name)
                continue

            normalized = normalize_text(dish_name)
            dish_id = created_in_batch.get(normalized)
            if dish_id is None:
                dish_id = await self.catalog.create_dish_from_menu_item(dish_name, category)
                created_in_batch[normalized] = dish_id
                logger.info("Created dish %s for menu item %r", dish_id, dish_name)
            items[category] = MenuItem(dish_id=dish_id, dish_name=dish_name.strip())

        soup = None
        if meal.soup and meal.soup.strip():
            soup = MenuItem(dish_name=meal.soup.strip())

        return ProcessedMeal(items=items, soup=soup)

    async def get_menu_by_date(self, menu_date: datetime.date) -> Optional[StoredDocument]:
        documents = await self.store.query_by_exact_field(
            self.collection,
            "date",
            menu_date.isoformat(),
            limit=1,
        )
        return documents[0] if documents else None

    async def get_menu(self, menu_date: datetime.date) -> Optional[StoredMenu]:
        document = await self.get_menu_by_date(menu_date)
        return StoredMenu.from_document(document) if document else None

    async def save_menus(self, menus: Sequence[ProcessedMenu]) -> List[MenuUploadResult]:
        results: List[MenuUploadResult] = []
        for menu in menus:
            now = datetime.datetime.now(datetime.timezone.utc).isoformat()
            payload = {
                "lunch": menu.lunch.model_dump(),
                "dinner": menu.dinner.model_dump() if menu.dinner else None,
                "updated_at": now,
            }

            existing = await self.get_menu_by_date(menu.date)
            if existing is not None:
                await self.store.update_document(self.collection, existing.id, payload)
                results.append(
                    MenuUploadResult(date=format_menu_date(menu.date), action="updated", id=existing.id)
                )
                continue

            menu_id = await self.store.create_document(
                self.collection,
                {"date": menu.date.isoformat(), "created_at": now, **payload},
            )
            results.append(MenuUploadResult(date=format_menu_date(menu.date), action="created", id=menu_id))
        return results
