from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from schemas.dish import DISH_CATEGORIES

if TYPE_CHECKING:
    from infrastructure.document_store import StoredDocument


class MealJSON(BaseModel):
    """One meal as uploaded by the admin: a free-text dish name per category."""

    model_config = ConfigDict(populate_by_name=True)

    chef_suggestion: Optional[str] = Field(None, alias="Sugestão do Chefe")
    mediterranean_diet: Optional[str] = Field(None, alias="Dieta Mediterrânica")
    alternative: Optional[str] = Field(None, alias="Alternativa")
    vegetarian: Optional[str] = Field(None, alias="Vegetariana")
    soup: Optional[str] = Field(None, validation_alias=AliasChoices("Sopa", "soup"))

    def items_by_category(self) -> Dict[str, str]:
        values = (
            self.chef_suggestion,
            self.mediterranean_diet,
            self.alternative,
            self.vegetarian,
        )
        return {category: value or "" for category, value in zip(DISH_CATEGORIES, values)}

    def has_content(self) -> bool:
        return any(value.strip() for value in self.items_by_category().values()) or bool(
            self.soup and self.soup.strip()
        )


class MenuDayJSON(BaseModel):
    date: str = Field(..., description="Menu date formatted DD/MM/YYYY")
    lunch: MealJSON
    dinner: Optional[MealJSON] = None


class MenuUploadRequest(BaseModel):
    menu_data: Union[List[MenuDayJSON], MenuDayJSON]

    def days(self) -> List[MenuDayJSON]:
        if isinstance(self.menu_data, list):
            return self.menu_data
        return [self.menu_data]


class MenuItem(BaseModel):
    dish_name: str
    dish_id: Optional[str] = None


class ProcessedMeal(BaseModel):
    items: Dict[str, MenuItem] = Field(default_factory=dict)
    soup: Optional[MenuItem] = None

    def has_dishes(self) -> bool:
        return any(item.dish_name.strip() for item in self.items.values()) or bool(
            self.soup and self.soup.dish_name.strip()
        )


class ProcessedMenu(BaseModel):
    date: datetime.date
    lunch: ProcessedMeal
    dinner: Optional[ProcessedMeal] = None


class MenuUploadResult(BaseModel):
    date: str = Field(..., description="Menu date formatted DD/MM/YYYY")
    action: Literal["created", "updated"]
    id: str


class MenuUploadResponse(BaseModel):
    success: bool
    message: str
    results: List[MenuUploadResult] = Field(default_factory=list)


class StoredMenu(BaseModel):
    id: str
    date: datetime.date
    lunch: ProcessedMeal
    dinner: Optional[ProcessedMeal] = None

    @classmethod
    def from_document(cls, document: "StoredDocument") -> "StoredMenu":
        data = document.fields
        return cls(
            id=document.id,
            date=data.get("date"),
            lunch=data.get("lunch") or {},
            dinner=data.get("dinner"),
        )
