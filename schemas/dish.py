from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from infrastructure.document_store import StoredDocument


DISH_CATEGORIES = (
    "Sugestão do Chefe",
    "Dieta Mediterrânica",
    "Alternativa",
    "Vegetariana",
)

DISH_TAGS = (
    "#porco",
    "#beef",
    "#frango",
    "#peixe",
    "#salada",
    "#sopa",
    "#sobremesa",
    "#vegetariano",
    "#vegano",
    "#picante",
    "#gluten-free",
    "#lactose-free",
)


class ApprovalState(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CatalogEntry(BaseModel):
    id: str = Field(..., description="Store-assigned dish identifier")
    name: str = Field(..., description="Display name, may contain accents")
    image_url: str = Field("", description="Primary image; empty when the dish has none")
    category: Optional[str] = Field(None, description="Menu category the dish was first listed under")
    tags: List[str] = Field(default_factory=list)
    approval_state: ApprovalState = ApprovalState.APPROVED
    image_provider_nickname: Optional[str] = None
    requested_by: Optional[str] = None
    thumbs_up: int = 0
    thumbs_down: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url and self.image_url.strip())

    @classmethod
    def from_document(cls, document: "StoredDocument") -> "CatalogEntry":
        data = document.fields
        # Documents written before moderation existed carry no state and are
        # treated as unreviewed.
        state = data.get("approval_state") or ApprovalState.PENDING.value
        return cls(
            id=document.id,
            name=data.get("name") or "",
            image_url=data.get("image_url") or "",
            category=data.get("category"),
            tags=list(data.get("tags") or []),
            approval_state=ApprovalState(state),
            image_provider_nickname=data.get("image_provider_nickname"),
            requested_by=data.get("requested_by"),
            thumbs_up=data.get("thumbs_up") or 0,
            thumbs_down=data.get("thumbs_down") or 0,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


class DishCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Dish name")
    image_url: str = Field("", description="Primary image URL")
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_provider_nickname: Optional[str] = None


class DishUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    image_provider_nickname: Optional[str] = None


class DishSuggestionRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Suggested dish name")
    image_url: str = ""
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    requested_by: str = Field(..., min_length=1, description="Anonymous client identifier")
    nickname: Optional[str] = None


class DishSearchResponse(BaseModel):
    query: str
    path: Literal["tokens", "name_prefix", "failed", "skipped"] = Field(
        ..., description="Which candidate fetch produced the results"
    )
    results: List[CatalogEntry] = Field(default_factory=list)


class DishIdResponse(BaseModel):
    id: str


class VoteDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class VoteRequest(BaseModel):
    vote: VoteDirection
    previous: Optional[VoteDirection] = Field(
        None, description="The vote this client cast earlier on the dish, if any"
    )


class VoteResult(BaseModel):
    id: str
    thumbs_up: int
    thumbs_down: int
    vote: Optional[VoteDirection] = Field(
        None, description="The client's vote after this call; None when it was withdrawn"
    )


class TopDishesResponse(BaseModel):
    dishes: List[CatalogEntry] = Field(default_factory=list)
    page: int
    page_size: int
    has_more: bool
