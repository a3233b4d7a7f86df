from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from infrastructure.document_store import DocumentNotFoundError
from routers.dependencies import get_catalog_service, get_search_service
from schemas import (
    ApprovalState,
    CatalogEntry,
    DishCreateRequest,
    DishIdResponse,
    DishSearchResponse,
    DishSuggestionRequest,
    DishUpdateRequest,
    TopDishesResponse,
    VoteRequest,
    VoteResult,
)
from services.catalog import DishCatalogService
from services.search import DishSearchService

router = APIRouter()


@router.get("/dishes/search", summary="Search dishes by name", response_model=DishSearchResponse)
async def search_dishes(
    q: str = Query(..., description="Free-text dish name or fragment"),
    tags: Optional[List[str]] = Query(None, description="Only dishes carrying all of these tags"),
    include_all_states: bool = Query(False, description="Include pending and rejected dishes"),
    service: DishSearchService = Depends(get_search_service),
) -> DishSearchResponse:
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query cannot be empty")

    result = await service.search_with_path(q, tags=tags, include_all_states=include_all_states)
    return DishSearchResponse(query=q, path=result.path.value, results=result.entries)


@router.get("/dishes/by-tags", summary="List dishes carrying all tags", response_model=List[CatalogEntry])
async def dishes_by_tags(
    tags: List[str] = Query(..., description="Required tags"),
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> List[CatalogEntry]:
    return await catalog.get_dishes_by_tags(tags)


@router.get("/dishes/top", summary="Most voted dishes", response_model=TopDishesResponse)
async def top_dishes(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=30),
    tags: Optional[List[str]] = Query(None, description="Only dishes carrying all of these tags"),
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> TopDishesResponse:
    dishes, has_more = await catalog.get_top_dishes(page, page_size, tags)
    return TopDishesResponse(dishes=dishes, page=page, page_size=page_size, has_more=has_more)


@router.get("/dishes/pending", summary="List dish suggestions awaiting review", response_model=List[CatalogEntry])
async def pending_dishes(
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> List[CatalogEntry]:
    return await catalog.list_dishes_by_state(ApprovalState.PENDING)


@router.post("/dishes", summary="Create an approved dish", response_model=DishIdResponse)
async def create_dish(
    request: DishCreateRequest,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        dish_id = await catalog.create_dish(
            request.name,
            image_url=request.image_url,
            category=request.category,
            tags=request.tags,
            image_provider_nickname=request.image_provider_nickname,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DishIdResponse(id=dish_id)


@router.post("/dishes/suggestions", summary="Suggest a dish for review", response_model=DishIdResponse)
async def suggest_dish(
    request: DishSuggestionRequest,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        dish_id = await catalog.submit_dish_suggestion(
            request.name,
            requested_by=request.requested_by,
            image_url=request.image_url,
            category=request.category,
            tags=request.tags,
            nickname=request.nickname,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DishIdResponse(id=dish_id)


@router.get("/dishes/{dish_id}", summary="Fetch a dish", response_model=CatalogEntry)
async def get_dish(
    dish_id: str,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> CatalogEntry:
    entry = await catalog.get_dish(dish_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return entry


@router.patch("/dishes/{dish_id}", summary="Update or rename a dish", response_model=DishIdResponse)
async def update_dish(
    dish_id: str,
    request: DishUpdateRequest,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        await catalog.update_dish(dish_id, **updates)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DishIdResponse(id=dish_id)


@router.post("/dishes/{dish_id}/reindex", summary="Rebuild a dish's search tokens", response_model=DishIdResponse)
async def reindex_dish(
    dish_id: str,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        await catalog.reindex_dish(dish_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc
    return DishIdResponse(id=dish_id)


@router.post("/dishes/{dish_id}/vote", summary="Vote a dish up or down", response_model=VoteResult)
async def vote_dish(
    dish_id: str,
    request: VoteRequest,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> VoteResult:
    try:
        return await catalog.vote_dish(dish_id, request.vote, request.previous)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc


@router.post("/dishes/{dish_id}/approve", summary="Approve a suggested dish", response_model=DishIdResponse)
async def approve_dish(
    dish_id: str,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        await catalog.approve_dish(dish_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc
    return DishIdResponse(id=dish_id)


@router.post("/dishes/{dish_id}/reject", summary="Reject a suggested dish", response_model=DishIdResponse)
async def reject_dish(
    dish_id: str,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        await catalog.reject_dish(dish_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc
    return DishIdResponse(id=dish_id)


@router.delete("/dishes/{dish_id}", summary="Delete a dish", response_model=DishIdResponse)
async def delete_dish(
    dish_id: str,
    catalog: DishCatalogService = Depends(get_catalog_service),
) -> DishIdResponse:
    try:
        await catalog.delete_dish(dish_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Dish not found") from exc
    return DishIdResponse(id=dish_id)
