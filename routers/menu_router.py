from __future__ import annotations

import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException

from infrastructure.document_store import DocumentStoreError
from routers.dependencies import get_menu_ingestion_service
from schemas import MenuUploadRequest, MenuUploadResponse, StoredMenu
from services.ingestion import MenuIngestionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/admin/menus/upload",
    summary="Upload daily menus and link their dishes",
    response_model=MenuUploadResponse,
)
async def upload_menu(
    request: MenuUploadRequest,
    service: MenuIngestionService = Depends(get_menu_ingestion_service),
) -> MenuUploadResponse:
    try:
        processed = await service.process_menu_upload(request.days())
        if not processed:
            raise HTTPException(status_code=400, detail="No valid menus to process.")
        results = await service.save_menus(processed)
    except DocumentStoreError as exc:
        logger.error("Menu upload failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Menu upload failed: {exc}") from exc

    return MenuUploadResponse(
        success=True,
        message=f"Successfully processed {len(results)} menu(s)",
        results=results,
    )


@router.get("/menus/{menu_date}", summary="Fetch the menu for a day", response_model=StoredMenu)
async def get_menu(
    menu_date: datetime.date,
    service: MenuIngestionService = Depends(get_menu_ingestion_service),
) -> StoredMenu:
    menu = await service.get_menu(menu_date)
    if menu is None:
        raise HTTPException(status_code=404, detail="No menu for this date")
    return menu
