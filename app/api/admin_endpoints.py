"""
Admin API endpoints - moderation queue and provider imports
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import (
    ServiceContainer,
    get_places_import,
    get_service_container,
    require_admin,
)
from app.core.exceptions import NotFoundError, StorageUnavailableError
from app.schemas.base import Message
from app.schemas.establishment import (
    ImportNearbyRequest,
    ImportNearbyResponse,
    PendingEstablishment,
    PendingListResponse,
)
from app.services.establishment_repository import EstablishmentRepository
from app.services.places_import import PlacesImportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/moderation/pending", response_model=PendingListResponse)
async def list_pending(
    limit: int = Query(200, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    """
    Submissions waiting for moderation, newest first
    """
    try:
        rows = await EstablishmentRepository(db).list_pending(limit)
    except SQLAlchemyError as e:
        raise StorageUnavailableError("list_pending") from e
    return PendingListResponse(establishments=[PendingEstablishment.model_validate(r) for r in rows])


@router.post("/establishments/{establishment_id}/approve", response_model=Message)
async def approve_establishment(
    establishment_id: str,
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Publish a pending establishment
    """
    try:
        updated = await EstablishmentRepository(db).approve(establishment_id)
    except SQLAlchemyError as e:
        raise StorageUnavailableError("approve_establishment") from e
    if not updated:
        raise NotFoundError("Establishment", establishment_id)

    container.invalidate_nearby()
    logger.info(f"Establishment {establishment_id} approved")
    return Message(message="approved")


@router.post("/establishments/{establishment_id}/reject", response_model=Message)
async def reject_establishment(
    establishment_id: str,
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Reject a submission; the row is deleted
    """
    try:
        deleted = await EstablishmentRepository(db).reject(establishment_id)
    except SQLAlchemyError as e:
        raise StorageUnavailableError("reject_establishment") from e
    if not deleted:
        raise NotFoundError("Establishment", establishment_id)

    container.invalidate_nearby()
    logger.info(f"Establishment {establishment_id} rejected")
    return Message(message="rejected")


@router.post("/import/google/nearby", response_model=ImportNearbyResponse)
async def import_google_nearby(
    request: ImportNearbyRequest,
    db: AsyncSession = Depends(get_db),
    importer: PlacesImportService = Depends(get_places_import),
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Import places around a point from Google Places

    - **types**: Google place types, each one of the supported set
    - **radiusMeters**: 100..50000 (default 3000)
    """
    result = await importer.import_nearby(db, request)
    container.invalidate_nearby()
    return result
