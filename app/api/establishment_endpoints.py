"""
Establishment API endpoints - nearby search, venue detail and submissions
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import (
    ServiceContainer,
    get_proximity_service,
    get_service_container,
    require_user_id,
)
from app.core.exceptions import NotFoundError, StorageUnavailableError
from app.schemas.establishment import (
    EstablishmentCreate,
    EstablishmentRead,
    EstablishmentResponse,
    NearbyResponse,
)
from app.services.establishment_repository import EstablishmentRepository
from app.services.proximity_service import ProximityService

router = APIRouter(prefix="/api/establishments", tags=["establishments"])

NEARBY_CACHE_CONTROL = "public, max-age=10, s-maxage=30, stale-while-revalidate=60"


@router.get("", response_model=NearbyResponse)
async def nearby_establishments(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius_km: Optional[str] = Query(None, alias="radiusKm"),
    category: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    if_none_match: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    proximity: ProximityService = Depends(get_proximity_service),
):
    """
    Published establishments around a point, nearest first

    - **lat**, **lng**: Search origin (required)
    - **radiusKm**: Search radius, clamped to 1..50 (default 10)
    - **category**: Exact category tag or "all"
    - **q**: Case-insensitive text filter on name, address, commune, category
    - **limit**: Max results (default 500, or 1500 above 10 km; max 5000)
    """
    result = await proximity.query_nearby(db, lat, lng, radius_km, category, q, limit)

    headers = {
        "Cache-Control": NEARBY_CACHE_CONTROL,
        "ETag": result.etag,
        "X-Cache": "HIT" if result.cache_hit else "MISS",
    }
    if if_none_match and if_none_match == result.etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    return Response(content=result.body, media_type="application/json", headers=headers)


@router.get("/{establishment_id}", response_model=EstablishmentResponse)
async def get_establishment(
    establishment_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Get one published establishment
    """
    try:
        establishment = await EstablishmentRepository(db).get(establishment_id)
    except SQLAlchemyError as e:
        raise StorageUnavailableError("get_establishment") from e

    if establishment is None or not establishment.published:
        raise NotFoundError("Establishment", establishment_id)

    return EstablishmentResponse(establishment=EstablishmentRead.model_validate(establishment))


@router.post("", response_model=EstablishmentResponse, status_code=status.HTTP_201_CREATED)
async def create_establishment(
    data: EstablishmentCreate,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Create an establishment owned by the caller; visible immediately
    """
    try:
        establishment = await EstablishmentRepository(db).create(
            data, published=True, owner_user_id=user_id, provider="manual"
        )
    except SQLAlchemyError as e:
        raise StorageUnavailableError("create_establishment") from e

    container.invalidate_nearby()
    return EstablishmentResponse(establishment=EstablishmentRead.model_validate(establishment))


@router.post(
    "/submissions",
    response_model=EstablishmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_establishment(
    data: EstablishmentCreate,
    x_user_id: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Propose an establishment; stays pending until an admin approves it
    """
    try:
        establishment = await EstablishmentRepository(db).create(
            data, published=False, owner_user_id=x_user_id or None, provider="submission"
        )
    except SQLAlchemyError as e:
        raise StorageUnavailableError("submit_establishment") from e

    container.invalidate_nearby()
    return EstablishmentResponse(establishment=EstablishmentRead.model_validate(establishment))
