"""
Establishment repository - venue storage queries used by the nearby engine,
public submissions, moderation and provider imports.
"""
from typing import Optional, List, Dict, Any

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.geo import BoundingBox
from app.core.validation import WILDCARD_CATEGORY
from app.models.establishment import Establishment
from app.schemas.establishment import EstablishmentCreate


class EstablishmentRepository:
    """Venue CRUD and range queries over the establishments table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_candidates(
        self,
        box: BoundingBox,
        origin_lat: float,
        origin_lng: float,
        category: str = WILDCARD_CATEGORY,
        limit: int = 2000,
    ) -> List[Establishment]:
        """
        Published venues inside a bounding box

        Rows are ordered by a cheap L1 degree distance so that the cap keeps
        the closest candidates instead of an arbitrary subset.

        Args:
            box: Bounding box prefilter (indexed range comparisons)
            origin_lat: Origin latitude used for ordering
            origin_lng: Origin longitude used for ordering
            category: Exact category tag, or the wildcard
            limit: Maximum number of rows fetched

        Returns:
            Candidate establishments, not yet distance-filtered
        """
        stmt = select(Establishment).where(
            Establishment.published.is_(True),
            Establishment.lat >= box.min_lat,
            Establishment.lat <= box.max_lat,
            Establishment.lng >= box.min_lng,
            Establishment.lng <= box.max_lng,
        )
        if category and category != WILDCARD_CATEGORY:
            stmt = stmt.where(Establishment.category == category)

        stmt = stmt.order_by(
            func.abs(Establishment.lat - origin_lat) + func.abs(Establishment.lng - origin_lng)
        ).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get(self, establishment_id: str) -> Optional[Establishment]:
        stmt = select(Establishment).where(Establishment.id == establishment_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        data: EstablishmentCreate,
        published: bool,
        owner_user_id: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> Establishment:
        """
        Insert a venue

        Args:
            data: Validated venue fields
            published: Whether the venue is visible immediately
            owner_user_id: Submitting account, if any
            provider: Provenance tag (manual, submission)

        Returns:
            Created establishment
        """
        establishment = Establishment(
            name=data.name,
            category=data.category,
            address=data.address or None,
            commune=data.commune or None,
            phone=data.phone or None,
            description=data.description or None,
            photos=list(data.photos) or None,
            lat=data.lat,
            lng=data.lng,
            owner_user_id=owner_user_id,
            provider=provider,
            provider_place_id=None,
            published=published,
        )
        self.db.add(establishment)
        await self.db.commit()
        await self.db.refresh(establishment)
        return establishment

    async def list_pending(self, limit: int = 200) -> List[Establishment]:
        stmt = (
            select(Establishment)
            .where(Establishment.published.is_(False))
            .order_by(Establishment.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def approve(self, establishment_id: str) -> bool:
        stmt = (
            update(Establishment)
            .where(Establishment.id == establishment_id)
            .values(published=True)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount > 0

    async def reject(self, establishment_id: str) -> bool:
        stmt = delete(Establishment).where(Establishment.id == establishment_id)
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount > 0

    async def upsert_provider_place(
        self,
        provider: str,
        provider_place_id: str,
        fields: Dict[str, Any],
    ) -> str:
        """
        Insert or update a venue imported from an external places provider

        Args:
            provider: Provider name (e.g. google)
            provider_place_id: Provider's stable place id
            fields: Column values to write

        Returns:
            Id of the inserted or updated establishment
        """
        stmt = select(Establishment).where(
            Establishment.provider == provider,
            Establishment.provider_place_id == provider_place_id,
        )
        result = await self.db.execute(stmt)
        establishment = result.scalar_one_or_none()

        if establishment is None:
            establishment = Establishment(
                provider=provider,
                provider_place_id=provider_place_id,
                **fields,
            )
            self.db.add(establishment)
        else:
            for field, value in fields.items():
                setattr(establishment, field, value)

        await self.db.flush()
        return establishment.id
