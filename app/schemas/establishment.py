import math
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, Field, HttpUrl, field_validator

from app.schemas.base import CamelModel

# Validated as an http(s) URL, stored and served as plain text
PhotoUrl = Annotated[HttpUrl, AfterValidator(str)]


class EstablishmentRead(CamelModel):
    id: str
    name: str
    category: str
    address: str | None = None
    commune: str | None = None
    phone: str | None = None
    description: str | None = None
    photos: list[str] = Field(default_factory=list)
    lat: float
    lng: float
    published: bool
    created_at: datetime | None = None

    @field_validator('photos', mode='before')
    @classmethod
    def none_photos_as_empty(cls, v):
        return v or []


class NearbyEstablishment(EstablishmentRead):
    distance_meters: float


class NearbyResponse(CamelModel):
    establishments: list[NearbyEstablishment]


class EstablishmentResponse(CamelModel):
    establishment: EstablishmentRead


class EstablishmentCreate(CamelModel):
    name: str = Field(min_length=2, max_length=120)
    category: str = Field(min_length=2, max_length=40)
    address: Optional[str] = Field(default=None, max_length=200)
    commune: Optional[str] = Field(default=None, max_length=80)
    phone: Optional[str] = Field(default=None, max_length=30)
    description: Optional[str] = Field(default=None, max_length=500)
    photos: list[PhotoUrl] = Field(default_factory=list, max_length=10)
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)

    @field_validator('lat', 'lng')
    @classmethod
    def finite_coordinate(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be finite")
        return v


class PendingEstablishment(EstablishmentRead):
    owner_user_id: str | None = None


class PendingListResponse(CamelModel):
    establishments: list[PendingEstablishment]


class ImportNearbyRequest(CamelModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    radius_meters: int = Field(default=3000, ge=100, le=50000)
    types: list[str] = Field(min_length=1, max_length=10)


class ImportNearbyResponse(CamelModel):
    ok: bool = True
    scanned: int
    upserted: int
    ids: list[str]
