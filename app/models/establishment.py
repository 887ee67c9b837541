import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.core.db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Establishment(Base):
    __tablename__ = "establishments"
    # Load server-side created_at right after insert
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        UniqueConstraint("provider", "provider_place_id", name="uq_establishments_provider_place"),
        Index("ix_establishments_published_lat_lng", "published", "lat", "lng"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    name = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)
    address = Column(Text, nullable=True)
    commune = Column(String(80), nullable=True)
    phone = Column(String(30), nullable=True)
    description = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)  # ordered list of URLs
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    owner_user_id = Column(String(64), nullable=True, index=True)
    provider = Column(String(32), nullable=True)  # google, manual, submission
    provider_place_id = Column(String(255), nullable=True)
    # Moderation gate: only published rows are visible to nearby queries
    published = Column(Boolean, nullable=False, default=False)
