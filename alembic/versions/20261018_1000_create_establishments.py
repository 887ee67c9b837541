"""create establishments table

Revision ID: 20261018_1000_create_establishments
Revises:
Create Date: 2026-10-18 10:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261018_1000_create_establishments'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'establishments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('category', sa.String(64), nullable=False, index=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('commune', sa.String(80), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=True),
        sa.Column('lat', sa.Float(), nullable=False),
        sa.Column('lng', sa.Float(), nullable=False),
        sa.Column('owner_user_id', sa.String(64), nullable=True, index=True),
        sa.Column('provider', sa.String(32), nullable=True),
        sa.Column('provider_place_id', sa.String(255), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('provider', 'provider_place_id', name='uq_establishments_provider_place'),
    )
    op.create_index(
        'ix_establishments_published_lat_lng',
        'establishments',
        ['published', 'lat', 'lng'],
    )

def downgrade() -> None:
    op.drop_index('ix_establishments_published_lat_lng', table_name='establishments')
    op.drop_table('establishments')
