"""events pubs beaches

Revision ID: 8d3f6a21c4e7
Revises: 5b1e0c7d2a94
Create Date: 2026-10-19 12:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "8d3f6a21c4e7"
down_revision: Union[str, Sequence[str], None] = "5b1e0c7d2a94"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
    ]


def _venue_columns():
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("cover_image", sa.String(length=1024), nullable=True),
        sa.Column("logo_url", sa.String(length=1024), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("website", sa.String(length=1024), nullable=True),
        sa.Column("price_range", sa.String(length=20), nullable=True),
        sa.Column("amenities", postgresql.ARRAY(sa.String()), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cover_image", sa.String(length=1024), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], name=op.f("fk_events_club_id_clubs"), ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], name=op.f("fk_events_created_by_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_events")),
    )
    op.create_index(op.f("ix_events_id"), "events", ["id"], unique=False)
    op.create_index(op.f("ix_events_club_id"), "events", ["club_id"], unique=False)

    op.create_table(
        "pubs",
        *_venue_columns(),
        sa.Column("cuisine_types", postgresql.ARRAY(sa.String()), nullable=False),
        sa.Column("has_live_music", sa.Boolean(), nullable=False),
        sa.Column("has_sports_viewing", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_pubs")),
    )
    op.create_index(op.f("ix_pubs_id"), "pubs", ["id"], unique=False)

    op.create_table(
        "beaches",
        *_venue_columns(),
        sa.Column("beach_type", sa.String(length=50), nullable=True),
        sa.Column("water_activities", postgresql.ARRAY(sa.String()), nullable=False),
        sa.Column("has_lifeguard", sa.Boolean(), nullable=False),
        sa.Column("has_restaurant", sa.Boolean(), nullable=False),
        sa.Column("has_parking", sa.Boolean(), nullable=False),
        sa.Column("entry_fee", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_beaches")),
    )
    op.create_index(op.f("ix_beaches_id"), "beaches", ["id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_beaches_id"), table_name="beaches")
    op.drop_table("beaches")
    op.drop_index(op.f("ix_pubs_id"), table_name="pubs")
    op.drop_table("pubs")
    op.drop_index(op.f("ix_events_club_id"), table_name="events")
    op.drop_index(op.f("ix_events_id"), table_name="events")
    op.drop_table("events")
