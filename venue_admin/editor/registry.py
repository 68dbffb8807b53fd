# venue_admin/editor/registry.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple, Type

from venue_admin.core.exceptions import NotFoundError
from venue_admin.models import Base, Beach, Club, Event, LiveShow, Lounge, Post, Pub, Restaurant, SubscriptionPlan
from venue_admin.models.user import UserRole
from .fields import EntitySchema

ADMIN_ONLY = (UserRole.ADMIN.value,)


@dataclass(frozen=True)
class EntityDefinition:
    name: str
    schema: EntitySchema
    model: Type[Base]
    search_fields: Tuple[str, ...]
    flags: Tuple[str, ...] = ()
    owner_field: Optional[str] = None
    creator_field: Optional[str] = None
    roles: Tuple[str, ...] = ADMIN_ONLY
    label: str = ""
    # columns maintained elsewhere, shown but never edited
    read_only: Tuple[str, ...] = ()

    @property
    def cache_key(self) -> str:
        return f"admin-{self.name.replace('_', '-')}"

    @property
    def title(self) -> str:
        return self.label or self.schema.label


def _venue_schema(name: str, folder: str) -> EntitySchema:
    return (
        EntitySchema(name)
        .string("name", required=True)
        .text("description", required=True)
        .string("location", required=True)
        .image("cover_image", folder=folder, placeholder="Upload cover image or enter URL")
        .image("logo_url", folder=f"{folder}/logos", placeholder="Upload logo or enter URL")
        .string("phone", max_length=50)
        .email("email")
        .url("website")
        .string("price_range", max_length=20)
        .tags("amenities")
        .boolean("is_active", default=True)
        .boolean("is_featured")
    )


CLUBS = EntityDefinition(
    name="clubs",
    schema=(
        EntitySchema("clubs")
        .image("logo_url", folder="clubs", placeholder="Upload club logo or enter URL")
        .string("name", required=True, label="Club name")
        .text("description", required=True, label="Club description")
    ),
    model=Club,
    search_fields=("name",),
)

EVENTS = EntityDefinition(
    name="events",
    schema=(
        EntitySchema("events")
        .string("title", required=True, label="Event title")
        .text("description")
        .string("location")
        .integer("club_id", required=True, min_value=1, label="Club")
        .datetime("start_date", required=True, label="Start date & time")
        .datetime("end_date", label="End date & time")
        .image("cover_image", folder="events", placeholder="Upload event image or enter URL")
        .boolean("is_featured")
    ),
    model=Event,
    search_fields=("title", "description", "location"),
    flags=("is_featured",),
    creator_field="created_by",
)

RESTAURANTS = EntityDefinition(
    name="restaurants",
    schema=(
        _venue_schema("restaurants", "restaurants")
        .tags("cuisine_types")
        .boolean("has_delivery")
        .boolean("has_takeout")
        .boolean("has_reservations")
    ),
    model=Restaurant,
    search_fields=("name", "location", "description"),
    flags=("is_active", "is_featured"),
    creator_field="created_by",
)

LOUNGES = EntityDefinition(
    name="lounges",
    schema=_venue_schema("lounges", "lounges"),
    model=Lounge,
    search_fields=("name", "location", "description"),
    flags=("is_active", "is_featured"),
)

PUBS = EntityDefinition(
    name="pubs",
    schema=(
        _venue_schema("pubs", "pubs")
        .tags("cuisine_types")
        .boolean("has_live_music")
        .boolean("has_sports_viewing")
    ),
    model=Pub,
    search_fields=("name", "location", "description"),
    flags=("is_active", "is_featured"),
)

BEACHES = EntityDefinition(
    name="beaches",
    schema=(
        _venue_schema("beaches", "beaches")
        .string("beach_type", max_length=50)
        .tags("water_activities")
        .boolean("has_lifeguard")
        .boolean("has_restaurant")
        .boolean("has_parking")
        .string("entry_fee", max_length=50)
    ),
    model=Beach,
    search_fields=("name", "location", "description"),
    flags=("is_active", "is_featured"),
)

LIVE_SHOWS = EntityDefinition(
    name="live_shows",
    schema=(
        EntitySchema("live_shows", label="Live Shows")
        .string("title", required=True)
        .text("description")
        .string("performer_name", required=True)
        .string("venue_name", required=True)
        .string("location")
        .date("show_date")
        .time("show_time")
        .integer("duration_minutes", min_value=0)
        .image("cover_image", folder="live-shows")
        .tags("genre")
        .decimal("ticket_price_min", min_value=Decimal("0"))
        .decimal("ticket_price_max", min_value=Decimal("0"))
        .url("ticket_url")
        .integer("capacity", min_value=0)
        .integer("age_restriction", min_value=0)
        .boolean("is_active", default=True)
        .boolean("is_featured")
    ),
    model=LiveShow,
    search_fields=("title", "performer_name", "venue_name"),
    flags=("is_active", "is_featured"),
)

POSTS = EntityDefinition(
    name="posts",
    schema=(
        EntitySchema("posts")
        .text("content", required=True)
        .image("image_url", folder="posts", placeholder="Add a photo to your post")
    ),
    model=Post,
    search_fields=("content",),
    owner_field="user_id",
    roles=(UserRole.ADMIN.value, UserRole.BLOGGER.value),
    read_only=("like_count", "comment_count"),
)

SUBSCRIPTION_PLANS = EntityDefinition(
    name="subscription_plans",
    schema=(
        EntitySchema("subscription_plans", label="Subscription Plans")
        .string("name", required=True)
        .text("description")
        .decimal("price_monthly", required=True, min_value=Decimal("0"))
        .decimal("price_yearly", min_value=Decimal("0"))
        .integer("tier_level", min_value=0)
        .tags("benefits")
        .boolean("is_active", default=True)
    ),
    model=SubscriptionPlan,
    search_fields=("name", "description"),
    flags=("is_active",),
)

REGISTRY: Dict[str, EntityDefinition] = {
    d.name: d for d in (
        CLUBS, EVENTS, RESTAURANTS, LOUNGES, PUBS, BEACHES, LIVE_SHOWS, POSTS, SUBSCRIPTION_PLANS
    )
}


def get_definition(name: str) -> EntityDefinition:
    try:
        return REGISTRY[name]
    except KeyError:
        raise NotFoundError(f"Unknown entity: {name}")
