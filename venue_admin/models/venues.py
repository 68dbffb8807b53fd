# venue_admin/models/venues.py
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Text, Numeric, Date, DateTime, Time
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Club(TimestampMixin, Base):
    __tablename__ = "clubs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    logo_url = Column(String(1024), nullable=True)

    def __str__(self):
        return self.name


class VenueMixin(TimestampMixin):
    """Columns shared by the listing-style venues (restaurants, lounges, pubs, beaches)"""
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    cover_image = Column(String(1024), nullable=True)
    logo_url = Column(String(1024), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String, nullable=True)
    website = Column(String(1024), nullable=True)
    price_range = Column(String(20), nullable=True)
    amenities = Column(ARRAY(String), nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    def __str__(self):
        return self.name


class Restaurant(VenueMixin, Base):
    __tablename__ = "restaurants"

    cuisine_types = Column(ARRAY(String), nullable=False, default=list)
    has_delivery = Column(Boolean, nullable=False, default=False)
    has_takeout = Column(Boolean, nullable=False, default=False)
    has_reservations = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    creator = relationship("User", foreign_keys=[created_by])


class Lounge(VenueMixin, Base):
    __tablename__ = "lounges"


class Pub(VenueMixin, Base):
    __tablename__ = "pubs"

    cuisine_types = Column(ARRAY(String), nullable=False, default=list)
    has_live_music = Column(Boolean, nullable=False, default=False)
    has_sports_viewing = Column(Boolean, nullable=False, default=False)


class Beach(VenueMixin, Base):
    __tablename__ = "beaches"

    beach_type = Column(String(50), nullable=True)
    water_activities = Column(ARRAY(String), nullable=False, default=list)
    has_lifeguard = Column(Boolean, nullable=False, default=False)
    has_restaurant = Column(Boolean, nullable=False, default=False)
    has_parking = Column(Boolean, nullable=False, default=False)
    entry_fee = Column(String(50), nullable=True)


class Event(TimestampMixin, Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    cover_image = Column(String(1024), nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    club = relationship("Club")
    creator = relationship("User", foreign_keys=[created_by])

    def __str__(self):
        return self.title


class LiveShow(TimestampMixin, Base):
    __tablename__ = "live_shows"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    performer_name = Column(String, nullable=False)
    venue_name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    show_date = Column(Date, nullable=True)
    show_time = Column(Time, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    cover_image = Column(String(1024), nullable=True)
    genre = Column(ARRAY(String), nullable=False, default=list)
    ticket_price_min = Column(Numeric(10, 2), nullable=True)
    ticket_price_max = Column(Numeric(10, 2), nullable=True)
    ticket_url = Column(String(1024), nullable=True)
    capacity = Column(Integer, nullable=True)
    age_restriction = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    def __str__(self):
        return f"{self.title} ({self.performer_name})"
