# venue_admin/core/admin.py
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from fastapi import Request
from venue_admin.core.security import verify_password
from venue_admin.core.config import settings
from venue_admin.repositories.user_repository import UserRepository
from venue_admin.core.database import db_helper
from venue_admin.models import (
    Beach, Club, Event, LiveShow, Lounge, Post, Pub, Restaurant, SubscriptionPlan, User, UserRole,
)


class AdminAuth(AuthenticationBackend):
    """Back office login: admins only, session cookie signed with the JWT secret"""
    async def login(self, request: Request) -> bool:
        form = await request.form()
        email, password = form.get("username", ""), form.get("password", "")

        async with db_helper.session_factory() as session:
            user = await UserRepository(session).get_by_email(str(email))

        if user and verify_password(str(password), user.password_hash) and user.role == UserRole.ADMIN.value:
            request.session.update({"user_id": user.id})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("user_id") is not None


authentication_backend = AdminAuth(secret_key=settings.security.JWT_SECRET_KEY.get_secret_value())


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.full_name, User.role, User.created_at]
    column_searchable_list = [User.email]
    column_sortable_list = [User.id, User.created_at]
    form_excluded_columns = [User.password_hash, User.posts]
    icon = "fa-solid fa-user"


class ClubAdmin(ModelView, model=Club):
    column_list = [Club.id, Club.name, Club.logo_url, Club.created_at]
    column_searchable_list = [Club.name]
    icon = "fa-solid fa-people-group"


class EventAdmin(ModelView, model=Event):
    column_list = [Event.id, Event.title, Event.club, Event.start_date, Event.is_featured]
    column_searchable_list = [Event.title, Event.location]
    form_excluded_columns = [Event.creator]
    icon = "fa-solid fa-calendar-days"


# ARRAY columns are edited through the API tag editor, not sqladmin forms
class RestaurantAdmin(ModelView, model=Restaurant):
    column_list = [Restaurant.id, Restaurant.name, Restaurant.location, Restaurant.is_active, Restaurant.is_featured]
    column_searchable_list = [Restaurant.name, Restaurant.location]
    form_excluded_columns = [Restaurant.amenities, Restaurant.cuisine_types, Restaurant.creator]
    icon = "fa-solid fa-utensils"


class LoungeAdmin(ModelView, model=Lounge):
    column_list = [Lounge.id, Lounge.name, Lounge.location, Lounge.is_active, Lounge.is_featured]
    column_searchable_list = [Lounge.name, Lounge.location]
    form_excluded_columns = [Lounge.amenities]
    icon = "fa-solid fa-martini-glass"


class PubAdmin(ModelView, model=Pub):
    column_list = [Pub.id, Pub.name, Pub.location, Pub.is_active, Pub.is_featured]
    column_searchable_list = [Pub.name, Pub.location]
    form_excluded_columns = [Pub.amenities, Pub.cuisine_types]
    icon = "fa-solid fa-beer-mug-empty"


class BeachAdmin(ModelView, model=Beach):
    column_list = [Beach.id, Beach.name, Beach.location, Beach.beach_type, Beach.is_active]
    column_searchable_list = [Beach.name, Beach.location]
    form_excluded_columns = [Beach.amenities, Beach.water_activities]
    icon = "fa-solid fa-umbrella-beach"


class LiveShowAdmin(ModelView, model=LiveShow):
    column_list = [LiveShow.id, LiveShow.title, LiveShow.performer_name, LiveShow.show_date, LiveShow.is_active]
    column_searchable_list = [LiveShow.title, LiveShow.performer_name]
    form_excluded_columns = [LiveShow.genre]
    icon = "fa-solid fa-microphone"


class PostAdmin(ModelView, model=Post):
    column_list = [Post.id, Post.author, Post.like_count, Post.created_at]
    icon = "fa-solid fa-newspaper"


class SubscriptionPlanAdmin(ModelView, model=SubscriptionPlan):
    column_list = [SubscriptionPlan.id, SubscriptionPlan.name, SubscriptionPlan.price_monthly, SubscriptionPlan.is_active]
    form_excluded_columns = [SubscriptionPlan.benefits]
    icon = "fa-solid fa-crown"


def setup_admin(app, engine):
    admin = Admin(app, engine, authentication_backend=authentication_backend, title=f"{settings.app_name} Back Office")

    admin.add_view(UserAdmin)
    admin.add_view(ClubAdmin)
    admin.add_view(EventAdmin)
    admin.add_view(RestaurantAdmin)
    admin.add_view(LoungeAdmin)
    admin.add_view(PubAdmin)
    admin.add_view(BeachAdmin)
    admin.add_view(LiveShowAdmin)
    admin.add_view(PostAdmin)
    admin.add_view(SubscriptionPlanAdmin)
