from fastapi import APIRouter
from venue_admin.api.v1.routes import auth
from .media import router as media_router
from .entities import entity_routers


api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(media_router)

for entity_router in entity_routers:
    api_router.include_router(entity_router)
