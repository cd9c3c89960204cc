"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from app.api.endpoints import admin, students

api_router = APIRouter()

api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Students"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)
