from fastapi import APIRouter
import app.api.v1.routes.plant_care as plant_care

api_router = APIRouter()

api_router.include_router(
    plant_care.router,
    prefix="",
    tags=["Plant Care"],
)
