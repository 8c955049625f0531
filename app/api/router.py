from fastapi import APIRouter
from app.api.routes.auth import router as auth_router
from app.api.routes.cars import router as cars_router
from app.api.routes.rentals import router as rentals_router
from app.api.routes.users import router as users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(cars_router)
api_router.include_router(rentals_router)
api_router.include_router(users_router)
