from fastapi import APIRouter

from carlens.api.endpoints import auth, cars, health

# Create API router
api_router = APIRouter()

# Paths are kept at the root: /signup, /login, /upload, /images, ...
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(cars.router, tags=["cars"])
api_router.include_router(health.router, tags=["health"])
