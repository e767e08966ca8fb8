from fastapi import APIRouter

from app.api.endpoints import auth, health, locations, posts, users, weather

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(weather.router, prefix="/weather", tags=["weather"])
