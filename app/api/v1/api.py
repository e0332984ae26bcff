from fastapi import APIRouter

from app.api.v1.routes import users, challenge_config, challenges, badges

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(challenge_config.router)
api_router.include_router(challenges.router)
api_router.include_router(badges.router)
