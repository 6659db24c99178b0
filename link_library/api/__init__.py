from fastapi import APIRouter

from link_library.api.v1 import auth, links, users

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(links.router)
api_router.include_router(users.router)

__all__ = ["api_router"]
