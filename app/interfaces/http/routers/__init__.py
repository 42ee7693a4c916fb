from fastapi import APIRouter

from app.interfaces.http.routers import wallets


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(wallets.router, tags=["wallets"])
    return router


__all__ = [
    "create_api_router",
]
