"""Reusable FastAPI dependencies."""

from .wallet import get_app_container, get_wallet_service

__all__ = [
    "get_app_container",
    "get_wallet_service",
]
