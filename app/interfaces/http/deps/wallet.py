"""Wallet related dependency providers."""

from fastapi import Depends, Request

from app.core.container import ApplicationContainer
from app.modules.wallets import WalletService


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_wallet_service(container: ApplicationContainer = Depends(get_app_container)) -> WalletService:
    return container.wallet_service


__all__ = [
    "get_app_container",
    "get_wallet_service",
]
