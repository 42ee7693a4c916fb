"""Feature modules and their public exports."""

from . import wallets

__all__ = [
    "wallets",
]
