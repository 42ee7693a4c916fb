"""Wallet domain exports"""

from .exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidOperationTypeError,
    InvalidWalletIdError,
    OperationTypeNotSpecifiedError,
    WalletError,
    WalletNotFoundError,
    WalletStorageError,
)
from .models import DepositInput, Operation, OperationType, WithdrawInput
from .service import WalletService

__all__ = [
    "DepositInput",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidOperationTypeError",
    "InvalidWalletIdError",
    "Operation",
    "OperationType",
    "OperationTypeNotSpecifiedError",
    "WalletError",
    "WalletNotFoundError",
    "WalletService",
    "WalletStorageError",
    "WithdrawInput",
]
