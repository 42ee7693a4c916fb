"""Wallet domain specific exceptions."""


class WalletError(Exception):
    """Base class for wallet domain errors."""


class WalletNotFoundError(WalletError):
    """Raised when the requested wallet does not exist."""


class InsufficientFundsError(WalletError):
    """Raised when a withdrawal exceeds the current balance."""


class InvalidAmountError(WalletError):
    """Raised when an amount is not a positive 64-bit integer."""


class InvalidOperationTypeError(WalletError):
    """Raised when the operation type is neither DEPOSIT nor WITHDRAW."""


class OperationTypeNotSpecifiedError(WalletError):
    """Raised when the operation type is missing or blank."""


class InvalidWalletIdError(WalletError):
    """Raised when a wallet id is not a valid, non-nil UUID."""


class WalletStorageError(WalletError):
    """Raised when the store fails for a reason other than a missing wallet."""
