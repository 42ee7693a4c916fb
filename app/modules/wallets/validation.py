"""Validation of raw request fields before they reach the wallet service."""

from __future__ import annotations

import re
import uuid
from typing import Any

from .exceptions import (
    InvalidAmountError,
    InvalidOperationTypeError,
    InvalidWalletIdError,
    OperationTypeNotSpecifiedError,
)
from .models import OperationType

# balances and amounts are stored as signed 64-bit integers
MAX_AMOUNT = 2**63 - 1

_HEX_UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
# canonical, urn:uuid:, braced or bare 32-digit hex; no surrounding whitespace
_WALLET_ID_PATTERN = re.compile(
    rf"{_HEX_UUID}|urn:uuid:{_HEX_UUID}|\{{{_HEX_UUID}\}}|[0-9a-f]{{32}}",
    re.IGNORECASE,
)


def parse_operation_type(value: Any) -> OperationType:
    """Surrounding whitespace is ignored, case is not."""
    if value is None:
        raise OperationTypeNotSpecifiedError("operation type not specified")
    if not isinstance(value, str):
        raise InvalidOperationTypeError(repr(value))

    value = value.strip()
    if not value:
        raise OperationTypeNotSpecifiedError("operation type not specified")
    try:
        return OperationType(value)
    except ValueError as exc:
        raise InvalidOperationTypeError(value) from exc


def validate_amount(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(repr(value))
    if value <= 0 or value > MAX_AMOUNT:
        raise InvalidAmountError(str(value))
    return value


def parse_wallet_id(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        wallet_id = value
    elif isinstance(value, str):
        if _WALLET_ID_PATTERN.fullmatch(value) is None:
            raise InvalidWalletIdError(repr(value))
        wallet_id = uuid.UUID(value)
    else:
        raise InvalidWalletIdError(repr(value))

    if wallet_id.int == 0:
        raise InvalidWalletIdError(str(wallet_id))
    return wallet_id
