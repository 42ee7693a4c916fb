"""Wallet ledger endpoints: deposit/withdraw and balance lookup."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from app.interfaces.http.deps import get_wallet_service
from app.modules.wallets import DepositInput, OperationType, WalletService, WithdrawInput
from app.modules.wallets.validation import parse_operation_type, parse_wallet_id, validate_amount
from app.schemas import WalletBalanceResponse, WalletOperationRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/wallet", status_code=status.HTTP_200_OK, summary="Deposit to or withdraw from a wallet")
async def apply_operation(
    payload: WalletOperationRequest,
    wallet_service: WalletService = Depends(get_wallet_service),
) -> Response:
    operation_type = parse_operation_type(payload.operation_type)
    amount = validate_amount(payload.amount)
    wallet_id = parse_wallet_id(payload.wallet_id)

    logger.info("processing %s wallet=%s amount=%d", operation_type.value, wallet_id, amount)
    if operation_type is OperationType.DEPOSIT:
        await wallet_service.deposit(DepositInput(wallet_id=wallet_id, amount=amount))
    else:
        await wallet_service.withdraw(WithdrawInput(wallet_id=wallet_id, amount=amount))
    return Response(status_code=status.HTTP_200_OK)


@router.get("/wallets/{wallet_id}", response_model=WalletBalanceResponse, summary="Get wallet balance")
async def get_balance(
    wallet_id: str,
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletBalanceResponse:
    parsed_id = parse_wallet_id(wallet_id)
    balance = await wallet_service.balance(parsed_id)
    return WalletBalanceResponse(wallet_id=parsed_id, balance=balance)
