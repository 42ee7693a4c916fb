"""
Provision a wallet for local testing.

Usage: python init_wallet.py [--id UUID] [--balance N]
"""
import argparse
import asyncio
import uuid

from app.core.config import get_settings
from app.core.container import ApplicationContainer
from app.core.logging import configure_logging
from app.infrastructure.database.session import init_db
from app.modules.wallets import InvalidWalletIdError, WalletNotFoundError
from app.modules.wallets.validation import parse_wallet_id


async def create_wallet(wallet_id: uuid.UUID | None, balance: int) -> uuid.UUID:
    settings = get_settings()
    container = ApplicationContainer.from_settings(settings)
    try:
        await init_db(container.engine)

        repository = container.wallet_repository
        if wallet_id is not None:
            try:
                await repository.get_balance(wallet_id)
            except WalletNotFoundError:
                pass
            else:
                print(f"wallet already exists: {wallet_id}")
                return wallet_id

        return await container.transactions.run_in_transaction(
            lambda: repository.create_wallet(wallet_id, balance)
        )
    finally:
        await container.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a wallet")
    parser.add_argument("--id", dest="wallet_id", default=None, help="wallet UUID (random when omitted)")
    parser.add_argument("--balance", type=int, default=0, help="initial balance in minor units")
    args = parser.parse_args()

    if args.balance < 0:
        parser.error("--balance must not be negative")
    try:
        wallet_id = parse_wallet_id(args.wallet_id) if args.wallet_id else None
    except InvalidWalletIdError:
        parser.error(f"--id is not a valid wallet id: {args.wallet_id}")

    configure_logging(get_settings().log_level)
    created = asyncio.run(create_wallet(wallet_id, args.balance))
    print(f"wallet ready: {created}")


if __name__ == "__main__":
    main()
