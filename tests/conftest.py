from __future__ import annotations

from pathlib import Path

import pytest

from app.core.config import Settings

from .support import make_settings, open_ledger


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path / "wallet.db")


@pytest.fixture()
def ledger(settings: Settings):
    """Factory opening a ledger on the test database; use inside ``asyncio.run``."""
    return lambda: open_ledger(settings)
