"""Shared fixtures for WalletScan tests."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.data.transaction import TransactionRecord

SUBJECT = "0xAbC0000000000000000000000000000000000001"
OTHER = "0x00000000000000000000000000000000000000b2"
WEI = 10 ** 18
DAY = 86400
# 2024-03-15T12:00:00Z
BASE_TS = 1710504000


def to_wei(amount) -> int:
    return int(Decimal(str(amount)) * WEI)


@pytest.fixture
def make_tx():
    """Factory for TransactionRecord objects with sensible defaults."""
    counter = {"n": 0}

    def _make(
        value="0",
        from_address=OTHER,
        to_address=SUBJECT,
        fee=None,
        gas_used=21000,
        gas_price=0,
        timestamp=BASE_TS,
        is_error=False,
    ):
        counter["n"] += 1
        if fee is not None:
            # fee expressed in native units, charged as gas_used=1
            gas_used, gas_price = 1, to_wei(fee)
        return TransactionRecord(
            hash=f"0x{counter['n']:064x}",
            from_address=from_address,
            to_address=to_address,
            value_wei=to_wei(value),
            gas_used=gas_used,
            gas_price=gas_price,
            timestamp=timestamp,
            is_error=is_error,
        )

    return _make


def mock_response(status=200, payload=None, text=""):
    """Build an async context manager yielding a mocked aiohttp response."""
    resp = AsyncMock()
    resp.status = status
    resp.json = AsyncMock(return_value=payload)
    resp.text = AsyncMock(return_value=text)

    ctx = AsyncMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


def mock_session(*responses):
    """Build a mocked ClientSession whose get() yields the given responses in order."""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    session.get = MagicMock(side_effect=list(responses))
    return session


@pytest.fixture
def explorer_config():
    return {"timeout": 5, "retry_attempts": 3, "retry_backoff": 0}


@pytest.fixture
def price_config():
    return {"api_url": "https://api.coingecko.test/api/v3", "asset_id": "ethereum", "api_key": None}
