"""Tests for the explorer connector."""

from decimal import Decimal
from unittest.mock import patch

import aiohttp
import pytest

from config.settings import ScanTarget
from src.data.explorer_connector import ExplorerConnector
from src.exceptions import ExplorerError

from conftest import BASE_TS, OTHER, SUBJECT, mock_response, mock_session

TARGET = ScanTarget(network_key="8", network_name="Ethereum", api_url="https://eth.blockscout.test/api", address=SUBJECT)

SESSION_PATH = "src.data.explorer_connector.aiohttp.ClientSession"


def _tx(**overrides):
    tx = {
        "hash": "0x1",
        "from": OTHER,
        "to": SUBJECT,
        "value": "1000000000000000000",
        "gasUsed": "21000",
        "gasPrice": "1000000000",
        "timeStamp": str(BASE_TS),
        "isError": "0",
    }
    tx.update(overrides)
    return tx


@pytest.fixture
def connector(explorer_config, price_config):
    return ExplorerConnector(explorer_config, price_config)


class TestFetchTransactions:
    """Tests for fetch_transactions."""

    @pytest.mark.asyncio
    async def test_parses_result_list(self, connector):
        payload = {"status": "1", "message": "OK", "result": [_tx(), _tx(hash="0x2", isError="1")]}
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            records = await connector.fetch_transactions(TARGET)

        assert [r.hash for r in records] == ["0x1", "0x2"]
        assert records[0].value_native == Decimal(1)
        assert records[1].is_error
        session.get.assert_called_once_with(
            TARGET.api_url,
            params={"module": "account", "action": "txlist", "address": SUBJECT},
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_no_transactions_found_returns_empty(self, connector):
        payload = {"status": "0", "message": "No transactions found", "result": []}
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            assert await connector.fetch_transactions(TARGET) == []

    @pytest.mark.asyncio
    async def test_no_transactions_message_with_null_result(self, connector):
        payload = {"status": "0", "message": "No transactions found", "result": None}
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            assert await connector.fetch_transactions(TARGET) == []

    @pytest.mark.asyncio
    async def test_explorer_error_message_raises(self, connector):
        payload = {"status": "0", "message": "Invalid address format", "result": None}
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            with pytest.raises(ExplorerError, match="Invalid address format"):
                await connector.fetch_transactions(TARGET)

    @pytest.mark.asyncio
    async def test_skips_malformed_entries(self, connector):
        payload = {"status": "1", "message": "OK", "result": [_tx(), "garbage", None]}
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            records = await connector.fetch_transactions(TARGET)

        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, connector):
        payload = {"status": "1", "message": "OK", "result": [_tx()]}
        session = mock_session(
            mock_response(status=502, text="bad gateway"),
            aiohttp.ClientConnectionError("connection reset"),
            mock_response(payload=payload),
        )

        with patch(SESSION_PATH, return_value=session):
            records = await connector.fetch_transactions(TARGET)

        assert len(records) == 1
        assert session.get.call_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_retry_attempts(self, connector):
        session = mock_session(*[mock_response(status=500, text="oops") for _ in range(3)])

        with patch(SESSION_PATH, return_value=session):
            with pytest.raises(ExplorerError, match="after 3 attempts"):
                await connector.fetch_transactions(TARGET)

        assert session.get.call_count == 3

    @pytest.mark.asyncio
    async def test_waits_between_attempts(self, price_config):
        connector = ExplorerConnector({"timeout": 5, "retry_attempts": 2, "retry_backoff": 0.5}, price_config)
        session = mock_session(mock_response(status=500), mock_response(status=500))

        with patch(SESSION_PATH, return_value=session):
            with patch("src.data.explorer_connector.asyncio.sleep") as mock_sleep:
                with pytest.raises(ExplorerError):
                    await connector.fetch_transactions(TARGET)

        mock_sleep.assert_awaited_once_with(0.5)


class TestFetchQuotePrice:
    """Tests for fetch_quote_price."""

    @pytest.mark.asyncio
    async def test_returns_decimal_price(self, connector):
        session = mock_session(mock_response(payload={"ethereum": {"usd": 2000.5}}))

        with patch(SESSION_PATH, return_value=session):
            price = await connector.fetch_quote_price()

        assert price == Decimal("2000.5")
        args, kwargs = session.get.call_args
        assert args[0] == "https://api.coingecko.test/api/v3/simple/price"
        assert kwargs["params"] == {"ids": "ethereum", "vs_currencies": "usd"}
        assert "x-cg-demo-api-key" not in kwargs["headers"]

    @pytest.mark.asyncio
    async def test_sends_api_key(self, explorer_config, price_config):
        price_config["api_key"] = "fake_key"
        connector = ExplorerConnector(explorer_config, price_config)
        session = mock_session(mock_response(payload={"ethereum": {"usd": 1}}))

        with patch(SESSION_PATH, return_value=session):
            await connector.fetch_quote_price()

        assert session.get.call_args.kwargs["headers"]["x-cg-demo-api-key"] == "fake_key"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"ethereum": {}}, {"ethereum": {"usd": "n/a"}}, {"ethereum": {"usd": True}}, [],
         {"ethereum": "2000"}, {"ethereum": [2000]}, {"ethereum": None}],
    )
    async def test_unusable_payload_returns_none(self, connector, payload):
        session = mock_session(mock_response(payload=payload))

        with patch(SESSION_PATH, return_value=session):
            assert await connector.fetch_quote_price() is None

    @pytest.mark.asyncio
    async def test_request_failure_returns_none(self, connector):
        session = mock_session(*[mock_response(status=429, text="rate limited") for _ in range(3)])

        with patch(SESSION_PATH, return_value=session):
            assert await connector.fetch_quote_price() is None


class TestFetchAll:
    """Tests for fetch_all."""

    @pytest.mark.asyncio
    async def test_fetches_price_when_there_are_transactions(self, connector):
        session = mock_session(
            mock_response(payload={"status": "1", "message": "OK", "result": [_tx()]}),
            mock_response(payload={"ethereum": {"usd": 3000}}),
        )

        with patch(SESSION_PATH, return_value=session):
            records, price = await connector.fetch_all(TARGET)

        assert len(records) == 1
        assert price == Decimal(3000)

    @pytest.mark.asyncio
    async def test_skips_price_for_empty_wallet(self, connector):
        session = mock_session(mock_response(payload={"status": "0", "message": "No transactions found", "result": []}))

        with patch(SESSION_PATH, return_value=session):
            records, price = await connector.fetch_all(TARGET)

        assert records == []
        assert price is None
        assert session.get.call_count == 1
