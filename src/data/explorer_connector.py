"""Block explorer and price feed connector for retrieving wallet data."""

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List, Optional, Tuple
import aiohttp

from config.settings import ScanTarget
from .transaction import TransactionRecord
from ..exceptions import ExplorerError

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_MESSAGE = 'no transactions found'


class ExplorerConnector:
    """Handles requests to a Blockscout-compatible explorer and the price API."""

    def __init__(self, explorer_config: Dict[str, Any], price_config: Dict[str, Any]):
        """
        Initialize explorer connector.

        Args:
            explorer_config: Timeout and retry settings for HTTP requests.
            price_config: Price API base URL, asset id and optional API key.
        """
        self.explorer_config = explorer_config
        self.price_config = price_config
        self.timeout = aiohttp.ClientTimeout(total=explorer_config.get('timeout', 30))
        self.retry_attempts = max(1, int(explorer_config.get('retry_attempts', 3)))
        self.retry_backoff = float(explorer_config.get('retry_backoff', 1.0))

        logger.info("Explorer Connector initialized")

    async def fetch_all(self, target: ScanTarget) -> Tuple[List[TransactionRecord], Optional[Decimal]]:
        """
        Fetch the transaction list and, when there is anything to price, the quote price.

        Args:
            target: Network and wallet address to scan.

        Returns:
            Tuple of (transactions, quote price or None).
        """
        transactions = await self.fetch_transactions(target)
        if not transactions:
            return transactions, None
        quote_price = await self.fetch_quote_price()
        return transactions, quote_price

    async def fetch_transactions(self, target: ScanTarget) -> List[TransactionRecord]:
        """
        Fetch the native-asset transaction list of a wallet.

        Args:
            target: Network and wallet address to scan.

        Returns:
            List of parsed transactions, empty if the explorer has none.

        Raises:
            ExplorerError: If the explorer cannot be reached or rejects the request.
        """
        logger.info(f"Fetching data from {target.network_name} for {target.address}...")
        params = {
            'module': 'account',
            'action': 'txlist',
            'address': target.address,
        }

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            data = await self._request_json(session, target.api_url, params=params)

        if not isinstance(data, dict):
            raise ExplorerError(f"Unexpected response from {target.network_name}: {data!r}")

        result = data.get('result')
        if not isinstance(result, list):
            message = str(data.get('message') or '')
            if NO_TRANSACTIONS_MESSAGE in message.lower():
                logger.info(f"{target.network_name} reports no transactions for {target.address}")
                return []
            raise ExplorerError(f"{target.network_name} explorer error: {message or result!r}")

        transactions = []
        for raw in result:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed transaction entry: {raw!r}")
                continue
            transactions.append(TransactionRecord.from_api(raw))

        logger.info(f"Fetched {len(transactions)} transactions from {target.network_name}")
        return transactions

    async def fetch_quote_price(self) -> Optional[Decimal]:
        """
        Fetch the USD price of the native asset.

        Returns:
            Price as Decimal, or None if fetch failed or the payload has no usable price.
        """
        asset_id = self.price_config.get('asset_id', 'ethereum')
        url = f"{self.price_config['api_url'].rstrip('/')}/simple/price"
        params = {'ids': asset_id, 'vs_currencies': 'usd'}
        headers = {'Accept': 'application/json'}
        if self.price_config.get('api_key'):
            headers['x-cg-demo-api-key'] = self.price_config['api_key']

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                data = await self._request_json(session, url, params=params, headers=headers)
        except ExplorerError as e:
            logger.error(f"Failed to fetch price for {asset_id}: {e}")
            return None

        entry = data.get(asset_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict):
            logger.warning(f"Price entry for {asset_id} missing or malformed in response: {data}")
            return None
        raw_price = entry.get('usd')
        if raw_price is None or isinstance(raw_price, bool):
            logger.warning(f"Price for {asset_id} in usd not found in response: {data}")
            return None
        try:
            price = Decimal(str(raw_price))
        except InvalidOperation:
            logger.warning(f"Price for {asset_id} is not numeric: {raw_price!r}")
            return None

        logger.info(f"Current {asset_id} price: {price} USD")
        return price

    async def _request_json(
        self,
        session: aiohttp.ClientSession,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a JSON document, retrying failed attempts with linear backoff.

        Raises:
            ExplorerError: If every attempt failed.
        """
        last_error = ''
        for attempt in range(1, self.retry_attempts + 1):
            try:
                async with session.get(url, params=params, headers=headers) as response:
                    if response.status == 200:
                        return await response.json(content_type=None)
                    error_text = await response.text()
                    last_error = f"{response.status} - {error_text[:200]}"
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                last_error = str(e) or type(e).__name__

            logger.warning(f"Request to {url} failed (attempt {attempt}/{self.retry_attempts}): {last_error}")
            if attempt < self.retry_attempts:
                await asyncio.sleep(self.retry_backoff * attempt)

        raise ExplorerError(f"Request to {url} failed after {self.retry_attempts} attempts: {last_error}")
