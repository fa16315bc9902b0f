"""Transaction record model and the parse boundary for raw explorer data."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

logger = logging.getLogger(__name__)

WEI_PER_NATIVE = Decimal(10) ** 18

_SUCCESS_FLAGS = {'0', 'false', ''}

# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_TIMESTAMP = 253402300799

# Exponent of the largest uint256 (~1.16e77); anything above it is not an on-chain amount
MAX_AMOUNT_DIGITS = 77


def wei_to_native(amount_wei: int) -> Decimal:
    """Convert an integer wei amount to native units."""
    return Decimal(amount_wei) / WEI_PER_NATIVE


def _parse_amount(raw: Any, field: str, tx_hash: str) -> int:
    """
    Parse a non-negative integer amount from loosely typed explorer data.

    Missing values silently become 0; values that cannot be parsed, are
    fractional or negative become 0 with a warning.
    """
    if raw is None or raw == '':
        return 0
    if isinstance(raw, bool):
        logger.warning(f"Transaction {tx_hash or '?'}: boolean {field} treated as 0")
        return 0
    if isinstance(raw, int):
        value = raw
    else:
        try:
            parsed = Decimal(str(raw).strip())
        except InvalidOperation:
            logger.warning(f"Transaction {tx_hash or '?'}: non-numeric {field} {raw!r} treated as 0")
            return 0
        if parsed.is_finite() and parsed.adjusted() > MAX_AMOUNT_DIGITS:
            logger.warning(f"Transaction {tx_hash or '?'}: out of range {field} {raw!r} treated as 0")
            return 0
        if not parsed.is_finite() or parsed != parsed.to_integral_value():
            logger.warning(f"Transaction {tx_hash or '?'}: invalid {field} {raw!r} treated as 0")
            return 0
        value = int(parsed)
    if value < 0:
        logger.warning(f"Transaction {tx_hash or '?'}: negative {field} {raw!r} treated as 0")
        return 0
    return value


def _parse_timestamp(raw: Any, tx_hash: str) -> int:
    value = _parse_amount(raw, 'timeStamp', tx_hash)
    if value > MAX_TIMESTAMP:
        logger.warning(f"Transaction {tx_hash or '?'}: out of range timeStamp {raw!r} treated as 0")
        return 0
    return value


def _parse_is_error(raw: Any) -> bool:
    if raw is None or raw is False:
        return False
    if raw is True:
        return True
    if isinstance(raw, (int, float)):
        return raw != 0
    return str(raw).strip().lower() not in _SUCCESS_FLAGS


@dataclass(frozen=True)
class TransactionRecord:
    """Normalized view of one confirmed transaction visible to the queried address."""
    hash: str
    from_address: str
    to_address: str
    value_wei: int
    gas_used: int
    gas_price: int
    timestamp: int
    is_error: bool = False

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "TransactionRecord":
        """
        Build a record from one entry of the explorer's txlist result.

        Args:
            raw: Transaction object as returned by the explorer API.

        Returns:
            TransactionRecord with malformed numeric fields coerced to zero.
        """
        tx_hash = str(raw.get('hash') or '')
        return cls(
            hash=tx_hash,
            from_address=str(raw.get('from') or ''),
            to_address=str(raw.get('to') or ''),
            value_wei=_parse_amount(raw.get('value'), 'value', tx_hash),
            gas_used=_parse_amount(raw.get('gasUsed'), 'gasUsed', tx_hash),
            gas_price=_parse_amount(raw.get('gasPrice'), 'gasPrice', tx_hash),
            timestamp=_parse_timestamp(raw.get('timeStamp'), tx_hash),
            is_error=_parse_is_error(raw.get('isError')),
        )

    @property
    def fee_wei(self) -> int:
        return self.gas_used * self.gas_price

    @property
    def value_native(self) -> Decimal:
        return wei_to_native(self.value_wei)

    @property
    def fee_native(self) -> Decimal:
        return wei_to_native(self.fee_wei)

    @property
    def succeeded(self) -> bool:
        return not self.is_error

    @property
    def timestamp_utc(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def day(self) -> date:
        return self.timestamp_utc.date()

    def is_sent_by(self, address: str) -> bool:
        return bool(self.from_address) and self.from_address.lower() == address.lower()

    def is_received_by(self, address: str) -> bool:
        return bool(self.to_address) and self.to_address.lower() == address.lower()

    def __str__(self) -> str:
        counterparty = self.to_address or 'contract creation'
        return f"{self.hash} {self.from_address} -> {counterparty}: {self.value_native} ({self.timestamp_utc:%Y-%m-%d})"
