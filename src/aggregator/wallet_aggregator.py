"""Aggregation of a wallet's transaction list into a financial summary."""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..data.transaction import TransactionRecord, wei_to_native
from ..exceptions import EmptyInputError, PriceUnavailableError

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
TOP_COUNTERPARTIES = 10

ZERO = Decimal(0)


@dataclass(frozen=True)
class CounterpartyActivity:
    """Interaction totals for one counterparty (the `to` address of a transaction)."""
    address: str
    transaction_count: int
    volume: Decimal


@dataclass(frozen=True)
class WalletSummary:
    """Descriptive financial summary of a single wallet.

    Native amounts are in units of the chain's native asset. USD amounts are
    derived from ``quote_price`` on access, each one independently.
    """
    address: str
    quote_price: Decimal
    as_of: datetime
    total_transactions: int
    successful_transactions: int
    failed_transactions: int
    total_volume: Decimal
    total_deposits: Decimal
    total_spent: Decimal
    total_fees: Decimal
    balance_delta: Decimal
    first_tx_timestamp: int
    wallet_age_days: int
    avg_tx_per_day: Decimal
    avg_fee_per_tx: Decimal
    avg_daily_fees_usd: Decimal
    deposit_to_spend_ratio: Optional[Decimal]
    daily_volume: Dict[date, Decimal]
    monthly_volume: Dict[Tuple[int, int], Decimal]
    yearly_volume: Dict[int, Decimal]
    top_counterparties: Tuple[CounterpartyActivity, ...]
    most_active_day: date
    most_active_day_volume: Decimal

    @property
    def first_tx_date(self) -> date:
        return datetime.fromtimestamp(self.first_tx_timestamp, tz=timezone.utc).date()

    def to_usd(self, amount: Decimal) -> Decimal:
        return amount * self.quote_price

    @property
    def total_volume_usd(self) -> Decimal:
        return self.to_usd(self.total_volume)

    @property
    def total_deposits_usd(self) -> Decimal:
        return self.to_usd(self.total_deposits)

    @property
    def total_spent_usd(self) -> Decimal:
        return self.to_usd(self.total_spent)

    @property
    def total_fees_usd(self) -> Decimal:
        return self.to_usd(self.total_fees)

    @property
    def avg_fee_per_tx_usd(self) -> Decimal:
        return self.to_usd(self.avg_fee_per_tx)

    @property
    def balance_delta_usd(self) -> Decimal:
        return self.to_usd(self.balance_delta)

    def volume_for_day(self, day: date) -> Decimal:
        return self.daily_volume.get(day, ZERO)

    def volume_for_month(self, year: int, month: int) -> Decimal:
        return self.monthly_volume.get((year, month), ZERO)

    def volume_for_year(self, year: int) -> Decimal:
        return self.yearly_volume.get(year, ZERO)

    @property
    def current_month_volume(self) -> Decimal:
        return self.volume_for_month(self.as_of.year, self.as_of.month)

    @property
    def current_year_volume(self) -> Decimal:
        return self.volume_for_year(self.as_of.year)


def _validate_quote_price(quote_price: Any) -> Decimal:
    """Return the quote price as a Decimal or raise PriceUnavailableError."""
    if quote_price is None:
        raise PriceUnavailableError("Quote price is not available")
    if isinstance(quote_price, bool):
        raise PriceUnavailableError(f"Quote price is not numeric: {quote_price!r}")
    try:
        price = quote_price if isinstance(quote_price, Decimal) else Decimal(str(quote_price))
    except InvalidOperation:
        raise PriceUnavailableError(f"Quote price is not numeric: {quote_price!r}")
    if not price.is_finite() or price < 0:
        raise PriceUnavailableError(f"Quote price is invalid: {quote_price!r}")
    return price


def _resolve_now(now: Union[datetime, float, int, None]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if isinstance(now, datetime):
        return now.astimezone(timezone.utc) if now.tzinfo else now.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(now, tz=timezone.utc)


class WalletAggregator:
    """Folds a wallet's transactions into a WalletSummary."""

    def __init__(self, top_counterparties: int = TOP_COUNTERPARTIES):
        """
        Initialize the wallet aggregator.

        Args:
            top_counterparties: Number of counterparties kept in the ranking.
        """
        self.top_counterparties = top_counterparties
        logger.info("Wallet Aggregator initialized")

    def summarize(
        self,
        records: Sequence[TransactionRecord],
        subject_address: str,
        quote_price: Any,
        now: Union[datetime, float, int, None] = None,
    ) -> WalletSummary:
        """
        Summarize the transactions of a single wallet.

        Args:
            records: Transactions visible to the wallet, in any order.
            subject_address: Wallet address, compared case-insensitively.
            quote_price: USD price of one unit of the native asset.
            now: Reference time for wallet age and current-period figures.
                Defaults to the current UTC time.

        Returns:
            WalletSummary for the given inputs.

        Raises:
            EmptyInputError: If there are no records.
            PriceUnavailableError: If the quote price is missing or invalid.
        """
        if not records:
            raise EmptyInputError(f"No transactions found for {subject_address}")
        price = _validate_quote_price(quote_price)
        as_of = _resolve_now(now)

        logger.info(f"Summarizing {len(records)} transactions for {subject_address}")

        # Amounts accumulate as integer wei; converted to native units at the end
        total_volume = 0
        total_deposits = 0
        total_spent = 0
        total_fees = 0
        balance_delta = 0
        successful = 0
        failed = 0
        daily: Dict[date, int] = defaultdict(int)
        monthly: Dict[Tuple[int, int], int] = defaultdict(int)
        yearly: Dict[int, int] = defaultdict(int)
        counterparties: Dict[str, List[int]] = {}

        for record in records:
            value = record.value_wei
            fee = record.fee_wei
            total_volume += value
            total_fees += fee

            if record.is_received_by(subject_address):
                total_deposits += value
                balance_delta += value
            if record.is_sent_by(subject_address):
                total_spent += value
                balance_delta -= value + fee

            day = record.day
            daily[day] += value
            monthly[(day.year, day.month)] += value
            yearly[day.year] += value

            if record.to_address:
                entry = counterparties.setdefault(record.to_address, [0, 0])
                entry[0] += 1
                entry[1] += value

            if record.succeeded:
                successful += 1
            else:
                failed += 1

        total_tx = len(records)
        first_tx_timestamp = min(record.timestamp for record in records)
        elapsed = as_of.timestamp() - first_tx_timestamp
        wallet_age_days = max(1, math.ceil(elapsed / SECONDS_PER_DAY))

        total_fees_native = wei_to_native(total_fees)
        total_deposits_native = wei_to_native(total_deposits)
        total_spent_native = wei_to_native(total_spent)

        ratio = None
        if total_deposits > 0:
            ratio = total_spent_native / total_deposits_native

        # Strict comparison keeps the first-seen day on ties
        most_active_day = None
        for day, volume in daily.items():
            if most_active_day is None or volume > daily[most_active_day]:
                most_active_day = day

        # sorted() is stable, so equal volumes keep first-seen order
        ranked = sorted(counterparties.items(), key=lambda item: item[1][1], reverse=True)
        top = tuple(
            CounterpartyActivity(address=address, transaction_count=count, volume=wei_to_native(volume))
            for address, (count, volume) in ranked[:self.top_counterparties]
        )

        summary = WalletSummary(
            address=subject_address,
            quote_price=price,
            as_of=as_of,
            total_transactions=total_tx,
            successful_transactions=successful,
            failed_transactions=failed,
            total_volume=wei_to_native(total_volume),
            total_deposits=total_deposits_native,
            total_spent=total_spent_native,
            total_fees=total_fees_native,
            balance_delta=wei_to_native(balance_delta),
            first_tx_timestamp=first_tx_timestamp,
            wallet_age_days=wallet_age_days,
            avg_tx_per_day=Decimal(total_tx) / Decimal(wallet_age_days),
            avg_fee_per_tx=total_fees_native / Decimal(total_tx),
            avg_daily_fees_usd=(total_fees_native * price) / Decimal(wallet_age_days),
            deposit_to_spend_ratio=ratio,
            daily_volume={day: wei_to_native(volume) for day, volume in daily.items()},
            monthly_volume={month: wei_to_native(volume) for month, volume in monthly.items()},
            yearly_volume={year: wei_to_native(volume) for year, volume in yearly.items()},
            top_counterparties=top,
            most_active_day=most_active_day,
            most_active_day_volume=wei_to_native(daily[most_active_day]),
        )

        logger.info(
            f"Summary complete for {subject_address}: {total_tx} transactions, "
            f"{summary.total_volume:.4f} native volume over {wallet_age_days} days"
        )
        return summary


def summarize(
    records: Sequence[TransactionRecord],
    subject_address: str,
    quote_price: Any,
    now: Union[datetime, float, int, None] = None,
) -> WalletSummary:
    """Summarize ``records`` with a default WalletAggregator."""
    return WalletAggregator().summarize(records, subject_address, quote_price, now=now)
