"""Console display module for rendering a wallet summary to the terminal."""

import logging
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Sequence
from ..aggregator.wallet_aggregator import WalletSummary, CounterpartyActivity

logger = logging.getLogger(__name__)

NATIVE_SYMBOL = 'ETH'

# Wide enough for any uint256 wei amount expressed in native units
_FORMAT_CONTEXT = Context(prec=100)


def fixed_point(amount: Decimal, places: int) -> str:
    """Render ``amount`` with ``places`` decimals, rounding exact halves away from zero."""
    exponent = Decimal(1).scaleb(-places)
    return f"{amount.quantize(exponent, rounding=ROUND_HALF_UP, context=_FORMAT_CONTEXT):f}"


def format_native(amount: Decimal, places: int = 4) -> str:
    return fixed_point(amount, places)


def format_usd(amount: Decimal) -> str:
    return fixed_point(amount, 2)


def format_ratio(ratio) -> str:
    return 'N/A' if ratio is None else fixed_point(ratio, 2)


class ConsoleDisplay:
    """Handles console-based display of wallet summaries."""

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors
        self._setup_colors()
        logger.info("Console Display initialized")

    def _setup_colors(self) -> None:
        if self.use_colors:
            self.colors = {
                'reset': '\033[0m',
                'bold': '\033[1m',
                'green': '\033[92m',
                'red': '\033[91m',
                'yellow': '\033[93m',
                'blue': '\033[94m',
                'cyan': '\033[96m',
                'gray': '\033[90m',
            }
        else:
            self.colors = {k: '' for k in ['reset', 'bold', 'green', 'red', 'yellow', 'blue', 'cyan', 'gray']}

    def show_summary(self, summary: WalletSummary, network_name: str) -> None:
        self._print_header(network_name)
        self._print_wallet_summary(summary)
        self._print_financial_summary(summary)
        self._print_spending_overview(summary)
        self._print_top_contracts(summary.top_counterparties, summary)
        self._print_footer(summary)

    def show_no_transactions(self, address: str, network_name: str) -> None:
        print(f"\n{self.colors['yellow']}❌ No transactions found for this address.{self.colors['reset']}")
        print(f"{self.colors['gray']}{address} on {network_name}{self.colors['reset']}")

    def show_error(self, message: str) -> None:
        print(f"\n{self.colors['red']}❌ {message}{self.colors['reset']}")

    def _print_header(self, network_name: str) -> None:
        print(f"{self.colors['cyan']}{self.colors['bold']}")
        print("╔══════════════════════════════════════════════════════════════╗")
        print("║                         WALLETSCAN                           ║")
        print("╚══════════════════════════════════════════════════════════════╝")
        print(f"Network: {network_name}{self.colors['reset']}")

    def _amount(self, amount: Decimal, amount_usd: Decimal, places: int = 4) -> str:
        return f"{format_native(amount, places)} {NATIVE_SYMBOL} ${format_usd(amount_usd)}"

    def _print_wallet_summary(self, summary: WalletSummary) -> None:
        print(f"\n{self.colors['bold']}📊 Wallet Summary for {summary.address}{self.colors['reset']}")
        print("═" * 60)
        print(f"📌 Total Transactions    : {summary.total_transactions}")
        print(f"📌 Wallet Age            : {summary.wallet_age_days} days (Since {summary.first_tx_date.isoformat()})")
        print(f"📌 Most Active Day       : {summary.most_active_day.isoformat()} "
              f"({format_native(summary.most_active_day_volume)} {NATIVE_SYMBOL})")
        print(f"📌 Avg Transactions/Day  : {fixed_point(summary.avg_tx_per_day, 2)}")
        print(f"📌 Success/Failed Tx     : {self.colors['green']}{summary.successful_transactions}{self.colors['reset']}"
              f"/{self.colors['red']}{summary.failed_transactions}{self.colors['reset']}")

    def _print_financial_summary(self, summary: WalletSummary) -> None:
        print(f"\n{self.colors['bold']}💰 Financial Summary{self.colors['reset']}")
        print("═" * 60)
        print(f"🔹 Total Volume          : {self._amount(summary.total_volume, summary.total_volume_usd)}")
        print(f"🔹 Total Deposits        : {self._amount(summary.total_deposits, summary.total_deposits_usd)}")
        print(f"🔹 Total Fees Used       : {self._amount(summary.total_fees, summary.total_fees_usd)}")
        print(f"🔹 Avg Gas Fee per Tx    : {self._amount(summary.avg_fee_per_tx, summary.avg_fee_per_tx_usd, places=6)}")
        print(f"🔹 Total Spent           : {self._amount(summary.total_spent, summary.total_spent_usd)}")
        print(f"🔹 Avg Daily Fees        : ${format_usd(summary.avg_daily_fees_usd)}")
        print(f"🔹 Deposit to Spend Ratio: {format_ratio(summary.deposit_to_spend_ratio)}")
        balance_color = self.colors['green'] if summary.balance_delta >= 0 else self.colors['red']
        print(f"🔹 Balance Estimation    : {balance_color}{self._amount(summary.balance_delta, summary.balance_delta_usd)}{self.colors['reset']}")

    def _print_spending_overview(self, summary: WalletSummary) -> None:
        current_month = f"{summary.as_of.year:04d}-{summary.as_of.month:02d}"
        current_year = f"{summary.as_of.year:04d}"
        print(f"\n{self.colors['bold']}📅 Spending Overview{self.colors['reset']}")
        print("═" * 60)
        print(f"🔹 Most Spent (1 Day)    : {self._spend(summary.most_active_day_volume, summary)}")
        print(f"🔹 Most Spent ({current_month})  : {self._spend(summary.current_month_volume, summary)}")
        print(f"🔹 Most Spent ({current_year})     : {self._spend(summary.current_year_volume, summary)}")

    def _spend(self, amount: Decimal, summary: WalletSummary) -> str:
        return f"{format_native(amount)} {NATIVE_SYMBOL} (${format_usd(summary.to_usd(amount))})"

    def _print_top_contracts(self, counterparties: Sequence[CounterpartyActivity], summary: WalletSummary) -> None:
        print(f"\n{self.colors['bold']}📡 Top Interacted Contracts{self.colors['reset']}")
        print("═" * 60)
        if not counterparties:
            print(f"   {self.colors['gray']}No contracts interacted{self.colors['reset']}")
            return
        for i, contract in enumerate(counterparties, 1):
            print(f"{i:>2}. {self.colors['blue']}{contract.address}{self.colors['reset']} - "
                  f"{contract.transaction_count} tx, {self._spend(contract.volume, summary)}")

    def _print_footer(self, summary: WalletSummary) -> None:
        print(f"\n{self.colors['gray']}" + "─" * 60)
        print(f"Summary generated at {summary.as_of.strftime('%Y-%m-%d %H:%M:%S')} UTC, "
              f"{NATIVE_SYMBOL} price ${format_usd(summary.quote_price)}")
        print(f"WalletScan - Block Explorer Wallet Summary{self.colors['reset']}\n")
