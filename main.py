"""
WalletScan - Block Explorer Wallet Summary

This application fetches the transaction list of a wallet from a
Blockscout-compatible explorer, aggregates it into a financial summary
and displays it in the terminal.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, Optional

from config.settings import load_config, resolve_target, ScanTarget
from src.data.explorer_connector import ExplorerConnector
from src.aggregator.wallet_aggregator import WalletAggregator
from src.dashboard.console_display import ConsoleDisplay
from src.exceptions import (
    ConfigurationError,
    EmptyInputError,
    ExplorerError,
    PriceUnavailableError,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PRICE_UNAVAILABLE = 2
EXIT_EXPLORER_ERROR = 3


def resolve_log_level(name: str) -> int:
    """Map a level name to its numeric value, WARNING for anything unknown."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(app_config: Dict[str, Any]) -> None:
    logging.basicConfig(
        level=resolve_log_level(app_config.get('log_level', 'WARNING')),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def prompt_target(config: Dict[str, Any], network_key: Optional[str] = None, address: Optional[str] = None) -> ScanTarget:
    """Ask for whatever part of the scan target is not configured."""
    if not network_key or network_key not in config['networks']:
        print('\nSelect a network:')
        for key, network in config['networks'].items():
            print(f"{key}: {network['name']}")
        network_key = input('\nEnter network number: ').strip()
    if not address:
        address = input('Enter wallet address: ').strip()
    return resolve_target(network_key, address, config)


async def run(target: ScanTarget, config: Dict[str, Any], display: ConsoleDisplay) -> int:
    """Fetch, aggregate and display the summary for one target. Returns the exit code."""
    connector = ExplorerConnector(config['explorer'], config['price'])
    aggregator = WalletAggregator()

    try:
        print(f"\n🔍 Fetching data from {target.network_name}...")
        transactions, quote_price = await connector.fetch_all(target)

        logger.info("Aggregating wallet transactions...")
        summary = aggregator.summarize(transactions, target.address, quote_price)
    except EmptyInputError:
        display.show_no_transactions(target.address, target.network_name)
        return EXIT_OK
    except PriceUnavailableError as e:
        logger.error(f"Summarization failed: {e}")
        display.show_error(f"Could not summarize wallet, price unavailable: {e}")
        return EXIT_PRICE_UNAVAILABLE
    except ExplorerError as e:
        logger.error(f"Explorer error: {e}")
        display.show_error(f"Error fetching data: {e}")
        return EXIT_EXPLORER_ERROR

    display.show_summary(summary, target.network_name)
    logger.info("WalletScan completed successfully!")
    return EXIT_OK


def main() -> int:
    """Main application entry point."""
    try:
        config = load_config()
    except (ConfigurationError, ValueError) as e:
        print(f"\n❌ Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    configure_logging(config['app'])
    display = ConsoleDisplay(use_colors=config['app']['use_colors'])

    try:
        target = prompt_target(config, config['target']['network'], config['target']['address'])
    except ConfigurationError as e:
        display.show_error(str(e))
        return EXIT_CONFIG_ERROR

    return asyncio.run(run(target, config, display))


if __name__ == "__main__":
    sys.exit(main())
