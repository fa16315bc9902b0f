"""Configuration management for WalletScan."""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from src.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Blockscout-compatible explorers; every network listed here settles fees in ETH
NETWORKS: Dict[str, Dict[str, str]] = {
    '1': {'name': 'Soneium', 'api_url': 'https://soneium.blockscout.com/api'},
    '2': {'name': 'Optimism', 'api_url': 'https://optimism.blockscout.com/api'},
    '3': {'name': 'Base', 'api_url': 'https://base.blockscout.com/api'},
    '4': {'name': 'Mode', 'api_url': 'https://explorer.mode.network/api'},
    '5': {'name': 'Unichain', 'api_url': 'https://unichain.blockscout.com/api'},
    '6': {'name': 'Inkonchain', 'api_url': 'https://explorer.inkonchain.com/api'},
    '7': {'name': 'Arbitrum', 'api_url': 'https://arbitrum.blockscout.com/api'},
    '8': {'name': 'Ethereum', 'api_url': 'https://eth.blockscout.com/api'},
}

COINGECKO_API_URL = 'https://api.coingecko.com/api/v3'


@dataclass(frozen=True)
class ScanTarget:
    """Resolved network and wallet address for one scan."""
    network_key: str
    network_name: str
    api_url: str
    address: str


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def load_config() -> Dict[str, Any]:
    """
    Load configuration from environment variables and return structured config.

    Returns:
        Dict containing configuration sections for explorer, price, networks,
        target and app settings.
    """
    # Load environment variables from .env file
    env_path = Path(__file__).parent.parent / '.env'
    if env_path.exists():
        load_dotenv(env_path)
        logger.info(f"Loaded configuration from {env_path}")
    else:
        logger.info("No .env file found, using environment variables only")

    debug = _env_bool('DEBUG', 'False')

    config = {
        'explorer': {
            'timeout': int(os.getenv('EXPLORER_TIMEOUT', 30)),
            'retry_attempts': int(os.getenv('EXPLORER_RETRY_ATTEMPTS', 3)),
            'retry_backoff': float(os.getenv('EXPLORER_RETRY_BACKOFF', 1.0)),
        },
        'price': {
            'api_url': os.getenv('PRICE_API_URL', COINGECKO_API_URL),
            'asset_id': os.getenv('PRICE_ASSET_ID', 'ethereum'),
            'api_key': os.getenv('COINGECKO_API_KEY') or None,
        },
        'networks': {key: dict(network) for key, network in NETWORKS.items()},
        'target': {
            'network': os.getenv('WALLETSCAN_NETWORK') or None,
            'address': os.getenv('WALLETSCAN_ADDRESS') or None,
        },
        'app': {
            'debug': debug,
            'log_level': 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING').upper(),
            'use_colors': _env_bool('CONSOLE_COLORS', 'True'),
        }
    }

    _validate_config(config)

    return config


def _validate_config(config: Dict[str, Any]) -> None:
    """
    Validate that required configuration values are usable.

    Args:
        config: Configuration dictionary to validate.

    Raises:
        ConfigurationError: If a required value is missing or out of range.
    """
    explorer = config['explorer']
    if explorer['timeout'] <= 0:
        raise ConfigurationError("EXPLORER_TIMEOUT must be positive")
    if explorer['retry_attempts'] < 1:
        raise ConfigurationError("EXPLORER_RETRY_ATTEMPTS must be at least 1")
    if not config['price']['api_url']:
        raise ConfigurationError("PRICE_API_URL missing; cannot proceed.")
    network = config['target']['network']
    if network and network not in config['networks']:
        logger.warning(f"WALLETSCAN_NETWORK={network} is not a known network; it will be asked for")
    logger.info("Configuration validation completed")


def get_network_config(network_key: str, config: Dict[str, Any]) -> Dict[str, str]:
    """
    Get configuration for a specific network.

    Args:
        network_key: Selection key of the network (e.g. '8' for Ethereum).
        config: Main configuration dictionary.

    Returns:
        Network configuration dictionary.

    Raises:
        ConfigurationError: If the network key is unknown.
    """
    network = config['networks'].get(str(network_key).strip())
    if network is None:
        raise ConfigurationError(f"Invalid network selection: {network_key!r}")
    return network


def resolve_target(network_key: Optional[str], address: Optional[str], config: Dict[str, Any]) -> ScanTarget:
    """
    Resolve the network key and wallet address into a ScanTarget.

    Raises:
        ConfigurationError: If the network is unknown or the address is empty.
    """
    network = get_network_config(network_key or '', config)
    address = (address or '').strip()
    if not address:
        raise ConfigurationError("Wallet address must not be empty")
    return ScanTarget(
        network_key=str(network_key).strip(),
        network_name=network['name'],
        api_url=network['api_url'],
        address=address,
    )
