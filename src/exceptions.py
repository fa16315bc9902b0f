"""Error taxonomy for WalletScan."""


class WalletScanError(Exception):
    """Base class for all WalletScan errors."""


class EmptyInputError(WalletScanError):
    """Raised when there are no transactions to summarize."""


class PriceUnavailableError(WalletScanError):
    """Raised when the quote price is missing, non-numeric or invalid."""


class ExplorerError(WalletScanError):
    """Raised when the block explorer could not be queried."""


class ConfigurationError(WalletScanError, ValueError):
    """Raised when the scan target cannot be resolved from configuration."""
