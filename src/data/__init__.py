"""Data package for explorer connectivity and transaction models."""

from .explorer_connector import ExplorerConnector
from .transaction import TransactionRecord, wei_to_native

__all__ = ['ExplorerConnector', 'TransactionRecord', 'wei_to_native']
