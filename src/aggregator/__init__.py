"""Aggregator package for wallet transaction analysis."""

from .wallet_aggregator import WalletAggregator, WalletSummary, CounterpartyActivity, summarize

__all__ = ['WalletAggregator', 'WalletSummary', 'CounterpartyActivity', 'summarize']
