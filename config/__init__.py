"""Configuration package for WalletScan."""

from .settings import load_config, get_network_config, resolve_target, ScanTarget, NETWORKS

__all__ = ['load_config', 'get_network_config', 'resolve_target', 'ScanTarget', 'NETWORKS']
