"""
Provider adapters for CloudTranscode.
"""

from .base import Provider, ProviderFactory
from .registry import ProviderRegistry
from .bitmovin import NAME as BITMOVIN, bitmovin_factory


def default_registry() -> ProviderRegistry:
    """Build a registry with every bundled provider registered."""
    registry = ProviderRegistry()
    registry.register(BITMOVIN, bitmovin_factory)
    return registry


__all__ = [
    "Provider",
    "ProviderFactory",
    "ProviderRegistry",
    "default_registry",
]
