"""
Provider registry.

Maps canonical provider names to factory functions. A registry is a plain
value: build one at startup (see ``default_registry``) and hand it to
whatever needs to resolve adapters.
"""

import logging
from typing import Dict, List

from ..config import CloudTranscodeConfig
from ..errors import (
    CloudTranscodeError,
    InvalidProviderConfigError,
    ProviderAlreadyRegisteredError,
    ProviderNotFoundError,
)
from ..models import Capabilities, Health, ProviderDescription
from .base import Provider, ProviderFactory

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Name -> factory table for provider adapters."""

    def __init__(self):
        self._factories: Dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """
        Register a provider factory.

        Args:
            name: Canonical provider name
            factory: Callable building the provider from the service config

        Raises:
            ProviderAlreadyRegisteredError: If the name is already taken
        """
        if name in self._factories:
            raise ProviderAlreadyRegisteredError(name)
        self._factories[name] = factory
        logger.debug(f"Registered provider {name}")

    def get_factory(self, name: str) -> ProviderFactory:
        """
        Look up the factory for a provider name.

        Raises:
            ProviderNotFoundError: If no factory is registered under the name
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ProviderNotFoundError(name)
        return factory

    def get(self, name: str, config: CloudTranscodeConfig) -> Provider:
        """Build the provider registered under ``name``."""
        return self.get_factory(name)(config)

    def names(self) -> List[str]:
        """Registered provider names, sorted."""
        return sorted(self._factories)

    def describe(self, name: str, config: CloudTranscodeConfig) -> ProviderDescription:
        """
        Describe a provider: whether it is configured, its capabilities and health.

        A provider whose factory rejects the configuration is reported as
        disabled rather than raising.
        """
        factory = self.get_factory(name)

        try:
            provider = factory(config)
        except InvalidProviderConfigError as e:
            logger.info(f"Provider {name} is disabled: {e.reason}")
            return ProviderDescription(
                name=name,
                capabilities=Capabilities(),
                health=Health(ok=False, message=str(e)),
                enabled=False,
            )

        with provider:
            try:
                provider.healthcheck()
                health = Health(ok=True)
            except CloudTranscodeError as e:
                logger.warning(f"Provider {name} is unhealthy: {e}")
                health = Health(ok=False, message=str(e))

            return ProviderDescription(
                name=name,
                capabilities=provider.capabilities(),
                health=health,
                enabled=True,
            )
