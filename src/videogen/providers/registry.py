"""Registry for video provider instances.

This module creates provider instances from application settings, caches one
instance per provider name, and selects a provider for new jobs with a
primary -> fallback -> any-available strategy.
"""

import logging
from typing import Callable, Optional

import httpx

from src.config import get_settings
from src.config.settings import Settings
from src.videogen.errors import ConfigurationError, NoProviderAvailableError
from src.videogen.models import ProviderConfig
from src.videogen.providers.base import VideoProvider
from src.videogen.providers.did import DIDProvider
from src.videogen.providers.heygen import HeyGenProvider
from src.videogen.providers.sora import SoraProvider

logger = logging.getLogger(__name__)

# Fixed probe order for last-resort selection.
PROVIDER_NAMES = ("d-id", "heygen", "sora")

ProviderFactory = Callable[[ProviderConfig, Optional[httpx.AsyncBaseTransport]], VideoProvider]

_FACTORIES: dict[str, ProviderFactory] = {
    "d-id": DIDProvider,
    "heygen": HeyGenProvider,
    "sora": SoraProvider,
}


class ProviderRegistry:
    """Creates, caches and selects video providers.

    One registry is built at process start and handed to whatever needs
    provider resolution. Instances are created lazily on first use; if two
    concurrent callers race to create the same provider, the last one wins
    and both instances behave identically.

    Example:
        ```python
        registry = ProviderRegistry()
        provider = await registry.select_primary()
        job = await provider.submit(request)
        ```
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize registry.

        Args:
            settings: Optional application settings. If None, uses get_settings().
            transport: Optional httpx transport passed to every provider.
        """
        self.settings = settings or get_settings()
        self._transport = transport
        self._providers: dict[str, VideoProvider] = {}

    def get_config(self, name: str) -> ProviderConfig:
        """Build the connection config for a provider from settings.

        Args:
            name: Provider name.

        Returns:
            Provider configuration.

        Raises:
            ConfigurationError: If the provider is unknown or has no API key.
        """
        blocks = {
            "d-id": self.settings.d_id,
            "heygen": self.settings.heygen,
            "sora": self.settings.sora,
        }
        block = blocks.get(name.lower())
        if block is None:
            raise ConfigurationError(f"Unknown video provider: {name}")
        if not block.api_key:
            raise ConfigurationError(f"API key not configured for provider: {name}")

        return ProviderConfig(api_key=block.api_key, base_url=block.base_url, timeout_ms=block.timeout_ms)

    def resolve(self, name: str) -> VideoProvider:
        """Get a provider by name, creating and caching it on first use.

        Raises:
            ConfigurationError: If the provider is unknown or has no API key.
        """
        key = name.lower()
        provider = self._providers.get(key)
        if provider is not None:
            return provider

        factory = _FACTORIES.get(key)
        if factory is None:
            raise ConfigurationError(f"Unknown video provider: {name}")

        provider = factory(self.get_config(key), self._transport)
        self._providers[key] = provider
        logger.debug(f"Created video provider: {key}")
        return provider

    def register(self, name: str, provider: VideoProvider) -> None:
        """Install a pre-built provider instance under a name."""
        self._providers[name.lower()] = provider

    def clear_cache(self) -> None:
        """Drop all cached provider instances."""
        self._providers.clear()

    async def select_primary(self) -> VideoProvider:
        """Select the provider for a new job.

        Tries the configured primary, then the configured fallback. If neither
        is available, or anything goes wrong while checking them, every known
        provider is probed in fixed order.

        Returns:
            An available provider.

        Raises:
            NoProviderAvailableError: If no provider is available.
        """
        primary_name = self.settings.video.provider
        fallback_name = self.settings.video.fallback_provider

        try:
            primary = self.resolve(primary_name)
            if await primary.check_availability():
                logger.info(f"Using primary video provider: {primary_name}")
                return primary

            logger.warning(f"Primary provider {primary_name} unavailable, falling back to {fallback_name}")
            fallback = self.resolve(fallback_name)
            if await fallback.check_availability():
                logger.info(f"Using fallback video provider: {fallback_name}")
                return fallback

            logger.warning(f"Fallback provider {fallback_name} unavailable")
        except Exception as e:
            logger.error(f"Provider selection error: {e}")

        return await self.select_any_available()

    async def select_any_available(self) -> VideoProvider:
        """Return the first available provider in fixed priority order.

        Raises:
            NoProviderAvailableError: If no provider is available.
        """
        for name in PROVIDER_NAMES:
            try:
                provider = self.resolve(name)
                if await provider.check_availability():
                    logger.info(f"Found available provider: {name}")
                    return provider
            except Exception as e:
                logger.warning(f"Provider {name} failed: {e}")

        raise NoProviderAvailableError("No video generation providers are currently available")

    async def available_providers(self) -> list[str]:
        """List the names of all providers that are configured and available."""
        available = []
        for name in PROVIDER_NAMES:
            try:
                if await self.resolve(name).check_availability():
                    available.append(name)
            except ConfigurationError as e:
                logger.debug(f"Skipping provider {name}: {e}")
        return available
