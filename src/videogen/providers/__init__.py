"""Avatar video providers.

This module provides avatar video generation through third-party vendors
behind a uniform submit / poll / probe contract:
- d-id: photoreal talking avatars
- heygen: marketing-style avatar videos
- sora: cinematic generation (not yet launched, always unavailable)
"""

from src.videogen.providers.base import HTTPVideoProvider, VideoProvider
from src.videogen.providers.did import DIDProvider
from src.videogen.providers.heygen import HeyGenProvider
from src.videogen.providers.registry import PROVIDER_NAMES, ProviderRegistry
from src.videogen.providers.sora import SoraProvider

__all__ = [
    "VideoProvider",
    "HTTPVideoProvider",
    "DIDProvider",
    "HeyGenProvider",
    "SoraProvider",
    "ProviderRegistry",
    "PROVIDER_NAMES",
]
