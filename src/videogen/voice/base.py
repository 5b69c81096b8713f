"""Base interface for voice cloning providers.

A voice cloning provider registers a new voice from audio samples, speaks
text with a registered voice, and removes voices on request.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import httpx

from src.videogen.models import VoiceCloneRequest, VoiceIdentity

logger = logging.getLogger(__name__)


class VoiceCloneProvider(ABC):
    """Abstract base class for voice cloning vendors."""

    name: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize provider.

        Args:
            api_key: API key for authentication.
            base_url: Vendor API base URL.
            timeout: Request timeout in seconds. Defaults to 60.
            transport: Optional httpx transport (used to stub the vendor in tests).
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    def _get_headers(self) -> dict[str, str]:
        """Get authentication headers for API requests."""
        pass

    def _client(self, **kwargs: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._get_headers(),
            timeout=self.timeout,
            transport=self._transport,
            **kwargs,
        )

    @staticmethod
    def _read_sample(path: str) -> tuple[str, bytes]:
        sample = Path(path)
        return sample.name, sample.read_bytes()

    @abstractmethod
    async def clone_voice(self, request: VoiceCloneRequest) -> VoiceIdentity:
        """Register a new voice from audio samples.

        Args:
            request: Voice metadata and local sample paths.

        Returns:
            The registered voice, ``ready`` or ``processing`` depending on
            the vendor.

        Raises:
            VoiceCloneError: If the vendor rejects the samples.
        """
        pass

    @abstractmethod
    async def synthesize(self, provider_voice_id: str, text: str, language_code: str = "en") -> bytes:
        """Speak text with a registered voice.

        Args:
            provider_voice_id: Vendor-side voice id.
            text: Text to speak.
            language_code: Language of the text.

        Returns:
            Encoded audio bytes (MP3).

        Raises:
            SynthesisError: If the vendor call fails.
        """
        pass

    @abstractmethod
    async def delete_voice(self, provider_voice_id: str) -> None:
        """Delete a voice at the vendor.

        Raises:
            httpx.HTTPError: If the vendor call fails.
        """
        pass

    @abstractmethod
    async def check_availability(self) -> bool:
        """Probe the vendor account. Never raises."""
        pass
