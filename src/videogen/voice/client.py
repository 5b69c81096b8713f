"""Cloned-voice narration client.

``VoiceSynthesisClient`` dispatches clone, synthesize and delete calls to the
vendor that owns a voice. Vendor instances are created lazily from settings
and reused for the lifetime of the client.
"""

import asyncio
import io
import logging
from typing import Optional

import httpx
from pydub import AudioSegment

from src.config import get_settings
from src.config.settings import Settings
from src.videogen.errors import ConfigurationError, StorageError, SynthesisError, VoiceCloneError
from src.videogen.models import VoiceCloneRequest, VoiceIdentity, VoiceStatus
from src.videogen.storage import AssetStorage
from src.videogen.voice.base import VoiceCloneProvider
from src.videogen.voice.elevenlabs import ElevenLabsVoiceCloner
from src.videogen.voice.playht import PlayHTVoiceCloner

logger = logging.getLogger(__name__)

VOICE_PROVIDER_NAMES = ("elevenlabs", "playht")

# Fewer samples than this still clone, but with noticeably worse likeness
RECOMMENDED_SAMPLE_COUNT = 3


class VoiceSynthesisClient:
    """Clones voices and narrates text with them.

    Example:
        ```python
        client = VoiceSynthesisClient(storage=LocalAssetStorage())
        identity = await client.clone(
            VoiceCloneRequest(name="Mom", audio_files=["a.mp3", "b.mp3", "c.mp3"]),
            user_id="user-42",
        )
        audio = await client.synthesize(identity, "You can do this.")
        ```
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[AssetStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sample_rate: int = 44100,
        channels: int = 1,
    ) -> None:
        """Initialize client.

        Args:
            settings: Optional application settings. If None, uses get_settings().
            storage: Optional storage used to publish the first clone sample.
            transport: Optional httpx transport passed to every vendor.
            sample_rate: Sample rate of synthesized audio. Defaults to 44100.
            channels: Channel count of synthesized audio. Defaults to 1 (mono).
        """
        self.settings = settings or get_settings()
        self.storage = storage
        self.sample_rate = sample_rate
        self.channels = channels
        self._transport = transport
        self._providers: dict[str, VoiceCloneProvider] = {}

    def get_provider(self, name: str) -> VoiceCloneProvider:
        """Get (and cache) the vendor adapter for a provider name.

        Raises:
            ConfigurationError: If the name is unknown or has no API key.
        """
        if name in self._providers:
            return self._providers[name]

        if name == "elevenlabs":
            config = self.settings.elevenlabs
            if not config.api_key:
                raise ConfigurationError("ElevenLabs voice cloning requires ELEVENLABS_API_KEY to be set.")
            provider: VoiceCloneProvider = ElevenLabsVoiceCloner(
                api_key=config.api_key,
                base_url=config.base_url,
                model_id=config.model_id,
                timeout=config.timeout,
                transport=self._transport,
            )
        elif name == "playht":
            config = self.settings.playht
            if not config.api_key:
                raise ConfigurationError("Play.ht voice cloning requires PLAYHT_API_KEY to be set.")
            provider = PlayHTVoiceCloner(
                api_key=config.api_key,
                user_id=config.user_id,
                base_url=config.base_url,
                timeout=config.timeout,
                transport=self._transport,
            )
        else:
            raise ConfigurationError(f"Unknown voice cloning provider: {name}")

        self._providers[name] = provider
        return provider

    async def clone(self, request: VoiceCloneRequest, user_id: Optional[str] = None) -> VoiceIdentity:
        """Clone a voice with the configured vendor.

        Args:
            request: Voice metadata and local sample paths.
            user_id: Owner of the voice; used to key the published sample.

        Returns:
            New voice identity.

        Raises:
            VoiceCloneError: If no samples are given, a sample cannot be read,
                or the vendor rejects the upload.
            ConfigurationError: If the configured vendor has no API key.
        """
        if not request.audio_files:
            raise VoiceCloneError("At least one audio sample is required to clone a voice")
        if len(request.audio_files) < RECOMMENDED_SAMPLE_COUNT:
            logger.warning(
                f"Cloning voice '{request.name}' from {len(request.audio_files)} sample(s); "
                f"{RECOMMENDED_SAMPLE_COUNT}+ samples give better results"
            )

        provider = self.get_provider(self.settings.voice_clone.provider)
        try:
            identity = await provider.clone_voice(request)
        except OSError as e:
            raise VoiceCloneError(f"Failed to read audio sample: {e}") from e

        logger.info(f"Cloned voice '{request.name}' with {provider.name}: {identity.provider_voice_id}")

        if self.storage is not None and user_id:
            key = f"voice-samples/{user_id}/{identity.id}_sample.mp3"
            try:
                identity.sample_audio_url = await self.storage.persist(request.audio_files[0], key)
            except StorageError as e:
                logger.warning(f"Voice {identity.id} cloned but its sample was not stored: {e}")

        return identity

    async def synthesize(self, identity: VoiceIdentity, text: str) -> bytes:
        """Narrate text with a cloned voice.

        Args:
            identity: Cloned voice; its provider selects the vendor.
            text: Text to speak.

        Returns:
            MP3 audio bytes (44.1kHz mono by default).

        Raises:
            SynthesisError: If the voice is not ready or the vendor fails.
        """
        if identity.status != VoiceStatus.READY:
            raise SynthesisError(f"Voice {identity.id} is not ready (status: {identity.status.value})")

        try:
            provider = self.get_provider(identity.provider)
        except ConfigurationError as e:
            raise SynthesisError(str(e)) from e

        audio_data = await provider.synthesize(identity.provider_voice_id, text, identity.language_code)
        if not audio_data:
            raise SynthesisError(f"{provider.name} returned empty audio for voice {identity.id}")

        return await asyncio.to_thread(self._normalize_audio, audio_data)

    def _normalize_audio(self, audio_data: bytes) -> bytes:
        """Re-encode vendor audio as MP3 at the client's sample rate and channel count.

        Raises:
            SynthesisError: If the audio cannot be decoded or encoded.
        """
        try:
            audio = AudioSegment.from_file(io.BytesIO(audio_data), format="mp3")

            if audio.channels != self.channels:
                audio = audio.set_channels(self.channels)
            if audio.frame_rate != self.sample_rate:
                audio = audio.set_frame_rate(self.sample_rate)

            buffer = io.BytesIO()
            audio.export(buffer, format="mp3")
            return buffer.getvalue()
        except Exception as e:
            logger.error(f"Audio format conversion failed: {e}")
            raise SynthesisError(f"Failed to convert audio format: {e}") from e

    async def delete_voice(self, identity: VoiceIdentity) -> bool:
        """Delete a voice at its vendor, best-effort.

        Vendor failures are logged and reported through the return value;
        the caller deactivates the voice locally either way.

        Returns:
            True if the vendor confirmed the deletion.
        """
        try:
            provider = self.get_provider(identity.provider)
            await provider.delete_voice(identity.provider_voice_id)
        except Exception as e:
            logger.warning(f"Failed to delete voice {identity.id} at {identity.provider}: {e}")
            return False

        logger.info(f"Deleted voice {identity.id} at {identity.provider}")
        return True

    async def available_providers(self) -> list[str]:
        """Probe every vendor that has credentials configured."""
        available = []
        for name in VOICE_PROVIDER_NAMES:
            try:
                provider = self.get_provider(name)
            except ConfigurationError:
                continue
            if await provider.check_availability():
                available.append(name)
        return available
