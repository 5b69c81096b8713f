"""ElevenLabs voice cloning provider.

ElevenLabs instant voice cloning registers a voice synchronously, so new
voices are ready as soon as the upload succeeds.
"""

import logging
from typing import Optional

import httpx

from src.videogen.errors import SynthesisError, VoiceCloneError
from src.videogen.models import VoiceCloneRequest, VoiceIdentity, VoiceStatus
from src.videogen.voice.base import VoiceCloneProvider

logger = logging.getLogger(__name__)


class ElevenLabsVoiceCloner(VoiceCloneProvider):
    """Voice cloning and multilingual speech via ElevenLabs."""

    name = "elevenlabs"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.elevenlabs.io/v1",
        model_id: str = "eleven_multilingual_v2",
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, transport=transport)
        self.model_id = model_id

    def _get_headers(self) -> dict[str, str]:
        return {"xi-api-key": self.api_key}

    async def clone_voice(self, request: VoiceCloneRequest) -> VoiceIdentity:
        files = []
        for audio_path in request.audio_files:
            filename, content = self._read_sample(audio_path)
            files.append(("files", (filename, content, "audio/mpeg")))

        data = {"name": request.name, "description": request.description or ""}

        try:
            async with self._client() as client:
                response = await client.post("/voices/add", data=data, files=files)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs voice cloning error: {e.response.text}")
            raise VoiceCloneError(f"Voice cloning failed: {e}") from e
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"ElevenLabs voice cloning error: {e}")
            raise VoiceCloneError(f"Voice cloning failed: {e}") from e

        voice_id = body.get("voice_id") if isinstance(body, dict) else None
        if not voice_id:
            raise VoiceCloneError(f"ElevenLabs response did not include a voice_id: {body}")

        return VoiceIdentity(
            id=voice_id,
            name=request.name,
            relationship=request.relationship,
            description=request.description,
            gender=request.gender,
            language_code=request.language_code,
            provider="elevenlabs",
            provider_voice_id=voice_id,
            status=VoiceStatus.READY,
        )

    async def synthesize(self, provider_voice_id: str, text: str, language_code: str = "en") -> bytes:
        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    f"/text-to-speech/{provider_voice_id}",
                    json=payload,
                    headers={"Accept": "audio/mpeg"},
                )
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs TTS error: {e.response.text}")
            raise SynthesisError(f"Speech generation failed: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"ElevenLabs TTS error: {e}")
            raise SynthesisError(f"Speech generation failed: {e}") from e

    async def delete_voice(self, provider_voice_id: str) -> None:
        async with self._client() as client:
            response = await client.delete(f"/voices/{provider_voice_id}")
            response.raise_for_status()

    async def check_availability(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/user")
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"ElevenLabs availability check failed: {e}")
            return False
