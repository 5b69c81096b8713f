"""Play.ht voice cloning provider.

Play.ht clones asynchronously: samples are uploaded one by one, then a voice
is created from the uploaded sample URLs and starts out ``processing``.
Speech is rendered server-side and downloaded from the returned audio URL.
"""

import logging
from typing import Optional

import httpx

from src.videogen.errors import SynthesisError, VoiceCloneError
from src.videogen.models import VoiceCloneRequest, VoiceIdentity, VoiceStatus
from src.videogen.voice.base import VoiceCloneProvider

logger = logging.getLogger(__name__)


class PlayHTVoiceCloner(VoiceCloneProvider):
    """Voice cloning and speech via Play.ht."""

    name = "playht"

    def __init__(
        self,
        api_key: str,
        user_id: Optional[str] = None,
        base_url: str = "https://api.play.ht/api/v2",
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, transport=transport)
        self.user_id = user_id

    def _get_headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.user_id:
            headers["X-USER-ID"] = self.user_id
        return headers

    async def clone_voice(self, request: VoiceCloneRequest) -> VoiceIdentity:
        try:
            async with self._client() as client:
                sample_urls = []
                for audio_path in request.audio_files:
                    filename, content = self._read_sample(audio_path)
                    upload = await client.post(
                        "/cloned-voices/instant", files={"file": (filename, content, "audio/mpeg")}
                    )
                    upload.raise_for_status()
                    sample_urls.append(upload.json()["file_url"])

                response = await client.post(
                    "/cloned-voices",
                    json={"voice_name": request.name, "sample_file_urls": sample_urls},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Play.ht voice cloning error: {e.response.text}")
            raise VoiceCloneError(f"Voice cloning failed: {e}") from e
        except (httpx.RequestError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Play.ht voice cloning error: {e}")
            raise VoiceCloneError(f"Voice cloning failed: {e}") from e

        voice_id = body.get("id") if isinstance(body, dict) else None
        if not voice_id:
            raise VoiceCloneError(f"Play.ht response did not include an id: {body}")

        return VoiceIdentity(
            id=voice_id,
            name=request.name,
            relationship=request.relationship,
            description=request.description,
            gender=request.gender,
            language_code=request.language_code,
            provider="playht",
            provider_voice_id=voice_id,
            status=VoiceStatus.PROCESSING,
        )

    async def synthesize(self, provider_voice_id: str, text: str, language_code: str = "en") -> bytes:
        try:
            async with self._client(follow_redirects=True) as client:
                response = await client.post(
                    "/tts", json={"text": text, "voice": provider_voice_id, "output_format": "mp3"}
                )
                response.raise_for_status()
                audio_url = response.json()["audio_url"]

                # audio_url is absolute; httpx ignores base_url for it
                audio = await client.get(audio_url)
                audio.raise_for_status()
                return audio.content
        except httpx.HTTPStatusError as e:
            logger.error(f"Play.ht TTS error: {e.response.text}")
            raise SynthesisError(f"Speech generation failed: {e}") from e
        except (httpx.RequestError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Play.ht TTS error: {e}")
            raise SynthesisError(f"Speech generation failed: {e}") from e

    async def delete_voice(self, provider_voice_id: str) -> None:
        async with self._client() as client:
            response = await client.delete(f"/cloned-voices/{provider_voice_id}")
            response.raise_for_status()

    async def check_availability(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/user")
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Play.ht availability check failed: {e}")
            return False
