"""D-ID provider implementation.

D-ID creates photorealistic talking avatars from a presenter image and a
script, narrated either by a Microsoft neural voice or by supplied audio.
"""

import logging
from typing import Any

from src.videogen.language import resolve_voice
from src.videogen.models import GenerationJob, GenerationRequest, JobStatus
from src.videogen.providers.base import HTTPVideoProvider, parse_duration

logger = logging.getLogger(__name__)

DEFAULT_PRESENTER_URL = "https://create-images-results.d-id.com/default-presenter.jpg"


class DIDProvider(HTTPVideoProvider):
    """Photoreal talking avatar videos via the D-ID ``/talks`` API."""

    name = "d-id"
    default_base_url = "https://api.d-id.com"
    status_map = {
        "done": JobStatus.COMPLETED,
        "error": JobStatus.FAILED,
        "rejected": JobStatus.FAILED,
    }

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Basic {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _build_script(self, request: GenerationRequest) -> dict[str, Any]:
        if request.audio_url:
            return {"type": "audio", "audio_url": request.audio_url}

        voice_id = request.voice_id or resolve_voice(request.language_code, self.name)
        return {
            "type": "text",
            "input": request.script,
            "provider": {"type": "microsoft", "voice_id": voice_id},
        }

    async def submit(self, request: GenerationRequest) -> GenerationJob:
        payload = {
            "script": self._build_script(request),
            "source_url": request.avatar_id or DEFAULT_PRESENTER_URL,
            "config": {"stitch": True, "result_format": "mp4"},
        }
        body = await self._request("POST", "/talks", json=payload)
        job_id = self._require_id(body, "id", self.name)
        logger.info(f"D-ID talk created: {job_id}")
        return GenerationJob(job_id=job_id, provider=self.name, status=JobStatus.PROCESSING)

    async def fetch_status(self, job_id: str) -> GenerationJob:
        body = await self._request("GET", f"/talks/{job_id}")
        raw_status = body.get("status")
        return GenerationJob(
            job_id=str(body.get("id") or job_id),
            provider=self.name,
            status=self.map_status(raw_status),
            video_url=body.get("result_url"),
            thumbnail_url=body.get("thumbnail_url"),
            duration_seconds=parse_duration(body.get("duration")),
            raw_status=raw_status,
        )

    async def check_availability(self) -> bool:
        return await self._probe("/credits")
