"""HeyGen provider implementation.

HeyGen renders marketing-style avatar videos with natural movement. Videos
are requested in vertical 9:16 format for short-form feeds.
"""

import logging
from typing import Any

from src.videogen.language import resolve_voice
from src.videogen.models import GenerationJob, GenerationRequest, JobStatus
from src.videogen.providers.base import HTTPVideoProvider, parse_duration

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_ID = "josh_lite3_20230714"
VIDEO_DIMENSION = {"width": 1080, "height": 1920}


class HeyGenProvider(HTTPVideoProvider):
    """Avatar videos via the HeyGen v2 API."""

    name = "heygen"
    default_base_url = "https://api.heygen.com/v2"
    status_map = {
        "completed": JobStatus.COMPLETED,
        "failed": JobStatus.FAILED,
    }

    def _get_headers(self) -> dict[str, str]:
        return {
            "X-Api-Key": self.config.api_key,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _unwrap(body: dict[str, Any]) -> dict[str, Any]:
        # HeyGen wraps payloads in {"error": ..., "data": {...}}
        data = body.get("data")
        return data if isinstance(data, dict) else body

    def _build_voice(self, request: GenerationRequest) -> dict[str, Any]:
        if request.audio_url:
            return {"type": "audio", "audio_url": request.audio_url}

        voice_id = request.voice_id or resolve_voice(request.language_code, self.name)
        return {"type": "text", "input_text": request.script, "voice_id": voice_id}

    async def submit(self, request: GenerationRequest) -> GenerationJob:
        payload = {
            "video_inputs": [
                {
                    "character": {
                        "type": "avatar",
                        "avatar_id": request.avatar_id or DEFAULT_AVATAR_ID,
                        "avatar_style": "normal",
                    },
                    "voice": self._build_voice(request),
                }
            ],
            "dimension": VIDEO_DIMENSION,
            "aspect_ratio": "9:16",
        }
        body = self._unwrap(await self._request("POST", "/video/generate", json=payload))
        job_id = self._require_id(body, "video_id", self.name)
        logger.info(f"HeyGen video queued: {job_id}")
        return GenerationJob(job_id=job_id, provider=self.name, status=JobStatus.PROCESSING)

    async def fetch_status(self, job_id: str) -> GenerationJob:
        body = self._unwrap(await self._request("GET", f"/video/status/{job_id}"))
        raw_status = body.get("status")
        return GenerationJob(
            job_id=str(body.get("video_id") or job_id),
            provider=self.name,
            status=self.map_status(raw_status),
            video_url=body.get("video_url"),
            thumbnail_url=body.get("thumbnail_url"),
            duration_seconds=parse_duration(body.get("duration")),
            raw_status=raw_status,
        )

    async def check_availability(self) -> bool:
        return await self._probe("/user/remaining_quota")
