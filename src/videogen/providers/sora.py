"""Sora provider implementation (not yet launched).

Sora is not publicly available. The request shapes below follow OpenAI's
existing API conventions and may change at launch. ``check_availability``
always reports False so the registry never selects this provider, while the
fallback chain still lists it.
"""

import logging

from src.videogen.errors import ProviderRequestError
from src.videogen.models import GenerationJob, GenerationRequest, JobStatus
from src.videogen.providers.base import HTTPVideoProvider, parse_duration

logger = logging.getLogger(__name__)

STYLE_DESCRIPTIONS = {
    "professional": "professional, business-like setting with clean background",
    "casual": "casual, friendly atmosphere with warm lighting",
    "energetic": "vibrant, energetic environment with dynamic lighting",
    "calm": "peaceful, serene setting with soft, natural lighting",
}


class SoraProvider(HTTPVideoProvider):
    """Cinematic text-to-video generation (stub until the API is public)."""

    name = "sora"
    default_base_url = "https://api.openai.com/v1"
    status_map = {
        "completed": JobStatus.COMPLETED,
        "succeeded": JobStatus.COMPLETED,
        "failed": JobStatus.FAILED,
        "error": JobStatus.FAILED,
    }

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def build_prompt(request: GenerationRequest) -> str:
        """Build a scene prompt describing the avatar and its voice-over."""
        style = STYLE_DESCRIPTIONS[request.style]
        return (
            "Create a motivational video featuring a realistic avatar speaking to camera.\n"
            f"{style}. The avatar should appear genuine, trustworthy, and encouraging.\n"
            "High quality cinematography, natural movements, engaging eye contact.\n"
            "Vertical 9:16 short-form format.\n\n"
            f'Voice-over text: "{request.script}"'
        )

    async def submit(self, request: GenerationRequest) -> GenerationJob:
        payload = {
            "prompt": self.build_prompt(request),
            "duration": request.duration_seconds,
            "aspect_ratio": "9:16",
            "quality": "hd",
            "style": request.style,
        }
        try:
            body = await self._request("POST", "/sora/generate", json=payload)
        except ProviderRequestError as e:
            if e.status_code == 404 or e.status_code is None:
                raise ProviderRequestError(
                    "Sora is not yet publicly available. Use d-id or heygen instead.",
                    provider=self.name,
                    status_code=e.status_code,
                    vendor_message=e.vendor_message,
                ) from e
            raise
        job_id = self._require_id(body, "id", self.name)
        return GenerationJob(job_id=job_id, provider=self.name, status=JobStatus.PROCESSING)

    async def fetch_status(self, job_id: str) -> GenerationJob:
        body = await self._request("GET", f"/sora/videos/{job_id}")
        raw_status = body.get("status")
        return GenerationJob(
            job_id=str(body.get("id") or job_id),
            provider=self.name,
            status=self.map_status(raw_status),
            video_url=body.get("url"),
            duration_seconds=parse_duration(body.get("duration")),
            raw_status=raw_status,
        )

    async def check_availability(self) -> bool:
        # TODO: probe GET /models once Sora is listed there
        return False
