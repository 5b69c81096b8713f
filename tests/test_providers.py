"""Unit tests for avatar video providers.

Vendors are stubbed with ``httpx.MockTransport``; no network calls are made.
"""

import json
from typing import Callable

import httpx
import pytest

from src.videogen.errors import ProviderRequestError
from src.videogen.models import GenerationRequest, JobStatus, ProviderConfig
from src.videogen.providers.base import VideoProvider, parse_duration
from src.videogen.providers.did import DEFAULT_PRESENTER_URL, DIDProvider
from src.videogen.providers.heygen import DEFAULT_AVATAR_ID, HeyGenProvider
from src.videogen.providers.sora import SoraProvider

Handler = Callable[[httpx.Request], httpx.Response]


def _config(**overrides) -> ProviderConfig:
    return ProviderConfig(api_key=overrides.pop("api_key", "test-key"), **overrides)


def _request(**overrides) -> GenerationRequest:
    data = {"script": "You are stronger than you think.", "duration_seconds": 8}
    data.update(overrides)
    return GenerationRequest(**data)


class Recorder:
    """Mock transport handler that records requests."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class TestProviderBase:
    """Test shared provider helpers."""

    def test_provider_interface(self) -> None:
        """Test that provider interface is properly defined."""
        assert hasattr(VideoProvider, "submit")
        assert hasattr(VideoProvider, "fetch_status")
        assert hasattr(VideoProvider, "check_availability")

    def test_parse_duration(self) -> None:
        """Test fractional durations round up to whole seconds."""
        assert parse_duration(12.2) == 13
        assert parse_duration("7") == 7
        assert parse_duration(None) is None
        assert parse_duration("n/a") is None

    def test_base_url_override(self) -> None:
        """Test configured base URL wins over the vendor default."""
        provider = DIDProvider(_config(base_url="https://did.internal/"))

        assert provider.base_url == "https://did.internal"
        assert DIDProvider(_config()).base_url == "https://api.d-id.com"

    def test_timeout_from_config(self) -> None:
        """Test millisecond timeouts are converted."""
        provider = HeyGenProvider(_config(timeout_ms=2500))

        assert provider.timeout == 2.5


class TestDIDProvider:
    """Test D-ID provider."""

    @pytest.mark.asyncio
    async def test_submit_text_script(self) -> None:
        """Test submit builds a text script with a resolved voice."""
        recorder = Recorder(lambda r: httpx.Response(201, json={"id": "tlk_1", "status": "created"}))
        provider = DIDProvider(_config(api_key="abc"), transport=recorder.transport)

        job = await provider.submit(_request(language_code="es"))

        assert job.job_id == "tlk_1"
        assert job.provider == "d-id"
        assert job.status == JobStatus.PROCESSING

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert sent.url == "https://api.d-id.com/talks"
        assert sent.headers["Authorization"] == "Basic abc"

        body = recorder.json_body()
        assert body["source_url"] == DEFAULT_PRESENTER_URL
        assert body["script"]["type"] == "text"
        assert body["script"]["input"] == "You are stronger than you think."
        assert body["script"]["provider"] == {"type": "microsoft", "voice_id": "es-ES-ElviraNeural"}

    @pytest.mark.asyncio
    async def test_submit_explicit_voice_and_avatar(self) -> None:
        """Test caller voice and presenter are used as given."""
        recorder = Recorder(lambda r: httpx.Response(201, json={"id": "tlk_2"}))
        provider = DIDProvider(_config(), transport=recorder.transport)

        await provider.submit(_request(voice_id="en-US-GuyNeural", avatar_id="https://img.test/me.jpg"))

        body = recorder.json_body()
        assert body["script"]["provider"]["voice_id"] == "en-US-GuyNeural"
        assert body["source_url"] == "https://img.test/me.jpg"

    @pytest.mark.asyncio
    async def test_submit_audio_script(self) -> None:
        """Test pre-rendered narration is sent as an audio script."""
        recorder = Recorder(lambda r: httpx.Response(201, json={"id": "tlk_3"}))
        provider = DIDProvider(_config(), transport=recorder.transport)

        await provider.submit(_request(audio_url="https://cdn.test/narration.mp3"))

        assert recorder.json_body()["script"] == {"type": "audio", "audio_url": "https://cdn.test/narration.mp3"}

    @pytest.mark.asyncio
    async def test_submit_vendor_error(self) -> None:
        """Test vendor rejections carry the raw message."""
        recorder = Recorder(lambda r: httpx.Response(401, text='{"kind":"AuthorizationError"}'))
        provider = DIDProvider(_config(), transport=recorder.transport)

        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.submit(_request())

        assert exc_info.value.provider == "d-id"
        assert exc_info.value.status_code == 401
        assert "AuthorizationError" in exc_info.value.vendor_message

    @pytest.mark.asyncio
    async def test_submit_missing_id(self) -> None:
        """Test a response without a job id is an error."""
        recorder = Recorder(lambda r: httpx.Response(201, json={"status": "created"}))
        provider = DIDProvider(_config(), transport=recorder.transport)

        with pytest.raises(ProviderRequestError):
            await provider.submit(_request())

    @pytest.mark.asyncio
    async def test_fetch_status_done(self) -> None:
        """Test a finished talk maps to completed with URLs."""
        recorder = Recorder(
            lambda r: httpx.Response(
                200,
                json={
                    "id": "tlk_1",
                    "status": "done",
                    "result_url": "https://d-id.test/tlk_1.mp4",
                    "thumbnail_url": "https://d-id.test/tlk_1.jpg",
                    "duration": 8.4,
                },
            )
        )
        provider = DIDProvider(_config(), transport=recorder.transport)

        job = await provider.fetch_status("tlk_1")

        assert recorder.requests[0].url.path == "/talks/tlk_1"
        assert job.status == JobStatus.COMPLETED
        assert job.video_url == "https://d-id.test/tlk_1.mp4"
        assert job.thumbnail_url == "https://d-id.test/tlk_1.jpg"
        assert job.duration_seconds == 9
        assert job.raw_status == "done"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "vendor_status,expected",
        [
            ("created", JobStatus.PROCESSING),
            ("started", JobStatus.PROCESSING),
            ("error", JobStatus.FAILED),
            ("rejected", JobStatus.FAILED),
            ("DONE", JobStatus.COMPLETED),
            ("something-new", JobStatus.PROCESSING),
        ],
    )
    async def test_status_mapping(self, vendor_status: str, expected: JobStatus) -> None:
        """Test vendor statuses map onto canonical statuses; unknown means processing."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"id": "tlk_1", "status": vendor_status}))
        provider = DIDProvider(_config(), transport=recorder.transport)

        job = await provider.fetch_status("tlk_1")

        assert job.status == expected

    @pytest.mark.asyncio
    async def test_fetch_status_non_object_body(self) -> None:
        """Test a JSON body that is not an object raises ProviderRequestError."""
        recorder = Recorder(lambda r: httpx.Response(200, json=["unexpected"]))
        provider = DIDProvider(_config(), transport=recorder.transport)

        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.fetch_status("tlk_1")

        assert exc_info.value.provider == "d-id"
        assert "unexpected" in exc_info.value.vendor_message

    @pytest.mark.asyncio
    async def test_fetch_status_non_json_body(self) -> None:
        """Test an HTML error page raises ProviderRequestError."""
        recorder = Recorder(lambda r: httpx.Response(200, text="<html>maintenance</html>"))
        provider = DIDProvider(_config(), transport=recorder.transport)

        with pytest.raises(ProviderRequestError):
            await provider.fetch_status("tlk_1")

    @pytest.mark.asyncio
    async def test_check_availability(self) -> None:
        """Test availability probes the credits endpoint."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"remaining": 20}))
        provider = DIDProvider(_config(), transport=recorder.transport)

        assert await provider.check_availability() is True
        assert recorder.requests[0].url.path == "/credits"

    @pytest.mark.asyncio
    async def test_check_availability_never_raises(self) -> None:
        """Test probe failures report unavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = DIDProvider(_config(), transport=httpx.MockTransport(handler))

        assert await provider.check_availability() is False


class TestHeyGenProvider:
    """Test HeyGen provider."""

    @pytest.mark.asyncio
    async def test_submit(self) -> None:
        """Test submit builds a vertical avatar video request."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"error": None, "data": {"video_id": "vid_9"}}))
        provider = HeyGenProvider(_config(api_key="hg"), transport=recorder.transport)

        job = await provider.submit(_request(language_code="ko"))

        assert job.job_id == "vid_9"
        assert job.provider == "heygen"
        sent = recorder.requests[0]
        assert sent.url == "https://api.heygen.com/v2/video/generate"
        assert sent.headers["X-Api-Key"] == "hg"

        body = recorder.json_body()
        video_input = body["video_inputs"][0]
        assert video_input["character"]["avatar_id"] == DEFAULT_AVATAR_ID
        assert video_input["voice"] == {
            "type": "text",
            "input_text": "You are stronger than you think.",
            "voice_id": "ko-KR-SunHiNeural",
        }
        assert body["dimension"] == {"width": 1080, "height": 1920}
        assert body["aspect_ratio"] == "9:16"

    @pytest.mark.asyncio
    async def test_submit_audio_voice(self) -> None:
        """Test pre-rendered narration is sent as audio voice input."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"data": {"video_id": "vid_10"}}))
        provider = HeyGenProvider(_config(), transport=recorder.transport)

        await provider.submit(_request(audio_url="https://cdn.test/n.mp3"))

        voice = recorder.json_body()["video_inputs"][0]["voice"]
        assert voice == {"type": "audio", "audio_url": "https://cdn.test/n.mp3"}

    @pytest.mark.asyncio
    async def test_fetch_status(self) -> None:
        """Test status payloads are unwrapped from the data envelope."""
        recorder = Recorder(
            lambda r: httpx.Response(
                200,
                json={
                    "data": {
                        "video_id": "vid_9",
                        "status": "completed",
                        "video_url": "https://heygen.test/vid_9.mp4",
                        "thumbnail_url": "https://heygen.test/vid_9.jpg",
                        "duration": 11,
                    }
                },
            )
        )
        provider = HeyGenProvider(_config(), transport=recorder.transport)

        job = await provider.fetch_status("vid_9")

        assert recorder.requests[0].url.path == "/v2/video/status/vid_9"
        assert job.status == JobStatus.COMPLETED
        assert job.video_url == "https://heygen.test/vid_9.mp4"
        assert job.duration_seconds == 11

    @pytest.mark.asyncio
    async def test_fetch_status_pending(self) -> None:
        """Test intermediate statuses remain processing."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"data": {"status": "pending"}}))
        provider = HeyGenProvider(_config(), transport=recorder.transport)

        job = await provider.fetch_status("vid_9")

        assert job.status == JobStatus.PROCESSING
        assert job.job_id == "vid_9"

    @pytest.mark.asyncio
    async def test_fetch_status_numeric_status(self) -> None:
        """Test a non-string vendor status is treated as still processing."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"data": {"status": 3}}))
        provider = HeyGenProvider(_config(), transport=recorder.transport)

        job = await provider.fetch_status("vid_9")

        assert job.status == JobStatus.PROCESSING
        assert job.raw_status == "3"

    def test_map_status_ignores_non_strings(self) -> None:
        """Test status mapping tolerates missing and non-string values."""
        provider = HeyGenProvider(_config())

        assert provider.map_status(None) == JobStatus.PROCESSING
        assert provider.map_status(3) == JobStatus.PROCESSING
        assert provider.map_status({"state": "done"}) == JobStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_check_availability_unauthorized(self) -> None:
        """Test a rejected key reports unavailable."""
        recorder = Recorder(lambda r: httpx.Response(401, json={"error": "unauthorized"}))
        provider = HeyGenProvider(_config(), transport=recorder.transport)

        assert await provider.check_availability() is False
        assert recorder.requests[0].url.path == "/v2/user/remaining_quota"


class TestSoraProvider:
    """Test Sora stub provider."""

    @pytest.mark.asyncio
    async def test_never_available(self) -> None:
        """Test Sora never reports available and makes no calls."""
        recorder = Recorder(lambda r: httpx.Response(200, json={}))
        provider = SoraProvider(_config(), transport=recorder.transport)

        assert await provider.check_availability() is False
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_submit_not_launched(self) -> None:
        """Test a 404 explains that Sora is not yet available."""
        recorder = Recorder(lambda r: httpx.Response(404, json={"error": "not found"}))
        provider = SoraProvider(_config(), transport=recorder.transport)

        with pytest.raises(ProviderRequestError, match="not yet publicly available"):
            await provider.submit(_request())

    @pytest.mark.asyncio
    async def test_submit_prompt(self) -> None:
        """Test the prompt includes style and voice-over text."""
        recorder = Recorder(lambda r: httpx.Response(200, json={"id": "sora_1"}))
        provider = SoraProvider(_config(), transport=recorder.transport)

        job = await provider.submit(_request(style="calm"))

        body = recorder.json_body()
        assert job.job_id == "sora_1"
        assert "peaceful, serene setting" in body["prompt"]
        assert 'Voice-over text: "You are stronger than you think."' in body["prompt"]
        assert body["duration"] == 8
        assert recorder.requests[0].headers["Authorization"] == "Bearer test-key"
