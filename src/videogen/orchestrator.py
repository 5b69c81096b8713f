"""Avatar video orchestration.

The orchestrator turns a motivational script into a finished avatar video:
it selects a provider, submits a job, polls the job until it finishes or
times out, and optionally layers background music over the result.

Per-call state::

    selecting -> submitted -> polling -> completed | failed | timed_out
"""

import asyncio
import logging
import math
import os
import tempfile
import time
import uuid
from pathlib import Path
from typing import Awaitable, Callable, Optional

from src.config import get_settings
from src.config.settings import Settings
from src.videogen.duration import estimate_duration
from src.videogen.errors import GenerationFailedError, GenerationTimeoutError
from src.videogen.models import (
    GenerationJob,
    GenerationOptions,
    GenerationRequest,
    GenerationResult,
    JobStatus,
)
from src.videogen.music import AudioMixer
from src.videogen.providers.base import VideoProvider
from src.videogen.providers.registry import ProviderRegistry
from src.videogen.state import GenerationState, GenerationStateTracker, StateCallback
from src.videogen.storage import AssetStorage, LocalAssetStorage
from src.videogen.voice.client import VoiceSynthesisClient

logger = logging.getLogger(__name__)


class AvatarVideoOrchestrator:
    """Coordinates provider selection, job polling and post-processing.

    The orchestrator holds no per-request state; each call to
    ``generate_motivational_video`` owns its job, its state tracker and its
    temporary files.

    Example:
        ```python
        orchestrator = AvatarVideoOrchestrator()
        result = await orchestrator.generate_motivational_video(
            "user-42",
            "Every morning is a fresh start.",
            GenerationOptions(style="calm", music_track="motivational_2"),
        )
        print(result.video_url)
        ```
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        mixer: Optional[AudioMixer] = None,
        storage: Optional[AssetStorage] = None,
        voice_client: Optional[VoiceSynthesisClient] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize orchestrator.

        Args:
            registry: Provider registry. Defaults to one built from settings.
            mixer: Audio mixer for background music.
            storage: Storage used to publish mixed videos and narration audio.
            voice_client: Client used for cloned-voice narration. Created on
                first use if not given.
            settings: Optional application settings. If None, uses get_settings().
            clock: Monotonic clock in seconds; injectable for tests.
            sleep: Async sleep; injectable for tests.
        """
        self.settings = settings or get_settings()
        self.registry = registry or ProviderRegistry(self.settings)
        self.mixer = mixer or AudioMixer(self.settings.music, self.settings.ffmpeg)
        self.storage = storage or LocalAssetStorage(self.settings.storage)
        self._voice_client = voice_client
        self._clock = clock
        self._sleep = sleep

        self.poll_interval = self.settings.orchestrator.poll_interval_seconds
        self.timeout = self.settings.orchestrator.timeout_seconds

    @property
    def voice_client(self) -> VoiceSynthesisClient:
        if self._voice_client is None:
            self._voice_client = VoiceSynthesisClient(settings=self.settings, storage=self.storage)
        return self._voice_client

    async def generate_motivational_video(
        self,
        user_id: str,
        script: str,
        options: Optional[GenerationOptions] = None,
        state_callbacks: Optional[list[StateCallback]] = None,
    ) -> GenerationResult:
        """Generate an avatar video for a script.

        Args:
            user_id: Owner of the video; used to key published assets.
            script: Text the avatar speaks.
            options: Voice, avatar, style, music and language choices.
            state_callbacks: Optional callbacks for state transitions.

        Returns:
            Normalized result. Recovered failures (dropped music) are listed
            in ``warnings``.

        Raises:
            NoProviderAvailableError: If no provider can take the job.
            ProviderRequestError: If the vendor rejects a submit or status call.
            GenerationFailedError: If the vendor reports the job as failed.
            GenerationTimeoutError: If the job is still running at the timeout.
            SynthesisError: If cloned-voice narration cannot be produced.
            ValidationError: If the script is blank.
        """
        options = options or GenerationOptions()
        tracker = GenerationStateTracker(job_label=user_id, callbacks=state_callbacks)

        try:
            request = self._build_request(script, options)
            provider = await self.registry.select_primary()
            if options.voice_identity is not None:
                request = await self._attach_narration(user_id, request, options)

            submitted = await provider.submit(request)
            tracker.set_state(GenerationState.SUBMITTED)
            logger.info(f"Video job submitted to {provider.name}: {submitted.job_id}")

            tracker.set_state(GenerationState.POLLING)
            job = await self._wait_for_completion(provider, submitted.job_id)
            tracker.set_state(GenerationState.COMPLETED)
        except Exception as e:
            tracker.fail(timed_out=isinstance(e, GenerationTimeoutError))
            raise

        result = GenerationResult(
            video_id=job.job_id,
            status=job.status,
            provider=provider.name,
            video_url=job.video_url,
            thumbnail_url=job.thumbnail_url,
            duration_seconds=job.duration_seconds,
            state=tracker.state.value,
        )

        if options.music_track and job.video_url:
            result.video_url = await self._add_music(user_id, job.video_url, options.music_track, result.warnings)

        return result

    async def get_video_status(self, job_id: str, provider_name: str) -> GenerationJob:
        """Read a job's current status from its provider.

        Raises:
            ConfigurationError: If the provider is unknown or not configured.
            ProviderRequestError: If the vendor call fails.
        """
        provider = self.registry.resolve(provider_name)
        return await provider.fetch_status(job_id)

    def _build_request(self, script: str, options: GenerationOptions) -> GenerationRequest:
        defaults = self.settings.orchestrator
        return GenerationRequest(
            script=script,
            voice_id=options.voice_id,
            avatar_id=options.avatar_id,
            style=options.style or defaults.default_style,
            duration_seconds=estimate_duration(script),
            language_code=options.language_code or defaults.default_language,
        )

    async def _attach_narration(
        self, user_id: str, request: GenerationRequest, options: GenerationOptions
    ) -> GenerationRequest:
        audio_url = await self._publish_narration(user_id, request.script, options)
        update = {"audio_url": audio_url}
        # narration language follows the cloned voice unless the caller picked one
        if not options.language_code:
            update["language_code"] = options.voice_identity.language_code
        return request.model_copy(update=update)

    async def _publish_narration(self, user_id: str, script: str, options: GenerationOptions) -> str:
        """Synthesize cloned-voice narration and publish it for the provider to fetch."""
        audio = await self.voice_client.synthesize(options.voice_identity, script)

        path = self._temp_path(prefix="narration_", suffix=".mp3")
        try:
            path.write_bytes(audio)
            key = f"audio/{user_id}/narration_{uuid.uuid4().hex}.mp3"
            return await self.storage.persist(path, key)
        finally:
            path.unlink(missing_ok=True)

    async def _wait_for_completion(self, provider: VideoProvider, job_id: str) -> GenerationJob:
        """Poll a job until it completes, fails or runs out of time.

        Status reads are strictly sequential. The loop is bounded both by
        ``ceil(timeout / interval)`` polls and by the wall clock.

        Raises:
            GenerationFailedError: If the vendor reports the job as failed.
            GenerationTimeoutError: If the job never reaches a terminal status.
        """
        max_polls = math.ceil(self.timeout / self.poll_interval)
        deadline = self._clock() + self.timeout
        polls = 0

        while polls < max_polls and self._clock() < deadline:
            job = await provider.fetch_status(job_id)
            polls += 1

            if job.status == JobStatus.COMPLETED:
                logger.info(f"Video job {job_id} completed after {polls} poll(s)")
                return job
            if job.status == JobStatus.FAILED:
                raise GenerationFailedError(
                    f"Video generation failed at {provider.name} (status: {job.raw_status})",
                    job_id=job_id,
                    provider=provider.name,
                )

            logger.debug(f"Video job {job_id} still processing (poll {polls}/{max_polls})")
            await self._sleep(self.poll_interval)

        raise GenerationTimeoutError(
            f"Video generation timed out after {self.timeout:g}s",
            job_id=job_id,
            provider=provider.name,
            timeout_seconds=self.timeout,
        )

    async def _add_music(self, user_id: str, video_url: str, track: str, warnings: list[str]) -> str:
        """Mix background music into a finished video.

        Returns:
            URL of the mixed video, or ``video_url`` unchanged if mixing or
            publishing fails. Failures are appended to ``warnings``.
        """
        output_path: Optional[Path] = None
        try:
            output_path = self._temp_path(prefix="enhanced_", suffix=".mp4")
            await self.mixer.mix(video_url, track, output_path)
            key = f"videos/{user_id}/enhanced_{uuid.uuid4().hex}.mp4"
            return await self.storage.persist(output_path, key)
        except Exception as e:
            logger.warning(f"Background music dropped, returning original video: {e}")
            warnings.append(f"Background music could not be added: {e}")
            return video_url
        finally:
            if output_path is not None:
                output_path.unlink(missing_ok=True)

    def _temp_path(self, prefix: str, suffix: str) -> Path:
        temp_dir = self.settings.music.temp_dir
        temp_dir.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=temp_dir)
        os.close(fd)
        return Path(name)
