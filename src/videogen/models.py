"""Data models for avatar video generation.

This module defines Pydantic models for type-safe validation of generation
requests, vendor jobs, provider configuration and cloned voices.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_DURATION_SECONDS = 60

VideoStyle = Literal["professional", "casual", "energetic", "calm"]


class JobStatus(str, Enum):
    """Canonical vendor job status."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PROCESSING


class VoiceStatus(str, Enum):
    """Cloned voice readiness at the vendor."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class ProviderConfig(BaseModel):
    """Immutable per-provider connection configuration."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, description="Vendor API key")
    base_url: Optional[str] = Field(default=None, description="Override for the vendor's default base URL")
    timeout_ms: int = Field(default=60000, ge=1, description="Request timeout in milliseconds")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class GenerationRequest(BaseModel):
    """A single avatar video generation request sent to a provider.

    Narration is either text spoken by a catalog voice (``voice_id``) or a
    pre-rendered audio track (``audio_url``), never both.
    """

    script: str = Field(..., description="Text the avatar speaks")
    voice_id: Optional[str] = Field(default=None, description="Provider catalog voice")
    avatar_id: Optional[str] = Field(default=None, description="Provider avatar / presenter")
    style: VideoStyle = Field(default="energetic", description="Delivery style")
    duration_seconds: int = Field(..., ge=1, le=MAX_DURATION_SECONDS, description="Target length")
    language_code: str = Field(default="en", description="Language code (e.g., 'en', 'es')")
    audio_url: Optional[str] = Field(default=None, description="Pre-rendered narration audio")

    @field_validator("script")
    @classmethod
    def validate_script(cls, v: str) -> str:
        """Reject blank scripts."""
        if not v.strip():
            raise ValueError("Script cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_narration_source(self) -> "GenerationRequest":
        if self.voice_id and self.audio_url:
            raise ValueError("voice_id and audio_url are mutually exclusive")
        return self


class GenerationJob(BaseModel):
    """Snapshot of a vendor job as last read from the vendor."""

    job_id: str = Field(..., description="Vendor-assigned job id")
    provider: str = Field(..., description="Provider that owns the job")
    status: JobStatus = Field(default=JobStatus.PROCESSING)
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = None
    raw_status: Optional[str] = Field(default=None, description="Vendor status before mapping")

    @field_validator("raw_status", mode="before")
    @classmethod
    def stringify_raw_status(cls, v: object) -> Optional[str]:
        """Keep non-string vendor statuses (e.g. numeric codes) as text."""
        return None if v is None else str(v)


class VoiceIdentity(BaseModel):
    """A cloned voice registered at a voice vendor."""

    id: str
    name: str
    relationship: Optional[str] = Field(default=None, description="Display only (e.g. 'mother')")
    description: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    language_code: str = Field(default="en")
    provider: Literal["elevenlabs", "playht"]
    provider_voice_id: str
    status: VoiceStatus = Field(default=VoiceStatus.PROCESSING)
    sample_audio_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class VoiceCloneRequest(BaseModel):
    """Metadata and samples for cloning a new voice."""

    name: str = Field(..., min_length=1)
    relationship: Optional[str] = None
    description: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    language_code: str = Field(default="en")
    audio_files: list[str] = Field(default_factory=list, description="Paths to local audio samples")


class MusicTrack(BaseModel):
    """Background music catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    source_url: str
    duration_seconds: int
    mood: VideoStyle


class GenerationOptions(BaseModel):
    """Caller-supplied options for a motivational video."""

    voice_id: Optional[str] = None
    avatar_id: Optional[str] = None
    style: Optional[VideoStyle] = None
    music_track: Optional[str] = Field(default=None, description="Catalog track id or URL")
    language_code: Optional[str] = None
    voice_identity: Optional[VoiceIdentity] = Field(
        default=None, description="Cloned voice used to narrate instead of a catalog voice"
    )

    @model_validator(mode="after")
    def validate_voice_source(self) -> "GenerationOptions":
        if self.voice_id and self.voice_identity is not None:
            raise ValueError("voice_id and voice_identity are mutually exclusive")
        return self


class GenerationResult(BaseModel):
    """Normalized outcome of a completed generation call."""

    video_id: str
    status: JobStatus
    provider: str
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = None
    state: str = Field(default="completed", description="Final orchestrator state")
    warnings: list[str] = Field(
        default_factory=list, description="Recovered, non-fatal failures (e.g. music dropped)"
    )
