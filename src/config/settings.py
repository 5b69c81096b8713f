"""Configuration settings for the avatar video generation service.

This module provides type-safe configuration management using Pydantic,
with support for environment variables, ``.env`` files and default values.
Each concern has its own settings class with a dedicated environment prefix.
"""

import os
from pathlib import Path
from typing import Literal, Optional, Type, TypeVar

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

T = TypeVar("T", bound=BaseSettings)

ProviderName = Literal["d-id", "heygen", "sora"]


class VideoProviderSettings(BaseSettings):
    """Video provider selection settings."""

    model_config = SettingsConfigDict(env_prefix="VIDEO_", case_sensitive=False, extra="ignore")

    provider: ProviderName = Field(default="d-id", description="Primary avatar video provider")
    fallback_provider: ProviderName = Field(
        default="heygen", description="Provider tried when the primary is unavailable"
    )


class DIDSettings(BaseSettings):
    """D-ID (photoreal talking avatar) API settings."""

    model_config = SettingsConfigDict(env_prefix="D_ID_", case_sensitive=False, extra="ignore")

    api_key: Optional[str] = Field(default=None, description="D-ID API key (Basic auth token)")
    base_url: Optional[str] = Field(default=None, description="Override for https://api.d-id.com")
    timeout_ms: int = Field(default=60000, ge=1, description="Request timeout in milliseconds")


class HeyGenSettings(BaseSettings):
    """HeyGen (avatar marketing video) API settings."""

    model_config = SettingsConfigDict(env_prefix="HEYGEN_", case_sensitive=False, extra="ignore")

    api_key: Optional[str] = Field(default=None, description="HeyGen API key")
    base_url: Optional[str] = Field(default=None, description="Override for https://api.heygen.com/v2")
    timeout_ms: int = Field(default=60000, ge=1, description="Request timeout in milliseconds")


class SoraSettings(BaseSettings):
    """Sora (cinematic generation, not yet public) API settings."""

    model_config = SettingsConfigDict(
        env_prefix="SORA_", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SORA_API_KEY", "OPENAI_API_KEY"),
        description="Sora API key (falls back to OPENAI_API_KEY)",
    )
    base_url: Optional[str] = Field(default=None, description="Override for https://api.openai.com/v1")
    timeout_ms: int = Field(default=120000, ge=1, description="Request timeout in milliseconds")


class OrchestratorSettings(BaseSettings):
    """Polling and request defaults for avatar video generation."""

    model_config = SettingsConfigDict(env_prefix="AVATAR_VIDEO_", case_sensitive=False, extra="ignore")

    poll_interval_seconds: float = Field(default=5.0, gt=0, description="Delay between status polls")
    timeout_seconds: float = Field(default=120.0, gt=0, description="Wall-clock limit for polling")
    default_style: Literal["professional", "casual", "energetic", "calm"] = Field(
        default="energetic", description="Style used when the caller does not pick one"
    )
    default_language: str = Field(default="en", description="Language used when the caller does not pick one")


class VoiceCloneSettings(BaseSettings):
    """Voice cloning vendor selection."""

    model_config = SettingsConfigDict(env_prefix="VOICE_CLONE_", case_sensitive=False, extra="ignore")

    provider: Literal["elevenlabs", "playht"] = Field(
        default="elevenlabs", description="Vendor used to clone new voices"
    )


class ElevenLabsSettings(BaseSettings):
    """ElevenLabs voice cloning / synthesis settings."""

    model_config = SettingsConfigDict(env_prefix="ELEVENLABS_", case_sensitive=False, extra="ignore")

    api_key: Optional[str] = Field(default=None, description="ElevenLabs API key")
    base_url: str = Field(default="https://api.elevenlabs.io/v1", description="API base URL")
    model_id: str = Field(default="eleven_multilingual_v2", description="Speech model")
    timeout: int = Field(default=60, description="API request timeout in seconds")


class PlayHTSettings(BaseSettings):
    """Play.ht voice cloning / synthesis settings."""

    model_config = SettingsConfigDict(env_prefix="PLAYHT_", case_sensitive=False, extra="ignore")

    api_key: Optional[str] = Field(default=None, description="Play.ht API key")
    user_id: Optional[str] = Field(default=None, description="Play.ht user id (X-USER-ID header)")
    base_url: str = Field(default="https://api.play.ht/api/v2", description="API base URL")
    timeout: int = Field(default=60, description="API request timeout in seconds")


class MusicSettings(BaseSettings):
    """Background music settings."""

    model_config = SettingsConfigDict(env_prefix="MUSIC_", case_sensitive=False, extra="ignore")

    volume: float = Field(default=0.15, gt=0, le=1, description="Music volume relative to narration")
    download_timeout: int = Field(default=30, description="Track download timeout in seconds")
    temp_dir: Path = Field(default=Path("./uploads/temp"), description="Directory for ephemeral files")

    @field_validator("temp_dir", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path) -> Path:
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v


class FFmpegSettings(BaseSettings):
    """FFmpeg configuration settings."""

    model_config = SettingsConfigDict(env_prefix="FFMPEG_", case_sensitive=False, extra="ignore")

    path: str = Field(default="ffmpeg", description="FFmpeg executable path (or 'ffmpeg' if in PATH)")
    audio_codec: str = Field(default="aac", description="Codec for the re-encoded audio track")
    audio_bitrate: str = Field(default="192k", description="Audio bitrate")


class StorageSettings(BaseSettings):
    """Local asset storage settings."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", case_sensitive=False, extra="ignore")

    root: Path = Field(default=Path("./uploads/storage"), description="Directory published assets are copied to")
    base_url: str = Field(
        default="http://localhost:3000/uploads/storage", description="Public URL prefix for stored assets"
    )

    @field_validator("root", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path) -> Path:
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class Settings(BaseSettings):
    """Main application settings.

    This class aggregates all configuration settings and provides
    a single entry point for application configuration.

    The env_file can be specified via:
    1. ENV_FILE environment variable
    2. env_file parameter in get_settings() or reload_settings()
    3. Default: ".env"
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="motivation-avatar-video", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component settings
    video: VideoProviderSettings = Field(default_factory=VideoProviderSettings)
    d_id: DIDSettings = Field(default_factory=DIDSettings)
    heygen: HeyGenSettings = Field(default_factory=HeyGenSettings)
    sora: SoraSettings = Field(default_factory=SoraSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    voice_clone: VoiceCloneSettings = Field(default_factory=VoiceCloneSettings)
    elevenlabs: ElevenLabsSettings = Field(default_factory=ElevenLabsSettings)
    playht: PlayHTSettings = Field(default_factory=PlayHTSettings)
    music: MusicSettings = Field(default_factory=MusicSettings)
    ffmpeg: FFmpegSettings = Field(default_factory=FFmpegSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    _env_file_used: Optional[str] = None

    @classmethod
    def create(cls, env_file: Optional[str] = None) -> "Settings":
        """Create a Settings instance with a specific env file.

        Nested settings blocks are built against the same env file so that
        prefixed variables (e.g. ``HEYGEN_API_KEY``) are read from it too.

        Args:
            env_file: Optional path to environment file. If None, uses:
                1. ENV_FILE environment variable
                2. Default ".env"

        Returns:
            Settings instance configured with the specified env file.
        """
        if env_file is None:
            env_file = os.getenv("ENV_FILE", ".env")

        nested = {
            name: _create_nested_settings(field.annotation, env_file)
            for name, field in cls.model_fields.items()
            if isinstance(field.annotation, type) and issubclass(field.annotation, BaseSettings)
        }
        settings = cls(_env_file=env_file, **nested)
        settings._env_file_used = env_file
        return settings


# Global settings instance (lazy-loaded singleton)
_settings: Optional[Settings] = None


def _create_nested_settings(cls: Type[T], env_file: Optional[str] = None) -> T:
    """Instantiate a nested settings class against an env file.

    Args:
        cls: The settings class to create an instance of.
        env_file: Optional env_file to use. If None, uses ENV_FILE or ".env".

    Returns:
        Instance of the settings class configured with the env_file.
    """
    if env_file is None:
        env_file = os.getenv("ENV_FILE", ".env")
    return cls(_env_file=env_file)


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Get or create the global settings instance.

    Args:
        env_file: Optional path to environment file. If None, uses:
            1. ENV_FILE environment variable
            2. Default ".env"
            If provided and different from the loaded one, forces a reload.

    Returns:
        Settings: The global settings instance.

    Example:
        >>> settings = get_settings()
        >>> print(settings.video.provider)
        d-id
    """
    global _settings

    requested = env_file or os.getenv("ENV_FILE", ".env")

    if _settings is not None and _settings._env_file_used == requested:
        return _settings

    _settings = Settings.create(env_file=requested)
    return _settings


def reload_settings(env_file: Optional[str] = None) -> Settings:
    """Reload settings from environment variables.

    Args:
        env_file: Optional path to environment file. If None, uses:
            1. ENV_FILE environment variable
            2. Default ".env"

    Returns:
        Settings: The newly loaded settings instance.
    """
    global _settings
    _settings = Settings.create(env_file=env_file)
    return _settings
