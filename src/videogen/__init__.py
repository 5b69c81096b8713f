"""Motivational avatar video generation.

Selects a video provider, submits and polls generation jobs, and layers
cloned-voice narration and background music over the result.
"""

# Import only lightweight models directly; the orchestrator pulls in every
# provider and the voice client, so it is imported from its own module.
from src.videogen.errors import (
    ConfigurationError,
    GenerationFailedError,
    GenerationTimeoutError,
    MixingError,
    NoProviderAvailableError,
    ProviderRequestError,
    SynthesisError,
    VideoGenerationError,
)
from src.videogen.models import (
    GenerationJob,
    GenerationOptions,
    GenerationRequest,
    GenerationResult,
    JobStatus,
    VoiceIdentity,
)

__all__ = [
    "VideoGenerationError",
    "ConfigurationError",
    "ProviderRequestError",
    "NoProviderAvailableError",
    "GenerationFailedError",
    "GenerationTimeoutError",
    "MixingError",
    "SynthesisError",
    "GenerationRequest",
    "GenerationJob",
    "GenerationOptions",
    "GenerationResult",
    "JobStatus",
    "VoiceIdentity",
    # Other exports available via direct imports
    # "AvatarVideoOrchestrator",
    # "ProviderRegistry",
    # "AudioMixer",
    # "VoiceSynthesisClient",
]
