"""Exception hierarchy for avatar video generation.

Fatal errors propagate to the caller. Failures while adding background music
(``MixingError``, ``StorageError``) are recovered by the orchestrator, which
returns the unmixed video with a warning. Voice deletion is best effort.
"""

from typing import Optional


class VideoGenerationError(Exception):
    """Base exception for video generation errors."""

    pass


class ConfigurationError(VideoGenerationError):
    """Raised when a provider is unknown or has no credentials configured."""

    pass


class ProviderRequestError(VideoGenerationError):
    """Raised when a vendor rejects or fails an API call.

    Attributes:
        provider: Name of the vendor that failed.
        status_code: HTTP status code, if the vendor answered at all.
        vendor_message: Raw response body from the vendor, for diagnostics.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        vendor_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.vendor_message = vendor_message


class NoProviderAvailableError(VideoGenerationError):
    """Raised when every known video provider reports unavailable."""

    pass


class GenerationFailedError(VideoGenerationError):
    """Raised when a vendor reports a job as failed."""

    def __init__(self, message: str, job_id: str, provider: str) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.provider = provider


class GenerationTimeoutError(VideoGenerationError):
    """Raised when a job does not reach a terminal status in time.

    The vendor job is not cancelled; it keeps running and its result is
    orphaned.
    """

    def __init__(self, message: str, job_id: str, provider: str, timeout_seconds: float) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.provider = provider
        self.timeout_seconds = timeout_seconds


class MixingError(VideoGenerationError):
    """Raised when background music cannot be downloaded or mixed."""

    pass


class SynthesisError(VideoGenerationError):
    """Raised when cloned-voice narration cannot be produced."""

    pass


class VoiceCloneError(VideoGenerationError):
    """Raised when a voice cannot be cloned at the vendor."""

    pass


class StorageError(VideoGenerationError):
    """Raised when an asset cannot be published to storage."""

    pass
