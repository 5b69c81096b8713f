"""Base interface for avatar video providers.

This module defines the abstract base class that all video generation
providers must implement, ensuring a consistent submit / poll / probe
contract regardless of the vendor behind it.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from src.videogen.errors import ProviderRequestError
from src.videogen.models import GenerationJob, GenerationRequest, JobStatus, ProviderConfig

logger = logging.getLogger(__name__)


def parse_duration(value: Any) -> Optional[int]:
    """Parse a vendor duration (seconds, possibly fractional) into whole seconds."""
    if value is None:
        return None
    try:
        return math.ceil(float(value))
    except (TypeError, ValueError):
        return None


class VideoProvider(ABC):
    """Abstract base class for avatar video providers.

    Jobs are asynchronous at the vendor: ``submit`` returns a job in the
    ``processing`` state and ``fetch_status`` is polled until the job reaches
    ``completed`` or ``failed``.
    """

    name: str = ""

    @abstractmethod
    async def submit(self, request: GenerationRequest) -> GenerationJob:
        """Submit a generation job.

        Args:
            request: Validated generation request.

        Returns:
            The vendor job with status ``processing``.

        Raises:
            ProviderRequestError: If the vendor rejects the request.
        """
        pass

    @abstractmethod
    async def fetch_status(self, job_id: str) -> GenerationJob:
        """Read the current state of a job from the vendor.

        Vendor statuses are mapped onto the canonical ``JobStatus``; unknown
        statuses map to ``processing``.

        Args:
            job_id: Vendor-assigned job id.

        Returns:
            Latest job snapshot.

        Raises:
            ProviderRequestError: If the vendor call fails.
        """
        pass

    @abstractmethod
    async def check_availability(self) -> bool:
        """Probe whether the vendor can currently accept jobs.

        Returns:
            True if available. Any failure yields False; this never raises.
        """
        pass


class HTTPVideoProvider(VideoProvider):
    """Shared HTTP plumbing for JSON-over-HTTPS video vendors."""

    default_base_url: str = ""

    # Vendor status -> canonical status. Anything unlisted is still processing.
    status_map: dict[str, JobStatus] = {}

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize provider.

        Args:
            config: Credentials and connection settings.
            transport: Optional httpx transport (used to stub the vendor in tests).
        """
        self.config = config
        self.base_url = (config.base_url or self.default_base_url).rstrip("/")
        self.timeout = config.timeout_seconds
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers for API requests, including authentication."""
        return {"Content-Type": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._get_headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Make an API request and decode the JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            json: Optional JSON payload.

        Returns:
            Decoded response body (empty dict for empty bodies).

        Raises:
            ProviderRequestError: On transport failure or non-2xx response.
        """
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json)
                response.raise_for_status()
                body = response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            detail = e.response.text
            logger.error(f"{self.name} {method} {path} failed ({e.response.status_code}): {detail}")
            raise ProviderRequestError(
                f"{self.name} request failed: {e}",
                provider=self.name,
                status_code=e.response.status_code,
                vendor_message=detail,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"{self.name} {method} {path} failed: {e}")
            raise ProviderRequestError(
                f"{self.name} request failed: {e}", provider=self.name, vendor_message=str(e)
            ) from e
        except ValueError as e:
            raise ProviderRequestError(
                f"{self.name} returned a non-JSON response: {e}", provider=self.name
            ) from e

        if not isinstance(body, dict):
            raise ProviderRequestError(
                f"{self.name} returned an unexpected response body",
                provider=self.name,
                vendor_message=str(body),
            )
        return body

    def map_status(self, vendor_status: Any) -> JobStatus:
        """Map a vendor status string onto the canonical status."""
        if not isinstance(vendor_status, str):
            return JobStatus.PROCESSING
        return self.status_map.get(vendor_status.lower(), JobStatus.PROCESSING)

    async def _probe(self, path: str) -> bool:
        try:
            await self._request("GET", path)
            return True
        except Exception as e:
            logger.warning(f"{self.name} availability check failed: {e}")
            return False

    @staticmethod
    def _require_id(body: dict[str, Any], key: str, provider: str) -> str:
        job_id = body.get(key)
        if not job_id:
            raise ProviderRequestError(
                f"{provider} response did not include '{key}'",
                provider=provider,
                vendor_message=str(body),
            )
        return str(job_id)
