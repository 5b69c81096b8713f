"""Asset storage for published videos and audio.

The orchestrator only needs a ``persist(local_path, key) -> url`` capability;
``LocalAssetStorage`` satisfies it by copying files under a served directory.
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional, Protocol, Union

from src.config import get_settings
from src.config.settings import StorageSettings
from src.videogen.errors import StorageError

logger = logging.getLogger(__name__)


class AssetStorage(Protocol):
    """Publishes local files and returns their public URL."""

    async def persist(self, local_path: Union[str, Path], key: str) -> str:
        """Publish a local file under a logical key and return its URL."""
        ...


class LocalAssetStorage:
    """Stores assets on local disk below a root served at ``base_url``."""

    def __init__(self, settings: Optional[StorageSettings] = None) -> None:
        settings = settings or get_settings().storage
        self.root = settings.root
        self.base_url = settings.base_url

    def _destination(self, key: str) -> Path:
        destination = (self.root / key).resolve()
        if not destination.is_relative_to(self.root.resolve()):
            raise StorageError(f"Storage key escapes the storage root: {key}")
        return destination

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key.lstrip('/')}"

    async def persist(self, local_path: Union[str, Path], key: str) -> str:
        """Copy a file into storage.

        Args:
            local_path: File to publish.
            key: Logical key, e.g. ``videos/<user>/<name>.mp4``.

        Returns:
            Public URL of the stored file.

        Raises:
            StorageError: If the file cannot be copied.
        """
        destination = self._destination(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, local_path, destination)
        except OSError as e:
            logger.error(f"Failed to store {local_path} as {key}: {e}")
            raise StorageError(f"Failed to store file {key}: {e}") from e

        logger.info(f"File stored locally: {key}")
        return self.url_for(key)

    async def delete(self, key: str) -> None:
        """Remove a stored asset.

        Raises:
            StorageError: If the file cannot be removed.
        """
        try:
            await asyncio.to_thread(self._destination(key).unlink)
        except OSError as e:
            raise StorageError(f"Failed to delete file {key}: {e}") from e
        logger.info(f"File deleted: {key}")
