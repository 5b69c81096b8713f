"""Background music for motivational videos.

This module holds the static track catalog and the ``AudioMixer``, which lays
a track under a rendered video's narration with FFmpeg. The video stream is
copied unchanged; only the audio track is re-encoded.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import httpx

from src.config import get_settings
from src.config.settings import FFmpegSettings, MusicSettings
from src.videogen.errors import MixingError
from src.videogen.models import MusicTrack, VideoStyle

logger = logging.getLogger(__name__)

MUSIC_LIBRARY: dict[str, MusicTrack] = {
    track.id: track
    for track in (
        MusicTrack(
            id="motivational_1",
            name="Uplifting Ambient",
            source_url="https://cdn.pixabay.com/audio/2022/03/15/audio_d1718372c6.mp3",
            duration_seconds=120,
            mood="energetic",
        ),
        MusicTrack(
            id="motivational_2",
            name="Inspiring Cinematic",
            source_url="https://cdn.pixabay.com/audio/2022/05/27/audio_1808fbf07a.mp3",
            duration_seconds=120,
            mood="calm",
        ),
        MusicTrack(
            id="motivational_3",
            name="Corporate Success",
            source_url="https://cdn.pixabay.com/audio/2022/03/22/audio_730e05a9ab.mp3",
            duration_seconds=120,
            mood="professional",
        ),
        MusicTrack(
            id="energetic_beats",
            name="Energetic Hip Hop",
            source_url="https://cdn.pixabay.com/audio/2022/11/28/audio_cbc3831a09.mp3",
            duration_seconds=120,
            mood="energetic",
        ),
    )
}

STYLE_RECOMMENDATIONS: dict[str, str] = {
    "professional": "motivational_3",
    "casual": "motivational_1",
    "energetic": "energetic_beats",
    "calm": "motivational_2",
}


def list_tracks() -> list[MusicTrack]:
    """List all catalog tracks."""
    return list(MUSIC_LIBRARY.values())


def get_track(track_id: str) -> Optional[MusicTrack]:
    return MUSIC_LIBRARY.get(track_id)


def resolve_track_url(track_id_or_url: str) -> str:
    """Resolve a catalog id to its source URL; anything else is treated as a URL."""
    track = MUSIC_LIBRARY.get(track_id_or_url)
    return track.source_url if track else track_id_or_url


def recommend_track(style: VideoStyle = "energetic") -> str:
    """Pick a catalog track id that suits a video style."""
    return STYLE_RECOMMENDATIONS[style]


class AudioMixer:
    """Mixes a background track under a video's existing audio.

    Example:
        ```python
        mixer = AudioMixer()
        await mixer.mix("https://cdn.example.com/talk.mp4", "motivational_2", "out.mp4")
        ```
    """

    def __init__(
        self,
        music_settings: Optional[MusicSettings] = None,
        ffmpeg_settings: Optional[FFmpegSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize mixer.

        Args:
            music_settings: Optional music settings. If None, uses get_settings().music.
            ffmpeg_settings: Optional FFmpeg settings. If None, uses get_settings().ffmpeg.
            transport: Optional httpx transport for track downloads.
        """
        if music_settings is None or ffmpeg_settings is None:
            settings = get_settings()
            music_settings = music_settings or settings.music
            ffmpeg_settings = ffmpeg_settings or settings.ffmpeg

        self.music_settings = music_settings
        self.ffmpeg_settings = ffmpeg_settings
        self.temp_dir = music_settings.temp_dir
        self._transport = transport

    async def download_track(self, track_id_or_url: str) -> Path:
        """Download a track to a private temporary file.

        Args:
            track_id_or_url: Catalog track id or direct URL.

        Returns:
            Path of the downloaded file. The caller must delete it.

        Raises:
            MixingError: If the download fails.
        """
        url = resolve_track_url(track_id_or_url)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix="music_", suffix=".mp3", dir=self.temp_dir)
        os.close(fd)
        path = Path(name)

        try:
            async with httpx.AsyncClient(
                timeout=self.music_settings.download_timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
            path.write_bytes(response.content)
        except Exception as e:
            path.unlink(missing_ok=True)
            logger.error(f"Music download error for {url}: {e}")
            raise MixingError(f"Failed to download music track: {e}") from e

        logger.debug(f"Downloaded music track {track_id_or_url} to {path}")
        return path

    def build_command(
        self,
        video_input: str,
        music_path: Union[str, Path],
        output_path: Union[str, Path],
        music_volume: float,
    ) -> list[str]:
        """Build the FFmpeg command that mixes music under the narration."""
        # normalize=0 keeps the narration at its original level
        filter_graph = (
            f"[1:a]volume={music_volume}[music];"
            "[0:a][music]amix=inputs=2:duration=shortest:normalize=0[aout]"
        )
        return [
            self.ffmpeg_settings.path,
            "-y",
            "-loglevel",
            "error",
            "-i",
            video_input,
            "-i",
            str(music_path),
            "-filter_complex",
            filter_graph,
            "-map",
            "0:v",
            "-map",
            "[aout]",
            "-c:v",
            "copy",
            "-c:a",
            self.ffmpeg_settings.audio_codec,
            "-b:a",
            self.ffmpeg_settings.audio_bitrate,
            "-shortest",
            str(output_path),
        ]

    async def _run_ffmpeg(self, cmd: list[str]) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise MixingError(f"Failed to start FFmpeg ({cmd[0]}): {e}") from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"FFmpeg error (exit {process.returncode}): {message}")
            raise MixingError(f"FFmpeg exited with code {process.returncode}: {message}")

    async def mix(
        self,
        video_path: Union[str, Path],
        track_id_or_url: str,
        output_path: Union[str, Path],
        music_volume: Optional[float] = None,
    ) -> None:
        """Mix a background track under a video's narration.

        Args:
            video_path: Local path or URL of the rendered video.
            track_id_or_url: Catalog track id or direct track URL.
            output_path: Where to write the mixed video.
            music_volume: Music level relative to narration. Defaults to
                MusicSettings.volume (0.15).

        Raises:
            MixingError: If the track cannot be downloaded or FFmpeg fails.
        """
        volume = self.music_settings.volume if music_volume is None else music_volume
        music_path = await self.download_track(track_id_or_url)
        try:
            cmd = self.build_command(str(video_path), music_path, output_path, volume)
            await self._run_ffmpeg(cmd)
        except Exception:
            Path(output_path).unlink(missing_ok=True)
            raise
        finally:
            music_path.unlink(missing_ok=True)

        logger.info(f"Mixed background music '{track_id_or_url}' into {output_path}")
