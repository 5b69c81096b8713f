"""Command-line entry point for motivational avatar video generation.

Generates one video from a script and prints the result as JSON. Also lists
the music and language catalogs and can validate configuration.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from src.config import get_settings
from src.videogen.errors import VideoGenerationError
from src.videogen.language import get_enabled_languages
from src.videogen.models import GenerationOptions
from src.videogen.music import list_tracks
from src.videogen.orchestrator import AvatarVideoOrchestrator

logger = logging.getLogger(__name__)


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure logging for the application.

    Logs go to stderr so stdout carries only the JSON result.

    Args:
        log_level: Optional log level override. If None, uses settings.log_level.
    """
    if log_level is None:
        try:
            log_level = get_settings().log_level
        except Exception:
            log_level = "INFO"

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    logging.getLogger("src.videogen").setLevel(numeric_level)
    logging.getLogger("src.config").setLevel(numeric_level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list. Defaults to sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Motivational avatar video generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate a video from a script
  python -m src.videogen.main --user-id demo --script "Every step counts."

  # Calm style with background music
  python -m src.videogen.main --script-file script.txt --style calm --music-track motivational_2

  # Test configuration without calling any provider
  python -m src.videogen.main --dry-run --env-file .env.production
        """,
    )

    parser.add_argument(
        "--env-file",
        "--config",
        type=str,
        default=None,
        help="Path to environment file (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override log level (default: from settings)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load and print configuration without generating a video",
    )
    parser.add_argument("--list-tracks", action="store_true", help="List background music tracks")
    parser.add_argument("--list-languages", action="store_true", help="List enabled languages")

    script_group = parser.add_mutually_exclusive_group()
    script_group.add_argument("--script", type=str, help="Script text the avatar speaks")
    script_group.add_argument("--script-file", type=str, help="Read the script from a file")

    parser.add_argument("--user-id", type=str, default="cli", help="Owner of the generated assets")
    parser.add_argument(
        "--style",
        type=str,
        choices=["professional", "casual", "energetic", "calm"],
        default=None,
        help="Video style (default: from settings)",
    )
    parser.add_argument("--music-track", type=str, default=None, help="Music track id or URL")
    parser.add_argument("--language", type=str, default=None, help="Language code (e.g. en, es)")
    parser.add_argument("--voice-id", type=str, default=None, help="Provider voice id")
    parser.add_argument("--avatar-id", type=str, default=None, help="Provider avatar/presenter id")

    return parser.parse_args(argv)


def _read_script(args: argparse.Namespace) -> Optional[str]:
    if args.script_file:
        return Path(args.script_file).read_text(encoding="utf-8")
    return args.script


def _print_configuration(env_file: Optional[str]) -> None:
    settings = get_settings(env_file=env_file)
    logger.info("Configuration loaded successfully:")
    logger.info(f"  App Name: {settings.app_name}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Video Provider: {settings.video.provider} (fallback: {settings.video.fallback_provider})")
    logger.info(f"  D-ID Key: {'set' if settings.d_id.api_key else 'missing'}")
    logger.info(f"  HeyGen Key: {'set' if settings.heygen.api_key else 'missing'}")
    logger.info(f"  Sora Key: {'set' if settings.sora.api_key else 'missing'}")
    logger.info(
        f"  Polling: every {settings.orchestrator.poll_interval_seconds:g}s, "
        f"timeout {settings.orchestrator.timeout_seconds:g}s"
    )
    logger.info(f"  Voice Clone Provider: {settings.voice_clone.provider}")
    logger.info(f"  FFmpeg: {settings.ffmpeg.path}")
    logger.info(f"  Storage: {settings.storage.root} -> {settings.storage.base_url}")
    logger.info("Configuration test passed!")


async def main(argv: Optional[list[str]] = None) -> int:
    """Main application entry point.

    Returns:
        Process exit code.
    """
    args = parse_arguments(argv)
    setup_logging(args.log_level)

    env_file = None
    if args.env_file:
        env_path = Path(args.env_file)
        if not env_path.exists():
            logger.error(f"Environment file not found: {env_path}")
            return 1
        env_file = str(env_path)
        logger.info(f"Using environment file: {env_file}")
        os.environ["ENV_FILE"] = env_file

    if args.dry_run:
        logger.info("DRY RUN MODE: Testing configuration...")
        try:
            _print_configuration(env_file)
        except Exception as e:
            logger.error(f"Configuration test failed: {e}", exc_info=True)
            return 1
        return 0

    if args.list_tracks:
        print(json.dumps([track.model_dump() for track in list_tracks()], indent=2))
        return 0

    if args.list_languages:
        print(json.dumps([language.model_dump() for language in get_enabled_languages()], indent=2))
        return 0

    script = _read_script(args)
    if not script:
        logger.error("A script is required (--script or --script-file)")
        return 1

    options = GenerationOptions(
        voice_id=args.voice_id,
        avatar_id=args.avatar_id,
        style=args.style,
        music_track=args.music_track,
        language_code=args.language,
    )

    orchestrator = AvatarVideoOrchestrator(settings=get_settings(env_file=env_file))
    try:
        result = await orchestrator.generate_motivational_video(args.user_id, script, options)
    except (VideoGenerationError, ValueError) as e:
        logger.error(f"Video generation failed: {e}")
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    print(result.model_dump_json(indent=2))
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    run()
