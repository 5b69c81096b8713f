#!/usr/bin/env python3
"""Check which video and voice vendors are reachable with the current config.

This script probes every configured vendor to verify it can:
- Build a client from settings
- Authenticate against the vendor API
- Report whether it would be selected for new jobs

Usage:
    python scripts/check_providers.py
    python scripts/check_providers.py --env-file .env.dev
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config import get_settings
from src.videogen.errors import ConfigurationError, NoProviderAvailableError
from src.videogen.providers.registry import PROVIDER_NAMES, ProviderRegistry
from src.videogen.voice.client import VOICE_PROVIDER_NAMES, VoiceSynthesisClient

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def check_providers(env_file: Optional[str] = None) -> bool:
    """Probe all vendors and print a summary.

    Args:
        env_file: Optional environment file to load.

    Returns:
        True if at least one video provider is available.
    """
    print("=" * 60)
    print("Provider Availability Check")
    print("=" * 60)
    print()

    settings = get_settings(env_file=env_file)
    print(f"Primary Provider: {settings.video.provider}")
    print(f"Fallback Provider: {settings.video.fallback_provider}")
    print()

    print("Video providers:")
    registry = ProviderRegistry(settings)
    for name in PROVIDER_NAMES:
        try:
            available = await registry.resolve(name).check_availability()
            print(f"  {'✓' if available else '✗'} {name}")
        except ConfigurationError as e:
            print(f"  - {name}: {e}")
    print()

    print("Voice cloning providers:")
    voice_client = VoiceSynthesisClient(settings=settings)
    available_voices = await voice_client.available_providers()
    for name in VOICE_PROVIDER_NAMES:
        print(f"  {'✓' if name in available_voices else '✗'} {name}")
    print()

    try:
        selected = await registry.select_primary()
        print(f"New jobs would use: {selected.name}")
        return True
    except NoProviderAvailableError as e:
        print(f"✗ {e}")
        return False


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check video and voice vendor availability")
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to environment file (default: .env)",
    )
    args = parser.parse_args()

    ok = asyncio.run(check_providers(env_file=args.env_file))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
