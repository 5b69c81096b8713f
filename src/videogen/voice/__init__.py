"""Voice cloning and cloned-voice narration."""

from src.videogen.voice.base import VoiceCloneProvider
from src.videogen.voice.client import VOICE_PROVIDER_NAMES, VoiceSynthesisClient
from src.videogen.voice.elevenlabs import ElevenLabsVoiceCloner
from src.videogen.voice.playht import PlayHTVoiceCloner
from src.videogen.voice.templates import PRESET_VOICE_TEMPLATES, VoiceTemplate

__all__ = [
    "VoiceCloneProvider",
    "VoiceSynthesisClient",
    "VOICE_PROVIDER_NAMES",
    "ElevenLabsVoiceCloner",
    "PlayHTVoiceCloner",
    "PRESET_VOICE_TEMPLATES",
    "VoiceTemplate",
]
