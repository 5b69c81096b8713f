"""Language catalog and default voice resolution.

Each supported language lists the voices available for it at every
speech-capable provider. Providers that receive no explicit voice pick the
first voice listed for the request language, falling back to English.
"""

import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

VOICE_PROVIDERS = ("openai", "d-id", "heygen", "elevenlabs")


class LanguageConfig(BaseModel):
    """A supported language and its per-provider voice catalog."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    native_name: str
    voice_ids: dict[str, tuple[str, ...]]
    enabled: bool = True


class LanguagePreferences(BaseModel):
    """A user's content language preferences."""

    primary_language: str = DEFAULT_LANGUAGE
    secondary_languages: list[str] = Field(default_factory=list)
    mode: Literal["single", "mixed"] = "single"
    mix_ratio: int = Field(default=70, ge=0, le=100, description="Percent of primary language when mixing")
    voice_preference: Optional[str] = None


def _language(
    code: str,
    name: str,
    native_name: str,
    openai: tuple[str, ...],
    did: tuple[str, ...],
    heygen: tuple[str, ...],
    elevenlabs: tuple[str, ...] = (),
) -> LanguageConfig:
    return LanguageConfig(
        code=code,
        name=name,
        native_name=native_name,
        voice_ids={"openai": openai, "d-id": did, "heygen": heygen, "elevenlabs": elevenlabs},
    )


SUPPORTED_LANGUAGES: dict[str, LanguageConfig] = {
    lang.code: lang
    for lang in (
        _language(
            "en", "English", "English",
            openai=("alloy", "echo", "fable", "nova", "shimmer"),
            did=("en-US-JennyNeural", "en-US-GuyNeural", "en-US-AriaNeural"),
            heygen=("en-US-AriaNeural", "en-US-JennyNeural"),
            elevenlabs=("Rachel", "Adam", "Antoni", "Arnold"),
        ),
        _language(
            "es", "Spanish", "Español",
            openai=("nova", "alloy"),
            did=("es-ES-ElviraNeural", "es-MX-DaliaNeural", "es-US-AlonsoNeural"),
            heygen=("es-ES-ElviraNeural", "es-MX-DaliaNeural"),
            elevenlabs=("Bella", "Matilda"),
        ),
        _language(
            "fr", "French", "Français",
            openai=("alloy", "nova"),
            did=("fr-FR-DeniseNeural", "fr-FR-HenriNeural", "fr-CA-SylvieNeural"),
            heygen=("fr-FR-DeniseNeural", "fr-CA-SylvieNeural"),
            elevenlabs=("Charlotte", "Serena"),
        ),
        _language(
            "de", "German", "Deutsch",
            openai=("alloy", "fable"),
            did=("de-DE-KatjaNeural", "de-DE-ConradNeural"),
            heygen=("de-DE-KatjaNeural",),
            elevenlabs=("Daniel", "Lily"),
        ),
        _language(
            "pt", "Portuguese", "Português",
            openai=("nova", "echo"),
            did=("pt-BR-FranciscaNeural", "pt-PT-RaquelNeural"),
            heygen=("pt-BR-FranciscaNeural",),
            elevenlabs=("Elli", "Callum"),
        ),
        _language(
            "zh", "Chinese", "中文",
            openai=("alloy", "nova"),
            did=("zh-CN-XiaoxiaoNeural", "zh-CN-YunxiNeural"),
            heygen=("zh-CN-XiaoxiaoNeural",),
            elevenlabs=("Grace", "Thomas"),
        ),
        _language(
            "hi", "Hindi", "हिन्दी",
            openai=("alloy", "nova"),
            did=("hi-IN-SwaraNeural", "hi-IN-MadhurNeural"),
            heygen=("hi-IN-SwaraNeural",),
        ),
        _language(
            "ar", "Arabic", "العربية",
            openai=("alloy", "echo"),
            did=("ar-SA-ZariyahNeural", "ar-EG-SalmaNeural"),
            heygen=("ar-SA-ZariyahNeural",),
        ),
        _language(
            "ja", "Japanese", "日本語",
            openai=("alloy", "shimmer"),
            did=("ja-JP-NanamiNeural", "ja-JP-KeitaNeural"),
            heygen=("ja-JP-NanamiNeural",),
        ),
        _language(
            "ko", "Korean", "한국어",
            openai=("alloy", "nova"),
            did=("ko-KR-SunHiNeural", "ko-KR-InJoonNeural"),
            heygen=("ko-KR-SunHiNeural",),
        ),
    )
}


def get_language_config(code: str) -> Optional[LanguageConfig]:
    """Get the catalog entry for a language code, or None if unsupported."""
    return SUPPORTED_LANGUAGES.get(code)


def get_enabled_languages() -> list[LanguageConfig]:
    """List all enabled languages in catalog order."""
    return [lang for lang in SUPPORTED_LANGUAGES.values() if lang.enabled]


def get_language_native_name(code: str) -> str:
    """Get a language's name in its own script (upper-cased code if unknown)."""
    config = get_language_config(code)
    return config.native_name if config else code.upper()


def resolve_voice(language_code: str, provider: str) -> str:
    """Resolve the default voice for a language at a provider.

    Args:
        language_code: Language code (e.g., 'en', 'es').
        provider: Provider name, one of VOICE_PROVIDERS.

    Returns:
        First voice id listed for the language at the provider, or the
        provider's first English voice if the language is unlisted or has
        no voices there.

    Raises:
        ValueError: If the provider has no voice catalog.
    """
    if provider not in VOICE_PROVIDERS:
        raise ValueError(f"No voice catalog for provider: {provider}. Supported providers: {VOICE_PROVIDERS}")

    config = get_language_config(language_code)
    voices = config.voice_ids.get(provider, ()) if config else ()
    if voices:
        return voices[0]

    logger.debug(f"No {provider} voices for language '{language_code}', using {DEFAULT_LANGUAGE}")
    return SUPPORTED_LANGUAGES[DEFAULT_LANGUAGE].voice_ids[provider][0]


def validate_language_preferences(
    primary_language: Optional[str] = None,
    secondary_languages: Optional[list[str]] = None,
    mode: Optional[str] = None,
    mix_ratio: Optional[int] = None,
    voice_preference: Optional[str] = None,
) -> LanguagePreferences:
    """Normalize partially specified language preferences.

    Args:
        primary_language: Main language code. Defaults to 'en'.
        secondary_languages: Additional language codes; unsupported ones are dropped.
        mode: 'single' or 'mixed'. Defaults to 'single'.
        mix_ratio: Percent of primary language when mixing. Defaults to 70.
        voice_preference: Optional specific voice id.

    Returns:
        Complete, validated preferences.

    Raises:
        ValueError: If the primary language is not supported.
    """
    primary = primary_language or DEFAULT_LANGUAGE
    if primary not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported primary language: {primary}")

    secondary = [code for code in (secondary_languages or []) if code in SUPPORTED_LANGUAGES]

    return LanguagePreferences(
        primary_language=primary,
        secondary_languages=secondary,
        mode=mode or "single",
        mix_ratio=70 if mix_ratio is None else mix_ratio,
        voice_preference=voice_preference,
    )


def build_multilingual_prompt(preferences: LanguagePreferences, base_prompt: str) -> str:
    """Append a language instruction to a content generation prompt."""
    primary = SUPPORTED_LANGUAGES[preferences.primary_language]

    if preferences.mode == "single" or not preferences.secondary_languages:
        return (
            f"{base_prompt}\n\n"
            f"IMPORTANT: Generate the entire response in {primary.name} ({primary.native_name}) only."
        )

    secondary = ", ".join(
        f"{SUPPORTED_LANGUAGES[code].name} ({SUPPORTED_LANGUAGES[code].native_name})"
        for code in preferences.secondary_languages
    )
    ratio = preferences.mix_ratio
    return (
        f"{base_prompt}\n\n"
        "IMPORTANT: Generate a natural, code-switching response mixing these languages:\n"
        f"- Primary language ({ratio}%): {primary.name} ({primary.native_name})\n"
        f"- Secondary languages ({100 - ratio}%): {secondary}\n\n"
        "Make it feel natural and authentic, like how bilingual people actually speak."
    )
