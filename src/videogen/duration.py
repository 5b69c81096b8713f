"""Target video length estimation from script length."""

from src.videogen.models import MAX_DURATION_SECONDS

WORDS_PER_MINUTE = 150
PADDING_SECONDS = 5


def count_words(script: str) -> int:
    """Count whitespace-separated words in a script."""
    return len(script.split())


def estimate_duration(script: str) -> int:
    """Estimate the narrated length of a script in seconds.

    Uses an average speaking rate of 150 words per minute, adds five seconds
    of padding and caps the result at the short-form platform limit.

    Args:
        script: Script text.

    Returns:
        Duration in whole seconds, never more than 60.
    """
    words = count_words(script)
    # ceil(words / WPM * 60) without float rounding
    seconds = -(-words * 60 // WORDS_PER_MINUTE)
    return min(seconds + PADDING_SECONDS, MAX_DURATION_SECONDS)
