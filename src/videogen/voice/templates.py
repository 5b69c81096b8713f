"""Preset voice templates offered when a user sets up a cloned voice."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class VoiceTemplate(BaseModel):
    """Suggested metadata for a new cloned voice."""

    model_config = ConfigDict(frozen=True)

    name: str
    gender: Literal["male", "female", "other"]
    relationship: str
    description: str


PRESET_VOICE_TEMPLATES: dict[str, VoiceTemplate] = {
    "motivational_coach": VoiceTemplate(
        name="Motivational Coach",
        gender="male",
        relationship="coach",
        description="Energetic, inspiring, supportive tone",
    ),
    "gentle_mother": VoiceTemplate(
        name="Gentle Mother",
        gender="female",
        relationship="mother",
        description="Warm, caring, nurturing voice",
    ),
    "best_friend": VoiceTemplate(
        name="Best Friend",
        gender="female",
        relationship="friend",
        description="Casual, friendly, encouraging",
    ),
    "wise_mentor": VoiceTemplate(
        name="Wise Mentor",
        gender="male",
        relationship="mentor",
        description="Calm, experienced, guiding voice",
    ),
}
