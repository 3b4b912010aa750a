"""Noise persona shown to the respondent after submitting.

Derived purely from the bother threshold (dB) they picked.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NoisePersona:
    name: str
    description: str

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}


LIGHT_SLEEPER = NoisePersona(
    "Light Sleeper",
    "I notice everything, even a whisper. Quiet is my sanctuary.",
)
CITY_WANDERER = NoisePersona(
    "City Wanderer",
    "Life is a constant hum. I blend with chatter and engines, comfortably distracted.",
)
NOISE_VETERAN = NoisePersona(
    "Noise Veteran",
    "I've survived honks and drills. Loud but not reckless, I know my limits.",
)
THRILL_SEEKER = NoisePersona(
    "Thrill Seeker",
    "Why would anyone choose this willingly? I thrive in chaos and ignore pain... mostly.",
)

# (upper bound in dB, persona), checked in order
_THRESHOLDS: tuple[tuple[int, NoisePersona], ...] = (
    (50, LIGHT_SLEEPER),
    (70, CITY_WANDERER),
    (90, NOISE_VETERAN),
)


def persona_for(bother_level: int) -> NoisePersona:
    for upper, persona in _THRESHOLDS:
        if bother_level <= upper:
            return persona
    return THRILL_SEEKER
