"""Survey answer enumerations and submission models.

Every single-select question draws from one StrEnum below. Questions whose
answers have a natural order (how often, how disruptive) subclass
RankedChoice: declaration order is the rank, so adding or removing an option
is a one-line change here and the dashboard sort follows automatically.
"""

from enum import StrEnum

from pydantic import Field, field_validator

from soundscape.models.common import SoundScapeBase, SubmissionId

UNRANKED = 99


class RankedChoice(StrEnum):
    """StrEnum whose members carry a 1-based rank in declaration order."""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self) + 1

    @classmethod
    def rank_table(cls) -> dict[str, int]:
        return {member.value: member.rank for member in cls}


# ---------------------------------------------------------------------------
# Single-select answers
# ---------------------------------------------------------------------------


class AgeGroup(StrEnum):
    BELOW_18 = "Below 18"
    AGE_18_22 = "18-22"
    AGE_23_30 = "23-30"
    AGE_31_45 = "31-45"
    AGE_45_PLUS = "45+"


class Occupation(StrEnum):
    STUDENT = "Student"
    WORKING_PROFESSIONAL = "Working professional"
    HOMEMAKER = "Homemaker"
    OTHER = "Other"


class NoiseExposureFrequency(RankedChoice):
    """How often the respondent is exposed to disturbing noise."""

    RARELY = "Rarely"
    SOMETIMES = "Sometimes"
    OFTEN = "Often"
    VERY_OFTEN = "Very Often"
    CONSTANTLY = "Constantly"


class FocusDisturbance(RankedChoice):
    """How often noise breaks the respondent's focus."""

    RARELY = "Rarely"
    SOMETIMES = "Sometimes"
    OFTEN = "Often"
    ALMOST_ALWAYS = "Almost Always"


class BotherLabel(StrEnum):
    LIBRARY_QUIET = "Library quiet (40dB)"
    CONVERSATION = "Conversation (50dB)"
    BUSY_CAFE = "Busy café (60dB)"
    STREET_TRAFFIC = "Street traffic (70dB)"
    HONKING = "Honking (80dB)"
    CONSTRUCTION = "Construction (90dB)"
    LOUD_MUSIC = "Loud music (100dB)"
    JACKHAMMER = "Jackhammer (110dB)"


BOTHER_LEVELS: dict[BotherLabel, int] = {
    BotherLabel.LIBRARY_QUIET: 40,
    BotherLabel.CONVERSATION: 50,
    BotherLabel.BUSY_CAFE: 60,
    BotherLabel.STREET_TRAFFIC: 70,
    BotherLabel.HONKING: 80,
    BotherLabel.CONSTRUCTION: 90,
    BotherLabel.LOUD_MUSIC: 100,
    BotherLabel.JACKHAMMER: 110,
}


class CommunitySeriousness(StrEnum):
    YES_DEFINITELY = "Yes, definitely"
    SOMEWHAT = "Somewhat"
    NOT_REALLY = "Not really"
    NOT_SURE = "Not sure"


class MapInterest(StrEnum):
    YES_VERY_USEFUL = "Yes, very useful"
    MAYBE = "Maybe"
    NOT_REALLY_USEFUL = "Not really useful"
    NO_NOT_AT_ALL = "No, not at all"


class CitizenScientist(StrEnum):
    YES_DEFINITELY = "Yes, definitely"
    MAYBE_OCCASIONALLY = "Maybe, occasionally"
    UNLIKELY = "Unlikely"
    NO_NOT_INTERESTED = "No, not interested"


# ---------------------------------------------------------------------------
# Multi-select / ranking answers
# ---------------------------------------------------------------------------


class NoiseLocation(StrEnum):
    HOME = "Home"
    COMMUTE = "Commute"
    COLLEGE_WORK = "College/Work"
    METRO_BUS_STOP = "Metro/Bus Stop"
    CONSTRUCTION = "Construction"


class CommonSound(StrEnum):
    TRAFFIC = "Traffic"
    CONSTRUCTION = "Construction"
    LOUDSPEAKERS = "Loudspeakers"
    NEIGHBOURS = "Neighbours"
    METRO_TRAINS = "Metro/Trains"
    OTHERS = "Others (listen at your own risk)"


class Feature(StrEnum):
    """App features the respondent ranks, most wanted first."""

    NOISE_HEATMAPS = "Noise Heatmaps"
    QUIETER_ROUTES = "Quieter Routes"
    NOISE_FORECASTS = "Noise Forecasts"
    REPORT_AND_LEARN = "Report & Learn Tool"


class ChoiceField(StrEnum):
    """Array answers stored one element per row in submission_choices."""

    NOISE_SOURCE_LOCATIONS = "noiseSourceLocations"
    COMMON_NOISE_SOURCES = "commonNoiseSources"
    FEATURE_PRIORITIES = "featurePriorities"


# ---------------------------------------------------------------------------
# Submission models
# ---------------------------------------------------------------------------


class SubmissionCreate(SoundScapeBase):
    """Payload posted by the survey wizard on completion."""

    name: str | None = Field(default=None, max_length=100)
    age_group: AgeGroup
    occupation: Occupation
    noise_exposure_freq: NoiseExposureFrequency
    noise_source_locations: list[NoiseLocation] = Field(default_factory=list)
    common_noise_sources: list[CommonSound] = Field(default_factory=list)
    focus_disturbance: FocusDisturbance
    sleep_effect: str | None = None
    stress_effect: str | None = None
    headphone_freq: int = Field(..., ge=1, le=10)
    bother_level: int = Field(..., ge=40, le=110)
    bother_label: BotherLabel
    community_seriousness: CommunitySeriousness
    map_interest: MapInterest
    citizen_scientist: CitizenScientist
    feature_priorities: list[Feature] = Field(..., min_length=4, max_length=4)
    is_duplicate: bool = False

    @field_validator("feature_priorities")
    @classmethod
    def _unique_priorities(cls, v: list[Feature]) -> list[Feature]:
        if len(set(v)) != len(v):
            raise ValueError("Feature priorities must be unique.")
        return v


class Submission(SoundScapeBase):
    """Full stored submission as returned by the detail endpoint."""

    id: SubmissionId
    name: str | None = None
    age_group: str | None = None
    occupation: str | None = None
    noise_exposure_freq: str | None = None
    noise_source_locations: list[str] = Field(default_factory=list)
    common_noise_sources: list[str] = Field(default_factory=list)
    focus_disturbance: str | None = None
    sleep_effect: str | None = None
    stress_effect: str | None = None
    headphone_freq: int | None = None
    bother_level: int | None = None
    bother_label: str | None = None
    community_seriousness: str | None = None
    map_interest: str | None = None
    citizen_scientist: str | None = None
    feature_priorities: list[str] = Field(default_factory=list)
    is_duplicate: bool = False
    created_at: str


class SubmissionSummary(SoundScapeBase):
    """Row of the dashboard's submission browser."""

    id: SubmissionId
    name: str | None = None
    created_at: str
    is_duplicate: bool = False
