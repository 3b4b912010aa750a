"""Dashboard payload models — one field per chart plus headline statistics."""

from pydantic import Field

from soundscape.models.common import SoundScapeBase

NOT_AVAILABLE = "N/A"


class BreakdownEntry(SoundScapeBase):
    """One bar / pie slice: a category label and how many submissions chose it."""

    name: str | int
    count: int = Field(..., ge=0)


class DashboardPayload(SoundScapeBase):
    """Everything the stats page renders, computed under one duplicate filter."""

    total_submissions: int = 0
    average_headphone_freq: str = NOT_AVAILABLE
    top_occupation: str = NOT_AVAILABLE
    age_group_data: list[BreakdownEntry] = Field(default_factory=list)
    occupation_data: list[BreakdownEntry] = Field(default_factory=list)
    noise_location_data: list[BreakdownEntry] = Field(default_factory=list)
    noise_exposure_freq_data: list[BreakdownEntry] = Field(default_factory=list)
    common_sounds_data: list[BreakdownEntry] = Field(default_factory=list)
    focus_data: list[BreakdownEntry] = Field(default_factory=list)
    headphone_freq_distribution: list[BreakdownEntry] = Field(default_factory=list)
    bother_level_data: list[BreakdownEntry] = Field(default_factory=list)
    seriousness_data: list[BreakdownEntry] = Field(default_factory=list)
    map_interest_data: list[BreakdownEntry] = Field(default_factory=list)
    citizen_scientist_data: list[BreakdownEntry] = Field(default_factory=list)
    top_feature_data: list[BreakdownEntry] = Field(default_factory=list)
    # Keys of breakdowns that failed and were rendered empty for this request
    failed_breakdowns: list[str] = Field(default_factory=list)
