"""Breakdown definitions — one grouped count query per dashboard chart.

Each Breakdown pairs a statement builder (predicate -> SELECT) with a shaper
that turns result rows into ordered BreakdownEntry items. Four query shapes
cover every chart:

- category counts: GROUP BY a single-select column, empty answers dropped,
  ordered by count (desc) or by value (asc)
- ordinal counts: as above, ordered by a fixed rank table, unknown last
- fan-out counts: GROUP BY submission_choices.value for one array field,
  so a submission contributes once per selected item
- first-choice counts: fan-out restricted to position 0 (the top ranking)

Bother level groups by label but sorts by the decibel level first observed
for that label, which needs a small merge step after the query.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, Row, Select, case, func, select

from soundscape.db.tables import SubmissionChoiceRow, SubmissionRow
from soundscape.models.dashboard import BreakdownEntry
from soundscape.models.survey import (
    UNRANKED,
    ChoiceField,
    FocusDisturbance,
    NoiseExposureFrequency,
    RankedChoice,
)

StatementBuilder = Callable[[ColumnElement[bool]], Select]
Shaper = Callable[[Sequence[Row]], list[BreakdownEntry]]


def _as_entries(rows: Sequence[Row]) -> list[BreakdownEntry]:
    """Default shaper: (name, count, *sort keys) rows -> entries, sort keys dropped."""
    return [BreakdownEntry(name=row[0], count=row[1]) for row in rows]


@dataclass(frozen=True)
class Breakdown:
    """A named, independently computable chart aggregation."""

    key: str
    statement: StatementBuilder
    shape: Shaper = field(default=_as_entries)


# ---------------------------------------------------------------------------
# Statement builders
# ---------------------------------------------------------------------------


def category_counts(column, *, by_value: bool = False,
                    text: bool = True) -> StatementBuilder:
    """Count per distinct value of a single-select column.

    by_value=False sorts by count descending (ties by value), True sorts by
    value ascending. Text columns also drop empty strings.
    """
    def build(predicate: ColumnElement[bool]) -> Select:
        count = func.count().label("count")
        stmt = (
            select(column.label("name"), count)
            .where(predicate, column.is_not(None))
            .group_by(column)
        )
        if text:
            stmt = stmt.where(column != "")
        if by_value:
            return stmt.order_by(column.asc())
        return stmt.order_by(count.desc(), column.asc())

    return build


def ordinal_counts(column, choices: type[RankedChoice]) -> StatementBuilder:
    """Count per value, ordered by the rank table of *choices*."""
    def build(predicate: ColumnElement[bool]) -> Select:
        rank = case(choices.rank_table(), value=column, else_=UNRANKED).label("rank")
        return (
            select(column.label("name"), func.count().label("count"), rank)
            .where(predicate, column.is_not(None), column != "")
            .group_by(column)
            .order_by(rank.asc(), column.asc())
        )

    return build


def fan_out_counts(choice_field: ChoiceField, *, first_only: bool = False) -> StatementBuilder:
    """Count per array element of *choice_field* across matching submissions."""
    value = SubmissionChoiceRow.value

    def build(predicate: ColumnElement[bool]) -> Select:
        count = func.count().label("count")
        stmt = (
            select(value.label("name"), count)
            .join(SubmissionRow,
                  SubmissionRow.submission_id == SubmissionChoiceRow.submission_id)
            .where(
                predicate,
                SubmissionChoiceRow.field == choice_field.value,
                value.is_not(None),
                value != "",
            )
            .group_by(value)
            .order_by(count.desc(), value.asc())
        )
        if first_only:
            stmt = stmt.where(SubmissionChoiceRow.position == 0)
        return stmt

    return build


def bother_level_counts(predicate: ColumnElement[bool]) -> Select:
    label, level = SubmissionRow.bother_label, SubmissionRow.bother_level
    return (
        select(
            label.label("name"),
            level.label("level"),
            func.count().label("count"),
            func.min(SubmissionRow.created_at).label("first_seen"),
        )
        .where(predicate, label.is_not(None), label != "")
        .group_by(label, level)
    )


def shape_bother_levels(rows: Sequence[Row]) -> list[BreakdownEntry]:
    """Merge (label, level) groups per label and sort by first observed level."""
    merged: dict[str, dict] = {}
    for row in rows:
        r = row._mapping
        group = merged.setdefault(
            r["name"], {"count": 0, "level": r["level"], "first_seen": r["first_seen"]},
        )
        group["count"] += r["count"]
        if r["first_seen"] < group["first_seen"]:
            group["level"], group["first_seen"] = r["level"], r["first_seen"]

    def sort_key(item: tuple[str, dict]) -> tuple:
        name, group = item
        # labels whose first record had no level go last
        return (group["level"] is None, group["level"] or 0, name)

    return [
        BreakdownEntry(name=name, count=group["count"])
        for name, group in sorted(merged.items(), key=sort_key)
    ]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


BREAKDOWNS: tuple[Breakdown, ...] = (
    Breakdown("occupationData", category_counts(SubmissionRow.occupation)),
    Breakdown("ageGroupData", category_counts(SubmissionRow.age_group, by_value=True)),
    Breakdown("noiseLocationData", fan_out_counts(ChoiceField.NOISE_SOURCE_LOCATIONS)),
    Breakdown(
        "noiseExposureFreqData",
        ordinal_counts(SubmissionRow.noise_exposure_freq, NoiseExposureFrequency),
    ),
    Breakdown("commonSoundsData", fan_out_counts(ChoiceField.COMMON_NOISE_SOURCES)),
    Breakdown("focusData", ordinal_counts(SubmissionRow.focus_disturbance, FocusDisturbance)),
    Breakdown(
        "headphoneFreqDistribution",
        category_counts(SubmissionRow.headphone_freq, by_value=True, text=False),
    ),
    Breakdown("botherLevelData", bother_level_counts, shape_bother_levels),
    Breakdown("seriousnessData", category_counts(SubmissionRow.community_seriousness)),
    Breakdown("mapInterestData", category_counts(SubmissionRow.map_interest)),
    Breakdown("citizenScientistData", category_counts(SubmissionRow.citizen_scientist)),
    Breakdown(
        "topFeatureData",
        fan_out_counts(ChoiceField.FEATURE_PRIORITIES, first_only=True),
    ),
)


def total_count(predicate: ColumnElement[bool]) -> Select:
    return select(func.count()).select_from(SubmissionRow).where(predicate)


def average_headphone_freq(predicate: ColumnElement[bool]) -> Select:
    return select(func.avg(SubmissionRow.headphone_freq)).where(predicate)
