"""Seed script — load demo survey submissions into the SoundScape database.

Creates DEMO_SUBMISSION_COUNT submissions with answers drawn from a seeded
random generator, so every run produces the same data set. Roughly one in
twelve is flagged as a duplicate so the dashboard filter has something to do.

Idempotent: safe to run multiple times — skips if any submission exists.

Usage:
    python -m scripts          # against DATABASE_URL from .env
    pytest tests/scripts/test_seed.py  # against aiosqlite
"""

import random

from sqlalchemy.ext.asyncio import AsyncSession

from soundscape.models.survey import (
    BOTHER_LEVELS,
    AgeGroup,
    CitizenScientist,
    CommonSound,
    CommunitySeriousness,
    Feature,
    FocusDisturbance,
    MapInterest,
    NoiseExposureFrequency,
    NoiseLocation,
    Occupation,
    SubmissionCreate,
)
from soundscape.repositories.submissions import SubmissionRepository
from soundscape.survey.intake import SubmissionIntake

DEMO_SUBMISSION_COUNT = 60
DEMO_RANDOM_SEED = 2024
DUPLICATE_RATE = 1 / 12

DEMO_NAMES = [
    "Aarav", "Diya", "Kabir", "Meera", "Rohan", "Ananya", "Ishaan", "Saanvi",
    "Vihaan", "Priya", None, None,
]


def demo_submission(rng: random.Random) -> SubmissionCreate:
    """One plausible, schema-valid survey answer."""
    label, level = rng.choice(list(BOTHER_LEVELS.items()))
    features = list(Feature)
    rng.shuffle(features)
    return SubmissionCreate(
        name=rng.choice(DEMO_NAMES),
        age_group=rng.choice(list(AgeGroup)),
        occupation=rng.choice(list(Occupation)),
        noise_exposure_freq=rng.choice(list(NoiseExposureFrequency)),
        noise_source_locations=rng.sample(list(NoiseLocation), k=rng.randint(0, 3)),
        common_noise_sources=rng.sample(list(CommonSound), k=rng.randint(1, 3)),
        focus_disturbance=rng.choice(list(FocusDisturbance)),
        headphone_freq=rng.randint(1, 10),
        bother_level=level,
        bother_label=label,
        community_seriousness=rng.choice(list(CommunitySeriousness)),
        map_interest=rng.choice(list(MapInterest)),
        citizen_scientist=rng.choice(list(CitizenScientist)),
        feature_priorities=features,
        is_duplicate=rng.random() < DUPLICATE_RATE,
    )


async def seed_submissions(
    session: AsyncSession,
    *,
    count: int = DEMO_SUBMISSION_COUNT,
    seed: int = DEMO_RANDOM_SEED,
) -> dict:
    """Insert the demo data set unless the store already has submissions.

    Returns a summary dict with ``created`` (bool) and ``submission_ids``.
    """
    repo = SubmissionRepository(session)
    if await repo.exists_any():
        return {"created": False, "submission_ids": []}

    rng = random.Random(seed)
    intake = SubmissionIntake(repo)
    ids = []
    for _ in range(count):
        receipt = await intake.submit(demo_submission(rng))
        ids.append(receipt.submission_id)
    return {"created": True, "submission_ids": ids}


async def _run_seed() -> None:
    """Run the seed against the configured database (idempotent)."""
    from soundscape.db.session import async_session_factory

    async with async_session_factory() as session:
        result = await seed_submissions(session)

        if not result["created"]:
            print("Submissions already present. Skipping.")
            return

        await session.commit()

        print("Seed complete.")
        print(f"  Submissions:  {len(result['submission_ids'])}")
