"""Tests for SubmissionIntake — the survey write path."""

from soundscape.models.common import is_submission_id
from soundscape.models.survey import SubmissionCreate
from soundscape.repositories.submissions import SubmissionRepository
from soundscape.survey.browser import row_to_submission
from soundscape.survey.intake import SubmissionIntake


class TestSubmit:
    async def test_persists_answers_and_returns_receipt(self, db_session, valid_submission):
        repo = SubmissionRepository(db_session)
        receipt = await SubmissionIntake(repo).submit(
            SubmissionCreate.model_validate(valid_submission),
        )

        assert is_submission_id(receipt.submission_id)
        assert receipt.persona.name == "Noise Veteran"

        row = await repo.get(receipt.submission_id)
        assert row is not None
        assert row.occupation == "Student"
        assert row.bother_label == "Honking (80dB)"
        assert row.headphone_freq == 6
        assert row.is_duplicate is False

    async def test_arrays_keep_their_order(self, db_session, valid_submission):
        repo = SubmissionRepository(db_session)
        receipt = await SubmissionIntake(repo).submit(
            SubmissionCreate.model_validate(valid_submission),
        )
        stored = row_to_submission(await repo.get(receipt.submission_id))

        assert stored.noise_source_locations == ["Home", "Commute"]
        assert stored.common_noise_sources == ["Traffic", "Construction"]
        assert stored.feature_priorities == valid_submission["featurePriorities"]

    async def test_duplicate_flag_stored_as_reported(self, db_session, valid_submission):
        valid_submission["isDuplicate"] = True
        repo = SubmissionRepository(db_session)
        receipt = await SubmissionIntake(repo).submit(
            SubmissionCreate.model_validate(valid_submission),
        )
        assert (await repo.get(receipt.submission_id)).is_duplicate is True
