"""Error taxonomy for the SoundScape read path.

InvalidSubmissionIdError and SubmissionNotFoundError propagate to the API
layer (400 / 404). BreakdownComputationError and TotalCountError are raised
inside the aggregation engine and recovered there. ServiceUnavailableError
fails a whole dashboard request.
"""


class InvalidSubmissionIdError(ValueError):
    """Identifier is not a 24-hex string. Raised before any store access."""

    def __init__(self, submission_id: object) -> None:
        super().__init__(f"Invalid submission ID format: {submission_id!r}")
        self.submission_id = submission_id


class SubmissionNotFoundError(LookupError):
    """Well-formed identifier with no matching record."""

    def __init__(self, submission_id: str) -> None:
        super().__init__(f"Submission not found: {submission_id}")
        self.submission_id = submission_id


class BreakdownComputationError(RuntimeError):
    """One dashboard breakdown failed; the others are unaffected."""

    def __init__(self, breakdown: str, cause: BaseException) -> None:
        super().__init__(f"Breakdown {breakdown!r} failed: {cause}")
        self.breakdown = breakdown
        self.cause = cause


class TotalCountError(RuntimeError):
    """The headline submission count query failed."""


class ServiceUnavailableError(RuntimeError):
    """The submission store cannot be reached at all."""
