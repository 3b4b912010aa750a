"""Duplicate filter shared by every dashboard query."""

from sqlalchemy import ColumnElement, true

from soundscape.db.tables import SubmissionRow


def build_filter(include_duplicates: bool) -> ColumnElement[bool]:
    """Predicate applied before any grouping.

    The duplicate flag is reported by the client and never verified, so this
    is an advisory filter. Rows with a NULL flag are treated as originals.
    """
    if include_duplicates:
        return true()
    return SubmissionRow.is_duplicate.is_not(True)
