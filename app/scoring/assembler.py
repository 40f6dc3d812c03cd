"""Result assembly.

Merges a scored test with submission metadata into the record returned to
clients and stored for history. Contains no scoring logic.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.scoring.engine import ScoredTest
from app.utils.time import format_datetime, utc_now


@dataclass(frozen=True)
class SubmissionRecord:
    """Externally visible result of one submission."""

    user_id: str
    submitted_at: datetime
    scored: ScoredTest

    @property
    def test_results(self) -> dict[str, Any]:
        data = self.scored.to_dict()
        data["userId"] = self.user_id
        data["submittedAt"] = format_datetime(self.submitted_at)
        return data


def assemble_submission(
    scored: ScoredTest,
    user_id: str,
    submitted_at: datetime | None = None,
) -> SubmissionRecord:
    """Attach the anonymous user ID and submission time to a scored test."""
    return SubmissionRecord(
        user_id=user_id,
        submitted_at=submitted_at or utc_now(),
        scored=scored,
    )
