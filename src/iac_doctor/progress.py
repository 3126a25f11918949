"""Payload handed to the external progress tracker after a solved challenge."""

from dataclasses import dataclass
from typing import Optional

from iac_doctor.models import ChallengeOutcome, ValidationReport


@dataclass(frozen=True)
class ProgressUpdate:
    """Increment reported for one passing challenge."""

    steps_completed: int
    security_score: int
    best_practices_followed: int

    @classmethod
    def from_results(
        cls, outcome: ChallengeOutcome, report: ValidationReport
    ) -> Optional["ProgressUpdate"]:
        """Build the update, or None when the outcome did not pass."""
        if not outcome.passed:
            return None
        return cls(
            steps_completed=1,
            security_score=report.score,
            best_practices_followed=len(report.suggestions),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "steps_completed": self.steps_completed,
            "security_score": self.security_score,
            "best_practices_followed": self.best_practices_followed,
        }
