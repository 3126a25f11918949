"""Editing session for a single challenge attempt."""

import logging
from enum import Enum
from typing import Optional

from iac_doctor.challenges.validator import ChallengeValidator
from iac_doctor.models import ChallengeOutcome, RealtimeHint

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Where a challenge attempt currently stands."""

    UNMODIFIED = "unmodified"
    EDITING = "editing"
    SOLVED = "solved"
    STILL_BROKEN = "still-broken"


class ChallengeSession:
    """Tracks the editor text of one challenge between submissions.

    Solved is not a locked state: editing or resubmitting afterwards is
    always allowed.
    """

    def __init__(
        self,
        challenge_id: int,
        validator: Optional[ChallengeValidator] = None,
        original: Optional[str] = None,
    ) -> None:
        self.challenge_id = challenge_id
        self._validator = validator or ChallengeValidator()
        self._spec = self._validator.get_spec(challenge_id, original)
        self.text = self._spec.broken_text
        self.state = SessionState.UNMODIFIED
        self.hint = RealtimeHint(has_changes=False, likely_correct=False)
        self.last_outcome: Optional[ChallengeOutcome] = None
        self._refresh_hint()

    @property
    def broken_text(self) -> str:
        return self._spec.broken_text

    @property
    def hints(self) -> tuple[str, ...]:
        return self._spec.hints

    def edit(self, text: Optional[str]) -> RealtimeHint:
        """Replace the editor text and return the refreshed live hint."""
        self.text = text or ""
        self._refresh_hint()
        self.state = (
            SessionState.EDITING if self.hint.has_changes else SessionState.UNMODIFIED
        )
        return self.hint

    def submit(self) -> ChallengeOutcome:
        """Validate the current text authoritatively."""
        outcome = self._validator.validate(
            self.challenge_id, self.text, self._spec.broken_text
        )
        self.last_outcome = outcome
        self.state = SessionState.SOLVED if outcome.passed else SessionState.STILL_BROKEN
        return outcome

    def reset(self) -> None:
        """Restore the broken text verbatim and forget the last outcome."""
        self.text = self._spec.broken_text
        self.last_outcome = None
        self.state = SessionState.UNMODIFIED
        self._refresh_hint()

    def apply_solution(self) -> bool:
        """Load the reference fix into the editor.

        Returns:
            False when the challenge has no authored solution.
        """
        solved = self._spec.solved_text()
        if solved is None:
            logger.debug(f"Challenge {self.challenge_id} has no reference solution")
            return False
        self.edit(solved)
        return True

    def _refresh_hint(self) -> None:
        self.hint = self._validator.live_hint(
            self.challenge_id, self.text, self._spec.broken_text
        )
