"""Challenge validation: authoritative pass/fail and live editor hints."""

import logging
from typing import Mapping, Optional

from iac_doctor.challenges.catalog import CHALLENGES, ChallengeSpec, generic_spec
from iac_doctor.models import ChallengeOutcome, RealtimeHint

logger = logging.getLogger(__name__)


class ChallengeValidator:
    """Judges submissions against the authored challenge catalogue.

    Challenges without dedicated checks fall back to a generic validation
    that compares the submission with the broken text it started from.
    ``validate`` and ``live_hint`` evaluate the same checks, so whenever a
    hint reports ``likely_correct`` the authoritative result passes too.
    """

    def __init__(self, catalog: Optional[Mapping[int, ChallengeSpec]] = None) -> None:
        self._catalog = CHALLENGES if catalog is None else catalog

    @property
    def challenge_ids(self) -> list[int]:
        """Ids of the challenges with dedicated checks, ascending."""
        return sorted(self._catalog)

    def get_spec(self, challenge_id: int, original: Optional[str] = None) -> ChallengeSpec:
        """Get the spec for a challenge.

        Args:
            challenge_id: Challenge identifier.
            original: Broken text for challenges outside the catalogue.
                Ignored for catalogued challenges.

        Returns:
            The catalogued spec or a generic one.
        """
        spec = self._catalog.get(challenge_id)
        if spec is not None:
            return spec
        logger.debug(f"No dedicated checks for challenge {challenge_id}, using generic")
        return generic_spec(challenge_id, original or "")

    def validate(
        self, challenge_id: int, text: Optional[str], original: Optional[str] = None
    ) -> ChallengeOutcome:
        """Decide whether a submission fixes the challenge.

        Args:
            challenge_id: Challenge identifier.
            text: Submitted configuration text.
            original: Broken text for challenges outside the catalogue.

        Returns:
            ChallengeOutcome with one issue per failing check.
        """
        spec = self.get_spec(challenge_id, original)
        text = text or ""

        issues = [check.issue for check in spec.checks if not check.passes(text)]
        passed = not issues

        logger.info(
            f"Challenge {challenge_id} {'passed' if passed else 'failed'}"
            f" ({len(issues)} issue(s))"
        )

        return ChallengeOutcome(
            challenge_id=challenge_id,
            passed=passed,
            message=spec.success_message if passed else spec.failure_message,
            issues=issues,
        )

    def live_hint(
        self, challenge_id: int, text: Optional[str], original: Optional[str] = None
    ) -> RealtimeHint:
        """Quick feedback while the user is still typing."""
        spec = self.get_spec(challenge_id, original)
        text = text or ""
        return RealtimeHint(
            has_changes=text != spec.broken_text,
            likely_correct=all(check.passes(text) for check in spec.checks),
        )
