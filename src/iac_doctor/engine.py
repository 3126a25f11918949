"""Main diagnostic interface for iac_doctor."""

import logging
from typing import Optional, Union

from iac_doctor.challenges.validator import ChallengeValidator
from iac_doctor.compliance.mapper import ComplianceMapper
from iac_doctor.evaluator import RuleEvaluator
from iac_doctor.models import ChallengeOutcome, Provider, RealtimeHint, ValidationReport
from iac_doctor.rules.registry import RuleRegistry, default_registry
from iac_doctor.scoring import calculate_score, generate_recommendations

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    """Composes rule evaluation, scoring and compliance mapping into a report.

    The engine keeps no state between calls; the same input always yields an
    equal report.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        disabled_rules: Optional[list[str]] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Rule catalogue. Defaults to the built-in rules.
            disabled_rules: Rule IDs to drop from the catalogue.
        """
        if registry is None:
            registry = default_registry(disabled_rules)
        else:
            for rule_id in disabled_rules or []:
                registry.unregister(rule_id)

        self.evaluator = RuleEvaluator(registry)
        self.mapper = ComplianceMapper()
        self.validator = ChallengeValidator()

    def scan(
        self,
        text: Optional[str],
        provider: Union[Provider, str, None],
        resource_type: str,
    ) -> ValidationReport:
        """Scan a snippet and build its report.

        Args:
            text: Raw snippet text. None is treated as empty.
            provider: Provider enum member or name, e.g. "aws".
            resource_type: Resource type, e.g. "s3".

        Returns:
            ValidationReport with findings, suggestions, score and checklist.
        """
        text = text or ""
        findings = self.evaluator.evaluate(text, provider, resource_type)
        suggestions = self.evaluator.suggest(text, provider, resource_type)
        score = calculate_score(findings)

        parsed = Provider.parse(provider)
        logger.debug(
            f"Scanned {len(text)} chars as {provider}/{resource_type}: "
            f"score={score}, findings={len(findings)}, suggestions={len(suggestions)}"
        )

        return ValidationReport(
            score=score,
            findings=findings,
            suggestions=suggestions,
            compliance_checklist=self.mapper.build_checklist(findings),
            recommendations=generate_recommendations(findings),
            provider=parsed.value if parsed else str(provider or ""),
            resource_type=resource_type or "",
        )

    def validate_challenge(
        self, challenge_id: int, text: Optional[str], original: Optional[str] = None
    ) -> ChallengeOutcome:
        """Authoritatively validate a challenge submission."""
        return self.validator.validate(challenge_id, text, original)

    def live_hint(
        self, challenge_id: int, text: Optional[str], original: Optional[str] = None
    ) -> RealtimeHint:
        """Cheap feedback for an in-progress challenge edit."""
        return self.validator.live_hint(challenge_id, text, original)


def scan(
    text: Optional[str],
    provider: Union[Provider, str, None],
    resource_type: str,
) -> ValidationReport:
    """Scan a snippet with the built-in rules.

    Args:
        text: Raw snippet text.
        provider: Provider enum member or name, e.g. "aws".
        resource_type: Resource type, e.g. "s3".

    Returns:
        ValidationReport for the snippet.
    """
    return DiagnosticEngine().scan(text, provider, resource_type)


def validate_challenge(
    challenge_id: int, text: Optional[str], original: Optional[str] = None
) -> ChallengeOutcome:
    """Validate a challenge submission.

    Args:
        challenge_id: Challenge identifier.
        text: Submitted configuration text.
        original: Broken text for challenges without dedicated checks.

    Returns:
        ChallengeOutcome with pass flag, message and issues.
    """
    return ChallengeValidator().validate(challenge_id, text, original)


def live_hint(
    challenge_id: int, text: Optional[str], original: Optional[str] = None
) -> RealtimeHint:
    """Get the live editor hint for a challenge edit."""
    return ChallengeValidator().live_hint(challenge_id, text, original)
