"""Base classes for text-level diagnostic rules."""

import re
from abc import ABC, abstractmethod
from typing import Optional

from iac_doctor.compliance.models import ComplianceCategory
from iac_doctor.models import (
    BestPractice,
    Finding,
    Impact,
    PracticeCategory,
    Provider,
    RuleCategory,
    Severity,
)


def contains_any(text: str, tokens: list[str]) -> bool:
    """Check whether any of the tokens occurs in the text."""
    return any(token in text for token in tokens)


def matches(pattern: str, text: str, flags: int = 0) -> bool:
    """Check whether a regular expression matches anywhere in the text."""
    return re.search(pattern, text, flags) is not None


class _Applicable:
    """Shared provider/resource-type matching."""

    PROVIDER: Optional[Provider] = None
    RESOURCE_TYPES: list[str] = []

    def applies_to(self, provider: Optional[Provider], resource_type: str) -> bool:
        """Check if this entry applies to a provider and resource type.

        Args:
            provider: Parsed provider, or None if unrecognised.
            resource_type: Resource type name, e.g. "s3".

        Returns:
            True if the entry should be evaluated for this context.
        """
        if provider is None or provider != self.PROVIDER:
            return False
        wanted = resource_type.strip().lower()
        return any(rt.lower() == wanted for rt in self.RESOURCE_TYPES)


class Rule(_Applicable, ABC):
    """Abstract base class for security rules."""

    # Rule metadata - override in subclasses
    RULE_ID: str = "UNKNOWN"
    TITLE: str = "Unknown Rule"
    SEVERITY: Severity = Severity.MEDIUM
    CATEGORY: RuleCategory = RuleCategory.CONFIGURATION
    DESCRIPTION: str = ""
    RECOMMENDATION: str = ""
    COMPLIANCE_TAG: Optional[ComplianceCategory] = None
    CWE_ID: Optional[str] = None

    # Resources a finding points the user at
    AFFECTED_RESOURCES: list[str] = []

    @abstractmethod
    def is_violated(self, text: str) -> bool:
        """Evaluate the rule against raw text.

        Must not depend on any other rule and must not raise.

        Args:
            text: The snippet to inspect.

        Returns:
            True if the snippet violates the rule.
        """
        pass

    def to_finding(self) -> Finding:
        """Create a Finding carrying this rule's metadata."""
        return Finding(
            rule_id=self.RULE_ID,
            severity=self.SEVERITY,
            category=self.CATEGORY,
            title=self.TITLE,
            description=self.DESCRIPTION,
            recommendation=self.RECOMMENDATION,
            compliance_tag=self.COMPLIANCE_TAG,
            cwe_id=self.CWE_ID,
            affected_resources=list(self.AFFECTED_RESOURCES),
        )


class RequiredTokenRule(Rule):
    """Violated when none of the required tokens appear in the text."""

    REQUIRED_TOKENS: list[str] = []

    def is_violated(self, text: str) -> bool:
        return not contains_any(text, self.REQUIRED_TOKENS)


class ForbiddenPatternRule(Rule):
    """Violated when any forbidden regular expression matches the text."""

    PATTERNS: list[str] = []
    FLAGS: int = re.IGNORECASE

    def is_violated(self, text: str) -> bool:
        return any(matches(pattern, text, self.FLAGS) for pattern in self.PATTERNS)


class BestPracticePattern(_Applicable):
    """Base class for best-practice suggestions.

    A pattern with no override of ``is_applicable`` is unconditional: it is
    suggested whenever the provider and resource type match.
    """

    PRACTICE_ID: str = "UNKNOWN"
    TITLE: str = "Unknown Practice"
    CATEGORY: PracticeCategory = PracticeCategory.OPERATIONAL
    DESCRIPTION: str = ""
    IMPLEMENTATION: str = ""
    IMPACT: Impact = Impact.MEDIUM
    AFFECTED_RESOURCES: list[str] = []

    def is_applicable(self, text: str) -> bool:
        """Whether the suggestion applies to the text."""
        return True

    def to_suggestion(self) -> BestPractice:
        """Create a BestPractice carrying this pattern's metadata."""
        return BestPractice(
            practice_id=self.PRACTICE_ID,
            category=self.CATEGORY,
            title=self.TITLE,
            description=self.DESCRIPTION,
            implementation=self.IMPLEMENTATION,
            impact=self.IMPACT,
            affected_resources=list(self.AFFECTED_RESOURCES),
        )
