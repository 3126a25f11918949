"""Data models for diagnostic reports and challenge results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from iac_doctor.compliance.models import ComplianceCategory, ComplianceEntry


class Severity(str, Enum):
    """Finding severity levels."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RuleCategory(str, Enum):
    """Security rule categories."""

    ACCESS_CONTROL = "access-control"
    ENCRYPTION = "encryption"
    NETWORK = "network"
    MONITORING = "monitoring"
    CONFIGURATION = "configuration"


class PracticeCategory(str, Enum):
    """Best-practice categories."""

    PERFORMANCE = "performance"
    COST = "cost"
    RELIABILITY = "reliability"
    SECURITY = "security"
    OPERATIONAL = "operational"


class Impact(str, Enum):
    """Expected impact of following a best practice."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Provider(str, Enum):
    """Supported cloud providers."""

    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"

    @classmethod
    def parse(cls, value: Union["Provider", str, None]) -> Optional["Provider"]:
        """Convert a provider name to a Provider, or None if unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class Finding:
    """A single rule violation detected in a text sample."""

    rule_id: str
    severity: Severity
    category: RuleCategory
    title: str
    description: str
    recommendation: str
    compliance_tag: Optional[ComplianceCategory] = None
    cwe_id: Optional[str] = None
    affected_resources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
            "compliance_tag": self.compliance_tag.value if self.compliance_tag else None,
            "cwe_id": self.cwe_id,
            "affected_resources": list(self.affected_resources),
        }


@dataclass
class BestPractice:
    """A best-practice suggestion included in a report."""

    practice_id: str
    category: PracticeCategory
    title: str
    description: str
    implementation: str
    impact: Impact
    affected_resources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "practice_id": self.practice_id,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "implementation": self.implementation,
            "impact": self.impact.value,
            "affected_resources": list(self.affected_resources),
        }


@dataclass
class ValidationReport:
    """Scored result of scanning one snippet."""

    score: int = 100
    findings: list[Finding] = field(default_factory=list)
    suggestions: list[BestPractice] = field(default_factory=list)
    compliance_checklist: list[ComplianceEntry] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    provider: str = ""
    resource_type: str = ""

    @property
    def summary(self) -> dict[str, int]:
        """Number of findings per severity."""
        counts = {severity.value: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    @property
    def critical_count(self) -> int:
        """Count of critical severity findings."""
        return sum(1 for f in self.findings if f.severity == Severity.CRITICAL)

    @property
    def high_count(self) -> int:
        """Count of high severity findings."""
        return sum(1 for f in self.findings if f.severity == Severity.HIGH)

    def passed(self, threshold: int = 90) -> bool:
        """Whether the score reaches the given threshold."""
        return self.score >= threshold

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "provider": self.provider,
            "resource_type": self.resource_type,
            "score": self.score,
            "summary": self.summary,
            "findings": [f.to_dict() for f in self.findings],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "compliance_checklist": [c.to_dict() for c in self.compliance_checklist],
            "recommendations": list(self.recommendations),
        }


@dataclass
class ChallengeOutcome:
    """Authoritative pass/fail result for a challenge submission."""

    challenge_id: int
    passed: bool
    message: str
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "challenge_id": self.challenge_id,
            "pass": self.passed,
            "message": self.message,
            "issues": list(self.issues),
        }


@dataclass(frozen=True)
class RealtimeHint:
    """Cheap per-keystroke feedback for the challenge editor."""

    has_changes: bool
    likely_correct: bool

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "has_changes": self.has_changes,
            "likely_correct": self.likely_correct,
        }
