"""Data models for compliance checklists."""

from dataclasses import dataclass, field
from enum import Enum


class ComplianceCategory(Enum):
    """OWASP cloud top-ten risk categories used for the compliance checklist."""

    IDENTITY_ACCESS_KEYS = "Insufficient Identity, Credential, Access and Key Management"
    INSECURE_INTERFACES = "Insecure Interfaces and APIs"
    MISCONFIGURATION = "Misconfiguration and Inadequate Change Control"
    SECURITY_ARCHITECTURE = "Lack of Cloud Security Architecture and Strategy"
    USAGE_VISIBILITY = "Limited Cloud Usage Visibility"
    ACCOUNT_HIJACKING = "Account Hijacking"
    MALICIOUS_INSIDERS = "Malicious Insiders"
    ADVANCED_PERSISTENT_THREATS = "Advanced Persistent Threats (APTs)"
    DATA_LOSS = "Data Loss"
    DUE_DILIGENCE = "Insufficient Due Diligence"


@dataclass
class ComplianceEntry:
    """Checklist line for one compliance category."""

    category: ComplianceCategory
    violating_titles: list[str] = field(default_factory=list)

    @property
    def compliant(self) -> bool:
        """A category is compliant iff no finding maps to it."""
        return not self.violating_titles

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "category": self.category.value,
            "compliant": self.compliant,
            "violating_titles": list(self.violating_titles),
        }
