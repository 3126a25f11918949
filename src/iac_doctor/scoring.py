"""Score calculation and high-level recommendations."""

from iac_doctor.models import Finding, RuleCategory, Severity

# Downstream thresholds ("90 and above is good") are calibrated to this table.
SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}

MAX_SCORE = 100

CATEGORY_RECOMMENDATIONS: list[tuple[RuleCategory, str]] = [
    (
        RuleCategory.ACCESS_CONTROL,
        "Review and restrict access permissions to prevent data exposure.",
    ),
    (
        RuleCategory.ENCRYPTION,
        "Enable encryption for all data storage services to protect sensitive information.",
    ),
    (
        RuleCategory.NETWORK,
        "Implement network segmentation and proper security group configurations.",
    ),
    (
        RuleCategory.MONITORING,
        "Enable comprehensive logging and monitoring for security visibility.",
    ),
    (
        RuleCategory.CONFIGURATION,
        "Review resource settings against the provider hardening guide.",
    ),
]


def calculate_score(findings: list[Finding]) -> int:
    """Calculate a 0-100 score from findings.

    Starts at 100 and subtracts a fixed penalty per finding, floored at 0.
    """
    penalty = sum(SEVERITY_PENALTIES[f.severity] for f in findings)
    return max(0, MAX_SCORE - penalty)


def generate_recommendations(findings: list[Finding]) -> list[str]:
    """Derive high-level advice from findings, in a fixed order."""
    recommendations = []

    if any(f.severity == Severity.CRITICAL for f in findings):
        recommendations.append(
            "Address critical security issues immediately to prevent potential breaches."
        )

    categories = {f.category for f in findings}
    for category, text in CATEGORY_RECOMMENDATIONS:
        if category in categories:
            recommendations.append(text)

    if not findings:
        recommendations.append(
            "Your configuration follows security best practices. Continue monitoring for new threats."
        )

    return recommendations
