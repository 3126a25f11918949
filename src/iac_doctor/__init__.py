"""iac-doctor - Rule-based diagnostics for infrastructure-as-code snippets."""

__version__ = "0.3.0"

from iac_doctor.engine import DiagnosticEngine, live_hint, scan, validate_challenge
from iac_doctor.models import (
    BestPractice,
    ChallengeOutcome,
    Finding,
    Provider,
    RealtimeHint,
    Severity,
    ValidationReport,
)

__all__ = [
    "__version__",
    "scan",
    "validate_challenge",
    "live_hint",
    "DiagnosticEngine",
    "BestPractice",
    "ChallengeOutcome",
    "Finding",
    "Provider",
    "RealtimeHint",
    "Severity",
    "ValidationReport",
]
