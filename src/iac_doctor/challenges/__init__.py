"""Kubernetes troubleshooting challenges and their validation."""

from iac_doctor.challenges.catalog import CHALLENGES, ChallengeSpec, generic_spec
from iac_doctor.challenges.checks import Check
from iac_doctor.challenges.session import ChallengeSession, SessionState
from iac_doctor.challenges.validator import ChallengeValidator

__all__ = [
    "CHALLENGES",
    "ChallengeSession",
    "ChallengeSpec",
    "ChallengeValidator",
    "Check",
    "SessionState",
    "generic_spec",
]
