"""Compliance taxonomy mapping module."""

from iac_doctor.compliance.mapper import ComplianceMapper
from iac_doctor.compliance.models import ComplianceCategory, ComplianceEntry

__all__ = [
    "ComplianceCategory",
    "ComplianceEntry",
    "ComplianceMapper",
]
