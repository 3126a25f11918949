"""Maps findings onto the compliance taxonomy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from iac_doctor.compliance.models import ComplianceCategory, ComplianceEntry

if TYPE_CHECKING:
    from iac_doctor.models import Finding


class ComplianceMapper:
    """Groups findings by compliance category."""

    def get_supported_categories(self) -> list[ComplianceCategory]:
        """Get the fixed list of taxonomy categories, in checklist order."""
        return list(ComplianceCategory)

    def get_findings_by_category(
        self,
        findings: list[Finding],
        category: ComplianceCategory,
    ) -> list[Finding]:
        """Filter findings tagged with a compliance category.

        Args:
            findings: Findings from one evaluation.
            category: The category to filter by.

        Returns:
            Findings whose compliance tag equals the category.
        """
        return [f for f in findings if f.compliance_tag == category]

    def build_checklist(self, findings: list[Finding]) -> list[ComplianceEntry]:
        """Build one checklist entry per taxonomy category.

        Categories with no matching finding are compliant, including those
        no rule ever maps to.

        Args:
            findings: Findings from one evaluation.

        Returns:
            List of ComplianceEntry in taxonomy order.
        """
        return [
            ComplianceEntry(
                category=category,
                violating_titles=[
                    f.title for f in self.get_findings_by_category(findings, category)
                ],
            )
            for category in self.get_supported_categories()
        ]

    def get_violated_categories(self, findings: list[Finding]) -> list[ComplianceCategory]:
        """Get categories with at least one violating finding."""
        return [
            entry.category
            for entry in self.build_checklist(findings)
            if not entry.compliant
        ]
