"""Rule registry for diagnostic rules and best-practice patterns."""

import logging
from typing import Optional, Type, Union

from iac_doctor.models import Provider
from iac_doctor.rules.base import BestPracticePattern, Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Catalogue of rules and best practices indexed by provider and resource type."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._rules: dict[str, Rule] = {}
        self._practices: dict[str, BestPracticePattern] = {}

    def register(self, rule: Rule) -> None:
        """Register a rule.

        Args:
            rule: Rule instance to register. Replaces any rule with the same ID.
        """
        if rule.RULE_ID in self._rules:
            logger.debug(f"Replacing rule {rule.RULE_ID}")
        self._rules[rule.RULE_ID] = rule

    def register_class(self, rule_class: Type[Rule]) -> None:
        """Register a rule class (instantiates it).

        Args:
            rule_class: Rule class to register.
        """
        self.register(rule_class())

    def register_practice(self, practice: BestPracticePattern) -> None:
        """Register a best-practice pattern.

        Args:
            practice: Pattern instance to register.
        """
        self._practices[practice.PRACTICE_ID] = practice

    def unregister(self, rule_id: str) -> None:
        """Remove a rule if present."""
        self._rules.pop(rule_id, None)

    def get(self, rule_id: str) -> Optional[Rule]:
        """Get a rule by ID.

        Args:
            rule_id: The rule ID.

        Returns:
            Rule instance or None if not found.
        """
        return self._rules.get(rule_id)

    def get_all(self) -> list[Rule]:
        """Get all registered rules, in registration order."""
        return list(self._rules.values())

    def get_all_practices(self) -> list[BestPracticePattern]:
        """Get all registered best-practice patterns, in registration order."""
        return list(self._practices.values())

    def rules_for(
        self, provider: Union[Provider, str, None], resource_type: str
    ) -> list[Rule]:
        """Get rules that apply to a provider and resource type.

        Unknown pairs yield an empty list.

        Args:
            provider: Provider enum member or name, e.g. "aws".
            resource_type: Resource type, e.g. "s3".

        Returns:
            List of applicable rules, in registration order.
        """
        parsed = Provider.parse(provider)
        return [
            rule for rule in self._rules.values()
            if rule.applies_to(parsed, resource_type or "")
        ]

    def practices_for(
        self, provider: Union[Provider, str, None], resource_type: str
    ) -> list[BestPracticePattern]:
        """Get best-practice patterns that apply to a provider and resource type."""
        parsed = Provider.parse(provider)
        return [
            practice for practice in self._practices.values()
            if practice.applies_to(parsed, resource_type or "")
        ]

    def resource_types(self, provider: Union[Provider, str, None]) -> list[str]:
        """Get the resource types that have at least one rule or practice."""
        parsed = Provider.parse(provider)
        seen: list[str] = []
        entries = [*self._rules.values(), *self._practices.values()]
        for entry in entries:
            if entry.PROVIDER != parsed:
                continue
            for resource_type in entry.RESOURCE_TYPES:
                if resource_type not in seen:
                    seen.append(resource_type)
        return seen

    def clear(self) -> None:
        """Clear all registered rules and practices."""
        self._rules.clear()
        self._practices.clear()


def default_registry(disabled_rules: Optional[list[str]] = None) -> RuleRegistry:
    """Build a registry holding the built-in rules and practices.

    Args:
        disabled_rules: Rule IDs to leave out.

    Returns:
        A new RuleRegistry.
    """
    registry = RuleRegistry()
    _register_default_rules(registry)
    _register_default_practices(registry)

    for rule_id in disabled_rules or []:
        if registry.get(rule_id) is None:
            logger.warning(f"Cannot disable unknown rule '{rule_id}'")
        registry.unregister(rule_id)

    return registry


def _register_default_rules(registry: RuleRegistry) -> None:
    """Register all default rules."""
    # AWS Rules
    from iac_doctor.rules.aws import (
        S3BucketPublicAccessRule,
        S3BucketEncryptionRule,
        S3BucketVersioningRule,
        S3BucketLoggingRule,
        EC2OpenSSHRule,
        EC2IMDSv1Rule,
        RDSEncryptionRule,
        RDSPublicAccessRule,
        VPCFlowLogsRule,
        IAMWildcardPermissionsRule,
    )

    registry.register_class(S3BucketPublicAccessRule)
    registry.register_class(S3BucketEncryptionRule)
    registry.register_class(S3BucketVersioningRule)
    registry.register_class(S3BucketLoggingRule)
    registry.register_class(EC2OpenSSHRule)
    registry.register_class(EC2IMDSv1Rule)
    registry.register_class(RDSEncryptionRule)
    registry.register_class(RDSPublicAccessRule)
    registry.register_class(VPCFlowLogsRule)
    registry.register_class(IAMWildcardPermissionsRule)

    # Azure Rules
    from iac_doctor.rules.azure import (
        AzureStoragePublicAccessRule,
        AzureStorageHTTPSRule,
        AzureStorageTLSRule,
        AzureNSGOpenIngressRule,
        AzureSQLPublicAccessRule,
        AzureSQLAuditingRule,
        AzureKeyVaultPurgeProtectionRule,
    )

    registry.register_class(AzureStoragePublicAccessRule)
    registry.register_class(AzureStorageHTTPSRule)
    registry.register_class(AzureStorageTLSRule)
    registry.register_class(AzureNSGOpenIngressRule)
    registry.register_class(AzureSQLPublicAccessRule)
    registry.register_class(AzureSQLAuditingRule)
    registry.register_class(AzureKeyVaultPurgeProtectionRule)

    # GCP Rules
    from iac_doctor.rules.gcp import (
        GCSBucketPublicAccessRule,
        GCSUniformAccessRule,
        GCPFirewallOpenIngressRule,
        GCPCloudSQLPublicIPRule,
        GCPCloudSQLSSLRule,
        GCPKMSKeyRotationRule,
    )

    registry.register_class(GCSBucketPublicAccessRule)
    registry.register_class(GCSUniformAccessRule)
    registry.register_class(GCPFirewallOpenIngressRule)
    registry.register_class(GCPCloudSQLPublicIPRule)
    registry.register_class(GCPCloudSQLSSLRule)
    registry.register_class(GCPKMSKeyRotationRule)


def _register_default_practices(registry: RuleRegistry) -> None:
    """Register all default best-practice patterns."""
    from iac_doctor.rules.practices import (
        S3LifecyclePolicyPractice,
        EC2DetailedMonitoringPractice,
        EC2TaggingPractice,
        RDSMultiAZPractice,
        AzureStorageGeoRedundancyPractice,
        GCSObjectVersioningPractice,
    )

    for practice_class in (
        S3LifecyclePolicyPractice,
        EC2DetailedMonitoringPractice,
        EC2TaggingPractice,
        RDSMultiAZPractice,
        AzureStorageGeoRedundancyPractice,
        GCSObjectVersioningPractice,
    ):
        registry.register_practice(practice_class())
