"""Diagnostic rules and best-practice patterns."""

from iac_doctor.rules.aws import (
    EC2IMDSv1Rule,
    EC2OpenSSHRule,
    IAMWildcardPermissionsRule,
    RDSEncryptionRule,
    RDSPublicAccessRule,
    S3BucketEncryptionRule,
    S3BucketLoggingRule,
    S3BucketPublicAccessRule,
    S3BucketVersioningRule,
    VPCFlowLogsRule,
)
from iac_doctor.rules.azure import (
    AzureKeyVaultPurgeProtectionRule,
    AzureNSGOpenIngressRule,
    AzureSQLAuditingRule,
    AzureSQLPublicAccessRule,
    AzureStorageHTTPSRule,
    AzureStoragePublicAccessRule,
    AzureStorageTLSRule,
)
from iac_doctor.rules.base import (
    BestPracticePattern,
    ForbiddenPatternRule,
    RequiredTokenRule,
    Rule,
)
from iac_doctor.rules.gcp import (
    GCPCloudSQLPublicIPRule,
    GCPCloudSQLSSLRule,
    GCPFirewallOpenIngressRule,
    GCPKMSKeyRotationRule,
    GCSBucketPublicAccessRule,
    GCSUniformAccessRule,
)
from iac_doctor.rules.registry import RuleRegistry, default_registry

__all__ = [
    "BestPracticePattern",
    "ForbiddenPatternRule",
    "RequiredTokenRule",
    "Rule",
    "RuleRegistry",
    "default_registry",
    # AWS Rules
    "EC2IMDSv1Rule",
    "EC2OpenSSHRule",
    "IAMWildcardPermissionsRule",
    "RDSEncryptionRule",
    "RDSPublicAccessRule",
    "S3BucketEncryptionRule",
    "S3BucketLoggingRule",
    "S3BucketPublicAccessRule",
    "S3BucketVersioningRule",
    "VPCFlowLogsRule",
    # Azure Rules
    "AzureKeyVaultPurgeProtectionRule",
    "AzureNSGOpenIngressRule",
    "AzureSQLAuditingRule",
    "AzureSQLPublicAccessRule",
    "AzureStorageHTTPSRule",
    "AzureStoragePublicAccessRule",
    "AzureStorageTLSRule",
    # GCP Rules
    "GCPCloudSQLPublicIPRule",
    "GCPCloudSQLSSLRule",
    "GCPFirewallOpenIngressRule",
    "GCPKMSKeyRotationRule",
    "GCSBucketPublicAccessRule",
    "GCSUniformAccessRule",
]
