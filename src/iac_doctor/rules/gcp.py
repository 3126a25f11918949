"""GCP diagnostic rules."""

from iac_doctor.compliance.models import ComplianceCategory
from iac_doctor.models import Provider, RuleCategory, Severity
from iac_doctor.rules.base import ForbiddenPatternRule, Rule, matches


class GCSBucketPublicAccessRule(ForbiddenPatternRule):
    """Check that Cloud Storage buckets are not shared with everyone."""

    RULE_ID = "gcs-public-access"
    TITLE = "Cloud Storage Bucket Public Access"
    SEVERITY = Severity.CRITICAL
    CATEGORY = RuleCategory.ACCESS_CONTROL
    DESCRIPTION = "Bucket grants access to allUsers or allAuthenticatedUsers"
    RECOMMENDATION = "Remove allUsers and allAuthenticatedUsers IAM members"
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    CWE_ID = "CWE-732"
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["google_storage_bucket_iam_member", "google_storage_bucket_iam_binding"]

    PATTERNS = [r"\ballUsers\b", r"\ballAuthenticatedUsers\b"]
    FLAGS = 0


class GCSUniformAccessRule(Rule):
    """Check that uniform bucket-level access is enabled."""

    RULE_ID = "gcs-uniform-access"
    TITLE = "Uniform Bucket-Level Access Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.ACCESS_CONTROL
    DESCRIPTION = "Bucket relies on per-object ACLs instead of uniform IAM access"
    RECOMMENDATION = "Set uniform_bucket_level_access = true"
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["google_storage_bucket"]

    def is_violated(self, text: str) -> bool:
        return not matches(r"uniform_bucket_level_access\s*=\s*true", text)


class GCPFirewallOpenIngressRule(Rule):
    """Check that ingress firewall rules are not open to the internet."""

    RULE_ID = "gcp-firewall-open-ingress"
    TITLE = "Firewall Allows Ingress From Anywhere"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = "Firewall rule allows ingress from 0.0.0.0/0"
    RECOMMENDATION = (
        "Restrict source_ranges to known CIDRs or use Identity-Aware Proxy"
    )
    COMPLIANCE_TAG = ComplianceCategory.INSECURE_INTERFACES
    CWE_ID = "CWE-284"
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["firewall"]
    AFFECTED_RESOURCES = ["google_compute_firewall"]

    def is_violated(self, text: str) -> bool:
        # Direction defaults to INGRESS when omitted
        if matches(r'direction\s*=\s*"EGRESS"', text):
            return False
        return "0.0.0.0/0" in text


class GCPCloudSQLPublicIPRule(Rule):
    """Check that Cloud SQL public IPs are restricted."""

    RULE_ID = "gcp-sql-public-ip"
    TITLE = "Cloud SQL Open Public IP"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = (
        "Cloud SQL instance has a public IP and authorizes connections from anywhere"
    )
    RECOMMENDATION = "Disable ipv4_enabled or restrict authorized_networks"
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["sql"]
    AFFECTED_RESOURCES = ["google_sql_database_instance"]

    def is_violated(self, text: str) -> bool:
        return matches(r"ipv4_enabled\s*=\s*true", text) and "0.0.0.0/0" in text


class GCPCloudSQLSSLRule(Rule):
    """Check that Cloud SQL requires SSL connections."""

    RULE_ID = "gcp-sql-no-ssl"
    TITLE = "Cloud SQL SSL Not Required"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "Cloud SQL instance accepts unencrypted connections"
    RECOMMENDATION = (
        'Set ssl_mode = "ENCRYPTED_ONLY" (or require_ssl = true) in ip_configuration'
    )
    COMPLIANCE_TAG = ComplianceCategory.DATA_LOSS
    CWE_ID = "CWE-319"
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["sql"]
    AFFECTED_RESOURCES = ["google_sql_database_instance"]

    def is_violated(self, text: str) -> bool:
        return not (
            matches(r"require_ssl\s*=\s*true", text)
            or matches(r'ssl_mode\s*=\s*"(ENCRYPTED_ONLY|TRUSTED_CLIENT_CERTIFICATE_REQUIRED)"', text)
        )


class GCPKMSKeyRotationRule(Rule):
    """Check that KMS keys declare a rotation period."""

    RULE_ID = "gcp-kms-no-rotation"
    TITLE = "KMS Key Rotation Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "Crypto key has no automatic rotation period"
    RECOMMENDATION = 'Set rotation_period, e.g. "7776000s" for 90 days'
    COMPLIANCE_TAG = ComplianceCategory.IDENTITY_ACCESS_KEYS
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["kms"]
    AFFECTED_RESOURCES = ["google_kms_crypto_key"]

    def is_violated(self, text: str) -> bool:
        return "rotation_period" not in text
