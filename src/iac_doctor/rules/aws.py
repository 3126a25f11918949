"""AWS diagnostic rules."""

from iac_doctor.compliance.models import ComplianceCategory
from iac_doctor.models import Provider, RuleCategory, Severity
from iac_doctor.rules.base import (
    ForbiddenPatternRule,
    RequiredTokenRule,
    Rule,
    matches,
)


class S3BucketPublicAccessRule(ForbiddenPatternRule):
    """Check that S3 buckets are not granted a public canned ACL."""

    RULE_ID = "s3-public-access"
    TITLE = "S3 Bucket Public Access"
    SEVERITY = Severity.CRITICAL
    CATEGORY = RuleCategory.ACCESS_CONTROL
    DESCRIPTION = "S3 bucket is configured with public read or write access"
    RECOMMENDATION = (
        "Remove public access and use CloudFront or signed URLs for public content"
    )
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    CWE_ID = "CWE-732"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["s3"]
    AFFECTED_RESOURCES = ["aws_s3_bucket", "aws_s3_bucket_acl"]

    # Also covers public-read-write
    PATTERNS = [r"public-read"]
    FLAGS = 0


class S3BucketEncryptionRule(RequiredTokenRule):
    """Check that S3 buckets declare server-side encryption."""

    RULE_ID = "s3-no-encryption"
    TITLE = "S3 Bucket Not Encrypted"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "S3 bucket does not have server-side encryption enabled"
    RECOMMENDATION = "Enable server-side encryption with AES-256 or KMS"
    COMPLIANCE_TAG = ComplianceCategory.DATA_LOSS
    CWE_ID = "CWE-311"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["s3"]
    AFFECTED_RESOURCES = ["aws_s3_bucket_server_side_encryption_configuration"]

    REQUIRED_TOKENS = ["server_side_encryption", "encryption"]


class S3BucketVersioningRule(Rule):
    """Check that S3 bucket versioning is present and not switched off."""

    RULE_ID = "s3-no-versioning"
    TITLE = "S3 Versioning Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.CONFIGURATION
    DESCRIPTION = "S3 bucket versioning is not enabled"
    RECOMMENDATION = "Enable versioning to protect against accidental deletions"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["s3"]
    AFFECTED_RESOURCES = ["aws_s3_bucket_versioning"]

    DISABLED_PATTERN = (
        r'versioning[^}]*?(enabled\s*=\s*false|status\s*=\s*"(Disabled|Suspended)")'
    )

    def is_violated(self, text: str) -> bool:
        if "versioning" not in text:
            return True
        return matches(self.DISABLED_PATTERN, text)


class S3BucketLoggingRule(RequiredTokenRule):
    """Check that S3 access logging is configured."""

    RULE_ID = "s3-no-logging"
    TITLE = "S3 Access Logging Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.MONITORING
    DESCRIPTION = "S3 bucket access logging is not configured"
    RECOMMENDATION = "Enable access logging for audit and monitoring purposes"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["s3"]
    AFFECTED_RESOURCES = ["aws_s3_bucket_logging"]

    REQUIRED_TOKENS = ["logging", "access_log"]


class EC2OpenSSHRule(Rule):
    """Check that SSH is not reachable from the whole internet."""

    RULE_ID = "ec2-ssh-open"
    TITLE = "SSH Open to Internet"
    SEVERITY = Severity.CRITICAL
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = "EC2 security group allows SSH access from anywhere (0.0.0.0/0)"
    RECOMMENDATION = "Restrict SSH access to specific IP ranges or use bastion hosts"
    COMPLIANCE_TAG = ComplianceCategory.INSECURE_INTERFACES
    CWE_ID = "CWE-284"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["ec2"]
    AFFECTED_RESOURCES = ["aws_security_group", "aws_security_group_rule"]

    def is_violated(self, text: str) -> bool:
        return "0.0.0.0/0" in text and matches(r"\b22\b", text)


class EC2IMDSv1Rule(Rule):
    """Check that instances enforce IMDSv2 session tokens."""

    RULE_ID = "ec2-imdsv1"
    TITLE = "IMDSv1 Enabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.CONFIGURATION
    DESCRIPTION = "EC2 instance allows IMDSv1 which is less secure"
    RECOMMENDATION = "Enforce IMDSv2 by setting http_tokens to required"
    COMPLIANCE_TAG = ComplianceCategory.IDENTITY_ACCESS_KEYS
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["ec2"]
    AFFECTED_RESOURCES = ["aws_instance"]

    def is_violated(self, text: str) -> bool:
        if "metadata_options" not in text:
            return True
        return not matches(r'http_tokens\s*=\s*"?required', text)


class RDSEncryptionRule(Rule):
    """Check that RDS storage is encrypted at rest."""

    RULE_ID = "rds-no-encryption"
    TITLE = "RDS Not Encrypted"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "RDS instance does not have encryption at rest enabled"
    RECOMMENDATION = "Enable encryption at rest for the RDS instance"
    COMPLIANCE_TAG = ComplianceCategory.DATA_LOSS
    CWE_ID = "CWE-311"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["rds"]
    AFFECTED_RESOURCES = ["aws_db_instance"]

    def is_violated(self, text: str) -> bool:
        # storage_encrypted = true or encrypted = true
        return not matches(r"encrypted\s*=\s*true", text)


class RDSPublicAccessRule(ForbiddenPatternRule):
    """Check that RDS instances are not publicly accessible."""

    RULE_ID = "rds-public-access"
    TITLE = "RDS Publicly Accessible"
    SEVERITY = Severity.CRITICAL
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = "RDS instance is configured to be publicly accessible"
    RECOMMENDATION = "Set publicly_accessible to false and use VPC for access"
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["rds"]
    AFFECTED_RESOURCES = ["aws_db_instance"]

    PATTERNS = [r"publicly_accessible\s*=\s*true"]


class VPCFlowLogsRule(RequiredTokenRule):
    """Check that VPC flow logs are declared."""

    RULE_ID = "vpc-no-flow-logs"
    TITLE = "VPC Flow Logs Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.MONITORING
    DESCRIPTION = "VPC does not have flow logs enabled"
    RECOMMENDATION = (
        "Enable VPC flow logs for network monitoring and security analysis"
    )
    COMPLIANCE_TAG = ComplianceCategory.DUE_DILIGENCE
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["vpc"]
    AFFECTED_RESOURCES = ["aws_flow_log"]

    REQUIRED_TOKENS = ["aws_flow_log", "flow_log"]


class IAMWildcardPermissionsRule(Rule):
    """Check that IAM policies do not grant wildcard actions."""

    RULE_ID = "iam-wildcard-permissions"
    TITLE = "IAM Wildcard Permissions"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.ACCESS_CONTROL
    DESCRIPTION = "IAM policy uses wildcard (*) permissions"
    RECOMMENDATION = (
        "Use specific permissions following the principle of least privilege"
    )
    COMPLIANCE_TAG = ComplianceCategory.IDENTITY_ACCESS_KEYS
    CWE_ID = "CWE-269"
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["iam"]
    AFFECTED_RESOURCES = ["aws_iam_policy", "aws_iam_role_policy"]

    def is_violated(self, text: str) -> bool:
        return '"*"' in text and "Action" in text
