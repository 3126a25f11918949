"""Tests for diagnostic rules and best-practice patterns."""

import pytest

from iac_doctor.compliance.models import ComplianceCategory
from iac_doctor.models import Provider, RuleCategory, Severity
from iac_doctor.rules import (
    EC2OpenSSHRule,
    IAMWildcardPermissionsRule,
    RDSEncryptionRule,
    S3BucketEncryptionRule,
    S3BucketPublicAccessRule,
    S3BucketVersioningRule,
    default_registry,
)
from iac_doctor.rules.practices import (
    AzureStorageGeoRedundancyPractice,
    EC2TaggingPractice,
    GCSObjectVersioningPractice,
    RDSMultiAZPractice,
    S3LifecyclePolicyPractice,
)


# (rule_id, violating snippet, clean snippet)
RULE_CASES = [
    # AWS
    ("s3-public-access", 'acl = "public-read"', 'acl = "private"'),
    ("s3-no-encryption", 'bucket = "data"', "server_side_encryption_configuration {}"),
    ("s3-no-versioning", 'bucket = "data"', 'versioning_configuration {\n  status = "Enabled"\n}'),
    ("s3-no-logging", 'bucket = "data"', 'logging {\n  target_bucket = "logs"\n}'),
    (
        "ec2-ssh-open",
        'from_port = 22\nto_port = 22\ncidr_blocks = ["0.0.0.0/0"]',
        'from_port = 443\ncidr_blocks = ["0.0.0.0/0"]',
    ),
    ("ec2-imdsv1", 'ami = "ami-123"', 'metadata_options {\n  http_tokens = "required"\n}'),
    ("rds-no-encryption", 'engine = "mysql"', "storage_encrypted = true"),
    ("rds-public-access", "publicly_accessible = true", "publicly_accessible = false"),
    ("vpc-no-flow-logs", 'cidr_block = "10.0.0.0/16"', 'resource "aws_flow_log" "main" {}'),
    ("iam-wildcard-permissions", '"Action": "*"', '"Action": "s3:GetObject"'),
    # Azure
    (
        "azure-storage-public-access",
        "allow_nested_items_to_be_public = true",
        "allow_nested_items_to_be_public = false",
    ),
    (
        "azure-storage-https",
        "https_traffic_only_enabled = false",
        "https_traffic_only_enabled = true",
    ),
    ("azure-storage-weak-tls", 'min_tls_version = "TLS1_0"', 'min_tls_version = "TLS1_2"'),
    (
        "azure-nsg-open-ingress",
        'direction = "Inbound"\nsource_address_prefix = "*"',
        'direction = "Inbound"\nsource_address_prefix = "10.0.0.0/8"',
    ),
    (
        "azure-sql-public-access",
        "public_network_access_enabled = true",
        "public_network_access_enabled = false",
    ),
    (
        "azure-sql-no-auditing",
        'version = "12.0"',
        'resource "azurerm_mssql_server_extended_auditing_policy" "audit" {}',
    ),
    (
        "azure-keyvault-purge-protection",
        'sku_name = "standard"',
        "purge_protection_enabled = true",
    ),
    # GCP
    ("gcs-public-access", 'member = "allUsers"', 'member = "user:dev@example.com"'),
    (
        "gcs-uniform-access",
        "uniform_bucket_level_access = false",
        "uniform_bucket_level_access = true",
    ),
    (
        "gcp-firewall-open-ingress",
        'source_ranges = ["0.0.0.0/0"]',
        'direction = "EGRESS"\ndestination_ranges = ["0.0.0.0/0"]',
    ),
    (
        "gcp-sql-public-ip",
        'ipv4_enabled = true\nvalue = "0.0.0.0/0"',
        "ipv4_enabled = false",
    ),
    ("gcp-sql-no-ssl", "ipv4_enabled = true", 'ssl_mode = "ENCRYPTED_ONLY"'),
    ("gcp-kms-no-rotation", 'name = "key"', 'rotation_period = "7776000s"'),
]


@pytest.fixture
def registry():
    """Create a registry with the built-in rules."""
    return default_registry()


class TestRuleCatalogue:
    """Positive and negative case for every built-in rule."""

    @pytest.mark.parametrize("rule_id,violating,clean", RULE_CASES)
    def test_violating_snippet_is_flagged(self, registry, rule_id, violating, clean):
        assert registry.get(rule_id).is_violated(violating) is True

    @pytest.mark.parametrize("rule_id,violating,clean", RULE_CASES)
    def test_clean_snippet_passes(self, registry, rule_id, violating, clean):
        assert registry.get(rule_id).is_violated(clean) is False

    def test_every_rule_has_a_case(self, registry):
        covered = {case[0] for case in RULE_CASES}
        assert covered == {rule.RULE_ID for rule in registry.get_all()}

    def test_rules_never_raise_on_empty_text(self, registry):
        for rule in registry.get_all():
            assert isinstance(rule.is_violated(""), bool)


class TestS3Rules:
    """Details of the S3 rules."""

    def test_public_access_is_case_sensitive(self):
        rule = S3BucketPublicAccessRule()
        assert rule.is_violated('acl = "PUBLIC-READ"') is False

    def test_public_read_write_is_flagged(self):
        assert S3BucketPublicAccessRule().is_violated('acl = "public-read-write"') is True

    def test_plain_encryption_token_is_enough(self):
        assert S3BucketEncryptionRule().is_violated("# encryption handled by KMS") is False

    def test_suspended_versioning_is_flagged(self):
        text = 'versioning_configuration {\n  status = "Suspended"\n}'
        assert S3BucketVersioningRule().is_violated(text) is True

    def test_finding_carries_rule_metadata(self):
        finding = S3BucketEncryptionRule().to_finding()

        assert finding.rule_id == "s3-no-encryption"
        assert finding.severity == Severity.HIGH
        assert finding.category == RuleCategory.ENCRYPTION
        assert finding.compliance_tag == ComplianceCategory.DATA_LOSS
        assert finding.cwe_id == "CWE-311"
        assert finding.title == "S3 Bucket Not Encrypted"


class TestOtherAWSRules:
    """Edge cases for EC2, RDS and IAM rules."""

    def test_ssh_needs_open_cidr(self):
        assert EC2OpenSSHRule().is_violated('from_port = 22\ncidr_blocks = ["10.0.0.0/8"]') is False

    def test_port_2222_is_not_ssh(self):
        assert EC2OpenSSHRule().is_violated('port = 2222\ncidr = "0.0.0.0/0"') is False

    def test_rds_encrypted_allows_spacing(self):
        assert RDSEncryptionRule().is_violated("storage_encrypted   =   true") is False

    def test_iam_wildcard_needs_action(self):
        assert IAMWildcardPermissionsRule().is_violated('"Resource": "*"') is False


class TestApplicability:
    """Tests for provider and resource type matching."""

    def test_matches_provider_and_type(self):
        assert S3BucketEncryptionRule().applies_to(Provider.AWS, "s3") is True

    def test_resource_type_is_case_insensitive(self):
        assert S3BucketEncryptionRule().applies_to(Provider.AWS, "S3") is True

    def test_other_provider_does_not_apply(self):
        assert S3BucketEncryptionRule().applies_to(Provider.GCP, "s3") is False

    def test_unknown_provider_does_not_apply(self):
        assert S3BucketEncryptionRule().applies_to(None, "s3") is False


class TestBestPractices:
    """Tests for best-practice patterns."""

    def test_lifecycle_is_unconditional(self):
        assert S3LifecyclePolicyPractice().is_applicable("") is True

    def test_tagging_suggested_without_tags(self):
        assert EC2TaggingPractice().is_applicable('ami = "ami-123"') is True

    def test_tagging_not_suggested_with_tags(self):
        assert EC2TaggingPractice().is_applicable('tags = {\n  Name = "web"\n}') is False

    def test_multi_az(self):
        practice = RDSMultiAZPractice()
        assert practice.is_applicable('engine = "postgres"') is True
        assert practice.is_applicable("multi_az = true") is False

    def test_geo_redundancy_only_for_lrs(self):
        practice = AzureStorageGeoRedundancyPractice()
        assert practice.is_applicable('account_replication_type = "LRS"') is True
        assert practice.is_applicable('account_replication_type = "GRS"') is False

    def test_gcs_versioning(self):
        practice = GCSObjectVersioningPractice()
        assert practice.is_applicable('name = "bucket"') is True
        assert practice.is_applicable("versioning {\n  enabled = true\n}") is False

    def test_suggestion_carries_metadata(self):
        suggestion = S3LifecyclePolicyPractice().to_suggestion()

        assert suggestion.practice_id == "s3-lifecycle-policy"
        assert suggestion.category.value == "cost"
        assert suggestion.impact.value == "high"
