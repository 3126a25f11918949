"""Best-practice suggestions per provider and resource type."""

from iac_doctor.models import Impact, PracticeCategory, Provider
from iac_doctor.rules.base import BestPracticePattern, matches


class S3LifecyclePolicyPractice(BestPracticePattern):
    PRACTICE_ID = "s3-lifecycle-policy"
    TITLE = "Configure S3 Lifecycle Policies"
    CATEGORY = PracticeCategory.COST
    DESCRIPTION = "Automatically transition objects to cheaper storage classes"
    IMPLEMENTATION = (
        "Add lifecycle configuration to move old objects to IA or Glacier"
    )
    IMPACT = Impact.HIGH
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["s3"]
    AFFECTED_RESOURCES = ["aws_s3_bucket_lifecycle_configuration"]


class EC2DetailedMonitoringPractice(BestPracticePattern):
    PRACTICE_ID = "ec2-monitoring"
    TITLE = "Enable Detailed Monitoring"
    CATEGORY = PracticeCategory.OPERATIONAL
    DESCRIPTION = "Enable detailed CloudWatch monitoring for better observability"
    IMPLEMENTATION = "Set monitoring = true in EC2 instance configuration"
    IMPACT = Impact.MEDIUM
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["ec2"]
    AFFECTED_RESOURCES = ["aws_instance"]


class EC2TaggingPractice(BestPracticePattern):
    """Suggested when the instance carries no tags."""

    PRACTICE_ID = "ec2-tagging"
    TITLE = "Tag Instances for Cost Allocation"
    CATEGORY = PracticeCategory.COST
    DESCRIPTION = "Tags let you attribute spend and find owners of running instances"
    IMPLEMENTATION = "Add a tags block with at least Name, Owner and Environment"
    IMPACT = Impact.LOW
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["ec2"]
    AFFECTED_RESOURCES = ["aws_instance"]

    def is_applicable(self, text: str) -> bool:
        return not matches(r"\btags\s*=?\s*\{", text)


class RDSMultiAZPractice(BestPracticePattern):
    """Suggested when Multi-AZ is not switched on."""

    PRACTICE_ID = "rds-multi-az"
    TITLE = "Enable Multi-AZ Deployment"
    CATEGORY = PracticeCategory.RELIABILITY
    DESCRIPTION = "A standby replica in another zone keeps the database available during outages"
    IMPLEMENTATION = "Set multi_az = true on the database instance"
    IMPACT = Impact.HIGH
    PROVIDER = Provider.AWS
    RESOURCE_TYPES = ["rds"]
    AFFECTED_RESOURCES = ["aws_db_instance"]

    def is_applicable(self, text: str) -> bool:
        return not matches(r"multi_az\s*=\s*true", text)


class AzureStorageGeoRedundancyPractice(BestPracticePattern):
    """Suggested for locally-redundant storage accounts."""

    PRACTICE_ID = "azure-storage-geo-redundancy"
    TITLE = "Use Geo-Redundant Replication"
    CATEGORY = PracticeCategory.RELIABILITY
    DESCRIPTION = "LRS keeps all copies in one datacenter"
    IMPLEMENTATION = 'Set account_replication_type = "GRS" or "RAGRS"'
    IMPACT = Impact.MEDIUM
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["azurerm_storage_account"]

    def is_applicable(self, text: str) -> bool:
        return matches(r'account_replication_type\s*=\s*"LRS"', text)


class GCSObjectVersioningPractice(BestPracticePattern):
    """Suggested when the bucket has no versioning block."""

    PRACTICE_ID = "gcs-object-versioning"
    TITLE = "Enable Object Versioning"
    CATEGORY = PracticeCategory.RELIABILITY
    DESCRIPTION = "Versioning keeps overwritten and deleted objects recoverable"
    IMPLEMENTATION = "Add versioning { enabled = true } to the bucket"
    IMPACT = Impact.MEDIUM
    PROVIDER = Provider.GCP
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["google_storage_bucket"]

    def is_applicable(self, text: str) -> bool:
        return "versioning" not in text
