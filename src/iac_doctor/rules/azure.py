"""Azure diagnostic rules."""

from iac_doctor.compliance.models import ComplianceCategory
from iac_doctor.models import Provider, RuleCategory, Severity
from iac_doctor.rules.base import ForbiddenPatternRule, RequiredTokenRule, Rule, matches


class AzureStoragePublicAccessRule(ForbiddenPatternRule):
    """Check that storage accounts do not allow anonymous blob access."""

    RULE_ID = "azure-storage-public-access"
    TITLE = "Storage Account Public Blob Access"
    SEVERITY = Severity.CRITICAL
    CATEGORY = RuleCategory.ACCESS_CONTROL
    DESCRIPTION = "Storage account allows anonymous public access to blobs"
    RECOMMENDATION = (
        "Set allow_nested_items_to_be_public to false and grant access with SAS tokens or RBAC"
    )
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    CWE_ID = "CWE-732"
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["azurerm_storage_account"]

    PATTERNS = [
        r"allow_blob_public_access\s*=\s*true",
        r"allow_nested_items_to_be_public\s*=\s*true",
        r'container_access_type\s*=\s*"(blob|container)"',
    ]


class AzureStorageHTTPSRule(ForbiddenPatternRule):
    """Check that storage accounts only accept HTTPS traffic."""

    RULE_ID = "azure-storage-https"
    TITLE = "Storage Account Allows HTTP"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "Storage account accepts unencrypted HTTP traffic"
    RECOMMENDATION = "Set https_traffic_only_enabled to true"
    COMPLIANCE_TAG = ComplianceCategory.INSECURE_INTERFACES
    CWE_ID = "CWE-319"
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["azurerm_storage_account"]

    PATTERNS = [
        r"enable_https_traffic_only\s*=\s*false",
        r"https_traffic_only_enabled\s*=\s*false",
    ]


class AzureStorageTLSRule(Rule):
    """Check that storage accounts require TLS 1.2."""

    RULE_ID = "azure-storage-weak-tls"
    TITLE = "Storage Account Weak TLS"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.ENCRYPTION
    DESCRIPTION = "Storage account does not enforce a minimum TLS version of 1.2"
    RECOMMENDATION = 'Set min_tls_version = "TLS1_2"'
    CWE_ID = "CWE-326"
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["storage"]
    AFFECTED_RESOURCES = ["azurerm_storage_account"]

    def is_violated(self, text: str) -> bool:
        return not matches(r'min_tls_version\s*=\s*"TLS1_[23]"', text)


class AzureNSGOpenIngressRule(Rule):
    """Check that NSG rules do not allow inbound traffic from any source."""

    RULE_ID = "azure-nsg-open-ingress"
    TITLE = "NSG Allows Inbound From Any Source"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = "Network security group allows inbound traffic from any address"
    RECOMMENDATION = (
        "Restrict source_address_prefix to known ranges or use Azure Bastion"
    )
    COMPLIANCE_TAG = ComplianceCategory.INSECURE_INTERFACES
    CWE_ID = "CWE-284"
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["nsg"]
    AFFECTED_RESOURCES = ["azurerm_network_security_group", "azurerm_network_security_rule"]

    OPEN_SOURCE = r'source_address_prefix\s*=\s*"(\*|0\.0\.0\.0/0|Internet|Any)"'

    def is_violated(self, text: str) -> bool:
        return matches(r'direction\s*=\s*"Inbound"', text) and matches(
            self.OPEN_SOURCE, text
        )


class AzureSQLPublicAccessRule(ForbiddenPatternRule):
    """Check that SQL servers disable public network access."""

    RULE_ID = "azure-sql-public-access"
    TITLE = "SQL Server Public Network Access"
    SEVERITY = Severity.HIGH
    CATEGORY = RuleCategory.NETWORK
    DESCRIPTION = "Azure SQL server is reachable over the public network"
    RECOMMENDATION = (
        "Set public_network_access_enabled to false and use private endpoints"
    )
    COMPLIANCE_TAG = ComplianceCategory.MISCONFIGURATION
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["sql"]
    AFFECTED_RESOURCES = ["azurerm_mssql_server"]

    PATTERNS = [r"public_network_access_enabled\s*=\s*true"]


class AzureSQLAuditingRule(RequiredTokenRule):
    """Check that SQL server auditing is configured."""

    RULE_ID = "azure-sql-no-auditing"
    TITLE = "SQL Server Auditing Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.MONITORING
    DESCRIPTION = "Azure SQL server has no auditing policy"
    RECOMMENDATION = "Add an extended auditing policy with a retention period"
    COMPLIANCE_TAG = ComplianceCategory.DUE_DILIGENCE
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["sql"]
    AFFECTED_RESOURCES = ["azurerm_mssql_server_extended_auditing_policy"]

    REQUIRED_TOKENS = ["extended_auditing_policy", "auditing_policy"]


class AzureKeyVaultPurgeProtectionRule(Rule):
    """Check that Key Vault purge protection is enabled."""

    RULE_ID = "azure-keyvault-purge-protection"
    TITLE = "Key Vault Purge Protection Disabled"
    SEVERITY = Severity.MEDIUM
    CATEGORY = RuleCategory.CONFIGURATION
    DESCRIPTION = (
        "Key Vault can be permanently purged, losing keys and secrets"
    )
    RECOMMENDATION = "Set purge_protection_enabled = true"
    COMPLIANCE_TAG = ComplianceCategory.DATA_LOSS
    PROVIDER = Provider.AZURE
    RESOURCE_TYPES = ["keyvault"]
    AFFECTED_RESOURCES = ["azurerm_key_vault"]

    def is_violated(self, text: str) -> bool:
        return not matches(r"purge_protection_enabled\s*=\s*true", text)
