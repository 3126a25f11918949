"""Tests for report generators."""

import json

import pytest
import yaml

from iac_doctor.engine import scan
from iac_doctor.reporter import JSONReporter, TableReporter, YAMLReporter, create_reporter


@pytest.fixture
def report():
    """Report for a public, unencrypted bucket."""
    return scan('resource "aws_s3_bucket" "b" {\n  acl = "public-read"\n}\n', "aws", "s3")


class TestJSONReporter:
    """Tests for JSON output."""

    def test_round_trips_report(self, report):
        data = json.loads(JSONReporter().generate(report))

        assert data == report.to_dict()
        assert data["score"] == 40

    def test_indent(self, report):
        output = JSONReporter(indent=4).generate(report)
        assert '\n    "provider": "aws"' in output


class TestYAMLReporter:
    """Tests for YAML output."""

    def test_parses_back(self, report):
        data = yaml.safe_load(YAMLReporter().generate(report))

        assert data["score"] == 40
        assert data["summary"]["critical"] == 1
        assert len(data["compliance_checklist"]) == 10

    def test_keeps_field_order(self, report):
        output = YAMLReporter().generate(report)
        assert output.index("provider:") < output.index("findings:")


class TestTableReporter:
    """Tests for rich table output."""

    def test_contains_sections(self, report):
        output = TableReporter().generate(report)

        assert "Diagnostic Summary" in output
        assert "40/100" in output
        assert "Security Issues" in output
        assert "s3-public-access" in output
        assert "Compliance Checklist" in output
        assert "Recommendations" in output

    def test_summary_only(self, report):
        output = TableReporter(show_details=False).generate(report)

        assert "Compliance Checklist" not in output
        assert "Best Practices" not in output

    def test_clean_report_has_no_issue_table(self):
        clean = scan("", "oracle", "bucket")
        output = TableReporter().generate(clean)

        assert "100/100" in output
        assert "Security Issues" not in output


class TestCreateReporter:
    """Tests for create_reporter."""

    @pytest.mark.parametrize(
        "format,cls",
        [("json", JSONReporter), ("yaml", YAMLReporter), ("table", TableReporter)],
    )
    def test_known_formats(self, format, cls):
        assert isinstance(create_reporter(format), cls)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            create_reporter("sarif")
