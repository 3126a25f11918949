"""Tests for the diagnostic engine and public API."""

import json

import pytest

import iac_doctor
from iac_doctor.engine import DiagnosticEngine, live_hint, scan, validate_challenge
from iac_doctor.models import Provider, Severity
from iac_doctor.progress import ProgressUpdate


@pytest.fixture
def bucket_without_encryption():
    """S3 bucket that only lacks encryption."""
    return """
resource "aws_s3_bucket" "data" {
  bucket = "my-data"

  versioning {
    enabled = true
  }

  logging {
    target_bucket = "my-logs"
  }
}
"""


@pytest.fixture
def hardened_bucket():
    """S3 bucket that passes every S3 rule."""
    return """
resource "aws_s3_bucket" "data" {
  bucket = "my-data"
  acl    = "private"

  versioning {
    enabled = true
  }

  logging {
    target_bucket = "my-logs"
  }

  server_side_encryption_configuration {
    rule {
      apply_server_side_encryption_by_default {
        sse_algorithm = "aws:kms"
      }
    }
  }
}
"""


class TestScan:
    """Tests for scanning snippets."""

    def test_missing_encryption(self, bucket_without_encryption):
        report = scan(bucket_without_encryption, "aws", "s3")

        assert [f.rule_id for f in report.findings] == ["s3-no-encryption"]
        assert report.findings[0].severity == Severity.HIGH
        assert report.score == 85

    def test_hardened_bucket_scores_100(self, hardened_bucket):
        report = scan(hardened_bucket, Provider.AWS, "s3")

        assert report.findings == []
        assert report.score == 100
        assert all(entry.compliant for entry in report.compliance_checklist)

    def test_empty_text_fails_required_token_rules(self):
        report = scan("", "aws", "s3")

        assert [f.rule_id for f in report.findings] == [
            "s3-no-encryption",
            "s3-no-versioning",
            "s3-no-logging",
        ]
        assert report.score == 65

    def test_none_text_is_treated_as_empty(self):
        assert scan(None, "aws", "s3").to_dict() == scan("", "aws", "s3").to_dict()

    def test_unknown_pair_is_perfect(self):
        report = scan("anything at all", "oracle", "bucket")

        assert report.score == 100
        assert report.findings == []
        assert report.suggestions == []
        assert len(report.compliance_checklist) == 10
        assert all(entry.compliant for entry in report.compliance_checklist)
        assert len(report.recommendations) == 1

    def test_suggestions_do_not_affect_score(self, hardened_bucket):
        report = scan(hardened_bucket, "aws", "s3")

        assert [s.practice_id for s in report.suggestions] == ["s3-lifecycle-policy"]
        assert report.score == 100

    def test_rds_penalties(self):
        text = 'publicly_accessible = true\nengine = "mysql"'
        report = scan(text, "aws", "rds")

        assert report.score == 60
        assert report.critical_count == 1
        assert report.high_count == 1

    def test_provider_is_normalised(self):
        report = scan("", "AWS", "s3")

        assert report.provider == "aws"
        assert report.resource_type == "s3"

    def test_report_is_deterministic(self, bucket_without_encryption):
        first = scan(bucket_without_encryption, "aws", "s3")
        second = scan(bucket_without_encryption, "aws", "s3")

        assert first.to_dict() == second.to_dict()

    def test_report_is_json_serialisable(self, bucket_without_encryption):
        data = json.loads(json.dumps(scan(bucket_without_encryption, "aws", "s3").to_dict()))

        assert data["score"] == 85
        assert data["summary"] == {"critical": 0, "high": 1, "medium": 0, "low": 0}
        assert data["findings"][0]["compliance_tag"] == "Data Loss"

    def test_passed_threshold(self, bucket_without_encryption):
        report = scan(bucket_without_encryption, "aws", "s3")

        assert report.passed(80) is True
        assert report.passed() is False


class TestDiagnosticEngine:
    """Tests for DiagnosticEngine configuration."""

    def test_disabled_rules(self):
        engine = DiagnosticEngine(disabled_rules=["s3-no-logging", "s3-no-versioning"])
        report = engine.scan("", "aws", "s3")

        assert [f.rule_id for f in report.findings] == ["s3-no-encryption"]
        assert report.score == 85

    def test_engine_challenge_entry_points(self):
        engine = DiagnosticEngine()

        outcome = engine.validate_challenge(3, "type: NodePort")
        hint = engine.live_hint(3, "type: NodePort")

        assert outcome.passed is True
        assert hint.likely_correct is True


class TestPublicAPI:
    """Tests for the package-level entry points."""

    def test_exports(self):
        assert iac_doctor.scan is scan
        assert iac_doctor.validate_challenge is validate_challenge
        assert iac_doctor.live_hint is live_hint
        assert iac_doctor.__version__

    def test_validate_challenge_unknown_id_never_raises(self):
        outcome = validate_challenge(12345, "")

        assert outcome.passed is False
        assert outcome.issues

    def test_live_hint_empty_text(self):
        hint = live_hint(1, "")

        assert hint.has_changes is True
        assert hint.likely_correct is False


class TestProgressUpdate:
    """Tests for the progress payload."""

    def test_failing_outcome_yields_nothing(self):
        outcome = validate_challenge(7, "image: nginxx:latest")
        report = scan("", "aws", "s3")

        assert ProgressUpdate.from_results(outcome, report) is None

    def test_passing_outcome(self, hardened_bucket):
        outcome = validate_challenge(7, "image: nginx:latest")
        report = scan(hardened_bucket, "aws", "s3")

        update = ProgressUpdate.from_results(outcome, report)

        assert update.to_dict() == {
            "steps_completed": 1,
            "security_score": 100,
            "best_practices_followed": 1,
        }
