"""Tests for CLI interface."""

import json

import pytest
from click.testing import CliRunner

from iac_doctor import __version__
from iac_doctor.challenges import CHALLENGES
from iac_doctor.cli import main


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every command away from any real config file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("IAC_DOCTOR_PROVIDER", raising=False)
    monkeypatch.delenv("IAC_DOCTOR_LOG_LEVEL", raising=False)


@pytest.fixture
def bucket_file(tmp_path):
    """Create a Terraform snippet with a public bucket."""
    path = tmp_path / "bucket.tf"
    path.write_text('resource "aws_s3_bucket" "b" {\n  acl = "public-read"\n}\n')
    return path


@pytest.fixture
def hardened_file(tmp_path):
    """Create a Terraform snippet that passes every S3 rule."""
    path = tmp_path / "hardened.tf"
    path.write_text(
        'resource "aws_s3_bucket" "b" {\n'
        "  versioning {\n    enabled = true\n  }\n"
        '  logging {\n    target_bucket = "logs"\n  }\n'
        "  server_side_encryption_configuration {}\n"
        "}\n"
    )
    return path


class TestVersion:
    """Tests for version command."""

    def test_version_command(self, runner):
        result = runner.invoke(main, ["version"])
        assert result.exit_code == 0
        assert f"iac-doctor version {__version__}" in result.output

    def test_version_option(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "iac-doctor" in result.output


class TestScan:
    """Tests for scan command."""

    def test_scan_json(self, runner, bucket_file):
        result = runner.invoke(
            main, ["scan", str(bucket_file), "-p", "aws", "-r", "s3", "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["score"] == 40
        assert data["findings"][0]["rule_id"] == "s3-public-access"

    def test_scan_yaml(self, runner, bucket_file):
        result = runner.invoke(
            main, ["scan", str(bucket_file), "-p", "aws", "-r", "s3", "-f", "yaml"]
        )

        assert result.exit_code == 0
        assert "score: 40" in result.output

    def test_scan_table(self, runner, bucket_file):
        result = runner.invoke(main, ["scan", str(bucket_file), "-p", "aws", "-r", "s3"])

        assert result.exit_code == 0
        assert "Diagnostic Summary" in result.output

    def test_fail_under(self, runner, bucket_file):
        result = runner.invoke(
            main,
            ["scan", str(bucket_file), "-p", "aws", "-r", "s3", "-f", "json", "--fail-under", "90"],
        )
        assert result.exit_code == 1

    def test_fail_under_met(self, runner, hardened_file):
        result = runner.invoke(
            main,
            ["scan", str(hardened_file), "-p", "aws", "-r", "s3", "-f", "json", "--fail-under", "90"],
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["score"] == 100

    def test_output_to_file(self, runner, bucket_file, tmp_path):
        output_file = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "scan", str(bucket_file), "-p", "aws", "-r", "s3",
                "-f", "json", "-o", str(output_file),
            ],
        )

        assert result.exit_code == 0
        assert output_file.exists()
        assert json.loads(output_file.read_text())["score"] == 40

    def test_missing_provider(self, runner, bucket_file):
        result = runner.invoke(main, ["scan", str(bucket_file), "-r", "s3"])
        assert result.exit_code == 2

    def test_config_supplies_defaults(self, runner, bucket_file, tmp_path):
        config = tmp_path / "doctor.yaml"
        config.write_text(
            "provider: aws\nresource_type: s3\nformat: json\n"
            "disabled_rules:\n  - s3-public-access\n"
        )

        result = runner.invoke(main, ["scan", str(bucket_file), "--config", str(config)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert "s3-public-access" not in [f["rule_id"] for f in data["findings"]]

    def test_dotfile_is_picked_up(self, runner, bucket_file, tmp_path):
        (tmp_path / ".iac-doctor.yaml").write_text("provider: aws\nresource_type: s3\nformat: json\n")

        result = runner.invoke(main, ["scan", str(bucket_file)])

        assert result.exit_code == 0
        assert json.loads(result.output)["provider"] == "aws"

    def test_invalid_config(self, runner, bucket_file, tmp_path):
        config = tmp_path / "doctor.yaml"
        config.write_text("format: xml\n")

        result = runner.invoke(main, ["scan", str(bucket_file), "--config", str(config)])

        assert result.exit_code == 2
        assert "Configuration error" in result.output


class TestRules:
    """Tests for rules command."""

    def test_rules_list(self, runner):
        result = runner.invoke(main, ["rules"])

        assert result.exit_code == 0
        assert "Diagnostic Rules" in result.output

    def test_rules_filtered(self, runner):
        result = runner.invoke(main, ["rules", "-p", "gcp", "-r", "kms"])

        assert result.exit_code == 0
        assert "s3-public-access" not in result.output


class TestChallenge:
    """Tests for challenge commands."""

    def test_list(self, runner):
        result = runner.invoke(main, ["challenge", "list"])

        assert result.exit_code == 0
        assert "Pod in CrashLoopBackOff" in result.output

    def test_show(self, runner):
        result = runner.invoke(main, ["challenge", "show", "3", "--hints"])

        assert result.exit_code == 0
        assert "ClusterIP" in result.output
        assert "Hint 1" in result.output

    def test_show_solution(self, runner):
        result = runner.invoke(main, ["challenge", "show", "7", "--solution"])

        assert result.exit_code == 0
        assert "Solution" in result.output

    def test_show_unknown(self, runner):
        result = runner.invoke(main, ["challenge", "show", "999"])
        assert result.exit_code == 2

    def test_check_broken(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text(CHALLENGES[3].broken_text)

        result = runner.invoke(main, ["challenge", "check", "3", str(path), "-f", "json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["pass"] is False
        assert data["issues"]

    def test_check_fixed(self, runner, tmp_path):
        path = tmp_path / "fixed.yaml"
        path.write_text(CHALLENGES[3].solved_text())

        result = runner.invoke(main, ["challenge", "check", "3", str(path)])

        assert result.exit_code == 0

    def test_check_generic_with_original(self, runner, tmp_path):
        original = tmp_path / "original.yaml"
        original.write_text("apiVersion: v1\nkind: Pod\nmetadata:\n  name: demo\n")
        edited = tmp_path / "edited.yaml"
        edited.write_text(
            "apiVersion: v1\nkind: Pod\nmetadata:\n  name: demo\n"
            "spec:\n  containers:\n  - name: web\n    image: nginx:latest\n"
        )

        result = runner.invoke(
            main,
            ["challenge", "check", "999", str(edited), "--original", str(original), "-f", "json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["pass"] is True
