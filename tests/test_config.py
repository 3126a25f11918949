"""Tests for configuration loading."""

import pytest

from iac_doctor.config import ConfigError, DoctorConfig, find_config_file, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of config tests."""
    monkeypatch.delenv("IAC_DOCTOR_PROVIDER", raising=False)
    monkeypatch.delenv("IAC_DOCTOR_LOG_LEVEL", raising=False)


class TestDoctorConfig:
    """Tests for DoctorConfig.from_dict."""

    def test_defaults(self):
        config = DoctorConfig.from_dict({})

        assert config.provider is None
        assert config.resource_type is None
        assert config.format == "table"
        assert config.fail_under is None
        assert config.disabled_rules == []
        assert config.log_level == "WARNING"

    def test_values_from_dict(self):
        config = DoctorConfig.from_dict(
            {
                "provider": "aws",
                "resource_type": "s3",
                "format": "json",
                "fail_under": 80,
                "disabled_rules": ["s3-no-logging"],
                "log_level": "debug",
            }
        )

        assert config.provider == "aws"
        assert config.resource_type == "s3"
        assert config.format == "json"
        assert config.fail_under == 80
        assert config.disabled_rules == ["s3-no-logging"]
        assert config.log_level == "DEBUG"

    def test_environment_fills_gaps(self, monkeypatch):
        monkeypatch.setenv("IAC_DOCTOR_PROVIDER", "gcp")
        monkeypatch.setenv("IAC_DOCTOR_LOG_LEVEL", "info")

        config = DoctorConfig.from_dict({})

        assert config.provider == "gcp"
        assert config.log_level == "INFO"

    def test_file_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("IAC_DOCTOR_PROVIDER", "gcp")
        assert DoctorConfig.from_dict({"provider": "azure"}).provider == "azure"

    def test_unknown_format(self):
        with pytest.raises(ConfigError, match="format"):
            DoctorConfig.from_dict({"format": "xml"})

    @pytest.mark.parametrize("value", [101, -1, "high", True])
    def test_invalid_fail_under(self, value):
        with pytest.raises(ConfigError):
            DoctorConfig.from_dict({"fail_under": value})

    def test_disabled_rules_must_be_list(self):
        with pytest.raises(ConfigError):
            DoctorConfig.from_dict({"disabled_rules": "s3-no-logging"})


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert find_config_file() is None
        assert load_config() == DoctorConfig()

    def test_finds_dotfile(self, tmp_path, monkeypatch):
        (tmp_path / ".iac-doctor.yaml").write_text("provider: azure\nresource_type: storage\n")
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.provider == "azure"
        assert config.resource_type == "storage"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("fail_under: 90\ndisabled_rules:\n  - ec2-imdsv1\n")

        config = load_config(path)

        assert config.fail_under == 90
        assert config.disabled_rules == ["ec2-imdsv1"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "iac-doctor.yaml"
        path.write_text("")

        assert load_config(path) == DoctorConfig()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "iac-doctor.yaml"
        path.write_text("provider: [aws\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "iac-doctor.yaml"
        path.write_text("- aws\n- s3\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nope.yaml")
