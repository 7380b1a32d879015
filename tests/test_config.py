"""Tests for configuration loading."""

import pytest

from subweight.config import CompareParams, FilterParams, Settings, load_settings
from subweight.exceptions import InvalidConfigError, SubweightError
from subweight.models import CompareMethod, Dimension, RelativeChange


class TestLoadSettings:
    """Test merging of defaults, files, environment and overrides."""

    def test_defaults(self, isolated_config):
        settings = load_settings()
        assert settings.method is None
        assert settings.threshold == 5.0
        assert settings.path_pattern == "runtime/*/src/weights/*.rs"
        assert settings.max_files == 1000
        assert settings.filter_params() == FilterParams()

    def test_project_config(self, isolated_config):
        (isolated_config / "subweight.toml").write_text(
            '[subweight]\nmethod = "guess-worst"\nthreshold = 10\nchange = ["added", "changed"]\n'
        )
        settings = load_settings()
        assert settings.compare_params().method is CompareMethod.GUESS_WORST
        assert settings.filter_params().threshold == 10.0
        assert settings.filter_params().change == frozenset(
            {RelativeChange.ADDED, RelativeChange.CHANGED}
        )

    def test_top_level_table(self, isolated_config, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text('unit = "proof"\nmethod = "base"\n')
        params = load_settings(config_file=config).compare_params()
        assert params.unit is Dimension.PROOF

    def test_priority(self, isolated_config, monkeypatch):
        (isolated_config / "subweight.toml").write_text("threshold = 10\noffline = true\n")
        monkeypatch.setenv("SUBWEIGHT_THRESHOLD", "7.5")
        assert load_settings().threshold == 7.5
        assert load_settings(threshold=1.0).threshold == 1.0

    def test_none_overrides_are_ignored(self, isolated_config):
        (isolated_config / "subweight.toml").write_text("offline = true\n")
        settings = load_settings(offline=None, method=None)
        assert settings.offline is True

    def test_env_values_are_parsed(self, isolated_config, monkeypatch):
        monkeypatch.setenv("SUBWEIGHT_GIT_PULL", "yes")
        monkeypatch.setenv("SUBWEIGHT_MAX_FILES", "12")
        monkeypatch.setenv("SUBWEIGHT_CHANGE", "added, removed")
        settings = load_settings()
        assert settings.git_pull is True
        assert settings.max_files == 12
        assert settings.change == ("added", "removed")

    def test_log_file_from_env(self, isolated_config, monkeypatch):
        monkeypatch.setenv("SUBWEIGHT_LOG_FILE", "/tmp/subweight.log")
        assert load_settings().log_file == "/tmp/subweight.log"
        assert load_settings(log_file="run.log").log_file == "run.log"

    def test_invalid_env_value(self, isolated_config, monkeypatch):
        monkeypatch.setenv("SUBWEIGHT_OFFLINE", "maybe")
        with pytest.raises(SubweightError):
            load_settings()

    def test_verbosity_flags(self, isolated_config):
        assert load_settings(verbose=True).verbosity == "verbose"
        assert load_settings(quiet=True).verbosity == "quiet"
        assert load_settings(verbose=False, quiet=False).verbosity == "normal"

    def test_missing_config_file(self, isolated_config, tmp_path):
        with pytest.raises(SubweightError):
            load_settings(config_file=tmp_path / "missing.toml")

    def test_malformed_config_file(self, isolated_config, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("threshold = = 3\n")
        with pytest.raises(SubweightError):
            load_settings(config_file=config)

    def test_unknown_key(self, isolated_config):
        (isolated_config / "subweight.toml").write_text("colour = true\n")
        with pytest.raises(SubweightError):
            load_settings()


class TestSettingsValidation:
    """Test conversion into compare and filter parameters."""

    def test_method_is_required(self):
        with pytest.raises(InvalidConfigError):
            Settings().compare_params()

    def test_unknown_method(self):
        with pytest.raises(InvalidConfigError):
            Settings(method="worst").compare_params()

    def test_unknown_change(self):
        with pytest.raises(InvalidConfigError):
            Settings(change=("moved",)).filter_params()

    def test_negative_threshold(self):
        with pytest.raises(InvalidConfigError):
            FilterParams(threshold=-1)

    def test_invalid_regex(self):
        with pytest.raises(InvalidConfigError) as exc:
            FilterParams(extrinsic="(")
        assert exc.value.key == "extrinsic"

    def test_max_files(self):
        with pytest.raises(InvalidConfigError):
            Settings(max_files=0)

    def test_offline_disables_pull(self):
        assert CompareParams(method=CompareMethod.BASE, git_pull=True).should_pull()
        assert not CompareParams(method=CompareMethod.BASE, git_pull=True, offline=True).should_pull()
