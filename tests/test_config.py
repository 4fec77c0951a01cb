"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from stockboard.config import API_KEY_ENV, load_config, parse_benchmarks
from stockboard.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(API_KEY_ENV, raising=False)


def write_config(tmp_path: Path, config: object) -> Path:
    config_file = tmp_path / "stockboard.yaml"
    config_file.write_text(yaml.dump(config))
    return config_file


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self) -> None:
        """No path means defaults."""
        config = load_config()
        assert config.data_source == "alphavantage"
        assert config.api_key == ""
        assert config.lookback_days == 90

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """Load a valid configuration file."""
        config_file = write_config(
            tmp_path,
            {
                "data_source": "yahoo",
                "source_params": {"period": "1y"},
                "portfolio_path": str(tmp_path / "p.json"),
                "benchmarks": ["qqq", "SPY"],
                "lookback_days": 30,
                "logging": {"level": "debug"},
            },
        )

        config = load_config(config_file)

        assert config.data_source == "yahoo"
        assert config.source_params == {"period": "1y"}
        assert config.portfolio_path == str(tmp_path / "p.json")
        assert config.benchmarks == ["SPY", "QQQ"]
        assert config.lookback_days == 30
        assert config.log_level == "DEBUG"

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(config_file).data_source == "alphavantage"

    def test_env_overrides_api_key(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The environment variable wins over the file."""
        config_file = write_config(tmp_path, {"api_key": "from-file"})
        assert load_config(config_file).api_key == "from-file"

        monkeypatch.setenv(API_KEY_ENV, "from-env")
        assert load_config(config_file).api_key == "from-env"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("data_source: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_file)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, ["a", "b"])
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            load_config(config_file)

    def test_invalid_data_source_raises(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, {"data_source": "bloomberg"})
        with pytest.raises(ConfigError, match="Invalid data_source"):
            load_config(config_file)

    @pytest.mark.parametrize("lookback", [0, -5, "90", True])
    def test_invalid_lookback_raises(self, tmp_path: Path, lookback: object) -> None:
        config_file = write_config(tmp_path, {"lookback_days": lookback})
        with pytest.raises(ConfigError, match="lookback_days"):
            load_config(config_file)

    def test_invalid_log_level_raises(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, {"logging": {"level": "LOUD"}})
        with pytest.raises(ConfigError, match="Invalid log level"):
            load_config(config_file)

    def test_source_params_must_be_mapping(self, tmp_path: Path) -> None:
        config_file = write_config(tmp_path, {"source_params": [1, 2]})
        with pytest.raises(ConfigError, match="source_params"):
            load_config(config_file)


class TestParseBenchmarks:
    """Tests for benchmark list validation."""

    def test_orders_canonically(self) -> None:
        assert parse_benchmarks(["QQQ", "dia"]) == ["DIA", "QQQ"]

    def test_empty_list(self) -> None:
        assert parse_benchmarks([]) == []

    def test_unknown_benchmark_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown benchmark"):
            parse_benchmarks(["SPY", "IWM"])

    def test_non_list_raises(self) -> None:
        with pytest.raises(ConfigError, match="must be a list"):
            parse_benchmarks("SPY")
