"""Tests for command-line parsing and config overrides in run_platform."""

from run_platform import _parse_args, load_config


def test_defaults_without_config():
    config = load_config(_parse_args([]))
    assert config.persistence.data_file == "portfolio_data.txt"
    assert config.market.seed is None


def test_cli_overrides_yaml(tmp_path):
    path = tmp_path / "platform.yaml"
    path.write_text(
        "market:\n  seed: 1\n  max_price_change: 0.02\npersistence:\n  data_file: a.txt\n",
        encoding="utf-8",
    )
    config = load_config(
        _parse_args(["--config", str(path), "--data-file", "b.txt", "--seed", "9"])
    )
    assert config.persistence.data_file == "b.txt"
    assert config.market.seed == 9
    assert config.market.max_price_change == 0.02


def test_yaml_values_kept_without_overrides(tmp_path):
    path = tmp_path / "platform.yaml"
    path.write_text("persistence:\n  data_file: a.txt\ninitial_cash: 10\n", encoding="utf-8")
    config = load_config(_parse_args(["--config", str(path)]))
    assert config.persistence.data_file == "a.txt"
    assert config.initial_cash == 10.0
