from __future__ import annotations
import pytest
from pathlib import Path
from sheet2word.config.loader import ConfigError, ConverterConfig, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.output_directory == "./out"
    assert cfg.title is None
    assert cfg.transpose is False
    assert cfg.split_columns is False
    assert cfg.delivery_delay_seconds == 0.0


def test_load_config_defaults_when_missing(temp_workdir: Path):
    # config/sheet2word.yml は作らない
    assert load_config() == ConverterConfig()
    assert ConverterConfig().transpose is True
    assert ConverterConfig().delivery_delay_seconds == 0.3


def test_load_config_missing_file_required(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(missing, required=True)


def test_load_config_partial_file_uses_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "sheet2word.yml"
    cfg_path.write_text("split_columns: true\ntitle: Packing Sheet\n", encoding="utf-8")
    cfg = load_config()
    assert cfg.split_columns is True
    assert cfg.title == "Packing Sheet"
    assert cfg.transpose is True
    assert cfg.archive_name == "converted_files.zip"


def test_load_config_empty_file(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "sheet2word.yml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_config() == ConverterConfig()


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false で拒否される
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


@pytest.mark.parametrize(
    "line",
    [
        "transpose: 'yes'",
        "archive_name: archive.tar",
        "archive_folder: a/b",
        "delivery_delay_seconds: -1",
        "delivery_delay_seconds: 60",
    ],
)
def test_load_config_invalid_values(temp_workdir: Path, line: str):
    cfg_path = temp_workdir / "config" / "sheet2word.yml"
    cfg_path.write_text(line + "\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config()


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("transpose: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(write_config)


def test_load_config_root_not_mapping(write_config: Path):
    write_config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(write_config)


def test_env_override_output_directory(write_config: Path, monkeypatch):
    monkeypatch.setenv("SHEET2WORD_OUTPUT_DIR", "/tmp/docs")
    assert load_config(write_config).output_directory == "/tmp/docs"
