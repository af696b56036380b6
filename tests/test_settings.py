"""Tests for locating, reading, and validating ``stockroom.ini``."""

from __future__ import annotations

import configparser
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

import stockroom
from stockroom import settings as settings_module
from stockroom.settings import ReportSettings


CONFIG_TEXT = (
    "[Report]\n"
    "DomainTag = depot\n"
    "CurrencySymbol = EUR\n"
    "DateFormat = %Y-%m-%d\n"
    "ThousandsSeparator = .\n"
    "TopProducts = 5\n\n"
    "[Layout]\n"
    "PageBreakRatio = 0.7\n"
)


def _write_config(directory: Path, text: str = CONFIG_TEXT) -> Path:
    path = directory / settings_module.CONFIG_FILE_NAME
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_match_module_constants():
    settings = ReportSettings()

    assert settings.domain_tag == "warehouse"
    assert settings.currency_symbol == "RUB"
    assert settings.top_products == 3
    assert settings.page_break_ratio == pytest.approx(0.85)


def test_find_config_file_respects_explicit_path(tmp_path):
    explicit = tmp_path / "elsewhere.ini"

    assert settings_module.find_config_file(explicit) == explicit


def test_find_config_file_discovers_in_parent_directories(tmp_path, monkeypatch):
    config_path = _write_config(tmp_path)
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert settings_module.find_config_file() == config_path


def test_find_config_file_raises_when_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(FileNotFoundError):
        settings_module.find_config_file()


def test_read_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        settings_module.read_config(tmp_path / "not_there.ini")


def test_read_config_keeps_percent_signs_literal(tmp_path):
    parser = settings_module.read_config(_write_config(tmp_path))

    assert parser.get("Report", "DateFormat") == "%Y-%m-%d"


def test_load_settings_parses_every_option(tmp_path):
    settings = settings_module.load_settings(_write_config(tmp_path))

    assert settings == ReportSettings(
        domain_tag="depot",
        currency_symbol="EUR",
        date_format="%Y-%m-%d",
        thousands_separator=".",
        top_products=5,
        page_break_ratio=0.7,
    )


def test_parse_settings_falls_back_to_defaults():
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string("[Other]\nvalue=1")

    assert settings_module.parse_settings(parser) == ReportSettings()


def test_parse_settings_rejects_non_numeric_values():
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string("[Report]\nTopProducts = many\n")

    with pytest.raises(ValueError):
        settings_module.parse_settings(parser)


@pytest.mark.parametrize(
    "overrides",
    [{"page_break_ratio": 0}, {"page_break_ratio": 1.2}, {"top_products": 0}, {"domain_tag": "  "}],
)
def test_report_settings_validates_ranges(overrides):
    with pytest.raises(ValueError):
        ReportSettings(**overrides)


@pytest.fixture
def restore_log_file():
    yield
    stockroom.configure_log_file(stockroom.LOG_DIR)


def test_logging_directory_is_optional(tmp_path):
    settings = settings_module.load_settings(_write_config(tmp_path))

    assert settings.log_dir is None


def test_load_settings_moves_log_file_to_configured_directory(tmp_path, restore_log_file):
    log_dir = tmp_path / "logs"
    config_path = _write_config(tmp_path, CONFIG_TEXT + f"\n[Logging]\nDirectory = {log_dir}\n")

    settings = settings_module.load_settings(config_path)
    stockroom.log.info("written after reconfiguration")

    assert settings.log_dir == log_dir
    log_file = log_dir / stockroom.LOG_FILE_NAME
    assert "written after reconfiguration" in log_file.read_text(encoding="utf-8")
    file_handlers = [h for h in stockroom.log.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
