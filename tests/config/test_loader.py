"""Tests for settings parsing, loading and the public entrypoint."""

from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from khata_config import get_ledger_settings
from khata_config.loader import (
    compute_checksum,
    load_settings,
    load_yaml_file,
    parse_settings,
)
from khata_config.schema import LedgerSettings

EXAMPLE_SETTINGS = Path(__file__).resolve().parents[2] / "khata_config" / "settings.example.yaml"


class TestLedgerSettings:

    def test_defaults(self):
        settings = LedgerSettings()
        assert settings.currency_code == "INR"
        assert settings.settlement_tolerance == Decimal("0.01")
        assert settings.strict_references is False
        assert settings.financial_year_start_month == 4

    def test_currency_upper_cased(self):
        assert LedgerSettings(currency_code="usd").currency_code == "USD"

    @pytest.mark.parametrize("kwargs", [
        {"currency_code": "RUPEE"},
        {"settlement_tolerance": Decimal("-0.01")},
        {"financial_year_start_month": 0},
        {"financial_year_start_month": 13},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            LedgerSettings(**kwargs)


class TestParseSettings:

    def test_empty_document_gives_defaults(self):
        assert parse_settings({}) == LedgerSettings()
        assert parse_settings({"ledger": None}) == LedgerSettings()

    def test_all_keys(self):
        settings = parse_settings({"ledger": {
            "currency_code": "INR",
            "settlement_tolerance": "0.5",
            "strict_references": True,
            "financial_year_start_month": 1,
        }})
        assert settings.settlement_tolerance == Decimal("0.5")
        assert settings.strict_references is True
        assert settings.financial_year_start_month == 1

    def test_float_tolerance_keeps_written_value(self):
        settings = parse_settings({"ledger": {"settlement_tolerance": 0.01}})
        assert settings.settlement_tolerance == Decimal("0.01")

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="settlement_tolerence"):
            parse_settings({"ledger": {"settlement_tolerence": "0.01"}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError):
            parse_settings({"ledger": ["strict_references"]})

    def test_strict_must_be_bool(self):
        with pytest.raises(ValueError):
            parse_settings({"ledger": {"strict_references": "yes please"}})

    def test_start_month_must_be_int(self):
        with pytest.raises(ValueError):
            parse_settings({"ledger": {"financial_year_start_month": True}})


class TestLoadSettings:

    def test_example_file(self):
        settings = load_settings(EXAMPLE_SETTINGS)
        assert settings == LedgerSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("ledger: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_yaml_file(path)


class TestChecksum:

    def test_stable(self):
        assert compute_checksum(LedgerSettings()) == compute_checksum(LedgerSettings())

    def test_changes_with_settings(self):
        assert compute_checksum(LedgerSettings()) != compute_checksum(
            LedgerSettings(strict_references=True)
        )


class TestGetLedgerSettings:

    def test_defaults_traced(self, captured_logs):
        settings = get_ledger_settings()
        assert settings == LedgerSettings()
        record = next(r for r in captured_logs() if r["message"] == "KHATA_CONFIG_TRACE")
        assert record["settings_source"] == "defaults"
        assert record["checksum"] == compute_checksum(settings)

    def test_from_file(self, tmp_path, captured_logs):
        path = tmp_path / "settings.yaml"
        path.write_text("ledger:\n  strict_references: true\n", encoding="utf-8")
        settings = get_ledger_settings(path)
        assert settings.strict_references is True
        record = next(r for r in captured_logs() if r["message"] == "KHATA_CONFIG_TRACE")
        assert record["settings_source"] == str(path)
