"""Tests for TOML config file loading."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pytest

from infixcalc.cli import build_parser, load_config, parse_log_level, resolve_options


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[output]\nprecision = 4\n")
        assert load_config(cfg, tmp_path) == {"output": {"precision": 4}}

    def test_auto_discover_infixcalc_toml(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[debug]\nenabled = true\n")
        assert load_config(None, tmp_path) == {"debug": {"enabled": True}}


class TestConfigMerge:
    def _resolve(self, tmp_path: Path, *argv: str):
        ns = build_parser().parse_args(list(argv))
        return resolve_options(ns, cwd=tmp_path)

    def test_defaults(self, tmp_path: Path) -> None:
        opts = self._resolve(tmp_path, "1")
        assert opts.precision is None
        assert opts.debug is False
        assert opts.log_level == logging.WARNING
        assert opts.expressions == ["1"]
        assert opts.input_file is None

    def test_config_precision(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[output]\nprecision = 3\n")
        assert self._resolve(tmp_path).precision == 3

    def test_cli_overrides_config_precision(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[output]\nprecision = 3\n")
        assert self._resolve(tmp_path, "--precision", "1").precision == 1

    def test_config_precision_must_be_int(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text('[output]\nprecision = "two"\n')
        with pytest.raises(argparse.ArgumentTypeError):
            self._resolve(tmp_path)

    def test_config_debug_must_be_bool(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text('[debug]\nenabled = "yes"\n')
        with pytest.raises(argparse.ArgumentTypeError, match=r"\[debug\] enabled"):
            self._resolve(tmp_path)

    def test_config_log_level_must_be_str(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[logging]\nlevel = 10\n")
        with pytest.raises(argparse.ArgumentTypeError, match=r"\[logging\] level"):
            self._resolve(tmp_path)

    def test_config_precision_rejects_bool(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[output]\nprecision = true\n")
        with pytest.raises(argparse.ArgumentTypeError, match=r"\[output\] precision"):
            self._resolve(tmp_path)

    def test_expressions_and_file_conflict(self, tmp_path: Path) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="not both"):
            self._resolve(tmp_path, "-f", "sums.txt", "1 + 1")

    def test_config_debug(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[debug]\nenabled = true\n")
        assert self._resolve(tmp_path).debug is True

    def test_cli_debug_with_config_off(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text("[debug]\nenabled = false\n")
        assert self._resolve(tmp_path, "--debug").debug is True

    def test_config_log_level(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text('[logging]\nlevel = "info"\n')
        assert self._resolve(tmp_path).log_level == logging.INFO

    def test_verbose_overrides_config_log_level(self, tmp_path: Path) -> None:
        (tmp_path / "infixcalc.toml").write_text('[logging]\nlevel = "error"\n')
        assert self._resolve(tmp_path, "-v").log_level == logging.DEBUG

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text("[output]\nprecision = 6\n")
        opts = self._resolve(tmp_path, "--config", str(cfg))
        assert opts.precision == 6

    def test_file_option(self, tmp_path: Path) -> None:
        opts = self._resolve(tmp_path, "-f", "sums.txt")
        assert opts.input_file == Path("sums.txt")


class TestParseLogLevel:
    def test_known_levels(self) -> None:
        assert parse_log_level("debug") == logging.DEBUG
        assert parse_log_level("WARNING") == logging.WARNING

    def test_unknown_level(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_log_level("loud")
