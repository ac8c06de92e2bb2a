"""Tests for TOML config loading and validation."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from null_mcp.config import AppConfig, ReviewConfig, ServerConfig, load_config, resolve_config, validate_config


def _write(path: Path, content: str) -> Path:
	path.write_text(content)
	return path


class TestLoadConfig:
	def test_full(self, tmp_path: Path) -> None:
		cfg_path = _write(tmp_path / "null-mcp.toml", (
			'[server]\nname = "demo"\nversion = "2.1.0"\ninstructions = "be nice"\nlog_level = "debug"\n'
			'[review]\nlint_command = "flake8 src"\ncwd = "/srv/app"\n'
		))
		cfg = load_config(cfg_path)
		assert cfg.server.name == "demo"
		assert cfg.server.version == "2.1.0"
		assert cfg.server.instructions == "be nice"
		assert cfg.server.log_level == "debug"
		assert cfg.review.lint_command == "flake8 src"
		assert cfg.review.format_command == "ruff format ."
		assert cfg.review.cwd == "/srv/app"

	def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
		cfg = load_config(_write(tmp_path / "c.toml", ""))
		assert cfg == AppConfig()

	def test_missing_file(self, tmp_path: Path) -> None:
		with pytest.raises(FileNotFoundError):
			load_config(tmp_path / "nope.toml")

	def test_invalid_toml(self, tmp_path: Path) -> None:
		with pytest.raises(tomllib.TOMLDecodeError):
			load_config(_write(tmp_path / "c.toml", "[server\nname="))


class TestResolveConfig:
	def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		path = _write(tmp_path / "custom.toml", '[server]\nname = "from-env"\n')
		monkeypatch.setenv("NULL_MCP_CONFIG", str(path))
		assert resolve_config().server.name == "from-env"

	def test_cwd_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		monkeypatch.delenv("NULL_MCP_CONFIG", raising=False)
		monkeypatch.chdir(tmp_path)
		_write(tmp_path / "null-mcp.toml", '[server]\nname = "from-cwd"\n')
		assert resolve_config().server.name == "from-cwd"

	def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		monkeypatch.delenv("NULL_MCP_CONFIG", raising=False)
		monkeypatch.chdir(tmp_path)
		assert resolve_config() == AppConfig()


class TestReviewConfig:
	def test_commands_are_split(self) -> None:
		rc = ReviewConfig(check_command="mypy --strict 'src dir'")
		assert rc.commands()[2] == ["mypy", "--strict", "src dir"]


class TestValidateConfig:
	def test_blank_identity(self, tmp_path: Path) -> None:
		cfg = AppConfig(server=ServerConfig(name=" ", version=""), review=ReviewConfig(cwd=str(tmp_path)))
		errors = [msg for lvl, msg in validate_config(cfg) if lvl == "error"]
		assert any("server.name" in m for m in errors)
		assert any("server.version" in m for m in errors)

	def test_bad_log_level(self, tmp_path: Path) -> None:
		cfg = AppConfig(server=ServerConfig(log_level="loud"), review=ReviewConfig(cwd=str(tmp_path)))
		assert ("error", "server.log_level is not a logging level: loud") in validate_config(cfg)

	def test_missing_executable_warns(self, tmp_path: Path) -> None:
		cfg = AppConfig(review=ReviewConfig(lint_command="definitely-not-a-linter-xyz .", cwd=str(tmp_path)))
		warnings = [msg for lvl, msg in validate_config(cfg) if lvl == "warning"]
		assert any("definitely-not-a-linter-xyz" in m for m in warnings)

	def test_empty_command_is_error(self, tmp_path: Path) -> None:
		cfg = AppConfig(review=ReviewConfig(check_command="", cwd=str(tmp_path)))
		assert ("error", "review.check_command must not be empty") in validate_config(cfg)

	def test_missing_cwd_warns(self, tmp_path: Path) -> None:
		cfg = AppConfig(review=ReviewConfig(cwd=str(tmp_path / "gone")))
		assert any("review.cwd" in msg for lvl, msg in validate_config(cfg) if lvl == "warning")
