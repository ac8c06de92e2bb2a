"""TOML configuration loader for null-mcp servers."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG = "null-mcp.toml"
CONFIG_ENV_VAR = "NULL_MCP_CONFIG"


@dataclass
class ServerConfig:
	"""Identity advertised to clients, plus logging."""

	name: str = "null-mcp"
	version: str = "1.0.0"
	instructions: str = ""
	log_level: str = "INFO"


@dataclass
class ReviewConfig:
	"""Commands run by the review tool, in order."""

	format_command: str = "ruff format ."
	lint_command: str = "ruff check ."
	check_command: str = "mypy ."
	cwd: str = "."

	@property
	def resolved_cwd(self) -> Path:
		return Path(os.path.expanduser(self.cwd))

	def commands(self) -> list[list[str]]:
		return [shlex.split(c) for c in (self.format_command, self.lint_command, self.check_command)]


@dataclass
class AppConfig:
	"""Top-level configuration."""

	server: ServerConfig = field(default_factory=ServerConfig)
	review: ReviewConfig = field(default_factory=ReviewConfig)


def _build_server(data: dict[str, Any]) -> ServerConfig:
	sc = ServerConfig()
	for key in ("name", "version", "instructions", "log_level"):
		if key in data:
			setattr(sc, key, str(data[key]))
	return sc


def _build_review(data: dict[str, Any]) -> ReviewConfig:
	rc = ReviewConfig()
	for key in ("format_command", "lint_command", "check_command", "cwd"):
		if key in data:
			setattr(rc, key, str(data[key]))
	return rc


def load_config(path: str | Path) -> AppConfig:
	"""Load a null-mcp.toml config file.

	Args:
		path: Path to the TOML config file.

	Returns:
		Parsed AppConfig.

	Raises:
		FileNotFoundError: If config file doesn't exist.
		tomllib.TOMLDecodeError: If config is invalid TOML.
	"""
	config_path = Path(path)
	if not config_path.exists():
		raise FileNotFoundError(f"Config file not found: {config_path}")

	with open(config_path, "rb") as f:
		data = tomllib.load(f)

	cfg = AppConfig()
	if "server" in data:
		cfg.server = _build_server(data["server"])
	if "review" in data:
		cfg.review = _build_review(data["review"])
	return cfg


def resolve_config(path: str | Path | None = None) -> AppConfig:
	"""Load *path*, else $NULL_MCP_CONFIG, else ./null-mcp.toml if present, else defaults."""
	if path is None:
		path = os.environ.get(CONFIG_ENV_VAR, "")
	if path:
		return load_config(path)
	if Path(DEFAULT_CONFIG).exists():
		return load_config(DEFAULT_CONFIG)
	return AppConfig()


def validate_config(config: AppConfig) -> list[tuple[str, str]]:
	"""Perform semantic validation of a loaded AppConfig.

	Returns a list of (level, message) tuples where level is 'error' or 'warning'.
	"""
	issues: list[tuple[str, str]] = []

	if not config.server.name.strip():
		issues.append(("error", "server.name must not be empty"))
	if not config.server.version.strip():
		issues.append(("error", "server.version must not be empty"))
	if not isinstance(logging.getLevelName(config.server.log_level.upper()), int):
		issues.append(("error", f"server.log_level is not a logging level: {config.server.log_level}"))

	for label, command in (
		("format_command", config.review.format_command),
		("lint_command", config.review.lint_command),
		("check_command", config.review.check_command),
	):
		tokens = shlex.split(command)
		if not tokens:
			issues.append(("error", f"review.{label} must not be empty"))
		elif shutil.which(tokens[0]) is None:
			issues.append(("warning", f"review.{label} executable not found: {tokens[0]}"))

	if not config.review.resolved_cwd.is_dir():
		issues.append(("warning", f"review.cwd does not exist: {config.review.resolved_cwd}"))

	return issues
