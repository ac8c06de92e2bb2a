"""Example server: an echo tool, a code review tool and a config resource.

Run ``null-mcp-example`` to serve over stdio, or try a single entry::

	null-mcp-example tool echo Hello CLI
	null-mcp-example tool review
	null-mcp-example resource config
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys

from mcp.types import CallToolResult, ReadResourceResult
from pydantic import AnyUrl, BaseModel, Field

from null_mcp.config import AppConfig, ReviewConfig, resolve_config, validate_config
from null_mcp.models import CallContext, NoArguments, ResourceSpec, ToolSpec
from null_mcp.results import resource_text_result, tool_text_result
from null_mcp.server import NullMCP

logger = logging.getLogger(__name__)

CONFIG_URI = "config://app"
CONFIG_TEXT = "App configuration here"


class EchoInput(BaseModel):
	text: str = Field(description="The text to echo")


def echo(args: EchoInput, ctx: CallContext) -> CallToolResult:
	return tool_text_result(f"Echo: {args.text}")


async def _run_command(cmd: list[str], cwd: str, capture: bool = True) -> tuple[int, str]:
	"""Run *cmd* to completion. Returns (exit code, combined output if captured)."""
	proc = await asyncio.create_subprocess_exec(
		*cmd,
		cwd=cwd,
		stdout=asyncio.subprocess.PIPE if capture else asyncio.subprocess.DEVNULL,
		stderr=asyncio.subprocess.STDOUT if capture else asyncio.subprocess.DEVNULL,
	)
	try:
		stdout, _ = await proc.communicate()
	finally:
		if proc.returncode is None:
			with contextlib.suppress(ProcessLookupError):
				proc.kill()
			await proc.wait()
	output = stdout.decode(errors="replace") if stdout else ""
	return proc.returncode, output


async def run_review(config: ReviewConfig) -> CallToolResult:
	"""Format, lint and type-check the project, reporting failures as text."""
	try:
		fmt_cmd, lint_cmd, check_cmd = config.commands()
		cwd = str(config.resolved_cwd)
		await _run_command(fmt_cmd, cwd, capture=False)
		lint_code, lint_output = await _run_command(lint_cmd, cwd)
		check_code, check_output = await _run_command(check_cmd, cwd)
	except Exception as exc:
		logger.warning("Review failed to run: %s", exc)
		return tool_text_result(f"Error during review: {exc}")

	passed = lint_code == 0 and check_code == 0
	return tool_text_result("\n".join([
		"✅ All checks passed!" if passed else "❌ Checks failed:",
		f"Lint: {_status(lint_code, lint_output)}",
		f"Type Check: {_status(check_code, check_output)}",
	]))


def _status(code: int, output: str) -> str:
	return "✅" if code == 0 else f"❌\n{output}"


def read_config(uri: AnyUrl, ctx: CallContext) -> ReadResourceResult:
	return resource_text_result(str(uri), CONFIG_TEXT)


def build_app(config: AppConfig | None = None) -> NullMCP:
	"""Build the example server with its tools and resources registered."""
	config = config or AppConfig()
	review_config = config.review

	async def review(args: NoArguments, ctx: CallContext) -> CallToolResult:
		return await run_review(review_config)

	return NullMCP(
		config.server.name,
		config.server.version,
		instructions=config.server.instructions or None,
	).register_tools({
		"echo": ToolSpec(
			title="Echo",
			description="Echos supplied text",
			input_schema=EchoInput,
			callback=echo,
			test=lambda raw: {"text": raw},
		),
		"review": ToolSpec(
			title="Code Review",
			description="Runs the configured formatter, linter and type checker",
			callback=review,
			test=lambda raw: {},
		),
	}).register_resources({
		"config": ResourceSpec(
			uri=CONFIG_URI,
			title="Application Config",
			description="Application configuration data",
			mime_type="text/plain",
			callback=read_config,
			test=lambda raw: raw or CONFIG_URI,
		),
	})


def main(argv: list[str] | None = None) -> int:
	config = resolve_config()
	issues = validate_config(config)
	for level, msg in issues:
		print(f"[{level.upper()}] {msg}", file=sys.stderr)
	if any(level == "error" for level, _ in issues):
		return 1
	logging.basicConfig(
		level=config.server.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
		datefmt="%H:%M:%S",
		force=True,
	)
	app = build_app(config)
	asyncio.run(app.serve(argv=argv))
	return 0
