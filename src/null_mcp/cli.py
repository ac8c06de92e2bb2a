"""Run a single registered tool or resource from command-line arguments.

Usage (through any program whose ``NullMCP.connect`` sees these arguments)::

	<program> tool <name> [input words...]
	<program> resource <name> [input words...]

Output goes to stdout. Lookup and invocation failures go to stderr and end
the process with exit status 1.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import NoReturn

from mcp.types import BlobResourceContents

from null_mcp.models import ResourceSpec, ToolSpec, cli_context, invoke, parse_uri
from null_mcp.results import text_lines

logger = logging.getLogger(__name__)


def _fail(message: str, detail: object | None = None) -> NoReturn:
	print(message, file=sys.stderr)
	if detail:
		print(detail, file=sys.stderr)
	sys.exit(1)


def _describe_error(exc: BaseException) -> str:
	return f"{type(exc).__name__}: {exc}"


async def run_cli_tool(tools: Mapping[str, ToolSpec], name: str, raw: str) -> None:
	tool = tools.get(name)
	if tool is None:
		_fail(f"Tool '{name}' not found", f"Available tools: {', '.join(tools)}")
	if tool.test is None:
		_fail(f"Tool '{name}' does not have a test configuration")

	logger.debug("Running tool %s with input %r", name, raw)
	try:
		args = tool.input_model.model_validate(tool.test(raw))
		result = await invoke(tool.callback, args, cli_context())
		lines = text_lines(result)
	except Exception as exc:
		_fail(f"Error running tool '{name}':", _describe_error(exc))

	for line in lines:
		print(line)


async def run_cli_resource(resources: Mapping[str, ResourceSpec], name: str, raw: str) -> None:
	resource = resources.get(name)
	if resource is None:
		_fail(f"Resource '{name}' not found", f"Available resources: {', '.join(resources)}")
	if resource.test is None:
		_fail(f"Resource '{name}' does not have a test configuration")

	logger.debug("Reading resource %s with input %r", name, raw)
	try:
		uri = parse_uri(resource.test(raw))
		result = await invoke(resource.callback, uri, cli_context())
		contents = list(result.contents or [])
	except Exception as exc:
		_fail(f"Error reading resource '{name}':", _describe_error(exc))

	for entry in contents:
		print(entry.blob if isinstance(entry, BlobResourceContents) else entry.text)
