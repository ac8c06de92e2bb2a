"""Helpers for building the text results tools and resources return."""

from __future__ import annotations

from mcp.types import CallToolResult, ReadResourceResult, TextContent, TextResourceContents


def text_content(text: str) -> TextContent:
	"""Wrap *text* in a content block tagged ``text``."""
	return TextContent(type="text", text=text)


def tool_text_result(text: str) -> CallToolResult:
	"""Build a tool result holding a single text block."""
	return CallToolResult(content=[text_content(text)])


def resource_text_result(uri: str, text: str) -> ReadResourceResult:
	"""Build a resource result holding a single ``{uri, text}`` entry."""
	return ReadResourceResult(contents=[TextResourceContents(uri=uri, text=text)])


def text_lines(result: CallToolResult) -> list[str]:
	return [block.text for block in result.content if block.type == "text"]
