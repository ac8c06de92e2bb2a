"""Tests for result builders."""

from __future__ import annotations

from mcp.types import CallToolResult, ImageContent, TextResourceContents

from null_mcp.results import resource_text_result, text_content, text_lines, tool_text_result


class TestBuilders:
	def test_text_content(self) -> None:
		block = text_content("hi")
		assert block.type == "text"
		assert block.text == "hi"

	def test_tool_text_result_single_block(self) -> None:
		result = tool_text_result("Echo: x")
		assert len(result.content) == 1
		assert result.content[0].text == "Echo: x"
		assert not result.isError

	def test_resource_text_result(self) -> None:
		result = resource_text_result("config://app", "body")
		assert len(result.contents) == 1
		entry = result.contents[0]
		assert isinstance(entry, TextResourceContents)
		assert str(entry.uri) == "config://app"
		assert entry.text == "body"


class TestTextLines:
	def test_skips_non_text_blocks(self) -> None:
		result = CallToolResult(content=[
			text_content("one"),
			ImageContent(type="image", data="AAAA", mimeType="image/png"),
			text_content("two"),
		])
		assert text_lines(result) == ["one", "two"]

	def test_empty(self) -> None:
		assert text_lines(CallToolResult(content=[])) == []
