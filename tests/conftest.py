"""Shared pytest fixtures for null-mcp tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from pydantic import BaseModel

from null_mcp.host import ProtocolHost, ResourceMetadata, ToolMetadata
from null_mcp.models import ResourceSpec, ToolSpec
from null_mcp.results import resource_text_result, tool_text_result
from null_mcp.server import NullMCP


@dataclass
class FakeHost(ProtocolHost):
	"""Records registrations and lifecycle calls; rejects names listed in ``reject``."""

	reject: set[str] = field(default_factory=set)
	tools: dict[str, tuple[ToolMetadata, Any]] = field(default_factory=dict)
	resources: dict[str, tuple[str, ResourceMetadata, Any]] = field(default_factory=dict)
	calls: list[str] = field(default_factory=list)

	def register_tool(self, name: str, metadata: ToolMetadata, callback: Any) -> None:
		self.calls.append(f"register_tool:{name}")
		if name in self.reject:
			raise ValueError(f"rejected {name}")
		self.tools[name] = (metadata, callback)

	def register_resource(self, name: str, uri: str, metadata: ResourceMetadata, callback: Any) -> None:
		self.calls.append(f"register_resource:{name}")
		if name in self.reject:
			raise ValueError(f"rejected {name}")
		self.resources[name] = (uri, metadata, callback)

	async def connect(self, transport: Any) -> None:
		self.calls.append("connect")

	async def close(self) -> None:
		self.calls.append("close")

	async def wait_closed(self) -> None:
		self.calls.append("wait_closed")


class TextInput(BaseModel):
	text: str


def make_tool(**overrides: Any) -> ToolSpec:
	"""Create an echo ToolSpec with sensible defaults, overridable via kwargs."""
	defaults: dict[str, Any] = {
		"title": "Echo",
		"description": "Echos supplied text",
		"input_schema": TextInput,
		"callback": lambda args, ctx: tool_text_result(f"Echo: {args.text}"),
		"test": lambda raw: {"text": raw},
	}
	defaults.update(overrides)
	return ToolSpec(**defaults)


def make_resource(**overrides: Any) -> ResourceSpec:
	"""Create a config ResourceSpec with sensible defaults, overridable via kwargs."""
	defaults: dict[str, Any] = {
		"uri": "config://app",
		"title": "Application Config",
		"mime_type": "text/plain",
		"callback": lambda uri, ctx: resource_text_result(str(uri), "App configuration here"),
		"test": lambda raw: raw or "config://app",
	}
	defaults.update(overrides)
	return ResourceSpec(**defaults)


@pytest.fixture()
def host() -> FakeHost:
	return FakeHost()


@pytest.fixture()
def app(host: FakeHost) -> NullMCP:
	"""NullMCP backed by a FakeHost."""
	return NullMCP("test-server", "1.0.0", host=host)
