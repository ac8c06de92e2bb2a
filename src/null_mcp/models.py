"""Descriptors and call context shared by the registry, host and CLI."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from mcp.types import CallToolResult, EmptyResult, ReadResourceResult, ToolAnnotations
from pydantic import AnyUrl, BaseModel, TypeAdapter

CLI_REQUEST_ID = "cli-test"

_URI_ADAPTER = TypeAdapter(AnyUrl)


class NoArguments(BaseModel):
	"""Input model for tools that declare no input schema."""


ToolCallback = Callable[[Any, "CallContext"], "CallToolResult | Awaitable[CallToolResult]"]
ResourceCallback = Callable[[AnyUrl, "CallContext"], "ReadResourceResult | Awaitable[ReadResourceResult]"]


@dataclass(frozen=True)
class ToolSpec:
	"""A named tool: metadata, implementation and CLI test adapter."""

	callback: ToolCallback
	title: str | None = None
	description: str | None = None
	input_schema: type[BaseModel] | None = None
	output_schema: type[BaseModel] | None = None
	annotations: ToolAnnotations | None = None
	test: Callable[[str], dict[str, Any]] | None = None  # raw CLI input -> arguments

	@property
	def input_model(self) -> type[BaseModel]:
		return self.input_schema or NoArguments


@dataclass(frozen=True)
class ResourceSpec:
	"""A named, URI-addressed resource with its CLI test adapter."""

	uri: str
	callback: ResourceCallback
	title: str | None = None
	description: str | None = None
	mime_type: str | None = None
	test: Callable[[str], str] | None = None  # raw CLI input -> URI string


async def _noop_notification(notification: Any) -> None:
	"""CLI stand-in: there is no client to notify."""
	return None


async def _noop_request(request: Any, result_type: Any = None) -> EmptyResult:
	"""CLI stand-in: answers every server-initiated request with an empty result."""
	return EmptyResult()


@dataclass
class CallContext:
	"""Auxiliary values passed to every callback alongside its arguments.

	In a live session ``signal`` is set once the request has been cancelled,
	after the callback's own await has already raised ``CancelledError``; only
	work the callback handed off (a spawned task, a subprocess watcher) can
	still observe it. It is never set on the CLI path. ``send_notification``
	and ``send_request`` reach the connected client; outside a live session
	they are the no-op stand-ins above.
	"""

	request_id: str | int = CLI_REQUEST_ID
	signal: asyncio.Event = field(default_factory=asyncio.Event)
	send_notification: Callable[..., Awaitable[None]] = _noop_notification
	send_request: Callable[..., Awaitable[Any]] = _noop_request


def cli_context() -> CallContext:
	"""Synthetic context for a CLI invocation. Its signal is never set."""
	return CallContext(request_id=CLI_REQUEST_ID)


def parse_uri(text: str) -> AnyUrl:
	"""Parse *text* as a URI, raising ``pydantic.ValidationError`` if invalid."""
	return _URI_ADAPTER.validate_python(text)


async def invoke(callback: Callable[..., Any], *args: Any) -> Any:
	result = callback(*args)
	if inspect.isawaitable(result):
		result = await result
	return result
