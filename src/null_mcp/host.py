"""Protocol host: the runtime that tool and resource registrations are forwarded to."""

from __future__ import annotations

import asyncio
import base64
import contextlib
import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl, BaseModel, ValidationError

from null_mcp.models import (
	CallContext,
	NoArguments,
	ResourceCallback,
	ToolCallback,
	invoke,
	parse_uri,
)

logger = logging.getLogger(__name__)

Transport = AbstractAsyncContextManager[tuple[Any, Any]]


@dataclass(frozen=True)
class ToolMetadata:
	"""The part of a tool descriptor the host is told about."""

	title: str | None = None
	description: str | None = None
	input_schema: type[BaseModel] | None = None
	annotations: types.ToolAnnotations | None = None


@dataclass(frozen=True)
class ResourceMetadata:
	"""The part of a resource descriptor the host is told about."""

	title: str | None = None
	description: str | None = None
	mime_type: str | None = None


class ProtocolHost(ABC):
	"""Abstract base for the runtime that serves registered tools and resources."""

	@abstractmethod
	def register_tool(self, name: str, metadata: ToolMetadata, callback: ToolCallback) -> None:
		"""Expose a tool. Raises ValueError when the definition is rejected."""

	@abstractmethod
	def register_resource(
		self, name: str, uri: str, metadata: ResourceMetadata, callback: ResourceCallback
	) -> None:
		"""Expose a resource. Raises ValueError when the definition is rejected."""

	@abstractmethod
	async def connect(self, transport: Transport) -> None:
		"""Start serving on *transport*. Returns once the transport is open."""

	@abstractmethod
	async def close(self) -> None:
		"""Stop serving and release the transport."""

	@abstractmethod
	async def wait_closed(self) -> None:
		"""Block until the current session ends."""


@dataclass
class _HostedTool:
	metadata: ToolMetadata
	callback: ToolCallback

	@property
	def input_model(self) -> type[BaseModel]:
		return self.metadata.input_schema or NoArguments


@dataclass
class _HostedResource:
	name: str
	uri: AnyUrl
	metadata: ResourceMetadata
	callback: ResourceCallback


class McpHost(ProtocolHost):
	"""Serves registrations over MCP using the SDK's low-level server.

	Re-registering a name replaces the previous definition.
	"""

	def __init__(self, name: str, version: str, instructions: str | None = None) -> None:
		self.server: Server[Any, Any] = Server(name, version=version, instructions=instructions)
		self._tools: dict[str, _HostedTool] = {}
		self._resources: dict[str, _HostedResource] = {}
		self._task: asyncio.Task[None] | None = None
		self._install_handlers()

	# -- Registration --

	def register_tool(self, name: str, metadata: ToolMetadata, callback: ToolCallback) -> None:
		if not name or not name.strip():
			raise ValueError("Tool name is required")
		schema = metadata.input_schema
		if schema is not None and not (isinstance(schema, type) and issubclass(schema, BaseModel)):
			raise ValueError(f"Input schema for tool '{name}' must be a pydantic model class")
		self._tools[name] = _HostedTool(metadata=metadata, callback=callback)
		logger.debug("Registered tool %s", name)

	def register_resource(
		self, name: str, uri: str, metadata: ResourceMetadata, callback: ResourceCallback
	) -> None:
		if not name or not name.strip():
			raise ValueError("Resource name is required")
		try:
			parsed = parse_uri(uri)
		except ValidationError as exc:
			raise ValueError(f"Invalid URI for resource '{name}': {uri!r}") from exc
		self._resources[name] = _HostedResource(name=name, uri=parsed, metadata=metadata, callback=callback)
		logger.debug("Registered resource %s (%s)", name, parsed)

	# -- Protocol handlers --

	def _install_handlers(self) -> None:
		server = self.server

		@server.list_tools()
		async def list_tools() -> list[types.Tool]:
			return [self._describe_tool(name, tool) for name, tool in self._tools.items()]

		@server.call_tool()
		async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.ContentBlock]:
			result = await self._call_tool(name, arguments or {})
			return list(result.content)

		@server.list_resources()
		async def list_resources() -> list[types.Resource]:
			return [self._describe_resource(res) for res in self._resources.values()]

		@server.read_resource()
		async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
			return await self._read_resource(uri)

	def _describe_tool(self, name: str, tool: _HostedTool) -> types.Tool:
		meta = tool.metadata
		return types.Tool(
			name=name,
			title=meta.title,
			description=meta.description,
			inputSchema=tool.input_model.model_json_schema(),
			annotations=meta.annotations,
		)

	def _describe_resource(self, res: _HostedResource) -> types.Resource:
		meta = res.metadata
		return types.Resource(
			name=res.name,
			uri=res.uri,
			title=meta.title,
			description=meta.description,
			mimeType=meta.mime_type,
		)

	def _live_context(self) -> CallContext:
		request = self.server.request_context
		session = request.session

		async def send_notification(notification: types.ServerNotification) -> None:
			await session.send_notification(notification, related_request_id=request.request_id)

		async def send_request(request_: types.ServerRequest, result_type: type[Any]) -> Any:
			return await session.send_request(request_, result_type)

		return CallContext(
			request_id=request.request_id,
			send_notification=send_notification,
			send_request=send_request,
		)

	async def _call_tool(self, name: str, arguments: dict[str, Any]) -> types.CallToolResult:
		tool = self._tools.get(name)
		if tool is None:
			raise ValueError(f"Tool {name} not found")
		args = tool.input_model.model_validate(arguments)
		ctx = self._live_context()
		try:
			return await invoke(tool.callback, args, ctx)
		except asyncio.CancelledError:
			ctx.signal.set()
			raise

	async def _read_resource(self, uri: AnyUrl) -> list[ReadResourceContents]:
		res = next((r for r in self._resources.values() if str(r.uri) == str(uri)), None)
		if res is None:
			raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Resource {uri} not found"))
		ctx = self._live_context()
		try:
			result: types.ReadResourceResult = await invoke(res.callback, uri, ctx)
		except asyncio.CancelledError:
			ctx.signal.set()
			raise
		contents: list[ReadResourceContents] = []
		for entry in result.contents:
			mime_type = entry.mimeType or res.metadata.mime_type
			if isinstance(entry, types.TextResourceContents):
				contents.append(ReadResourceContents(content=entry.text, mime_type=mime_type))
			else:
				contents.append(ReadResourceContents(content=base64.b64decode(entry.blob), mime_type=mime_type))
		return contents

	# -- Lifecycle --

	async def connect(self, transport: Transport) -> None:
		if self._task is not None:
			raise RuntimeError("Host already connected")
		ready = asyncio.Event()
		task = asyncio.create_task(self._serve(transport, ready))
		waiter = asyncio.create_task(ready.wait())
		await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
		if not ready.is_set():
			waiter.cancel()
			task.result()
			raise RuntimeError("Transport closed before the session started")
		self._task = task

	async def _serve(self, transport: Transport, ready: asyncio.Event) -> None:
		async with transport as (read_stream, write_stream):
			ready.set()
			await self.server.run(read_stream, write_stream, self.server.create_initialization_options())

	async def close(self) -> None:
		task, self._task = self._task, None
		if task is None:
			return
		if not task.done():
			task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			pass
		except Exception as exc:
			logger.error("MCP session ended with error: %s", exc, exc_info=True)

	async def wait_closed(self) -> None:
		if self._task is None:
			return
		with contextlib.suppress(asyncio.CancelledError):
			await asyncio.shield(self._task)
