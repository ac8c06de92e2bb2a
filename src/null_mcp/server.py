"""NullMCP -- register tools and resources once, serve them over MCP or call them from the shell."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from mcp.server.stdio import stdio_server

from null_mcp.cli import run_cli_resource, run_cli_tool
from null_mcp.host import McpHost, ProtocolHost, ResourceMetadata, ToolMetadata, Transport
from null_mcp.models import ResourceSpec, ToolSpec

logger = logging.getLogger(__name__)


class NullMCP:
	"""MCP server with built-in command-line testing.

	Registrations are forwarded to the protocol host and also kept locally,
	so that ``connect`` can run a single tool or resource when the process
	is started as ``<program> tool <name> ...`` or
	``<program> resource <name> ...`` instead of serving a client.
	"""

	def __init__(
		self,
		name: str,
		version: str,
		*,
		instructions: str | None = None,
		host: ProtocolHost | None = None,
	) -> None:
		if not name or not name.strip():
			raise ValueError("Server name is required")
		if not version or not version.strip():
			raise ValueError("Server version is required")
		self.name = name
		self.version = version
		self.host = host if host is not None else McpHost(name, version, instructions)
		self._connected = False
		self._tools: dict[str, ToolSpec] = {}
		self._resources: dict[str, ResourceSpec] = {}

	@property
	def connected(self) -> bool:
		return self._connected

	@property
	def tools(self) -> Mapping[str, ToolSpec]:
		return MappingProxyType(self._tools)

	@property
	def resources(self) -> Mapping[str, ResourceSpec]:
		return MappingProxyType(self._resources)

	def register_tools(self, tools: Mapping[str, ToolSpec]) -> NullMCP:
		"""Register tools with the host and keep them for CLI testing.

		The local copy takes the whole batch before anything is forwarded.
		If the host rejects an entry, the error is logged and re-raised;
		entries forwarded before it stay registered and the rest of the
		batch is not forwarded.
		"""
		self._tools.update(tools)
		for name, tool in tools.items():
			metadata = ToolMetadata(
				title=tool.title,
				description=tool.description,
				input_schema=tool.input_schema,
				annotations=tool.annotations,
			)
			try:
				self.host.register_tool(name, metadata, tool.callback)
			except Exception as exc:
				logger.error("Failed to register tool '%s': %s", name, exc)
				raise
		return self

	def register_resources(self, resources: Mapping[str, ResourceSpec]) -> NullMCP:
		"""Register resources with the host and keep them for CLI testing.

		Same partial-failure behaviour as ``register_tools``.
		"""
		self._resources.update(resources)
		for name, resource in resources.items():
			metadata = ResourceMetadata(
				title=resource.title,
				description=resource.description,
				mime_type=resource.mime_type,
			)
			try:
				self.host.register_resource(name, resource.uri, metadata, resource.callback)
			except Exception as exc:
				logger.error("Failed to register resource '%s': %s", name, exc)
				raise
		return self

	async def connect(self, transport: Transport | None = None, argv: Sequence[str] | None = None) -> None:
		"""Run a CLI command found in *argv*, or connect the host to *transport*.

		*argv* defaults to ``sys.argv[1:]`` and *transport* to stdio.
		"""
		if self._connected:
			raise RuntimeError("Server already connected")

		args = list(sys.argv[1:] if argv is None else argv)
		if len(args) >= 2:
			if args[0] == "tool":
				await run_cli_tool(self._tools, args[1], " ".join(args[2:]))
				return
			if args[0] == "resource":
				await run_cli_resource(self._resources, args[1], " ".join(args[2:]))
				return

		await self.host.connect(transport if transport is not None else stdio_server())
		self._connected = True
		logger.info("MCP server started and connected")

	async def close(self) -> None:
		if not self._connected:
			return
		try:
			await self.host.close()
		finally:
			self._connected = False
			logger.info("MCP server disconnected")

	async def serve(self, transport: Transport | None = None, argv: Sequence[str] | None = None) -> None:
		"""Connect, wait for the client session to end, then close."""
		await self.connect(transport, argv)
		if not self._connected:
			return
		try:
			await self.host.wait_closed()
		finally:
			await self.close()
