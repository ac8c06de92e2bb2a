"""null-mcp -- declare MCP tools and resources, serve them, and test them from the shell."""

from null_mcp.host import McpHost, ProtocolHost, ResourceMetadata, ToolMetadata
from null_mcp.models import CallContext, NoArguments, ResourceSpec, ToolSpec
from null_mcp.results import resource_text_result, text_content, tool_text_result
from null_mcp.server import NullMCP

__all__ = [
	"CallContext",
	"McpHost",
	"NoArguments",
	"NullMCP",
	"ProtocolHost",
	"ResourceMetadata",
	"ResourceSpec",
	"ToolMetadata",
	"ToolSpec",
	"resource_text_result",
	"text_content",
	"tool_text_result",
]
