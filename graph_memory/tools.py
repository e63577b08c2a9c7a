"""
MCP Tools module for Graph Memory MCP Server.

Contains the MCP tool definitions and the call_tool dispatcher.
"""

import json
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from .operations import GraphOperations
from .utils import OperationError

SERVER_NAME = "graph-memory"

TOOLS = [
    Tool(
        name="graph_lookup",
        description="Get an entity by exact name. Local entities take precedence over vault notes.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Exact entity name (case-sensitive)"
                }
            },
            "required": ["name"]
        }
    ),
    Tool(
        name="graph_search",
        description="Search entities by name, type, or observation text (case-insensitive substring).",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to search for"
                }
            },
            "required": ["query"]
        }
    ),
    Tool(
        name="graph_list",
        description="List entities from both indexes. Local entities take precedence over vault notes.",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of entities per index (default: 100)"
                }
            }
        }
    ),
    Tool(
        name="graph_relations",
        description="List the outgoing relations of an entity.",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Source entity name"
                }
            },
            "required": ["name"]
        }
    ),
    Tool(
        name="graph_centrality",
        description="Rank entities by ArticleRank and report the average degree of the graph.",
        inputSchema={
            "type": "object",
            "properties": {}
        }
    ),
    Tool(
        name="graph_path",
        description="Find the shortest directed path between two entities.",
        inputSchema={
            "type": "object",
            "properties": {
                "entityName": {
                    "type": "string",
                    "description": "Start entity"
                },
                "targetEntity": {
                    "type": "string",
                    "description": "Target entity"
                },
                "maxHops": {
                    "type": "integer",
                    "description": "Maximum number of relations in the path (default: 5)"
                }
            },
            "required": ["entityName", "targetEntity"]
        }
    ),
    Tool(
        name="graph_predictions",
        description="Predict missing relations for an entity using the Adamic-Adar index.",
        inputSchema={
            "type": "object",
            "properties": {
                "entityName": {
                    "type": "string",
                    "description": "Entity to predict links for"
                },
                "topK": {
                    "type": "integer",
                    "description": "Number of predictions to return (default: 10)"
                }
            },
            "required": ["entityName"]
        }
    ),
    Tool(
        name="graph_communities",
        description="Group entities into communities with label propagation.",
        inputSchema={
            "type": "object",
            "properties": {
                "maxIterations": {
                    "type": "integer",
                    "description": "Maximum number of propagation passes (default: 100)"
                }
            }
        }
    ),
]


def _json_result(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


async def dispatch_tool(operations: GraphOperations, name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Run a tool against the graph operations and format the result."""
    try:
        if name == "graph_lookup":
            entity = operations.lookup(arguments.get("name"))
            if entity is None:
                return [TextContent(type="text", text=f"Entity not found: '{arguments.get('name')}'")]
            return _json_result(entity)

        elif name == "graph_search":
            return _json_result(operations.search(arguments.get("query")))

        elif name == "graph_list":
            return _json_result(operations.list_entities(arguments.get("limit")))

        elif name == "graph_relations":
            return _json_result(operations.relations(arguments.get("name")))

        elif name == "graph_centrality":
            return _json_result(await operations.centrality())

        elif name == "graph_path":
            return _json_result(await operations.paths(
                arguments.get("entityName"),
                arguments.get("targetEntity"),
                arguments.get("maxHops"),
            ))

        elif name == "graph_predictions":
            return _json_result(await operations.predictions(
                arguments.get("entityName"),
                arguments.get("topK"),
            ))

        elif name == "graph_communities":
            return _json_result(await operations.communities(arguments.get("maxIterations")))

    except OperationError as e:
        return [TextContent(type="text", text=f"Error: {e}")]

    return [TextContent(type="text", text=f"Unknown tool: {name}")]


def create_server(operations: GraphOperations) -> Server:
    """Create the MCP server bound to a GraphOperations instance."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        return await dispatch_tool(operations, name, arguments or {})

    return server
