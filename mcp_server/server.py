"""
Node-RED Atlas — MCP Server.

Exposes the parsed Node-RED node catalog (types, defaults, help, editor
templates) to LLM clients via the Model Context Protocol.

Usage:
    # Live mode (reads /nodes from the Admin API)
    python -m mcp_server.server --url http://localhost:1880 [--token T] [--prefix /api]

    # Offline mode (reads a saved /nodes HTML file)
    python -m mcp_server.server --html-file nodes.html

    Without flags the NODE_RED_URL / NODE_RED_TOKEN / NODE_MCP_PREFIX env vars apply.
"""

from __future__ import annotations

import sys

from mcp.server.fastmcp import FastMCP

from nodered_parser.admin_client import AdminApiError, AdminClient
from nodered_parser.catalog_cache import NodeCatalog
from nodered_parser.config import CatalogConfig, setup_logging
from nodered_parser.sources import AdminApiSource, LocalHtmlSource

# ── Globals ─────────────────────────────────────────────────────────────

_catalog: NodeCatalog | None = None
_client: AdminClient | None = None
mcp = FastMCP("nodered-atlas")


def _node_catalog() -> NodeCatalog:
    if _catalog is None:
        raise RuntimeError("Node catalog not initialized")
    return _catalog


def configure(catalog: NodeCatalog, client: AdminClient | None = None) -> None:
    """Install the catalog (and optional admin client) the tools use."""
    global _catalog, _client
    _catalog = catalog
    _client = client


# ── Tools ───────────────────────────────────────────────────────────────


@mcp.tool()
def connection_info() -> dict:
    """Return the configured Node-RED connection and a quick Admin API check.

    Probes GET /settings, which proves the URL, prefix and token are correct.
    """
    if _client is None:
        return {"ok": False, "error": "No Admin API connection configured (offline mode)"}
    info = {
        "nodeRedUrl": _client.base_url,
        "apiPrefix": _client.api_prefix,
        "hasToken": bool(_client.token),
    }
    try:
        settings = _client.get("/settings")
    except AdminApiError as e:
        return {"ok": False, "info": info, "error": str(e)}
    settings = settings if isinstance(settings, dict) else {}
    return {
        "ok": True,
        "info": info,
        "settingsSummary": {
            "httpAdminRoot": settings.get("httpAdminRoot"),
            "version": settings.get("version"),
        },
    }


@mcp.tool()
def catalog_refresh() -> dict:
    """Refresh the cached node catalog by re-fetching and re-parsing /nodes."""
    snapshot = _node_catalog().refresh()
    return {
        "refreshedAt": snapshot.timestamp,
        "nodeCount": len(snapshot.nodes),
        "warningCount": len(snapshot.warnings),
        "warnings": list(snapshot.warnings),
    }


@mcp.tool()
def catalog_list(custom_only: bool = False) -> list[dict]:
    """List installed node types (type, category, module, inputs/outputs).

    Args:
        custom_only: Only include nodes from the configured custom modules.
    """
    return _node_catalog().list(custom_only=custom_only)


@mcp.tool()
def catalog_get_node(type: str, include_html: bool = False) -> dict:
    """Get the full structured schema for one node type.

    Includes defaults, options, help text and editor template fields.

    Args:
        type: Node type, e.g. "inject".
        include_html: Include raw help/template HTML (can be large).
    """
    node = _node_catalog().get_node(type)
    if node is None:
        return {"ok": False, "error": f"Unknown node type: {type}"}
    return {"ok": True, "node": node.to_dict(include_html=include_html)}


@mcp.tool()
def catalog_search(
    query: str,
    custom_only: bool = False,
    module: str | None = None,
    category: str | None = None,
    limit: int = 25,
) -> list[dict]:
    """Search node documentation, metadata and default field names.

    Args:
        query: Case-insensitive substring, e.g. "mqtt" or "delay".
        custom_only: Only search the configured custom modules.
        module: Optional module-name substring filter.
        category: Optional category substring filter.
        limit: Max results, clamped to 1..200 (default 25).
    """
    return _node_catalog().search(query, custom_only=custom_only, module=module,
                                  category=category, limit=limit)


@mcp.tool()
def get_available_nodes(custom_only: bool = False) -> list[dict]:
    """List installed nodes with their defaults and a help text preview.

    Args:
        custom_only: Only include nodes from the configured custom modules.
    """
    return _node_catalog().available_nodes(custom_only=custom_only)


# ── Entry point ─────────────────────────────────────────────────────────

def main():
    import argparse

    parser = argparse.ArgumentParser(description="Node-RED Atlas MCP Server")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--url", help="Node-RED base URL (default: $NODE_RED_URL)")
    group.add_argument("--html-file", help="Saved /nodes HTML to serve offline")
    parser.add_argument("--token", help="Admin API bearer token (default: $NODE_RED_TOKEN)")
    parser.add_argument("--prefix", help="Admin API path prefix (default: $NODE_MCP_PREFIX)")
    parser.add_argument("--ttl-ms", type=int, help="Catalog freshness threshold in ms")
    parser.add_argument("--verbose", action="store_true", help="Emit extra catalog warnings")

    args = parser.parse_args()

    config = CatalogConfig.from_env()
    if args.url:
        config.node_red_url = args.url
    if args.token is not None:
        config.node_red_token = args.token
    if args.prefix is not None:
        config.api_prefix = args.prefix
    if args.ttl_ms is not None:
        if args.ttl_ms < 0:
            print("Error: --ttl-ms must be >= 0", file=sys.stderr)
            sys.exit(1)
        config.ttl_ms = args.ttl_ms
    config.verbose = config.verbose or args.verbose

    setup_logging(config.log_level)

    if args.html_file:
        configure(NodeCatalog.from_config(config, LocalHtmlSource(args.html_file)))
    else:
        client = AdminClient(config.node_red_url, token=config.node_red_token,
                             api_prefix=config.api_prefix)
        configure(NodeCatalog.from_config(config, AdminApiSource(client)), client)

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
