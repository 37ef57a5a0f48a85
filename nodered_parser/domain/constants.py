"""Constants shared across the catalog parser."""

import re

# ── Module blocks ────────────────────────────────────────────────────────

# Node-RED emits one marker comment per installed module set:
#   <!-- --- [red-module:node-red/inject] --- -->
MODULE_BLOCK_RE = re.compile(
    r'<!-- --- \[red-module:([^\]]+)\] --- -->(.*?)(?=<!-- --- \[red-module:|\Z)',
    re.DOTALL,
)

SCOPE_MARKER = '@'

# ── Script elements ──────────────────────────────────────────────────────

HELP_NAME_ATTR = 'data-help-name'
TEMPLATE_NAME_ATTR = 'data-template-name'
SCRIPT_TYPES = {'', 'text/javascript'}

# ── Template fields ──────────────────────────────────────────────────────

OWN_FIELD_RE = re.compile(r'^node-input-(.+)$')
NESTED_FIELD_RE = re.compile(r'^node-config-input-(.+)$')

# ── Registration calls ───────────────────────────────────────────────────

REGISTRATION_ROOT = 'RED'
REGISTRATION_NAMESPACE = 'nodes'
REGISTRATION_METHOD = 'registerType'

# ── Search ───────────────────────────────────────────────────────────────

SEARCH_DEFAULT_LIMIT = 25
SEARCH_MAX_LIMIT = 200
SNIPPET_LENGTH = 400
HELP_TEXT_PREVIEW_LENGTH = 800

# ── Configuration ────────────────────────────────────────────────────────

DEFAULT_NODE_RED_URL = 'http://localhost:1880'
DEFAULT_TTL_MS = 60_000
DEFAULT_CUSTOM_MODULES = (
    '@time-line-autopilot/node-red-nodes',
    'node-red-dashboard-2-time-line-autopilot',
)

ENV_NODE_RED_URL = 'NODE_RED_URL'
ENV_NODE_RED_TOKEN = 'NODE_RED_TOKEN'
ENV_API_PREFIX = 'NODE_MCP_PREFIX'
ENV_TTL_MS = 'NODE_MCP_CATALOG_TTL_MS'
ENV_CUSTOM_MODULES = 'TIME_LINE_CUSTOM_NODE_MODULES'
ENV_VERBOSE_CATALOG = 'NODE_MCP_VERBOSE_CATALOG'
ENV_VERBOSE = 'NODE_MCP_VERBOSE'
ENV_LOG_LEVEL = 'NODE_MCP_LOG_LEVEL'

TRUTHY_RE = re.compile(r'^(1|true|yes|on)$', re.IGNORECASE)

WARNING_NO_NODES = 'no_nodes_parsed'
