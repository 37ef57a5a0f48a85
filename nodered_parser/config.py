"""Runtime configuration read from environment variables."""

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Mapping

from nodered_parser.domain.constants import (
    DEFAULT_CUSTOM_MODULES,
    DEFAULT_NODE_RED_URL,
    DEFAULT_TTL_MS,
    ENV_API_PREFIX,
    ENV_CUSTOM_MODULES,
    ENV_LOG_LEVEL,
    ENV_NODE_RED_TOKEN,
    ENV_NODE_RED_URL,
    ENV_TTL_MS,
    ENV_VERBOSE,
    ENV_VERBOSE_CATALOG,
    TRUTHY_RE,
)

logger = logging.getLogger(__name__)

_logging_configured = False


@dataclass
class CatalogConfig:
    """Connection and catalog behaviour settings."""

    node_red_url: str = DEFAULT_NODE_RED_URL
    node_red_token: str = ''
    api_prefix: str = ''
    ttl_ms: int = DEFAULT_TTL_MS
    custom_modules: tuple[str, ...] = field(default_factory=lambda: DEFAULT_CUSTOM_MODULES)
    verbose: bool = False
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'CatalogConfig':
        env = os.environ if environ is None else environ
        modules = env.get(ENV_CUSTOM_MODULES)
        return cls(
            node_red_url=env.get(ENV_NODE_RED_URL) or DEFAULT_NODE_RED_URL,
            node_red_token=env.get(ENV_NODE_RED_TOKEN, ''),
            api_prefix=env.get(ENV_API_PREFIX, ''),
            ttl_ms=parse_ttl(env.get(ENV_TTL_MS)),
            custom_modules=parse_csv(modules) if modules else DEFAULT_CUSTOM_MODULES,
            verbose=is_truthy(env.get(ENV_VERBOSE_CATALOG)) or is_truthy(env.get(ENV_VERBOSE)),
            log_level=env.get(ENV_LOG_LEVEL) or 'INFO',
        )


def is_truthy(value: object) -> bool:
    return bool(TRUTHY_RE.match(str(value or '')))


def parse_csv(value: str | None) -> tuple[str, ...]:
    return tuple(part.strip() for part in (value or '').split(',') if part.strip())


def parse_ttl(value: str | None) -> int:
    """Freshness threshold in ms; invalid or negative values use the default."""
    if value is None or value == '':
        return DEFAULT_TTL_MS
    try:
        ttl = int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", ENV_TTL_MS, value)
        return DEFAULT_TTL_MS
    if ttl < 0:
        logger.warning("Ignoring %s=%r: must be >= 0", ENV_TTL_MS, value)
        return DEFAULT_TTL_MS
    return ttl


def setup_logging(level: str = 'INFO') -> None:
    """Configure root logging once, on stderr.

    stdout stays free for the stdio MCP transport.
    """
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
        force=True,
    )
    _logging_configured = True
