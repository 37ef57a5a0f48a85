"""Time-bounded cache of the node catalog.

Holds one immutable ``CatalogSnapshot`` at a time. A refresh builds a new
snapshot completely and then swaps the reference, so readers only ever see
the previous snapshot or the new one. A failed refresh leaves the previous
snapshot in place.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Iterable

from nodered_parser.admin_client import AdminClient
from nodered_parser.catalog_builder import CatalogBuilder
from nodered_parser.config import CatalogConfig
from nodered_parser.domain.constants import DEFAULT_CUSTOM_MODULES, DEFAULT_TTL_MS, HELP_TEXT_PREVIEW_LENGTH
from nodered_parser.domain.models import CatalogSnapshot, NodeRecord
from nodered_parser.domain.values import to_json
from nodered_parser.search import SearchRanker
from nodered_parser.sources import AdminApiSource, HtmlSource

logger = logging.getLogger(__name__)


class NodeCatalog:
    """Serves list/get/search over a periodically refreshed snapshot.

    Args:
        source: Where the ``/nodes`` HTML comes from.
        ttl_ms: Freshness threshold; ``0`` means every read refreshes.
        custom_modules: Package names (exact) or module-name prefixes
            whose nodes are flagged ``is_custom``.
        verbose: Emit extra build warnings.
        clock: Returns the current time in seconds.
    """

    def __init__(
        self,
        source: HtmlSource,
        ttl_ms: int = DEFAULT_TTL_MS,
        custom_modules: Iterable[str] = DEFAULT_CUSTOM_MODULES,
        verbose: bool = False,
        clock: Callable[[], float] = time.time,
        builder: CatalogBuilder | None = None,
    ):
        if ttl_ms < 0:
            raise ValueError(f"ttl_ms must be >= 0, got {ttl_ms}")
        self._source = source
        self._ttl_ms = ttl_ms
        self._custom_modules = tuple(str(m) for m in custom_modules)
        self._clock = clock
        self._builder = builder or CatalogBuilder(verbose=verbose)
        self._ranker = SearchRanker()
        self._snapshot: CatalogSnapshot | None = None

    @classmethod
    def from_config(cls, config: CatalogConfig, source: HtmlSource | None = None) -> 'NodeCatalog':
        if source is None:
            client = AdminClient(config.node_red_url, token=config.node_red_token,
                                 api_prefix=config.api_prefix)
            source = AdminApiSource(client)
        return cls(
            source,
            ttl_ms=config.ttl_ms,
            custom_modules=config.custom_modules,
            verbose=config.verbose,
        )

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        """The currently published snapshot, without refreshing."""
        return self._snapshot

    # ── Freshness ────────────────────────────────────────────────────────

    def _is_expired(self, snapshot: CatalogSnapshot) -> bool:
        if self._ttl_ms == 0:
            return True
        return (self._clock() - snapshot.timestamp) * 1000 > self._ttl_ms

    def is_custom(self, node: NodeRecord) -> bool:
        pkg = node.module_package or ''
        module = node.module or ''
        if pkg and pkg in self._custom_modules:
            return True
        return bool(module) and any(module.startswith(m) for m in self._custom_modules if m)

    def refresh(self) -> CatalogSnapshot:
        """Fetch, parse and publish a new snapshot.

        Fetch errors propagate; the previous snapshot stays published.
        """
        started = self._clock()
        logger.info("Refreshing node catalog from %s", self._source.describe())
        html = self._source.fetch_nodes_html()
        result = self._builder.build(str(html))
        nodes = [replace(n, is_custom=self.is_custom(n)) for n in result.nodes]
        snapshot = CatalogSnapshot.create(
            timestamp=self._clock(),
            nodes=nodes,
            warnings=result.warnings,
            source=self._source.describe(),
        )
        self._snapshot = snapshot
        logger.info("Catalog refreshed: %d nodes, %d warnings in %.2fs",
                    len(snapshot.nodes), len(snapshot.warnings), snapshot.timestamp - started)
        return snapshot

    def get_catalog(self, force: bool = False) -> CatalogSnapshot:
        """Current snapshot, refreshed first when forced, missing, empty or stale.

        A failed refresh of a stale snapshot is logged and the stale snapshot
        is served; forced refreshes and first loads raise.
        """
        snapshot = self._snapshot
        if force or snapshot is None or snapshot.is_empty:
            return self.refresh()
        if self._is_expired(snapshot):
            try:
                return self.refresh()
            except Exception as e:
                logger.warning("Catalog refresh failed, serving snapshot from %s: %s",
                               snapshot.timestamp, e)
        return snapshot

    # ── Reads ────────────────────────────────────────────────────────────

    def _nodes(self, custom_only: bool) -> list[NodeRecord]:
        nodes = self.get_catalog().nodes
        return [n for n in nodes if n.is_custom] if custom_only else list(nodes)

    def list(self, custom_only: bool = False) -> list[dict[str, Any]]:
        return [n.summary() for n in self._nodes(custom_only)]

    def get_node(self, node_type: str) -> NodeRecord | None:
        return self.get_catalog().nodes_by_type.get(str(node_type or ''))

    def search(self, query: str, custom_only: bool = False, module: str | None = None,
               category: str | None = None, limit: Any = None) -> list[dict[str, Any]]:
        if not (query or '').strip():
            return []
        return self._ranker.search(self._nodes(custom_only), query, module=module,
                                   category=category, limit=limit)

    def available_nodes(self, custom_only: bool = False) -> list[dict[str, Any]]:
        """Listing entries with defaults and a help text preview."""
        out = []
        for n in self._nodes(custom_only):
            entry = n.summary()
            entry.pop('moduleSet', None)
            entry['defaults'] = to_json(n.defaults)
            entry['helpText'] = n.help_text[:HELP_TEXT_PREVIEW_LENGTH]
            out.append(entry)
        return out
