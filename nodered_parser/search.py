"""Substring search over catalog records."""

from typing import Any, Iterable

from nodered_parser.domain.constants import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT, SNIPPET_LENGTH
from nodered_parser.domain.models import NodeRecord
from nodered_parser.domain.values import to_json


def clamp_limit(limit: Any) -> int:
    """Clamp a requested result count into [1, SEARCH_MAX_LIMIT]."""
    try:
        value = int(limit)
    except (TypeError, ValueError, OverflowError):
        return SEARCH_DEFAULT_LIMIT
    return max(1, min(SEARCH_MAX_LIMIT, value))


def haystack(node: NodeRecord) -> str:
    """Lower-cased searchable text for a record."""
    parts = [
        node.type,
        node.category,
        node.palette_label,
        node.module,
        node.module_package,
        node.module_set,
        node.help_text,
    ]
    if node.default_names:
        parts.append(' '.join(node.default_names))
    return '\n'.join(str(p) for p in parts if isinstance(p, str) and p).lower()


class SearchRanker:
    """Ranks records by where the query first appears in their haystack.

    Earlier matches rank first; ties favour shorter haystacks.
    """

    def search(
        self,
        nodes: Iterable[NodeRecord],
        query: str,
        module: str | None = None,
        category: str | None = None,
        limit: Any = SEARCH_DEFAULT_LIMIT,
    ) -> list[dict[str, Any]]:
        q = (query or '').strip().lower()
        if not q:
            return []
        lim = clamp_limit(SEARCH_DEFAULT_LIMIT if limit is None else limit)
        module_filter = module.lower() if module else None
        category_filter = category.lower() if category else None

        matches: list[tuple[float, NodeRecord]] = []
        for node in nodes:
            if module_filter and module_filter not in (node.module or '').lower():
                continue
            if category_filter:
                node_category = node.category if isinstance(node.category, str) else ''
                if category_filter not in node_category.lower():
                    continue
            hay = haystack(node)
            idx = hay.find(q)
            if idx == -1:
                continue
            matches.append((idx + min(len(hay), 10_000) / 10_000, node))

        # sort is stable, so equal scores keep catalog (type) order
        matches.sort(key=lambda m: m[0])
        return [self._hit(node) for _, node in matches[:lim]]

    @staticmethod
    def _hit(node: NodeRecord) -> dict[str, Any]:
        return {
            'type': node.type,
            'category': to_json(node.category),
            'paletteLabel': to_json(node.palette_label),
            'module': node.module,
            'modulePackage': node.module_package,
            'isCustom': node.is_custom,
            'snippet': node.help_text[:SNIPPET_LENGTH] or node.template_text[:SNIPPET_LENGTH],
        }
