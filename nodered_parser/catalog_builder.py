"""Builds the node catalog from the Admin API ``/nodes`` HTML.

Processing order is fixed so the same HTML always yields the same catalog:

1. Module blocks in document order.
2. Within a module, help and template fragments first.
3. Then the registrations found in each script block, in source order.

Every field follows last-explicit-write-wins: a later non-empty value
replaces an earlier one, an absent or empty value never clears it. Module
attribution is the exception and always follows the latest update.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from nodered_parser.content_extractor import extract_content, html_to_text
from nodered_parser.domain.constants import WARNING_NO_NODES
from nodered_parser.domain.models import HtmlDoc, ModuleName, NodeRecord, Registration
from nodered_parser.domain.values import UNDEFINED
from nodered_parser.module_splitter import split_module_name, split_modules
from nodered_parser.parsers.script_parser import ScriptParser
from nodered_parser.template_fields import extract_template_fields

logger = logging.getLogger(__name__)

# registerType option key -> NodeRecord field
OPTION_FIELDS = {
    'category': 'category',
    'paletteLabel': 'palette_label',
    'color': 'color',
    'icon': 'icon',
    'align': 'align',
    'inputs': 'inputs',
    'outputs': 'outputs',
    'outputLabels': 'output_labels',
    'defaults': 'defaults',
}


@dataclass
class BuildResult:
    """Records and warnings from one catalog build."""

    nodes: list[NodeRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def nodes_by_type(self) -> dict[str, NodeRecord]:
        return {n.type: n for n in self.nodes}


def is_explicit(value: Any) -> bool:
    """True when a value should overwrite an earlier one."""
    if value is None or value == UNDEFINED:
        return False
    if isinstance(value, (str, list, dict, tuple)) and len(value) == 0:
        return False
    if isinstance(value, HtmlDoc):
        return bool(value.html)
    return True


def merge_record(record: NodeRecord, module: ModuleName, **updates) -> NodeRecord:
    """Apply explicit updates and stamp module attribution."""
    changes = {name: value for name, value in updates.items() if is_explicit(value)}
    changes.update(
        module=module.module,
        module_package=module.package,
        module_set=module.set_name,
    )
    return dataclasses.replace(record, **changes)


class CatalogBuilder:
    """Merges module blocks into one record per node type."""

    def __init__(self, script_parser: ScriptParser | None = None, verbose: bool = False):
        self._script_parser = script_parser or ScriptParser()
        self._verbose = verbose

    def build(self, html: str) -> BuildResult:
        records: dict[str, NodeRecord] = {}
        warnings: list[str] = []

        for block in split_modules(html):
            module = split_module_name(block.name)
            content = extract_content(block.html)
            logger.debug("Module %s: %d help, %d template, %d script block(s)",
                         module.module, len(content.help_by_type),
                         len(content.template_by_type), len(content.scripts))

            # Docs first so a node still gets an entry if its script fails
            for node_type, help_html in content.help_by_type.items():
                self._update(records, node_type, module,
                             help=HtmlDoc(help_html, html_to_text(help_html)))
            for node_type, template_html in content.template_by_type.items():
                fields = extract_template_fields(template_html) if template_html else None
                self._update(records, node_type, module,
                             template=HtmlDoc(template_html, html_to_text(template_html)),
                             template_fields=fields)

            for script in content.scripts:
                result = self._script_parser.parse(script, module=module.module)
                warnings.extend(result.warnings)
                for registration in result.registrations:
                    self._apply_registration(records, registration, module)

        if self._verbose and not records:
            warnings.append(WARNING_NO_NODES)

        nodes = sorted(records.values(), key=lambda n: n.type)
        return BuildResult(nodes=nodes, warnings=warnings)

    def _apply_registration(self, records: dict[str, NodeRecord],
                            registration: Registration, module: ModuleName) -> None:
        options = registration.options if isinstance(registration.options, dict) else {}
        updates = {attr: options.get(key) for key, attr in OPTION_FIELDS.items()}
        self._update(records, registration.type, module,
                     options=options,
                     options_source=registration.options_source,
                     **updates)

    @staticmethod
    def _update(records: dict[str, NodeRecord], node_type: str, module: ModuleName, **updates) -> None:
        record = records.get(node_type) or NodeRecord(type=node_type)
        records[node_type] = merge_record(record, module, **updates)


def build_catalog(html: str, verbose: bool = False) -> BuildResult:
    """Convenience wrapper around ``CatalogBuilder().build``."""
    return CatalogBuilder(verbose=verbose).build(html)
