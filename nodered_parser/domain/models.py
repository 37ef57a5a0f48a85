"""Shared data models used across the catalog parser."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from nodered_parser.domain.values import EvaluatedValue, to_json


@dataclass(frozen=True)
class ModuleName:
    """A Node-RED module set name split into package and set."""

    module: str
    package: str
    set_name: str | None = None


@dataclass(frozen=True)
class ModuleBlock:
    """One ``red-module`` section of the ``/nodes`` HTML."""

    name: str
    html: str


@dataclass(frozen=True)
class HtmlDoc:
    """An HTML fragment together with its plain-text rendering."""

    html: str = ''
    text: str = ''

    def to_dict(self, include_html: bool = True) -> dict[str, str]:
        if include_html:
            return {'html': self.html, 'text': self.text}
        return {'text': self.text}


@dataclass(frozen=True)
class TemplateFields:
    """Form field names found in an edit template."""

    own: tuple[str, ...] = ()
    nested: tuple[str, ...] = ()
    all: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {'own': list(self.own), 'nested': list(self.nested), 'all': list(self.all)}


@dataclass
class ModuleContent:
    """Script elements of one module block, classified."""

    help_by_type: dict[str, str] = field(default_factory=dict)
    template_by_type: dict[str, str] = field(default_factory=dict)
    scripts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WrapperBinding:
    """A local function that forwards one of its parameters to registerType."""

    name: str
    params: tuple[str, ...]
    type_param: str
    options_node: Any


@dataclass(frozen=True)
class Registration:
    """One accepted registerType call."""

    type: str
    options: dict[str, EvaluatedValue]
    options_source: str


@dataclass
class ScriptParseResult:
    """Registrations and warnings produced by one script block."""

    registrations: list[Registration] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NodeRecord:
    """The merged catalog entry for a single node type."""

    type: str
    module: str | None = None
    module_package: str | None = None
    module_set: str | None = None
    category: EvaluatedValue = None
    palette_label: EvaluatedValue = None
    color: EvaluatedValue = None
    icon: EvaluatedValue = None
    align: EvaluatedValue = None
    inputs: EvaluatedValue = None
    outputs: EvaluatedValue = None
    output_labels: EvaluatedValue = None
    defaults: EvaluatedValue = None
    options: dict[str, EvaluatedValue] | None = None
    options_source: str = ''
    help: HtmlDoc | None = None
    template: HtmlDoc | None = None
    template_fields: TemplateFields | None = None
    is_custom: bool = False

    @property
    def help_text(self) -> str:
        return self.help.text if self.help else ''

    @property
    def template_text(self) -> str:
        return self.template.text if self.template else ''

    @property
    def default_names(self) -> list[str]:
        if isinstance(self.defaults, dict):
            return list(self.defaults.keys())
        return []

    def summary(self) -> dict[str, Any]:
        """Short listing entry."""
        return {
            'type': self.type,
            'category': to_json(self.category),
            'paletteLabel': to_json(self.palette_label),
            'module': self.module,
            'modulePackage': self.module_package,
            'moduleSet': self.module_set,
            'isCustom': self.is_custom,
            'inputs': to_json(self.inputs),
            'outputs': to_json(self.outputs),
        }

    def to_dict(self, include_html: bool = True) -> dict[str, Any]:
        return {
            'type': self.type,
            'module': self.module,
            'modulePackage': self.module_package,
            'moduleSet': self.module_set,
            'category': to_json(self.category),
            'paletteLabel': to_json(self.palette_label),
            'color': to_json(self.color),
            'icon': to_json(self.icon),
            'align': to_json(self.align),
            'inputs': to_json(self.inputs),
            'outputs': to_json(self.outputs),
            'outputLabels': to_json(self.output_labels),
            'defaults': to_json(self.defaults),
            'options': to_json(self.options),
            'optionsSource': self.options_source,
            'help': self.help.to_dict(include_html) if self.help else None,
            'template': self.template.to_dict(include_html) if self.template else None,
            'templateFields': self.template_fields.to_dict() if self.template_fields else None,
            'isCustom': self.is_custom,
        }


@dataclass(frozen=True)
class CatalogSnapshot:
    """An immutable, timestamped catalog built by one refresh."""

    timestamp: float
    nodes_by_type: Mapping[str, NodeRecord]
    nodes: tuple[NodeRecord, ...]
    warnings: tuple[str, ...] = ()
    source: str | None = None

    @classmethod
    def create(cls, timestamp: float, nodes: list[NodeRecord], warnings: list[str],
               source: str | None = None) -> 'CatalogSnapshot':
        ordered = tuple(sorted(nodes, key=lambda n: n.type))
        by_type = MappingProxyType({n.type: n for n in ordered})
        return cls(
            timestamp=timestamp,
            nodes_by_type=by_type,
            nodes=ordered,
            warnings=tuple(warnings),
            source=source,
        )

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self, include_html: bool = True) -> dict[str, Any]:
        return {
            'refreshedAt': self.timestamp,
            'source': self.source,
            'nodeCount': len(self.nodes),
            'warnings': list(self.warnings),
            'nodes': [n.to_dict(include_html) for n in self.nodes],
        }
