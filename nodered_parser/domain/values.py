"""Values produced by the constrained expression evaluator.

Statically known values are carried as plain JSON-compatible Python values
(``str``, ``int``, ``float``, ``bool``, ``None``, ``list``, ``dict``). Anything
the evaluator refuses to reduce becomes one of the placeholder types below,
which keep the original source text so nothing is lost.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Placeholder(ABC):
    """Base class for values that could not be reduced statically."""

    kind = 'unknown'

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """JSON object tagged with ``kind``."""


@dataclass(frozen=True)
class Reference(Placeholder):
    """An identifier that is not bound in the evaluation environment."""

    name: str
    kind = 'ref'

    def to_json(self) -> dict[str, Any]:
        return {'kind': self.kind, 'name': self.name}


@dataclass(frozen=True)
class Expression(Placeholder):
    """A call, member access, operator or other dynamic expression."""

    source: str
    kind = 'expr'

    def to_json(self) -> dict[str, Any]:
        return {'kind': self.kind, 'source': self.source}


@dataclass(frozen=True)
class TemplateFragment(Placeholder):
    """A template string with at least one non-literal substitution."""

    source: str
    kind = 'template'

    def to_json(self) -> dict[str, Any]:
        return {'kind': self.kind, 'source': self.source}


@dataclass(frozen=True)
class FunctionLiteral(Placeholder):
    """A function, arrow function or method body."""

    source: str
    kind = 'function'

    def to_json(self) -> dict[str, Any]:
        return {'kind': self.kind, 'source': self.source}


@dataclass(frozen=True)
class Unknown(Placeholder):
    """Any syntax the evaluator does not model (spread, regex, class...)."""

    node_type: str
    source: str
    kind = 'unknown'

    def to_json(self) -> dict[str, Any]:
        return {'kind': self.kind, 'type': self.node_type, 'source': self.source}


JsonValue = Union[str, int, float, bool, None, list, dict]
EvaluatedValue = Union[JsonValue, Placeholder]

UNDEFINED = Reference('undefined')


def is_literal(value: Any) -> bool:
    """True for values that are concrete JSON rather than a placeholder."""
    return not isinstance(value, Placeholder)


def is_scalar_literal(value: Any) -> bool:
    """True for strings, numbers and booleans (the template-safe scalars)."""
    return isinstance(value, (str, int, float, bool))


def js_string(value: Any) -> str:
    """Stringify a scalar the way JavaScript string coercion would."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value != value:
            return 'NaN'
        if value in (float('inf'), float('-inf')):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def to_json(value: EvaluatedValue) -> Any:
    """Convert an evaluated value tree into plain JSON."""
    if isinstance(value, Placeholder):
        return value.to_json()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_json(v) for v in value]
    return value
