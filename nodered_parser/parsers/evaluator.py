"""Constrained evaluator for JavaScript expression syntax trees.

Reduces tree-sitter nodes to JSON values where that can be decided from the
syntax alone. Nothing is ever invoked: calls, member access, operators and
constructors come back as ``Expression`` placeholders carrying their source.
"""

from typing import Mapping

from nodered_parser.domain.values import (
    UNDEFINED,
    EvaluatedValue,
    Expression,
    FunctionLiteral,
    Reference,
    TemplateFragment,
    Unknown,
    is_scalar_literal,
    js_string,
)

FUNCTION_NODES = {
    'function',
    'function_expression',
    'arrow_function',
    'generator_function',
}

EXPRESSION_NODES = {
    'call_expression',
    'member_expression',
    'subscript_expression',
    'binary_expression',
    'ternary_expression',
    'new_expression',
}

_SIMPLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}


def node_source(node, source: bytes) -> str:
    """Original source text covered by a node."""
    if node is None:
        return ''
    return source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')


def evaluate(node, env: Mapping[str, EvaluatedValue] | None = None, source: bytes = b'') -> EvaluatedValue:
    """Evaluate an expression node into a JSON value or a placeholder."""
    if node is None:
        return None
    env = env or {}
    kind = node.type

    if kind == 'parenthesized_expression':
        inner = _named(node)
        return evaluate(inner[0], env, source) if len(inner) == 1 else Expression(node_source(node, source))
    if kind == 'string':
        return string_value(node, source)
    if kind == 'number':
        return _number_value(node_source(node, source))
    if kind == 'true':
        return True
    if kind == 'false':
        return False
    if kind == 'null':
        return None
    if kind == 'undefined':
        return UNDEFINED
    if kind == 'identifier':
        name = node_source(node, source)
        if name in env:
            return env[name]
        return Reference(name)
    if kind == 'array':
        return [evaluate(el, env, source) for el in _named(node)]
    if kind == 'object':
        return _object_value(node, env, source)
    if kind == 'unary_expression':
        return _unary_value(node, env, source)
    if kind == 'template_string':
        return _template_value(node, env, source)
    if kind in FUNCTION_NODES:
        return FunctionLiteral(node_source(node, source))
    if kind in EXPRESSION_NODES:
        return Expression(node_source(node, source))
    return Unknown(kind, node_source(node, source))


def string_value(node, source: bytes) -> str:
    """Cooked value of a string literal node."""
    return _cook(node, source)


def property_key(key_node, source: bytes) -> str | None:
    """Statically known property name, or None for computed keys."""
    if key_node is None:
        return None
    kind = key_node.type
    if kind in ('property_identifier', 'identifier', 'private_property_identifier'):
        return node_source(key_node, source)
    if kind == 'string':
        return string_value(key_node, source)
    if kind == 'number':
        value = _number_value(node_source(key_node, source))
        return js_string(value) if is_scalar_literal(value) else None
    return None


# ── Node kinds ───────────────────────────────────────────────────────────

def _object_value(node, env, source: bytes) -> dict[str, EvaluatedValue]:
    out: dict[str, EvaluatedValue] = {}
    for prop in _named(node):
        if prop.type == 'pair':
            key = property_key(prop.child_by_field_name('key'), source)
            if key is None:
                continue
            # later duplicates replace earlier ones but keep first position
            out[key] = evaluate(prop.child_by_field_name('value'), env, source)
        elif prop.type == 'shorthand_property_identifier':
            name = node_source(prop, source)
            out[name] = env[name] if name in env else Reference(name)
        elif prop.type == 'method_definition':
            key = property_key(prop.child_by_field_name('name'), source)
            if key is not None:
                out[key] = FunctionLiteral(node_source(prop, source))
    return out


def _unary_value(node, env, source: bytes) -> EvaluatedValue:
    operator_node = node.child_by_field_name('operator')
    operator = operator_node.type if operator_node is not None else ''
    value = evaluate(node.child_by_field_name('argument'), env, source)

    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if is_number and operator == '-':
        return -value
    if is_number and operator == '+':
        return value
    if isinstance(value, bool) and operator == '!':
        return not value
    return Expression(node_source(node, source))


def _template_value(node, env, source: bytes) -> EvaluatedValue:
    parts: list[str] = []
    pos = node.start_byte + 1
    end = node.end_byte - 1
    for child in node.children:
        if child.type == 'template_substitution':
            parts.append(_raw(source, pos, child.start_byte))
            inner = _named(child)
            value = evaluate(inner[0], env, source) if inner else None
            if not is_scalar_literal(value):
                return TemplateFragment(node_source(node, source))
            parts.append(js_string(value))
            pos = child.end_byte
        elif child.type == 'escape_sequence':
            parts.append(_raw(source, pos, child.start_byte))
            parts.append(_unescape(node_source(child, source)))
            pos = child.end_byte
    parts.append(_raw(source, pos, end))
    return _join_surrogates(''.join(parts))


# ── Helpers ──────────────────────────────────────────────────────────────

def _named(node) -> list:
    return [c for c in node.named_children if c.type != 'comment']


def _raw(source: bytes, start: int, end: int) -> str:
    if end <= start:
        return ''
    return source[start:end].decode('utf-8', errors='replace')


def _cook(node, source: bytes) -> str:
    """Concatenate raw fragments with decoded escape sequences."""
    parts: list[str] = []
    pos = node.start_byte + 1
    for child in node.children:
        if child.type == 'escape_sequence':
            parts.append(_raw(source, pos, child.start_byte))
            parts.append(_unescape(node_source(child, source)))
            pos = child.end_byte
    parts.append(_raw(source, pos, node.end_byte - 1))
    return _join_surrogates(''.join(parts))


def _join_surrogates(text: str) -> str:
    """Combine \\u escaped UTF-16 surrogate pairs; lone halves become U+FFFD."""
    return text.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'replace')


def _unescape(seq: str) -> str:
    body = seq[1:]
    if not body:
        return ''
    head = body[0]
    if head in _SIMPLE_ESCAPES and len(body) == 1:
        return _SIMPLE_ESCAPES[head]
    if head in '\r\n\u2028\u2029':
        return ''
    try:
        if head == 'x':
            return chr(int(body[1:3], 16))
        if head == 'u':
            digits = body[2:-1] if body.startswith('u{') else body[1:5]
            return chr(int(digits, 16))
        if head.isdigit():
            return chr(int(body, 8))
    except ValueError:
        return body
    return body


def _number_value(text: str) -> EvaluatedValue:
    raw = text.replace('_', '')
    lowered = raw.lower()
    try:
        if lowered.endswith('n'):
            return int(lowered[:-1], 0)
        if lowered.startswith(('0x', '0o', '0b')):
            return int(lowered, 0)
        if len(lowered) > 1 and lowered.startswith('0') and lowered.isdigit():
            # legacy octal unless a digit rules it out
            return int(lowered, 8) if set(lowered) <= set('01234567') else int(lowered)
        if any(c in lowered for c in '.e'):
            return float(lowered)
        return int(lowered)
    except ValueError:
        return Unknown('number', text)
