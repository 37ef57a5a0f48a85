"""Finds ``RED.nodes.registerType`` calls in node editor JavaScript.

Editor code registers node types either directly::

    RED.nodes.registerType("inject", { category: "common", ... })

or through small local helpers::

    function reg(type, label) {
        RED.nodes.registerType(type, { category: "tl", paletteLabel: label })
    }
    reg("tl-drop", "Drop")

Two passes run over the same syntax tree. The first records such helpers
as wrapper bindings, the second resolves every call site. Option objects
are reduced with the constrained evaluator; nothing is executed.
"""

import logging
from typing import Iterator

from tree_sitter_language_pack import get_parser

from nodered_parser.domain.constants import (
    REGISTRATION_METHOD,
    REGISTRATION_NAMESPACE,
    REGISTRATION_ROOT,
)
from nodered_parser.domain.models import Registration, ScriptParseResult, WrapperBinding
from nodered_parser.parsers.evaluator import evaluate, node_source, string_value

logger = logging.getLogger(__name__)

FUNCTION_DECLARATIONS = {'function_declaration', 'generator_function_declaration'}
FUNCTION_VALUES = {'function', 'function_expression', 'generator_function', 'arrow_function'}
VARIABLE_DECLARATIONS = {'variable_declaration', 'lexical_declaration'}


class ScriptParseError(Exception):
    """Raised when a script block is not valid JavaScript."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ScriptParser:
    """Extracts node type registrations from one editor script block."""

    def __init__(self, language: str = 'javascript'):
        self._language = language

    def parse(self, script: str, module: str = '') -> ScriptParseResult:
        """Parse a script and return its registrations.

        A syntax error is reported as a warning tagged with ``module``;
        it never raises.
        """
        source = (script or '').encode('utf-8')
        try:
            root = self._parse_tree(source)
        except ScriptParseError as e:
            logger.warning("Script in %s failed to parse: %s", module or '<unknown>', e.reason)
            return ScriptParseResult(warnings=[f"{module}:script_parse_failed ({e.reason})"])

        wrappers = self.find_wrappers(root, source)
        if wrappers:
            logger.debug("Found %d registration wrapper(s) in %s: %s",
                         len(wrappers), module, ', '.join(sorted(wrappers)))
        return ScriptParseResult(registrations=self.find_registrations(root, source, wrappers))

    def _parse_tree(self, source: bytes):
        parser = get_parser(self._language)
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise ScriptParseError(_describe_error(root))
        return root

    # ── Pass 1: wrapper discovery ────────────────────────────────────────

    def find_wrappers(self, root, source: bytes) -> dict[str, WrapperBinding]:
        wrappers: dict[str, WrapperBinding] = {}
        for name_node, fn in _function_definitions(root):
            binding = _wrapper_binding(name_node, fn, source)
            if binding:
                wrappers[binding.name] = binding
        return wrappers

    # ── Pass 2: call resolution ──────────────────────────────────────────

    def find_registrations(self, root, source: bytes,
                           wrappers: dict[str, WrapperBinding]) -> list[Registration]:
        found: list[Registration] = []
        for node in iter_nodes(root):
            if node.type != 'call_expression':
                continue
            callee = node.child_by_field_name('function')
            args = call_arguments(node)

            if is_registration_callee(callee, source):
                registration = _direct_registration(args, source)
            elif callee is not None and callee.type == 'identifier' and node_source(callee, source) in wrappers:
                registration = _wrapper_registration(wrappers[node_source(callee, source)], args, source)
            else:
                continue
            if registration:
                found.append(registration)
        return found


# ── Syntax helpers ───────────────────────────────────────────────────────

def iter_nodes(root) -> Iterator:
    """Pre-order walk over named nodes in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def _function_definitions(root) -> Iterator[tuple]:
    """Yield (name node, function node) for named function definitions."""
    for node in iter_nodes(root):
        if node.type in FUNCTION_DECLARATIONS:
            yield node.child_by_field_name('name'), node
        elif node.type in VARIABLE_DECLARATIONS:
            for declarator in node.named_children:
                if declarator.type != 'variable_declarator':
                    continue
                value = declarator.child_by_field_name('value')
                if value is not None and value.type in FUNCTION_VALUES:
                    yield declarator.child_by_field_name('name'), value


def call_arguments(call) -> list:
    args = call.child_by_field_name('arguments')
    if args is None or args.type != 'arguments':
        return []
    return [a for a in args.named_children if a.type != 'comment']


def is_registration_callee(callee, source: bytes) -> bool:
    """Match ``RED.nodes.registerType`` including bracket access forms."""
    if callee is None:
        return False
    name, obj = _member_parts(callee, source)
    if name != REGISTRATION_METHOD or obj is None:
        return False
    name, root = _member_parts(obj, source)
    if name != REGISTRATION_NAMESPACE or root is None:
        return False
    return root.type == 'identifier' and node_source(root, source) == REGISTRATION_ROOT


def _member_parts(node, source: bytes) -> tuple[str | None, object]:
    if node.type == 'member_expression':
        prop = node.child_by_field_name('property')
        name = node_source(prop, source) if prop is not None else None
        return name, node.child_by_field_name('object')
    if node.type == 'subscript_expression':
        index = node.child_by_field_name('index')
        name = string_value(index, source) if index is not None and index.type == 'string' else None
        return name, node.child_by_field_name('object')
    return None, None


def _plain_params(fn, source: bytes) -> list[str] | None:
    """Parameter names, or None when any parameter is not a bare identifier."""
    single = fn.child_by_field_name('parameter')
    if single is not None:
        return [node_source(single, source)] if single.type == 'identifier' else None
    params = fn.child_by_field_name('parameters')
    if params is None:
        return []
    names = []
    for p in params.named_children:
        if p.type == 'comment':
            continue
        if p.type != 'identifier':
            return None
        names.append(node_source(p, source))
    return names


def _wrapper_binding(name_node, fn, source: bytes) -> WrapperBinding | None:
    if name_node is None or name_node.type != 'identifier':
        return None
    body = fn.child_by_field_name('body')
    if body is None or body.type != 'statement_block':
        return None
    params = _plain_params(fn, source)
    if not params:
        return None

    inner = next(
        (n for n in iter_nodes(body)
         if n.type == 'call_expression'
         and is_registration_callee(n.child_by_field_name('function'), source)),
        None,
    )
    if inner is None:
        return None
    args = call_arguments(inner)
    if len(args) < 2:
        return None
    type_arg, options_arg = args[0], args[1]
    if type_arg.type != 'identifier' or node_source(type_arg, source) not in params:
        return None
    if options_arg.type != 'object':
        return None
    return WrapperBinding(
        name=node_source(name_node, source),
        params=tuple(params),
        type_param=node_source(type_arg, source),
        options_node=options_arg,
    )


def _direct_registration(args: list, source: bytes) -> Registration | None:
    if len(args) < 2:
        return None
    type_arg, options_arg = args[0], args[1]
    if type_arg.type != 'string' or options_arg.type != 'object':
        return None
    node_type = string_value(type_arg, source)
    if not node_type:
        return None
    return Registration(
        type=node_type,
        options=evaluate(options_arg, {}, source),
        options_source=node_source(options_arg, source),
    )


def _wrapper_registration(wrapper: WrapperBinding, args: list, source: bytes) -> Registration | None:
    env = {}
    for i, param in enumerate(wrapper.params):
        env[param] = evaluate(args[i], {}, source) if i < len(args) else None
    node_type = env.get(wrapper.type_param)
    if not isinstance(node_type, str) or not node_type:
        return None
    return Registration(
        type=node_type,
        options=evaluate(wrapper.options_node, env, source),
        options_source=node_source(wrapper.options_node, source),
    )


def _describe_error(root) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'ERROR' or node.is_missing:
            row, column = node.start_point
            label = f"missing {node.type}" if node.is_missing else 'syntax error'
            return f"{label} at line {row + 1}, column {column + 1}"
        stack.extend(reversed(node.children))
    return 'syntax error'
