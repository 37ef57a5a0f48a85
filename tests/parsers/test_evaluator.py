"""Tests for the constrained expression evaluator."""

import pytest
from tree_sitter_language_pack import get_parser

from nodered_parser.domain.values import (
    UNDEFINED,
    Expression,
    FunctionLiteral,
    Placeholder,
    Reference,
    TemplateFragment,
    Unknown,
    to_json,
)
from nodered_parser.parsers.evaluator import evaluate


def eval_js(expr: str, env: dict | None = None):
    """Evaluate a single JavaScript expression."""
    source = f"({expr});".encode('utf-8')
    root = get_parser('javascript').parse(source).root_node
    assert not root.has_error, expr
    statement = root.named_children[0]
    return evaluate(statement.named_children[0], env or {}, source)


class TestLiterals:
    """Literal nodes map to their values."""

    @pytest.mark.parametrize('expr, expected', [
        ("'single'", 'single'),
        ('"double"', 'double'),
        ('42', 42),
        ('1.5', 1.5),
        ('0x1F', 31),
        ('1_000', 1000),
        ('true', True),
        ('false', False),
        ('null', None),
    ])
    def test_scalar(self, expr, expected):
        assert eval_js(expr) == expected

    def test_string_escapes_are_decoded(self):
        assert eval_js(r"'a\nb\tA\x42'") == 'a\nb\tAB'

    def test_surrogate_pair_escape_is_combined(self):
        assert eval_js(r"'\uD83D\uDE00'") == '\U0001F600'

    def test_lone_surrogate_is_replaced(self):
        value = eval_js(r"'a\uD83Db'")
        assert value == 'a\ufffdb'
        value.encode('utf-8')

    def test_undefined_is_reference(self):
        assert eval_js('undefined') == UNDEFINED

    def test_array_preserves_order(self):
        assert eval_js("[3, 'two', null, true]") == [3, 'two', None, True]


class TestIdentifiers:

    def test_unbound_identifier_is_reference(self):
        assert eval_js('someVar') == Reference('someVar')

    def test_bound_identifier_resolves(self):
        assert eval_js('label', {'label': 'Drop'}) == 'Drop'


class TestObjects:

    def test_plain_and_literal_keys(self):
        assert eval_js("{a: 1, 'b': 2, 3: 'c'}") == {'a': 1, 'b': 2, '3': 'c'}

    def test_computed_keys_dropped(self):
        assert eval_js('{[key]: 1, kept: 2}') == {'kept': 2}

    def test_duplicate_key_later_wins(self):
        assert eval_js('{a: 1, b: 2, a: 3}') == {'a': 3, 'b': 2}

    def test_shorthand_property(self):
        assert eval_js('{label}', {'label': 'x'}) == {'label': 'x'}
        assert eval_js('{label}') == {'label': Reference('label')}

    def test_method_becomes_function_literal(self):
        value = eval_js('{ oneditprepare() { return 1; } }')
        assert isinstance(value['oneditprepare'], FunctionLiteral)
        assert 'return 1' in value['oneditprepare'].source

    def test_spread_is_skipped(self):
        assert eval_js('{...base, a: 1}') == {'a': 1}

    def test_nested(self):
        value = eval_js("{defaults: {name: {value: ''}, n: {value: 5, required: true}}}")
        assert value == {'defaults': {'name': {'value': ''}, 'n': {'value': 5, 'required': True}}}


class TestUnary:

    def test_negative_number(self):
        assert eval_js('-5') == -5

    def test_unary_plus(self):
        assert eval_js('+2.5') == 2.5

    def test_not_boolean(self):
        assert eval_js('!true') is False

    def test_not_on_number_degrades(self):
        assert eval_js('!0') == Expression('!0')

    def test_minus_on_string_degrades(self):
        assert eval_js("-'a'") == Expression("-'a'")

    def test_minus_on_boolean_degrades(self):
        assert eval_js('-true') == Expression('-true')

    def test_typeof_degrades(self):
        assert eval_js('typeof x') == Expression('typeof x')


class TestTemplates:

    def test_no_substitutions(self):
        assert eval_js('`plain text`') == 'plain text'

    def test_surrogate_pair_in_template(self):
        assert eval_js(r"`\uD83D\uDE00 ready`") == '\U0001F600 ready'

    def test_literal_substitutions(self):
        assert eval_js('`a${1}b${true}c${"d"}`') == 'a1btruecd'

    def test_bound_substitution(self):
        assert eval_js('`${label} group`', {'label': 'Hold'}) == 'Hold group'

    def test_dynamic_substitution_degrades_whole_template(self):
        assert eval_js('`a${f()}b${1}`') == TemplateFragment('`a${f()}b${1}`')

    def test_unbound_substitution_degrades(self):
        assert eval_js('`${label}`') == TemplateFragment('`${label}`')


class TestOpaque:
    """Dynamic expressions are never executed."""

    @pytest.mark.parametrize('expr', [
        'getColor()',
        'RED._("node-red:common.label")',
        'a.b.c',
        'a[0]',
        'a + 1',
        'a || "x"',
        'ok ? 1 : 2',
        'new Date()',
    ])
    def test_expression_placeholder_keeps_source(self, expr):
        assert eval_js(expr) == Expression(expr)

    @pytest.mark.parametrize('expr', [
        'function () { return 1; }',
        '(v) => v > 0',
        'x => { return x; }',
    ])
    def test_function_literal(self, expr):
        assert eval_js(expr) == FunctionLiteral(expr)

    def test_placeholder_base_is_abstract(self):
        with pytest.raises(TypeError):
            Placeholder()

    def test_regex_is_unknown(self):
        value = eval_js('/ab+c/i')
        assert isinstance(value, Unknown)
        assert value.source == '/ab+c/i'

    def test_to_json_shapes(self):
        value = eval_js("{c: getColor(), f: function(){}, r: someRef, t: `${x}`}")
        assert to_json(value) == {
            'c': {'kind': 'expr', 'source': 'getColor()'},
            'f': {'kind': 'function', 'source': 'function(){}'},
            'r': {'kind': 'ref', 'name': 'someRef'},
            't': {'kind': 'template', 'source': '`${x}`'},
        }
