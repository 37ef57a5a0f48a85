"""Tests for edit-template field extraction."""

from nodered_parser.domain.models import TemplateFields
from nodered_parser.template_fields import extract_template_fields


TEMPLATE = """
<div class="form-row">
    <input type="text" id="node-input-name">
    <input type="text" id="node-input-topic">
    <select id="node-input-qos"></select>
    <input type="hidden" id="node-input-name">
</div>
<div class="form-row">
    <input type="text" id="node-config-input-broker">
    <input type="text" id="node-config-input-port">
    <input type="text" id="node-input-topic">
    <span id="unrelated"></span>
</div>
"""


class TestExtractTemplateFields:

    def test_own_fields_ordered_unique(self):
        fields = extract_template_fields(TEMPLATE)
        assert fields.own == ('name', 'topic', 'qos')

    def test_nested_fields(self):
        fields = extract_template_fields(TEMPLATE)
        assert fields.nested == ('broker', 'port')

    def test_all_is_ordered_union(self):
        fields = extract_template_fields(TEMPLATE)
        assert fields.all == ('name', 'topic', 'qos', 'broker', 'port')

    def test_shared_name_appears_once_in_all(self):
        html = '<input id="node-config-input-name"><input id="node-input-name">'
        fields = extract_template_fields(html)
        assert fields.own == ('name',)
        assert fields.nested == ('name',)
        assert fields.all == ('name',)

    def test_empty_template(self):
        assert extract_template_fields('') == TemplateFields()

    def test_malformed_markup_does_not_raise(self):
        fields = extract_template_fields('<div id="node-input-a"><input id="node-config-input-b"')
        assert isinstance(fields, TemplateFields)
        assert 'a' in fields.own
