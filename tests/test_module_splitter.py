"""Tests for module block splitting and module name decomposition."""

import pytest

from nodered_parser.module_splitter import split_module_name, split_modules
from tests.conftest import NODES_HTML


class TestSplitModules:

    def test_modules_in_document_order(self):
        names = [b.name for b in split_modules(NODES_HTML)]
        assert names == [
            'node-red/inject',
            'node-red/debug',
            '@time-line-autopilot/node-red-nodes/keypoints',
            'broken-module/set',
        ]

    def test_content_before_first_marker_discarded(self):
        blocks = split_modules(NODES_HTML)
        assert all('<title>' not in b.html for b in blocks)

    def test_block_contains_only_its_module(self):
        inject = split_modules(NODES_HTML)[0]
        assert "registerType('inject'" in inject.html
        assert 'registerType("debug"' not in inject.html

    def test_last_block_runs_to_end(self):
        last = split_modules(NODES_HTML)[-1]
        assert last.html.rstrip().endswith('</html>')

    def test_no_markers(self):
        assert split_modules('<html><body>nothing</body></html>') == []

    def test_empty_input(self):
        assert split_modules('') == []


class TestSplitModuleName:

    @pytest.mark.parametrize('name, package, set_name', [
        ('node-red/inject', 'node-red', 'inject'),
        ('node-red-contrib-foo/a/b', 'node-red-contrib-foo', 'a/b'),
        ('node-red-dashboard', 'node-red-dashboard', None),
        ('@scope/pkg/set', '@scope/pkg', 'set'),
        ('@scope/pkg/set/sub', '@scope/pkg', 'set/sub'),
        ('@scope/pkg', '@scope/pkg', None),
        ('@scope', '@scope', None),
    ])
    def test_decomposition(self, name, package, set_name):
        parsed = split_module_name(name)
        assert parsed.module == name
        assert parsed.package == package
        assert parsed.set_name == set_name
