"""Tests for catalog JSON output."""

import json
import os

from nodered_parser.domain.models import CatalogSnapshot
from nodered_parser.output.catalog_writer import CatalogWriter


class TestCatalogWriter:

    def test_writes_catalog_and_warnings(self, catalog, tmp_path):
        snapshot = catalog.get_catalog()
        paths = CatalogWriter(str(tmp_path / 'out')).write(snapshot)

        assert [os.path.basename(p) for p in paths] == ['catalog.json', 'warnings.json']
        with open(paths[0], encoding='utf-8') as f:
            data = json.load(f)
        assert data['nodeCount'] == 5
        assert data['source'] == 'stub://nodes'
        debug = next(n for n in data['nodes'] if n['type'] == 'debug')
        assert debug['color'] == {'kind': 'expr', 'source': 'getDebugColor()'}

        with open(paths[1], encoding='utf-8') as f:
            warnings = json.load(f)
        assert warnings[0].startswith('broken-module/set:script_parse_failed (')

    def test_no_warnings_file_when_clean(self, tmp_path):
        snapshot = CatalogSnapshot.create(timestamp=1.0, nodes=[], warnings=[])
        paths = CatalogWriter(str(tmp_path), pretty=False).write(snapshot)
        assert len(paths) == 1
        with open(paths[0], encoding='utf-8') as f:
            assert f.read() == '{"refreshedAt": 1.0, "source": null, "nodeCount": 0, "warnings": [], "nodes": []}'
