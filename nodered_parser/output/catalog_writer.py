"""JSON output for catalog snapshots.

Output structure:
    output_dir/
    ├── catalog.json
    └── warnings.json (only if warnings)
"""

import json
import os

from nodered_parser.domain.models import CatalogSnapshot


class CatalogWriter:
    """Writes a snapshot to a directory.

    Args:
        output_dir: Root directory for output files.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, output_dir: str, pretty: bool = True):
        self.output_dir = output_dir
        self.indent = 2 if pretty else None

    def write(self, snapshot: CatalogSnapshot) -> list[str]:
        """Write catalog.json (and warnings.json); return the written paths."""
        os.makedirs(self.output_dir, exist_ok=True)
        written = [self._dump('catalog.json', snapshot.to_dict())]
        if snapshot.warnings:
            written.append(self._dump('warnings.json', list(snapshot.warnings)))
        return written

    def _dump(self, filename: str, data) -> str:
        path = os.path.join(self.output_dir, filename)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self.indent, ensure_ascii=False, default=str)
        return path
