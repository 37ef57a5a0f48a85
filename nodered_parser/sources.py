"""Sources of the raw ``/nodes`` HTML.

Provides a uniform interface for reading the editor HTML either live from
the Admin API or from a saved copy on disk.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from nodered_parser.admin_client import AdminClient


class HtmlSourceError(Exception):
    """The HTML could not be read from a local source."""


class HtmlSource(ABC):
    """Abstract provider of the Admin API node HTML."""

    @abstractmethod
    def fetch_nodes_html(self) -> str:
        """Return the full ``/nodes`` HTML document."""

    @abstractmethod
    def describe(self) -> str:
        """Identifier recorded on snapshots built from this source."""


class AdminApiSource(HtmlSource):
    """Fetches ``GET /nodes`` from a running Node-RED instance."""

    def __init__(self, client: AdminClient):
        self.client = client

    def fetch_nodes_html(self) -> str:
        body = self.client.get('/nodes', accept='text/html')
        return body if isinstance(body, str) else str(body)

    def describe(self) -> str:
        return self.client.base_url


class LocalHtmlSource(HtmlSource):
    """Reads a saved ``/nodes`` HTML file."""

    def __init__(self, path: str):
        self._path = Path(path)

    def fetch_nodes_html(self) -> str:
        try:
            return self._path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise HtmlSourceError(f"Cannot read {self._path}: {e}") from e

    def describe(self) -> str:
        return str(self._path)


def source_for(location: str, token: str = '', api_prefix: str = '') -> HtmlSource:
    """Pick a source from a URL or a file path."""
    if location.startswith(('http://', 'https://')):
        return AdminApiSource(AdminClient(location, token=token, api_prefix=api_prefix))
    return LocalHtmlSource(location)
