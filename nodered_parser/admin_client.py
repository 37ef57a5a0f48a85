"""HTTP client for the Node-RED Admin API."""

import json
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

_BODY_METHODS = {'POST', 'PUT', 'PATCH'}


class AdminApiError(Exception):
    """Non-success response or transport failure talking to the Admin API."""

    def __init__(self, status: int | None, reason: str = '', body: str = ''):
        self.status = status
        self.reason = reason
        self.body = body
        message = f"Node-RED API error: {status if status is not None else 'transport'} {reason}".rstrip()
        if body:
            message += f" - {body}"
        super().__init__(message)


def join_url(base: str, path: str) -> str:
    b = (base or '').rstrip('/')
    if not path:
        return b
    if path.startswith('/'):
        return f"{b}{path}"
    return f"{b}/{path}"


class AdminClient:
    """Thin wrapper over ``requests`` for Admin API calls.

    Args:
        base_url: Node-RED root URL, e.g. ``http://localhost:1880``.
        token: Bearer token; no Authorization header when empty.
        api_prefix: Path prefix placed before every API path.
        session: Optional ``requests.Session`` (tests inject a fake).
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, token: str = '', api_prefix: str = '',
                 session: requests.Session | None = None, timeout: float = 30):
        self.base_url = base_url
        self.token = token or ''
        self.api_prefix = api_prefix or ''
        self._session = session or requests.Session()
        self._timeout = timeout

    def url_for(self, path: str) -> str:
        return join_url(self.base_url, f"{self.api_prefix}{path}")

    def _headers(self, method: str, has_body: bool, accept: str | None) -> dict[str, str]:
        h: dict[str, str] = {}
        if self.token:
            h['Authorization'] = f"Bearer {self.token}"
        if has_body and method in _BODY_METHODS:
            h['Content-Type'] = 'application/json'
        if accept:
            h['Accept'] = accept
        return h

    def request(self, method: str, path: str, data: Any = None, accept: str | None = None) -> Any:
        """Issue a request and return decoded JSON or the text body."""
        method = method.upper()
        url = self.url_for(path)
        body = json.dumps(data) if data is not None else None
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._headers(method, body is not None, accept),
                data=body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise AdminApiError(None, type(e).__name__, str(e)) from e

        if not resp.ok:
            raise AdminApiError(resp.status_code, resp.reason or '', resp.text or '')

        content_type = resp.headers.get('content-type', '')
        if 'application/json' in content_type:
            return resp.json()
        return resp.text

    def get(self, path: str, accept: str | None = None) -> Any:
        return self.request('GET', path, accept=accept)
