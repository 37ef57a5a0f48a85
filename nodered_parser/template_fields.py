"""Extracts form field names from node edit templates."""

import logging

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from nodered_parser.domain.constants import NESTED_FIELD_RE, OWN_FIELD_RE
from nodered_parser.domain.models import TemplateFields

logger = logging.getLogger(__name__)


def extract_template_fields(template_html: str) -> TemplateFields:
    """Find ``node-input-*`` and ``node-config-input-*`` element ids.

    Order of first appearance is kept and duplicates are dropped.
    """
    if not template_html:
        return TemplateFields()
    try:
        soup = BeautifulSoup(template_html, 'html.parser')
    except ParserRejectedMarkup as e:
        logger.debug("Template markup rejected: %s", e)
        return TemplateFields()

    own: list[str] = []
    nested: list[str] = []
    combined: list[str] = []
    for el in soup.find_all(id=True):
        element_id = str(el.get('id') or '')
        match = OWN_FIELD_RE.match(element_id)
        if match:
            own.append(match.group(1))
            combined.append(match.group(1))
            continue
        match = NESTED_FIELD_RE.match(element_id)
        if match:
            nested.append(match.group(1))
            combined.append(match.group(1))

    return TemplateFields(own=_dedupe(own), nested=_dedupe(nested), all=_dedupe(combined))


def _dedupe(names: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(n for n in names if n))
