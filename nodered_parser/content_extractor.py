"""Classifies the script elements of a module block.

Node-RED ships three kinds of ``<script>`` per module:

- ``<script type="text/html" data-help-name="type">`` help documentation
- ``<script type="text/html" data-template-name="type">`` edit dialogs
- plain ``<script>`` / ``<script type="text/javascript">`` editor code
"""

import logging
import re

from bs4 import BeautifulSoup, CData, NavigableString
from bs4.builder import ParserRejectedMarkup

from nodered_parser.domain.constants import HELP_NAME_ATTR, SCRIPT_TYPES, TEMPLATE_NAME_ATTR
from nodered_parser.domain.models import ModuleContent

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r'<[^>]+>')
# text nodes only; comments, doctypes and script bodies are skipped
_TEXT_TYPES = (NavigableString, CData)


def extract_content(module_html: str) -> ModuleContent:
    """Collect help, template and registration script sources.

    A later element for the same type replaces an earlier one.
    """
    content = ModuleContent()
    try:
        soup = BeautifulSoup(module_html or '', 'html.parser')
    except ParserRejectedMarkup as e:
        logger.warning("Unparseable module markup: %s", e)
        return content

    for script in soup.find_all('script'):
        type_attr = str(script.get('type') or '').strip().lower()
        help_name = script.get(HELP_NAME_ATTR)
        template_name = script.get(TEMPLATE_NAME_ATTR)
        text = _inner_html(script)

        if help_name:
            content.help_by_type[str(help_name)] = text
        if template_name:
            content.template_by_type[str(template_name)] = text
        if not help_name and not template_name and type_attr in SCRIPT_TYPES:
            code = text.strip()
            if code:
                content.scripts.append(code)

    return content


def html_to_text(html: str) -> str:
    """Render an HTML fragment as whitespace-normalized plain text."""
    if not html:
        return ''
    try:
        soup = BeautifulSoup(html, 'html.parser')
        text = ''.join(str(s) for s in soup.descendants if type(s) in _TEXT_TYPES)
    except ParserRejectedMarkup:
        text = _TAG_RE.sub(' ', html)
    return normalize_whitespace(text)


def normalize_whitespace(text: str) -> str:
    text = (text or '').replace('\r\n', '\n')
    text = re.sub(r'[ \t]+', ' ', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def _inner_html(tag) -> str:
    # html.parser keeps <script> bodies as a single raw string
    return ''.join(str(child) for child in tag.contents)
