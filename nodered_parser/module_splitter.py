"""Splits the ``/nodes`` HTML into per-module blocks."""

from nodered_parser.domain.constants import MODULE_BLOCK_RE, SCOPE_MARKER
from nodered_parser.domain.models import ModuleBlock, ModuleName


def split_modules(html: str) -> list[ModuleBlock]:
    """Return module blocks in document order.

    Anything before the first ``red-module`` marker is discarded.
    """
    return [
        ModuleBlock(name=match.group(1), html=match.group(2) or '')
        for match in MODULE_BLOCK_RE.finditer(html or '')
    ]


def split_module_name(module_name: str) -> ModuleName:
    """Decompose a module name into package and set.

    Examples:
        ``node-red/inject``     -> package ``node-red``, set ``inject``
        ``@scope/pkg/set/sub``  -> package ``@scope/pkg``, set ``set/sub``
        ``@scope/pkg``          -> package ``@scope/pkg``, no set
    """
    name = module_name or ''
    parts = name.split('/')
    if name.startswith(SCOPE_MARKER) and len(parts) >= 2:
        package = '/'.join(parts[:2])
        rest = '/'.join(parts[2:])
    else:
        package = parts[0] or name
        rest = '/'.join(parts[1:])
    return ModuleName(module=name, package=package, set_name=rest or None)
