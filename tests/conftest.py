"""Shared test fixtures."""

import pytest

from nodered_parser.catalog_cache import NodeCatalog
from nodered_parser.sources import HtmlSource


# ── Sample /nodes HTML ───────────────────────────────────────────────────

INJECT_MODULE = """\
<!-- --- [red-module:node-red/inject] --- -->
<script type="text/javascript">
    RED.nodes.registerType('inject', {
        category: 'common',
        color: '#a6bbcf',
        defaults: {
            name: {value: ''},
            repeat: {value: '', validate: function(v) { return true; }},
            crontab: {value: ''}
        },
        inputs: 0,
        outputs: 1,
        icon: 'inject.svg',
        label: function() { return this.name || 'inject'; },
        paletteLabel: 'inject'
    });
</script>
<script type="text/html" data-template-name="inject">
    <div class="form-row">
        <label for="node-input-name">Name</label>
        <input type="text" id="node-input-name">
        <input type="text" id="node-input-repeat">
        <input type="text" id="node-input-name">
    </div>
</script>
<script type="text/html" data-help-name="inject">
    <p>Injects a message into a flow either manually or at regular intervals.</p>
</script>
"""

DEBUG_MODULE = """\
<!-- --- [red-module:node-red/debug] --- -->
<script type="text/html" data-help-name="debug">
    <p>Displays selected message properties in the debug sidebar tab.</p>
</script>
<script type="text/javascript">
    RED.nodes.registerType("debug", {
        category: "common",
        defaults: { name: { value: "" }, active: { value: true }, tosidebar: { value: true } },
        inputs: 1,
        outputs: 0,
        align: "right",
        color: getDebugColor()
    });
</script>
"""

KEYPOINT_MODULE = """\
<!-- --- [red-module:@time-line-autopilot/node-red-nodes/keypoints] --- -->
<script type="text/javascript">
    (function () {
        function reg(type, label, color) {
            RED.nodes.registerType(type, {
                category: "time-line",
                paletteLabel: label,
                color: color,
                defaults: { name: { value: "" }, group: { value: `${label} group` } },
                inputs: 1,
                outputs: 1
            });
        }
        reg("tl-keypoint-drop", "Drop", "#fff");
        reg("tl-keypoint-hold", "Hold");
    })();
</script>
<script type="text/html" data-help-name="tl-keypoint-drop">
    <p>Marks a drop keypoint on the time-line.</p>
</script>
"""

BROKEN_MODULE = """\
<!-- --- [red-module:broken-module/set] --- -->
<script type="text/html" data-help-name="broken-node"><p>Still documented.</p></script>
<script type="text/javascript">
    RED.nodes.registerType('broken-node', { category: 'x'
</script>
"""

NODES_HTML = (
    "<!DOCTYPE html>\n<html><head><title>nodes</title></head><body>\n"
    + INJECT_MODULE
    + DEBUG_MODULE
    + KEYPOINT_MODULE
    + BROKEN_MODULE
    + "</body></html>\n"
)


def module_html(name: str, script: str = '', extra: str = '') -> str:
    """Build one module block around a registration script."""
    body = f'<script type="text/javascript">\n{script}\n</script>\n' if script else ''
    return f"<!-- --- [red-module:{name}] --- -->\n{body}{extra}"


# ── Test doubles ─────────────────────────────────────────────────────────

class StubSource(HtmlSource):
    """In-memory HTML source that counts fetches."""

    def __init__(self, html: str = NODES_HTML, error: Exception | None = None):
        self.html = html
        self.error = error
        self.fetch_count = 0

    def fetch_nodes_html(self) -> str:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return self.html

    def describe(self) -> str:
        return 'stub://nodes'


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def stub_source():
    return StubSource()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog(stub_source, clock):
    return NodeCatalog(stub_source, ttl_ms=60_000, clock=clock)


@pytest.fixture
def tmp_html(tmp_path):
    """Write HTML content to a temp file and return its path."""
    def _write(content: str = NODES_HTML, filename: str = "nodes.html") -> str:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
