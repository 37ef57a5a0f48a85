"""Node-RED node catalog parser.

Turns the Admin API ``/nodes`` HTML into a structured, searchable catalog
of node types without executing any of the embedded editor JavaScript.
"""

__version__ = '0.3.0'
