"""JavaScript parsing for node editor scripts."""

from nodered_parser.parsers.evaluator import evaluate
from nodered_parser.parsers.script_parser import ScriptParseError, ScriptParser

__all__ = ['ScriptParser', 'ScriptParseError', 'evaluate']
