"""JSON-NS - a small, predictable subset of JSON-LD name resolution.

This package provides:
- Source contexts built from inline and external ``@context`` declarations
- Expansion of prefixed, aliased and default-namespace names to IRIs
- Target contexts that reword absolute IRIs for the output document
- A lenient processor that rewrites whole documents

Usage:
    from jsonns import Processor

    output = Processor().add_rule("schema", "http://schema.org/").process_value(doc)

    python -m jsonns.processor --help
    python -m jsonns.fixtures --help
"""

from jsonns.context import Context
from jsonns.processor import Processor
from jsonns.target import TargetContext, TargetParseError

__all__ = [
    "Context",
    "Processor",
    "TargetContext",
    "TargetParseError",
]
