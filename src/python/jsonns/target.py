"""Target context: rules for rewording absolute IRIs in the output document.

Rules are (prefix, base IRI) pairs tried in the order they were added; the
first rule whose base starts the IRI wins. An empty prefix marks the default
namespace of the output, whose terms are written without any prefix. With no
rules at all, the output contains only absolute IRIs.

Rules can also be read from text, one ``prefix: base`` pair per line:

    schema: http://schema.org/
    : http://example.com/ns#

A lone ``-`` stands for an empty rule set.
"""

from __future__ import annotations

from dataclasses import dataclass, field

RULE_SEPARATOR = ": "

# Text form of an empty rule set
EMPTY_RULES = "-"


class TargetParseError(ValueError):
    """Error parsing target context rules from text."""


@dataclass
class TargetContext:
    """Ordered compaction rules for the output document."""

    rules: list[tuple[str, str]] = field(default_factory=list)

    def add_rule(self, prefix: str, base: str) -> TargetContext:
        """Append a rule. Returns self so calls can be chained."""
        self.rules.append((prefix, base))
        return self

    def compact_iri(self, iri: str) -> str:
        """Compact an absolute IRI using the first matching rule."""
        for prefix, base in self.rules:
            if iri.startswith(base):
                suffix = iri[len(base) :]
                if not prefix:
                    return suffix
                return f"{prefix}:{suffix}"
        return iri

    @classmethod
    def parse(cls, text: str) -> TargetContext:
        """Parse rules from their text form.

        Raises:
            TargetParseError: If a line has no ``": "`` separator.
        """
        target = cls()
        text = text.strip()
        if text == EMPTY_RULES:
            return target

        for lineno, line in enumerate(text.splitlines(), start=1):
            prefix, sep, base = line.partition(RULE_SEPARATOR)
            if not sep:
                raise TargetParseError(
                    f"Line {lineno}: expected 'prefix: base', got {line!r}"
                )
            target.add_rule(prefix, base)
        return target
