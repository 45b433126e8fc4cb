"""Source context: the rules used to interpret names in an input document.

A context collects a default namespace, a default language, CURIE prefixes,
aliases and container mappings from ``@context`` declarations. The processor
keeps one baseline context and derives a scoped copy for every object that
carries its own ``@context``, so a local declaration is only visible to the
subtree it appears in.

Malformed declarations are never an error. Anything that cannot be
interpreted is ignored.

Usage:
    from jsonns.context import Context

    ctx = Context.from_value({"@vocab": "http://example.com/ns#"})
    ctx.expand_name("hello")  # "http://example.com/ns#hello"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsonns._values import is_absolute_iri, is_curie_prefix, is_keyword, one_or_many


@dataclass
class Context:
    """Interpretation rules accumulated from ``@context`` declarations.

    All tables are keyed by the literal property name as it appears in the
    document, before alias resolution or expansion.

    Attributes:
        ns: Default namespace for names that are not a keyword, CURIE or IRI.
        lang: Default language for internationalised properties, "" if unset.
        prefixes: CURIE prefix -> base IRI.
        aliases: Literal property name -> the name it stands for.
        container: Literal property name -> container mapping keyword.
    """

    ns: str | None = None
    lang: str = ""
    prefixes: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    container: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: Any) -> Context:
        """Create a context from an ``@context`` value."""
        context = cls()
        context.merge_value(value)
        return context

    @classmethod
    def from_object(cls, data: dict[str, Any]) -> Context:
        """Create a context from a single ``@context`` object."""
        context = cls()
        context.merge_object(data)
        return context

    def copy(self) -> Context:
        """Return a copy that can be extended without touching this one."""
        return Context(
            ns=self.ns,
            lang=self.lang,
            prefixes=dict(self.prefixes),
            aliases=dict(self.aliases),
            container=dict(self.container),
        )

    def reset(self) -> None:
        """Discard everything, leaving an empty context."""
        self.ns = None
        self.lang = ""
        self.prefixes = {}
        self.aliases = {}
        self.container = {}

    def merge_value(self, value: Any) -> None:
        """Merge an ``@context`` value into this context.

        The value may be null, an object, or a list of those. A null clears
        the context. Remote context references (strings) and anything else
        are ignored.
        """
        for item in one_or_many(value):
            if item is None:
                self.reset()
            elif isinstance(item, dict):
                self.merge_object(item)

    def merge_object(self, data: dict[str, Any]) -> None:
        """Merge a single ``@context`` object into this context."""
        for key, value in data.items():
            if is_keyword(key):
                self._merge_keyword(key, value)
            elif isinstance(value, str):
                # Namespace definition.
                if is_curie_prefix(key) and is_absolute_iri(value):
                    self.prefixes[key] = value
            elif isinstance(value, dict):
                self._merge_term(key, value)
            elif value is None:
                # Null clears whatever the term defined.
                self.prefixes.pop(key, None)
                self.aliases.pop(key, None)
                self.container.pop(key, None)

    def _merge_keyword(self, key: str, value: Any) -> None:
        if key == "@vocab":
            if isinstance(value, str) and is_absolute_iri(value):
                self.ns = value
            elif value is None:
                self.ns = None
        elif key == "@language":
            if isinstance(value, str):
                self.lang = value
            elif value is None:
                self.lang = ""

    def _merge_term(self, key: str, definition: dict[str, Any]) -> None:
        alias = definition.get("@id")
        if isinstance(alias, str) and not is_keyword(alias):
            self.aliases[key] = alias

        container = definition.get("@container")
        if isinstance(container, str):
            self.container[key] = container

    def expand_name(self, name: str) -> str | None:
        """Expand a property or type name to an absolute IRI.

        A name may be an absolute IRI, a CURIE with a known prefix, or a term
        in the default namespace. Keywords and terms without a default
        namespace return None, and the property or value should be dropped.
        """
        if is_keyword(name):
            return None

        prefix, sep, suffix = name.partition(":")
        if sep:
            base = self.prefixes.get(prefix)
            if base is not None:
                return f"{base}{suffix}"
            # An absolute IRI in some other scheme.
            return name
        if self.ns is not None:
            return f"{self.ns}{name}"
        return None
