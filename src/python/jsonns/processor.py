"""Process JSON-NS documents into fully resolved (and optionally recompacted) form.

JSON-NS is a small subset of JSON-LD: documents may abbreviate property and
type names using ``@context`` declarations (prefixes, aliases, a default
namespace, language maps). Processing resolves every name against the active
context, then rewords the resulting IRIs according to a target context.

Processing is lenient: properties whose names cannot be resolved, invalid
``@id`` values and unknown keywords are silently dropped instead of failing
the whole document.

The walk keeps its own work stack rather than recursing, so deeply nested
documents are bounded by memory only, not by the interpreter recursion limit.

Note that the output is not itself a JSON-NS document. Running it through a
processor a second time may produce unexpected results.

CLI Usage:
    python -m jsonns.processor --help
    python -m jsonns.processor process --input doc.json --rule schema=http://schema.org/
    python -m jsonns.processor process --input doc.json --context ctx.json --rule =http://schema.org/
    python -m jsonns.processor expand --name schema:name --context ctx.json
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonns._values import is_absolute_iri, is_keyword, one_or_many
from jsonns.context import Context
from jsonns.target import TargetContext, TargetParseError

CONTEXT_KEY = "@context"

# Container mapping for internationalised properties
LANGUAGE_CONTAINER = "@language"

# Pending value: (input value, active context, output container, slot)
_Task = tuple[Any, Context, Any, Any]


@dataclass
class Processor:
    """A document processor.

    The defaults produce output with absolute IRIs only. Usually a caller adds
    rules to ``target`` to get shorter property names back.

    Attributes:
        context: External context applied before any inline ``@context``.
        target: Target context the output is reworded to.

    Example:
        >>> processor = Processor().add_rule("bar", "http://example.com/ns#")
        >>> processor.process_value({
        ...     "@context": {"foo": "http://example.com/ns#"},
        ...     "foo:hello": "world",
        ... })
        {'bar:hello': 'world'}
    """

    context: Context = field(default_factory=Context)
    target: TargetContext = field(default_factory=TargetContext)

    def add_rule(self, prefix: str, base: str) -> Processor:
        """Add a rule to the target context. Returns self for chaining."""
        self.target.add_rule(prefix, base)
        return self

    def process_value(self, value: Any) -> Any:
        """Process any JSON value using the external context."""
        return self._process_value(value, self.context)

    def process_object(self, data: dict[str, Any]) -> dict[str, Any]:
        """Process a JSON object using the external context."""
        return self._process_object(data, self.context)

    def _process_value(self, value: Any, context: Context) -> Any:
        root: list[Any] = [None]
        self._walk([(value, context, root, 0)])
        return root[0]

    def _process_object(self, data: dict[str, Any], context: Context) -> dict[str, Any]:
        stack: list[_Task] = []
        result = self._fill_object(data, context, stack)
        self._walk(stack)
        return result

    def _walk(self, stack: list[_Task]) -> None:
        """Process pending values until none are left.

        Each task writes its output into a slot of an already created parent
        container, so nesting depth costs heap space instead of stack frames.
        """
        while stack:
            value, context, parent, slot = stack.pop()
            if isinstance(value, list):
                items: list[Any] = [None] * len(value)
                parent[slot] = items
                stack.extend(
                    (item, context, items, index) for index, item in enumerate(value)
                )
            elif isinstance(value, dict):
                parent[slot] = self._fill_object(value, context, stack)
            else:
                parent[slot] = value

    def _fill_object(
        self, data: dict[str, Any], context: Context, stack: list[_Task]
    ) -> dict[str, Any]:
        """Build the output object, queueing nested values on ``stack``."""
        # A local context extends a copy, never the context of the parent.
        if CONTEXT_KEY in data:
            context = context.copy()
            context.merge_value(data[CONTEXT_KEY])

        # Later keys overwrite earlier ones that map to the same output name,
        # so only the last nested value per output key is queued.
        result: dict[str, Any] = {}
        nested: dict[str, Any] = {}
        for key, value in data.items():
            if is_keyword(key):
                if self._process_keyword(key, value, context, result):
                    nested.pop(key, None)
                continue

            name = context.expand_name(context.aliases.get(key, key))
            if name is None:
                continue
            out_key = self.target.compact_iri(name)

            if context.container.get(key) == LANGUAGE_CONTAINER:
                language_map = _language_map(value, context.lang)
                if language_map is None:
                    continue
                result[out_key] = language_map
                nested.pop(out_key, None)
            else:
                result[out_key] = None
                nested[out_key] = value

        stack.extend((value, context, result, key) for key, value in nested.items())
        return result

    def _process_keyword(
        self, key: str, value: Any, context: Context, result: dict[str, Any]
    ) -> bool:
        """Write a supported keyword into ``result``. Returns whether it was written."""
        if key == "@id":
            # Document ID, never reworded.
            if isinstance(value, str) and is_absolute_iri(value):
                result[key] = value
                return True
        elif key == "@type":
            types = []
            for item in one_or_many(value):
                if not isinstance(item, str):
                    continue
                iri = context.expand_name(item)
                if iri is not None:
                    types.append(self.target.compact_iri(iri))
            if types:
                result[key] = types
                return True
        # @context is already merged; other keywords are not supported.
        return False


def _language_map(value: Any, default_lang: str) -> dict[str, str] | None:
    """Normalise the value of an internationalised property.

    A plain string becomes a map with a single entry for the default language,
    and non-string entries are dropped from a map. Returns None for anything
    else.
    """
    if isinstance(value, str):
        return {default_lang: value}
    if isinstance(value, dict):
        return {lang: text for lang, text in value.items() if isinstance(text, str)}
    return None


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def load_context(path: str | Path) -> Context:
    """Load an external context from a JSON file.

    The file may hold the ``@context`` value itself, or a document with an
    ``@context`` key.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict) and CONTEXT_KEY in data:
        data = data[CONTEXT_KEY]
    return Context.from_value(data)


def parse_rule_arg(arg: str) -> tuple[str, str]:
    """Parse a ``PREFIX=BASE`` command-line rule.

    Raises:
        TargetParseError: If the argument has no ``=``.
    """
    prefix, sep, base = arg.partition("=")
    if not sep or not base:
        raise TargetParseError(f"Expected PREFIX=BASE, got {arg!r}")
    return prefix, base


def build_processor(
    context_file: str | None = None,
    target_file: str | None = None,
    rules: list[str] | None = None,
) -> Processor:
    """Build a processor from CLI-style options.

    Rules from ``target_file`` come first, followed by ``rules`` in order.
    """
    processor = Processor()
    if context_file:
        processor.context = load_context(context_file)
    if target_file:
        processor.target = TargetContext.parse(
            Path(target_file).read_text(encoding="utf-8")
        )
    for arg in rules or []:
        processor.add_rule(*parse_rule_arg(arg))
    return processor


def main() -> None:
    """CLI entry point for document processing."""
    parser = argparse.ArgumentParser(
        prog="jsonns.processor",
        description="Resolve and reword names in JSON-NS documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Output absolute IRIs only
  python -m jsonns.processor process --input doc.json

  # Use the schema: prefix and a default namespace in the output
  python -m jsonns.processor process --input doc.json \\
      --rule schema=http://schema.org/ --rule =http://example.com/ns#

  # Expand a single name
  python -m jsonns.processor expand --name foo:hello --context ctx.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Process command
    process_parser = subparsers.add_parser(
        "process",
        help="Process a JSON-NS document",
        description="Resolve all names in a document and reword them for output.",
    )
    process_parser.add_argument(
        "--input", "-i", required=True, help="Input JSON document"
    )
    process_parser.add_argument(
        "--context", "-c", help="External context JSON file (default: empty)"
    )
    process_parser.add_argument(
        "--rule",
        "-r",
        action="append",
        default=[],
        help="Target rule PREFIX=BASE, repeatable. An empty PREFIX sets the "
        "default namespace",
    )
    process_parser.add_argument(
        "--target-file",
        "-t",
        help="File with target rules, one 'prefix: base' per line",
    )
    process_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    # Expand command
    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand a single property or type name",
        description="Print the absolute IRI a name expands to.",
    )
    expand_parser.add_argument("--name", "-n", required=True, help="Name to expand")
    expand_parser.add_argument(
        "--context", "-c", help="External context JSON file (default: empty)"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == "process":
            processor = build_processor(args.context, args.target_file, args.rule)
            document = json.loads(Path(args.input).read_text(encoding="utf-8"))
            output = json.dumps(processor.process_value(document), indent=2)
            if args.output:
                Path(args.output).write_text(output + "\n", encoding="utf-8")
                print(f"Output written to {args.output}", file=sys.stderr)
            else:
                print(output)

        elif args.command == "expand":
            context = load_context(args.context) if args.context else Context()
            iri = context.expand_name(args.name)
            if iri is None:
                print(f"Name does not expand: {args.name}", file=sys.stderr)
                sys.exit(1)
            print(iri)

    except TargetParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(f"Error: Input is not valid UTF-8: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
