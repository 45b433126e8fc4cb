"""Load and run plain-text processing fixtures.

A fixture file holds five sections separated by blank lines:

    1. a one-line test name
    2. the external context (JSON)
    3. the target rules (see jsonns.target; ``-`` for none)
    4. the input document (JSON)
    5. the expected output (JSON)

CLI Usage:
    python -m jsonns.fixtures --help
    python -m jsonns.fixtures run tests/fixtures/cases
    python -m jsonns.fixtures show tests/fixtures/cases/vocab.txt
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonns.context import Context
from jsonns.processor import Processor
from jsonns.target import TargetContext, TargetParseError

SECTION_SEPARATOR = "\n\n"
SECTIONS = ("name", "context", "target", "input", "expectation")


class FixtureError(ValueError):
    """Error loading a fixture file."""


@dataclass
class Fixture:
    """A single processing fixture.

    Attributes:
        name: Human-readable test name.
        stem: File name without extension.
        context: External context for the processor.
        target: Target context for the processor.
        input: Input document.
        expect: Expected output document.
    """

    name: str
    stem: str
    context: Context
    target: TargetContext
    input: Any
    expect: Any

    @property
    def label(self) -> str:
        """Name and file stem, as shown in runner output."""
        return f"{self.name} [{self.stem}]"

    def processor(self) -> Processor:
        """A processor configured with this fixture's contexts."""
        return Processor(context=self.context.copy(), target=self.target)

    def run(self) -> Any:
        """Process the input and return the actual output."""
        return self.processor().process_value(self.input)


@dataclass
class FixtureResult:
    """Actual output of a fixture run."""

    fixture: Fixture
    output: Any

    @property
    def passed(self) -> bool:
        """Whether the output matches the expectation."""
        return self.output == self.fixture.expect


def _parse_json(text: str, section: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FixtureError(f"{path.name}: invalid {section}: {e}") from e


def parse_fixture(text: str, path: Path) -> Fixture:
    """Parse fixture text. ``path`` is only used for the stem and messages.

    Raises:
        FixtureError: If a section is missing or does not parse.
    """
    parts = text.split(SECTION_SEPARATOR)
    if len(parts) < len(SECTIONS):
        missing = SECTIONS[len(parts)]
        raise FixtureError(f"{path.name}: fixture has no {missing}")
    name, context, target, document, expect = parts[: len(SECTIONS)]

    try:
        target_context = TargetContext.parse(target)
    except TargetParseError as e:
        raise FixtureError(f"{path.name}: invalid target: {e}") from e

    return Fixture(
        name=name.strip(),
        stem=path.stem,
        context=Context.from_value(_parse_json(context, "context", path)),
        target=target_context,
        input=_parse_json(document, "input", path),
        expect=_parse_json(expect, "expectation", path),
    )


def load_fixture(path: str | Path) -> Fixture:
    """Load a fixture from a ``.txt`` file."""
    path = Path(path)
    return parse_fixture(path.read_text(encoding="utf-8"), path)


def find_fixtures(directory: str | Path) -> list[Path]:
    """Return all fixture files in a directory, sorted by name.

    Raises:
        FixtureError: If the directory does not exist or holds no fixtures.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FixtureError(f"Could not read fixture directory: {directory}")
    paths = sorted(directory.glob("*.txt"))
    if not paths:
        raise FixtureError(f"No *.txt fixtures found in {directory}")
    return paths


def run_dir(directory: str | Path) -> list[FixtureResult]:
    """Load and run every fixture in a directory.

    Raises:
        FixtureError: If there are no fixtures to run or one does not parse.
    """
    results = []
    for path in find_fixtures(directory):
        fixture = load_fixture(path)
        results.append(FixtureResult(fixture=fixture, output=fixture.run()))
    return results


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for the fixture runner."""
    parser = argparse.ArgumentParser(
        prog="jsonns.fixtures",
        description="Run JSON-NS processing fixtures",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    run_parser = subparsers.add_parser(
        "run", help="Run all *.txt fixtures in a directory"
    )
    run_parser.add_argument("directory", help="Directory containing fixtures")

    show_parser = subparsers.add_parser(
        "show", help="Print the actual output of a single fixture"
    )
    show_parser.add_argument("fixture", help="Fixture file")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == "run":
            results = run_dir(args.directory)
            num_passed = 0
            for result in results:
                if result.passed:
                    num_passed += 1
                    print(f" ✔ PASS: {result.fixture.label}", file=sys.stderr)
                else:
                    print(f" ✖ FAIL: {result.fixture.label}", file=sys.stderr)
                    print(json.dumps(result.output, indent=2), file=sys.stderr)
            print(f"{num_passed} of {len(results)} fixtures passed", file=sys.stderr)
            if num_passed != len(results):
                sys.exit(1)

        elif args.command == "show":
            fixture = load_fixture(args.fixture)
            print(json.dumps(fixture.run(), indent=2))

    except FixtureError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
