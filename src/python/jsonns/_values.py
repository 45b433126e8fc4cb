"""Shared helpers for walking JSON values and classifying names."""

from typing import Any, Iterator


def one_or_many(value: Any) -> Iterator[Any]:
    """Iterate a value that may or may not be a list.

    A list yields its items in order, anything else (``None`` included)
    is yielded once.
    """
    if isinstance(value, list):
        yield from value
    else:
        yield value


def is_keyword(name: str) -> bool:
    """Whether the name is a keyword such as ``@id``."""
    return name.startswith("@")


def is_absolute_iri(value: str) -> bool:
    """Whether the value is usable as an absolute IRI."""
    return ":" in value and not value.startswith("@")


def is_curie_prefix(value: str) -> bool:
    """Whether the value is usable as a CURIE prefix."""
    return bool(value) and ":" not in value and not value.startswith("@")
