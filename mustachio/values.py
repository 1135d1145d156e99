"""Template data values and the adapter from generic (JSON-shaped) trees.

Every value a template can see is one of four immutable shapes:

    Null      - absent or explicit null
    Scalar    - a string; numbers and booleans are canonicalized to text
    Sequence  - an ordered tuple of values
    Mapping   - string keys to values, insertion ordered and read-only
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union


@dataclass(frozen=True)
class Null:
    """The null value."""

    def pretty(self) -> str:
        return "null"


@dataclass(frozen=True)
class Scalar:
    """A scalar value held as its canonical text."""

    value: str

    def pretty(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Sequence:
    """An ordered list of values."""

    items: tuple["Value", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def pretty(self) -> str:
        return "[" + ", ".join(item.pretty() for item in self.items) + "]"


@dataclass(frozen=True)
class Mapping:
    """String-keyed values; key order is preserved."""

    fields: "MappingProxyType[str, Value]" = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self) -> int:
        return hash(tuple(self.fields.items()))

    def pretty(self) -> str:
        inner = ", ".join(f'"{key}": {value.pretty()}' for key, value in self.fields.items())
        return "{" + inner + "}"


Value = Union[Null, Scalar, Sequence, Mapping]

NULL = Null()
EMPTY = Mapping()


def lookup(value: Value, path: str) -> Value | None:
    """Resolve a dotted path against a value.

    Examples:
        lookup(obj(a=obj(b=string("1"))), "a.b") -> Scalar("1")
        lookup(string("x"), ".") -> Scalar("x")
        lookup(obj(a=string("1")), "a.b") -> None

    Only the whole path "." means the value itself; there is no
    fallback to a shorter prefix when a segment is missing.
    """
    if path == ".":
        return value

    current: Value | None = value
    for segment in path.strip().split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.fields.get(segment)
        if current is None:
            return None
    return current


def format_scalar(value: Any) -> str:
    """Canonical text for a scalar: integral numbers print without a fraction."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def unescape(text: str) -> str:
    """Turn literal backslash-n/r/t sequences into control characters."""
    return text.replace("\\n", "\n").replace("\\r", "\r").replace("\\t", "\t")


def from_external_tree(tree: Any) -> Value:
    """Convert a generic tree (as produced by ``json.loads``) into a Value.

    Never fails: anything that is not null, a list or a dict becomes a
    Scalar of its canonical text.
    """
    if tree is None:
        return NULL
    if isinstance(tree, str):
        return Scalar(unescape(tree))
    if isinstance(tree, dict):
        return Mapping({str(key): from_external_tree(item) for key, item in tree.items()})
    if isinstance(tree, (list, tuple)):
        return Sequence(tuple(from_external_tree(item) for item in tree))
    return Scalar(format_scalar(tree))


def from_json(text: str) -> Value:
    """Parse JSON text and convert it into a Value."""
    return from_external_tree(json.loads(text))


def string(value: str) -> Scalar:
    return Scalar(value)


def arr(*items: Value) -> Sequence:
    return Sequence(items)


def obj(*pairs: tuple[str, Value], **fields: Value) -> Mapping:
    """Build a Mapping from ``(key, value)`` pairs and/or keyword arguments."""
    return Mapping({**dict(pairs), **fields})


def pretty_print(value: Value) -> None:
    print(value.pretty())
