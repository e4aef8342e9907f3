"""Expression node tree.

Immutable boolean/term/range/script expression nodes. Each node renders to
exactly one request fragment; rendering is pure and can be repeated.

Typical usage:

- Build: `term("name", "Moscow") & range_("population", gte=1000000)`
- Negate: `~exists("deleted_at")`
- Cache: `(term("a", 1) | term("b", 2)).cached()`
- Render: `node.render()`
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from crossquery.constants import JoinMode
from crossquery.exceptions import InvalidFieldError
from crossquery.types import Fragment

from .compilers.utils import filters_join

__all__ = (
    "Node",
    "Term",
    "Range",
    "Exists",
    "Script",
    "And",
    "Or",
    "Not",
    "Cached",
    "Raw",
    "term",
    "range_",
    "exists",
    "script",
    "raw",
    "and_",
    "or_",
    "not_",
    "cached",
    "render",
)

RANGE_BOUNDS = ("gt", "gte", "lt", "lte")


def _check_field(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidFieldError("Field name must be a non-empty string", field=name)
    return name


@dataclass(frozen=True)
class Node:
    """Base expression node.

    - Use `&` to combine with logical AND.
    - Use `|` to combine with logical OR.
    - Use `~` to negate a node.
    - Use `.cached()` to mark a node as a cacheable filter.
    """

    def render(self) -> Fragment:
        raise NotImplementedError

    def to_dict(self) -> Fragment:
        """Alias of `render` for callers expecting the dict protocol."""
        return self.render()

    def cached(self) -> "Cached":
        return Cached(self)

    def __and__(self, other: "Node") -> "And":
        return And(_children(self, And) + _children(_as_node(other), And))

    def __or__(self, other: "Node") -> "Or":
        return Or(_children(self, Or) + _children(_as_node(other), Or))

    def __invert__(self) -> "Node":
        return Not(self)

    def __str__(self) -> str:
        return str(self.render())


def _as_node(value: Any) -> Node:
    if isinstance(value, Node):
        return value
    if isinstance(value, Mapping):
        return Raw(value)
    raise InvalidFieldError("Cannot combine with a non-node value", got=type(value).__name__)


def _check_children(node: "Node") -> None:
    if not node.nodes:
        raise InvalidFieldError(f"{type(node).__name__} requires at least one node")
    object.__setattr__(node, "nodes", tuple(node.nodes))


def _children(node: Node, kind: type) -> Tuple[Node, ...]:
    # flatten same-kind composites so a & b & c is one And
    if type(node) is kind:
        return node.nodes
    return (node,)


@dataclass(frozen=True)
class Term(Node):
    """Equality on a field; a list or tuple value renders as `terms`."""

    field: str
    value: Any

    def __post_init__(self) -> None:
        _check_field(self.field)
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))

    def render(self) -> Fragment:
        if isinstance(self.value, tuple):
            return {"terms": {self.field: list(self.value)}}
        return {"term": {self.field: self.value}}


@dataclass(frozen=True)
class Range(Node):
    field: str
    bounds: Tuple[Tuple[str, Any], ...]

    def __post_init__(self) -> None:
        _check_field(self.field)
        bounds = tuple(dict(self.bounds).items()) if isinstance(self.bounds, Mapping) else tuple(self.bounds)
        if not bounds:
            raise InvalidFieldError("Range requires at least one bound", field=self.field)
        for bound, value in bounds:
            if bound not in RANGE_BOUNDS:
                raise InvalidFieldError(
                    f"Range bound {bound!r} is not supported. Supported: {', '.join(RANGE_BOUNDS)}",
                    field=self.field,
                )
            if value is None:
                raise InvalidFieldError("Range bound value cannot be None", field=self.field, bound=bound)
        object.__setattr__(self, "bounds", bounds)

    def render(self) -> Fragment:
        return {"range": {self.field: dict(self.bounds)}}


@dataclass(frozen=True)
class Exists(Node):
    field: str

    def __post_init__(self) -> None:
        _check_field(self.field)

    def render(self) -> Fragment:
        return {"exists": {"field": self.field}}


@dataclass(frozen=True)
class Script(Node):
    """Script filter with optional params."""

    source: str
    params: Tuple[Tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.source, str) or not self.source.strip():
            raise InvalidFieldError("Script source must be a non-empty string", script=self.source)
        if isinstance(self.params, Mapping):
            object.__setattr__(self, "params", tuple(self.params.items()))

    def render(self) -> Fragment:
        body: Dict[str, Any] = {"script": self.source}
        if self.params:
            body["params"] = deepcopy(dict(self.params))
        return {"script": body}


@dataclass(frozen=True)
class And(Node):
    nodes: Tuple[Node, ...]

    def __post_init__(self) -> None:
        _check_children(self)

    def render(self) -> Fragment:
        return filters_join([node.render() for node in self.nodes], JoinMode.AND) or {}


@dataclass(frozen=True)
class Or(Node):
    nodes: Tuple[Node, ...]

    def __post_init__(self) -> None:
        _check_children(self)

    def render(self) -> Fragment:
        return filters_join([node.render() for node in self.nodes], JoinMode.OR) or {}


@dataclass(frozen=True)
class Not(Node):
    node: Node

    def __invert__(self) -> Node:
        return self.node

    def render(self) -> Fragment:
        if isinstance(self.node, Cached):
            return self.render_cached(self.node.node)
        return {"not": self.node.render()}

    @staticmethod
    def render_cached(node: Node) -> Fragment:
        return {"not": {"filter": node.render()}, "_cache": True}


@dataclass(frozen=True)
class Cached(Node):
    """Cacheable filter wrapper.

    Adds `_cache: true` next to the inner fragment's parameters, e.g.
    `{"and": {"filters": [...], "_cache": true}}`.
    """

    node: Node

    def cached(self) -> "Cached":
        return self

    def render(self) -> Fragment:
        if isinstance(self.node, Not):
            return Not.render_cached(self.node.node)
        fragment = self.node.render()
        if len(fragment) == 1:
            (key, body), = fragment.items()
            if isinstance(body, dict):
                return {key: {**body, "_cache": True}}
        return {**fragment, "_cache": True}


@dataclass(frozen=True)
class Raw(Node):
    """Verbatim fragment, rendered as a deep copy."""

    fragment: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.fragment, Mapping):
            raise InvalidFieldError("Raw fragment must be a mapping", got=type(self.fragment).__name__)
        object.__setattr__(self, "fragment", deepcopy(dict(self.fragment)))

    def __hash__(self) -> int:
        return hash(repr(self.fragment))

    def render(self) -> Fragment:
        return deepcopy(dict(self.fragment))


# -------------------
# Builders
# -------------------


def term(field: str, value: Any) -> Term:
    return Term(field, value)


def range_(field: str, **bounds: Any) -> Range:
    return Range(field, tuple(bounds.items()))


def exists(field: str) -> Exists:
    return Exists(field)


def script(source: str, params: Optional[Mapping[str, Any]] = None) -> Script:
    return Script(source, tuple((params or {}).items()))


def raw(fragment: Mapping[str, Any]) -> Raw:
    return Raw(fragment)


def and_(*nodes: Node) -> And:
    return And(tuple(_as_node(node) for node in nodes))


def or_(*nodes: Node) -> Or:
    return Or(tuple(_as_node(node) for node in nodes))


def not_(node: Node) -> Not:
    return Not(_as_node(node))


def cached(node: Node) -> Cached:
    return Cached(_as_node(node))


def render(node: Node) -> Fragment:
    """Render a node to its request fragment."""
    return node.render()
