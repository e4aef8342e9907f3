"""Query DSL lookup front end.

This module defines the `Q` node used to author filter expressions with
keyword lookups. A `Q` resolves its lookups into expression nodes at
construction time, so malformed lookups fail immediately, and renders like
any other node.

Typical usage:

- Build filters: `Q(age__gte=18) & Q(age__lte=30)`
- Negate: `~Q(is_active=True)`
- Render: `Q(category__in=["tech", "food"]).render()`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from crossquery.constants import JoinMode
from crossquery.exceptions import InvalidFieldError
from crossquery.types import Fragment

from .compilers.utils import filters_join
from .nodes import RANGE_BOUNDS, Exists, Node, Not, Range, Term


@dataclass(frozen=True, init=False)
class Q(Node):
    """Composable lookup node.

    Filter keys follow the `field__lookup` convention where lookup is one
    of: `eq`, `ne`, `in`, `nin`, `gt`, `gte`, `lt`, `lte`, `exists`.
    A key without a known lookup is an equality on the whole key; `__`
    inside field names becomes `.` for nested paths.

    Several lookups are joined with `and`; range lookups on one field are
    merged into a single range.
    """

    _LOOKUPS = {"eq", "ne", "in", "nin", "gt", "gte", "lt", "lte", "exists"}

    lookups: Tuple[Tuple[str, Any], ...]
    nodes: Tuple[Node, ...]

    def __init__(self, **lookups: Any) -> None:
        """Initialize a `Q` node from `field__lookup=value` pairs."""
        if not lookups:
            raise InvalidFieldError("Q requires at least one lookup")
        object.__setattr__(self, "lookups", tuple(lookups.items()))
        object.__setattr__(self, "nodes", self._resolve(lookups))

    def __repr__(self) -> str:
        return f"<Q: {self.render()}>"

    @classmethod
    def _split(cls, key: str) -> Tuple[str, str]:
        # Split from the right to get the lookup operator
        # e.g., "info__lang__eq" -> field="info.lang", lookup="eq"
        if "__" in key:
            field, lookup = key.rsplit("__", 1)
            if lookup in cls._LOOKUPS:
                return field.replace("__", "."), lookup
        return key.replace("__", "."), "eq"

    @classmethod
    def _resolve(cls, lookups: Dict[str, Any]) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        ranges: Dict[str, Dict[str, Any]] = {}
        for key, value in lookups.items():
            field, lookup = cls._split(key)
            if lookup in RANGE_BOUNDS:
                if field not in ranges:
                    ranges[field] = {}
                    nodes.append(Range(field, ((lookup, value),)))  # placeholder keeps position
                ranges[field][lookup] = value
            elif lookup in ("in", "nin"):
                if not isinstance(value, (list, tuple)):
                    raise InvalidFieldError(
                        f"Lookup '{lookup}' expects a list or tuple", field=field, got=type(value).__name__
                    )
                node = Term(field, list(value))
                nodes.append(node if lookup == "in" else Not(node))
            elif lookup == "exists":
                if not isinstance(value, bool):
                    raise InvalidFieldError("Lookup 'exists' expects a bool", field=field, got=type(value).__name__)
                node = Exists(field)
                nodes.append(node if value else Not(node))
            elif lookup == "ne":
                nodes.append(Not(Term(field, value)))
            else:
                nodes.append(Term(field, value))
        return tuple(
            Range(node.field, tuple(ranges[node.field].items())) if isinstance(node, Range) else node
            for node in nodes
        )

    def render(self) -> Fragment:
        return filters_join([node.render() for node in self.nodes], JoinMode.AND)
