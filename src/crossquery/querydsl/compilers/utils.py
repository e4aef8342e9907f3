"""Compiler utility functions.

Holds the join policy shared by expression node rendering and criteria
compilation. Every join follows the same arity rule: no clauses gives
`None`, one clause is returned as is, two or more are wrapped. `None`
entries and empty fragments do not count as clauses.
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from crossquery.constants import BOOL_JOIN_MODES, JoinMode
from crossquery.types import Fragment, JoinModeValue


def normalize_clause(clause: Any) -> Fragment:
    """Normalize an expression node or mapping to a standalone fragment.

    Args:
        clause: Node (with a `.render()` method) or mapping

    Returns:
        A fragment sharing no mutable state with the input

    Raises:
        TypeError: If input is neither a node nor a mapping
    """
    if hasattr(clause, "render") and callable(clause.render):
        return clause.render()
    elif isinstance(clause, Mapping):
        return deepcopy(dict(clause))
    else:
        raise TypeError(f"clause must be an expression node or mapping, got {type(clause).__name__}")


def normalize_clauses(clauses: Iterable[Any]) -> List[Optional[Fragment]]:
    """Render a clause list, passing `None` placeholders through."""
    return [None if clause is None else normalize_clause(clause) for clause in clauses]


def _present(fragments: Iterable[Optional[Fragment]]) -> List[Fragment]:
    return [fragment for fragment in fragments if fragment]


def _needs_wrap(fragments: List[Fragment], mode: JoinModeValue) -> bool:
    # a lone must_not clause keeps its wrapper, unwrapping would drop the negation
    return len(fragments) > 1 or (len(fragments) == 1 and mode == JoinMode.MUST_NOT)


def queries_join(queries: Iterable[Optional[Fragment]], mode: JoinModeValue) -> Optional[Fragment]:
    """Join query fragments under a query mode.

    Args:
        queries: Rendered query fragments, `None` and empty entries are ignored
        mode: `must`, `should`, `must_not`, `dis_max`, `and`, `or`, a float
            tie breaker or a minimum_should_match value

    Returns:
        The joined fragment, or `None` when there is nothing to join
    """
    queries = _present(queries)
    if not _needs_wrap(queries, mode):
        return queries[0] if queries else None

    if mode == JoinMode.DIS_MAX:
        return {"dis_max": {"queries": queries}}
    if mode in BOOL_JOIN_MODES:
        return {"bool": {mode: queries}}
    if mode in (JoinMode.AND, JoinMode.OR):
        return {mode: {"queries": queries}}
    if isinstance(mode, float):
        return {"dis_max": {"queries": queries, "tie_breaker": mode}}
    return {"bool": {"should": queries, "minimum_should_match": mode}}


def filters_join(filters: Iterable[Optional[Fragment]], mode: JoinModeValue) -> Optional[Fragment]:
    """Join filter fragments under a filter mode.

    Args:
        filters: Rendered filter fragments, `None` and empty entries are ignored
        mode: `and`, `or`, `must`, `should`, `must_not` or a minimum_should_match value

    Returns:
        The joined fragment, or `None` when there is nothing to join
    """
    filters = _present(filters)
    if not _needs_wrap(filters, mode):
        return filters[0] if filters else None

    if mode in (JoinMode.AND, JoinMode.OR):
        return {mode: {"filters": filters}}
    if mode in BOOL_JOIN_MODES:
        return {"bool": {mode: filters}}
    return {"bool": {"should": filters, "minimum_should_match": mode}}


def filtered_query(
    query: Optional[Fragment], filter: Optional[Fragment], strategy: Optional[Any] = None
) -> Dict[str, Any]:
    """Build the base request body from a joined query and filter.

    - query and filter: `{"query": {"filtered": {"query": ..., "filter": ...}}}`
    - query only: `{"query": ...}`
    - filter only: `{"filter": ...}`
    - neither: `{}`
    """
    if query is not None and filter is not None:
        filtered: Dict[str, Any] = {"query": query, "filter": filter}
        if strategy:
            filtered["strategy"] = str(strategy)
        return {"query": {"filtered": filtered}}
    if query is not None:
        return {"query": query}
    if filter is not None:
        return {"filter": filter}
    return {}
