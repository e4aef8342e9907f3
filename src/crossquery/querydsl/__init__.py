"""Query DSL module.

Exports expression nodes, the `Q` lookup node, the `Criteria` accumulator
and the chainable `Search` front end. Compilation into request documents
is handled by the `compilers` subpackage.
"""

from .criteria import Criteria
from .nodes import (
    And,
    Cached,
    Exists,
    Node,
    Not,
    Or,
    Range,
    Raw,
    Script,
    Term,
    and_,
    cached,
    exists,
    not_,
    or_,
    range_,
    raw,
    render,
    script,
    term,
)
from .q import Q
from .search import Search

__all__ = (
    "Criteria",
    "Search",
    "Q",
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
