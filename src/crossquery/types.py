"""Type aliases for crossquery package.

This module provides reusable type definitions to ensure consistency
across the codebase and improve code readability.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Union

if TYPE_CHECKING:
    from .querydsl.nodes import Node

# Rendered request fragment, e.g. {"term": {"name": "x"}}
Fragment = Dict[str, Any]

# Compiled request document, always {"body": {...}}
Document = Dict[str, Any]

# Join mode: a mode name, a tie breaker (float) or a minimum_should_match value
JoinModeValue = Union[str, int, float]

# Anything accepted in a query, filter or post filter storage
Clause = Union["Node", Mapping[str, Any]]
