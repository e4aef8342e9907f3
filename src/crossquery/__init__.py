"""
This __init__.py file makes the crossquery directory a Python package
and exposes the criteria, search builder and expression nodes for easy access.
"""

from .querydsl import Criteria, Q, Search
from .querydsl.nodes import Node
from .settings import QueryConfig
from .types import Clause, Document, Fragment

__version__ = "0.1.0"

__all__ = [
    "Criteria",
    "Search",
    "Q",
    "Node",
    "QueryConfig",
    "Clause",
    "Document",
    "Fragment",
]
