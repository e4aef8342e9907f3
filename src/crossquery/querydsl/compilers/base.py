"""Base compiler interface.

Defines the abstract contract for compilers turning accumulated criteria
into a request document.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from crossquery.types import Document

if TYPE_CHECKING:
    from crossquery.querydsl.criteria import Criteria

__all__ = ("BaseCompiler",)


class BaseCompiler(ABC):
    """Abstract base class for request compilers.

    Subclasses implement `compile` to produce a `{"body": {...}}` document.
    Compilation must not mutate the criteria.
    """

    @abstractmethod
    def compile(self, criteria: "Criteria") -> Document:
        """Convert criteria into a request document."""
        raise NotImplementedError
