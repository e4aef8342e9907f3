"""Search criteria accumulator.

A `Criteria` collects query, filter and post filter clauses, sort, field and
type selectors, scoring functions, facets, aggregations, suggesters, script
fields and options, then compiles them into one request document.

Storages come in two kinds:

- list storages (`queries`, `filters`, `post_filters`, `sort`, `fields`,
  `types`, `scores`) keep insertion order;
- map storages (`options`, `request_options`, `facets`, `aggregations`,
  `suggest`, `script_fields`) merge by key overwrite.

Every update validates its whole patch before touching state, so a
rejected patch leaves the criteria unchanged. Update methods return the
criteria itself for chaining.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable, Dict, List, Mapping, Optional

from crossquery.constants import ARRAY_STORAGES, HASH_STORAGES, STORAGES, Option
from crossquery.exceptions import InvalidPatchError
from crossquery.logger import Logger
from crossquery.settings import QueryConfig
from crossquery.types import Document
from crossquery.utils import expand_sort, normalize_list_patch, normalize_name_patch, union

from .compilers.request import search_request
from .nodes import Node

__all__ = ("Criteria",)


class _Storage:
    """Lazily defaulting storage slot.

    Reading a slot that was never written creates its empty value, so a slot
    is never `None` once accessed.
    """

    def __init__(self, factory: Callable[[], Any]) -> None:
        self.factory = factory

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.attr = f"_{name}"

    def __get__(self, instance: Optional["Criteria"], owner: type) -> Any:
        if instance is None:
            return self
        value = instance.__dict__.get(self.attr)
        if value is None:
            value = self.factory()
            instance.__dict__[self.attr] = value
        return value

    def __set__(self, instance: "Criteria", value: Any) -> None:
        instance.__dict__[self.attr] = value


class Criteria:
    """Mutable, mergeable search criteria.

    Not safe for concurrent mutation; hand a `clone()` across threads
    instead of sharing one instance.
    """

    queries: List[Any] = _Storage(list)
    filters: List[Any] = _Storage(list)
    post_filters: List[Any] = _Storage(list)
    sort: List[Any] = _Storage(list)
    fields: List[str] = _Storage(list)
    types: List[str] = _Storage(list)
    scores: List[Any] = _Storage(list)

    options: Dict[str, Any] = _Storage(dict)
    request_options: Dict[str, Any] = _Storage(dict)
    facets: Dict[str, Any] = _Storage(dict)
    aggregations: Dict[str, Any] = _Storage(dict)
    suggest: Dict[str, Any] = _Storage(dict)
    script_fields: Dict[str, Any] = _Storage(dict)

    def __init__(self, options: Optional[Mapping[str, Any]] = None, config: Optional[QueryConfig] = None) -> None:
        """Initialize criteria.

        Args:
            options: Option seed, overrides the configured join modes
            config: Join mode defaults; resolved from settings when omitted
        """
        if options is not None and not isinstance(options, Mapping):
            raise InvalidPatchError("Options must be a mapping", storage="options", got=type(options).__name__)
        config = config or QueryConfig.from_settings()
        self.options = {**config.default_options(), **(options or {})}
        self.logger = Logger(self.__class__.__name__)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Criteria):
            return NotImplemented
        return self.storages() == other.storages()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        present = {storage: getattr(self, storage) for storage in STORAGES if self.has(storage)}
        return f"<Criteria: {present}>"

    def storages(self) -> Dict[str, Any]:
        return {storage: getattr(self, storage) for storage in STORAGES}

    def has(self, storage: str) -> bool:
        """Return True when the named storage holds anything."""
        if storage not in STORAGES:
            raise KeyError(storage)
        return len(getattr(self, storage)) > 0

    def is_none(self) -> bool:
        """Return True when the criteria is marked to match nothing."""
        return bool(self.options.get(Option.NONE))

    # -------------------
    # Generic updaters
    # -------------------

    def _merge_map(self, storage: str, patch: Any) -> "Criteria":
        if patch is None:
            return self
        if not isinstance(patch, Mapping):
            raise InvalidPatchError(
                f"Storage '{storage}' expects a mapping patch", storage=storage, got=type(patch).__name__
            )
        getattr(self, storage).update(patch)
        return self

    def _append_clauses(self, storage: str, patch: Any) -> "Criteria":
        items = normalize_list_patch(patch)
        for item in items:
            if not isinstance(item, (Node, Mapping)):
                raise InvalidPatchError(
                    f"Storage '{storage}' expects expression nodes or mappings",
                    storage=storage,
                    got=type(item).__name__,
                )
        setattr(self, storage, getattr(self, storage) + items)
        return self

    def _union_names(self, storage: str, patch: Any, purge: bool) -> "Criteria":
        names = normalize_name_patch(patch)
        existing = [] if purge else getattr(self, storage)
        setattr(self, storage, union(existing, names))
        return self

    # -------------------
    # Map storages
    # -------------------

    def update_options(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("options", modifier)

    def update_request_options(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("request_options", modifier)

    def update_facets(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("facets", modifier)

    def update_aggregations(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("aggregations", modifier)

    def update_suggest(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("suggest", modifier)

    def update_script_fields(self, modifier: Mapping[str, Any]) -> "Criteria":
        return self._merge_map("script_fields", modifier)

    # -------------------
    # List storages
    # -------------------

    def update_scores(self, modifier: Any) -> "Criteria":
        self.scores = self.scores + normalize_list_patch(modifier)
        return self

    def update_queries(self, modifier: Any) -> "Criteria":
        return self._append_clauses("queries", modifier)

    def update_filters(self, modifier: Any) -> "Criteria":
        return self._append_clauses("filters", modifier)

    def update_post_filters(self, modifier: Any) -> "Criteria":
        return self._append_clauses("post_filters", modifier)

    def update_sort(self, modifier: Any, purge: bool = False) -> "Criteria":
        specs = expand_sort(modifier)
        self.sort = ([] if purge else self.sort) + specs
        return self

    def update_fields(self, modifier: Any, purge: bool = False) -> "Criteria":
        return self._union_names("fields", modifier, purge)

    def update_types(self, modifier: Any, purge: bool = False) -> "Criteria":
        return self._union_names("types", modifier, purge)

    # -------------------
    # Merge / clone
    # -------------------

    def merge(self, other: "Criteria", inplace: bool = False) -> "Criteria":
        """Merge `other` slot by slot using each storage's own update rule.

        Args:
            other: Criteria to merge in, never mutated
            inplace: Mutate and return this criteria instead of a merged clone
        """
        if not inplace:
            return self.clone().merge(other, inplace=True)
        if not isinstance(other, Criteria):
            raise InvalidPatchError("Can only merge another Criteria", got=type(other).__name__)
        for storage in STORAGES:
            getattr(self, f"update_{storage}")(deepcopy(getattr(other, storage)))
        self.logger.debug("Merged criteria, storages now present: %s", [s for s in STORAGES if self.has(s)])
        return self

    def clone(self) -> "Criteria":
        """Return an independent deep copy of every storage."""
        copy = self.__class__.__new__(self.__class__)
        for storage in ARRAY_STORAGES + HASH_STORAGES:
            setattr(copy, storage, deepcopy(getattr(self, storage)))
        copy.logger = self.logger
        return copy

    __copy__ = clone

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Criteria":
        return self.clone()

    # -------------------
    # Compile
    # -------------------

    def compile(self) -> Document:
        """Compile into a `{"body": {...}}` request document.

        Does not mutate the criteria; may be called any number of times.
        """
        return search_request.compile(self)

    request_body = compile
