"""Chainable search front end.

`Search` wraps a `Criteria` and clones it on every call, so a search can be
refined step by step without affecting earlier steps:

    base = Search().types("city").filter(Q(country="ru"))
    big = base.filter(Q(population__gte=1000000)).order({"population": "desc"})
    big.to_request()  # base is unchanged
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from crossquery.constants import Option
from crossquery.exceptions import InvalidConfigError, InvalidFieldError
from crossquery.settings import QueryConfig, validate_join_mode
from crossquery.types import Clause, Document, JoinModeValue

from .compilers.utils import normalize_clause
from .criteria import Criteria

__all__ = ("Search",)

DECAY_FUNCTIONS = ("gauss", "exp", "linear")


class Search:
    """Immutable builder over a `Criteria`.

    Every method returns a new `Search`; the receiver is never modified.
    """

    def __init__(self, config: Optional[QueryConfig] = None, criteria: Optional[Criteria] = None) -> None:
        self._config = config
        self.criteria = criteria if criteria is not None else Criteria(config=config)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Search):
            return NotImplemented
        return self.criteria == other.criteria

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Search: {self.to_request()}>"

    def _chain(self, storage: str, modifier: Any, **kwargs: Any) -> "Search":
        criteria = self.criteria.clone()
        getattr(criteria, f"update_{storage}")(modifier, **kwargs)
        return self.__class__(config=self._config, criteria=criteria)

    def _mode(self, option: str, value: JoinModeValue) -> "Search":
        try:
            value = validate_join_mode(value)
        except ValueError as exc:
            raise InvalidConfigError(str(exc), option=option, value=value) from exc
        return self._chain("options", {option: value})

    # -------------------
    # Clauses
    # -------------------

    def query(self, *clauses: Clause) -> "Search":
        return self._chain("queries", list(clauses))

    def filter(self, *clauses: Clause) -> "Search":
        return self._chain("filters", list(clauses))

    def post_filter(self, *clauses: Clause) -> "Search":
        return self._chain("post_filters", list(clauses))

    # -------------------
    # Modes and options
    # -------------------

    def query_mode(self, value: JoinModeValue) -> "Search":
        return self._mode(Option.QUERY_MODE, value)

    def filter_mode(self, value: JoinModeValue) -> "Search":
        return self._mode(Option.FILTER_MODE, value)

    def post_filter_mode(self, value: JoinModeValue) -> "Search":
        return self._mode(Option.POST_FILTER_MODE, value)

    def boost_mode(self, value: str) -> "Search":
        return self._chain("options", {Option.BOOST_MODE: value})

    def score_mode(self, value: str) -> "Search":
        return self._chain("options", {Option.SCORE_MODE: value})

    def strategy(self, value: str) -> "Search":
        """Set the `filtered` query strategy, e.g. `leap_frog` or `query_first`."""
        return self._chain("options", {Option.STRATEGY: value})

    def none(self) -> "Search":
        """Mark the search as matching nothing."""
        return self._chain("options", {Option.NONE: True})

    @property
    def is_none(self) -> bool:
        return self.criteria.is_none()

    def simple(self) -> "Search":
        return self._chain("options", {Option.SIMPLE: True})

    # -------------------
    # Selection
    # -------------------

    def types(self, *names: str) -> "Search":
        return self._chain("types", list(names))

    def only(self, *fields: str) -> "Search":
        return self._chain("fields", list(fields))

    def only_exactly(self, *fields: str) -> "Search":
        return self._chain("fields", list(fields), purge=True)

    def order(self, *specs: Any) -> "Search":
        return self._chain("sort", list(specs))

    def reorder(self, *specs: Any) -> "Search":
        return self._chain("sort", list(specs), purge=True)

    def limit(self, value: int) -> "Search":
        return self._chain("request_options", {"size": int(value)})

    def offset(self, value: int) -> "Search":
        return self._chain("request_options", {"from": int(value)})

    def request(self, **options: Any) -> "Search":
        """Pass extra top-level request keys, e.g. `explain=True`."""
        return self._chain("request_options", options)

    # -------------------
    # Extras
    # -------------------

    def facets(self, params: Mapping[str, Any]) -> "Search":
        return self._chain("facets", params)

    def aggregations(self, params: Mapping[str, Any]) -> "Search":
        return self._chain("aggregations", params)

    aggs = aggregations

    def suggest(self, params: Mapping[str, Any]) -> "Search":
        return self._chain("suggest", params)

    def script_fields(self, params: Mapping[str, Any]) -> "Search":
        return self._chain("script_fields", params)

    # -------------------
    # Scoring functions
    # -------------------

    def _score(self, function: Dict[str, Any], filter: Optional[Clause]) -> "Search":
        if filter is not None:
            function["filter"] = normalize_clause(filter)
        return self._chain("scores", [function])

    def boost_factor(self, factor: float, filter: Optional[Clause] = None) -> "Search":
        return self._score({"boost_factor": factor}, filter)

    def weight(self, value: float, filter: Optional[Clause] = None) -> "Search":
        return self._score({"weight": value}, filter)

    def random_score(self, seed: int, filter: Optional[Clause] = None) -> "Search":
        return self._score({"random_score": {"seed": seed}}, filter)

    def script_score(
        self, script: str, params: Optional[Mapping[str, Any]] = None, filter: Optional[Clause] = None
    ) -> "Search":
        body: Dict[str, Any] = {"script": script}
        if params:
            body["params"] = dict(params)
        return self._score({"script_score": body}, filter)

    def field_value_factor(self, settings: Mapping[str, Any], filter: Optional[Clause] = None) -> "Search":
        return self._score({"field_value_factor": dict(settings)}, filter)

    def decay(
        self,
        function: str,
        field: str,
        origin: Any,
        scale: Any,
        offset: Any = None,
        decay: Optional[float] = None,
        filter: Optional[Clause] = None,
    ) -> "Search":
        """Add a decay scoring function (`gauss`, `exp` or `linear`)."""
        if function not in DECAY_FUNCTIONS:
            raise InvalidFieldError(
                f"Decay function {function!r} is not supported. Supported: {', '.join(DECAY_FUNCTIONS)}",
                field=field,
            )
        params: Dict[str, Any] = {"origin": origin, "scale": scale}
        if offset is not None:
            params["offset"] = offset
        if decay is not None:
            params["decay"] = decay
        return self._score({function: {field: params}}, filter)

    # -------------------
    # Merge / compile
    # -------------------

    def merge(self, other: "Search") -> "Search":
        return self.__class__(config=self._config, criteria=self.criteria.merge(other.criteria))

    def __and__(self, other: "Search") -> "Search":
        return self.merge(other)

    def to_request(self) -> Document:
        return self.criteria.compile()
