"""Search request compiler.

Transforms a `Criteria` into the request document handed to a search
transport:

- queries and filters are joined under their configured modes;
- `types` become an `or` of type filters and-combined with the filters;
- query and filter fold into a `filtered` query (or a bare key when only
  one is present);
- unless `simple` is set, post filter, facets, aggregations, suggest,
  sort, `_source` and script fields are attached in that order;
- scoring functions wrap the query into `function_score`;
- `request_options` are merged last and win over body keys.
"""

from copy import deepcopy
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from crossquery.constants import JoinMode, Option
from crossquery.logger import Logger
from crossquery.types import Document, Fragment

from .base import BaseCompiler
from .utils import filtered_query, filters_join, normalize_clauses, queries_join

if TYPE_CHECKING:
    from crossquery.querydsl.criteria import Criteria

__all__ = (
    "SearchRequestCompiler",
    "search_request",
)


class SearchRequestCompiler(BaseCompiler):
    """Compile criteria into a search request body.

    Body keys and the order they are attached in:
    `query`/`filter`, `post_filter`, `facets`, `aggregations`, `suggest`,
    `sort`, `_source`, `script_fields`, then `request_options` keys.
    """

    def __init__(self) -> None:
        self.logger = Logger(self.__class__.__name__)

    def compile(self, criteria: "Criteria") -> Document:
        """Convert criteria into a `{"body": {...}}` document.

        Args:
            criteria: Criteria to compile, left untouched

        Returns:
            The request document, sharing no mutable state with `criteria`
        """
        options = criteria.options
        body = filtered_query(
            self.request_query(criteria), self.request_filter(criteria), options.get(Option.STRATEGY)
        )

        if options.get(Option.SIMPLE):
            return {"body": body or {"query": {"match_all": {}}}}

        post_filter = self.request_post_filter(criteria)
        if post_filter is not None:
            body["post_filter"] = post_filter
        if criteria.has("facets"):
            body["facets"] = deepcopy(criteria.facets)
        if criteria.has("aggregations"):
            body["aggregations"] = deepcopy(criteria.aggregations)
        if criteria.has("suggest"):
            body["suggest"] = deepcopy(criteria.suggest)
        if criteria.has("sort"):
            body["sort"] = deepcopy(criteria.sort)
        if criteria.has("fields"):
            body["_source"] = list(criteria.fields)
        if criteria.has("script_fields"):
            body["script_fields"] = deepcopy(criteria.script_fields)

        body = self.boost_query(body, criteria.scores, options)
        body.update(deepcopy(criteria.request_options))

        self.logger.debug("Compiled request body with keys: %s", list(body))
        return {"body": body}

    def request_query(self, criteria: "Criteria") -> Optional[Fragment]:
        return queries_join(normalize_clauses(criteria.queries), criteria.options.get(Option.QUERY_MODE))

    def request_filter(self, criteria: "Criteria") -> Optional[Fragment]:
        """Join filters and the type filter into one filter fragment.

        Under `and` mode every filter stays a sibling of the type filter;
        any other mode joins the filters first and and-combines the result.
        """
        filter_mode = criteria.options.get(Option.FILTER_MODE)
        filters = normalize_clauses(criteria.filters)
        if filter_mode == JoinMode.AND:
            request_filter = filters
        else:
            request_filter = [filters_join(filters, filter_mode)]

        return filters_join([self.request_types(criteria), *request_filter], JoinMode.AND)

    def request_types(self, criteria: "Criteria") -> Optional[Fragment]:
        return filters_join([{"type": {"value": type_name}} for type_name in criteria.types], JoinMode.OR)

    def request_post_filter(self, criteria: "Criteria") -> Optional[Fragment]:
        options = criteria.options
        mode = options.get(Option.POST_FILTER_MODE)
        if mode is None:
            mode = options.get(Option.FILTER_MODE)
        return filters_join(normalize_clauses(criteria.post_filters), mode)

    def boost_query(self, body: Dict[str, Any], scores: List[Any], options: Dict[str, Any]) -> Dict[str, Any]:
        """Wrap the body's query and filter into a `function_score` query.

        No-op without scoring functions. When both a query and a filter are
        present they are folded into a `filtered` query first, so no
        top-level `filter` key remains.
        """
        if not scores:
            return body
        query = body.pop("query", None)
        filter = body.pop("filter", None)
        if query is not None and filter is not None:
            query = {"filtered": {"query": query, "filter": filter}}
            filter = None

        score: Dict[str, Any] = {"functions": deepcopy(list(scores))}
        if options.get(Option.BOOST_MODE):
            score["boost_mode"] = options[Option.BOOST_MODE]
        if options.get(Option.SCORE_MODE):
            score["score_mode"] = options[Option.SCORE_MODE]
        if query is not None:
            score["query"] = query
        if filter is not None:
            score["filter"] = filter

        self.logger.debug("Wrapped query into function_score with %d functions", len(scores))
        body["query"] = {"function_score": score}
        return body


search_request = SearchRequestCompiler()
