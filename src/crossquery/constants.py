"""
Join modes and storage names shared by criteria and compilers.
"""


class JoinMode:
    AND = "and"
    OR = "or"
    MUST = "must"
    SHOULD = "should"
    MUST_NOT = "must_not"
    DIS_MAX = "dis_max"


# Modes rendered under a "bool" wrapper
BOOL_JOIN_MODES = frozenset({JoinMode.MUST, JoinMode.SHOULD, JoinMode.MUST_NOT})

FILTER_JOIN_MODES = frozenset({JoinMode.AND, JoinMode.OR}) | BOOL_JOIN_MODES
QUERY_JOIN_MODES = frozenset({JoinMode.AND, JoinMode.OR, JoinMode.DIS_MAX}) | BOOL_JOIN_MODES

ARRAY_STORAGES = ("queries", "filters", "post_filters", "sort", "fields", "types", "scores")
HASH_STORAGES = ("options", "request_options", "facets", "aggregations", "suggest", "script_fields")
STORAGES = ARRAY_STORAGES + HASH_STORAGES


class Option:
    QUERY_MODE = "query_mode"
    FILTER_MODE = "filter_mode"
    POST_FILTER_MODE = "post_filter_mode"
    BOOST_MODE = "boost_mode"
    SCORE_MODE = "score_mode"
    SIMPLE = "simple"
    NONE = "none"
    STRATEGY = "strategy"
