"""Tests for expression nodes."""

import pytest

from crossquery.exceptions import InvalidFieldError
from crossquery.querydsl.nodes import (
    And,
    Cached,
    Not,
    Or,
    Raw,
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


class TestLeafRendering:
    def test_term(self):
        assert render(term("email", "email")) == {"term": {"email": "email"}}

    def test_term_with_list_renders_terms(self):
        assert term("tag", ["a", "b"]).render() == {"terms": {"tag": ["a", "b"]}}

    def test_range(self):
        assert range_("age", gte=18, lt=30).render() == {"range": {"age": {"gte": 18, "lt": 30}}}

    def test_exists(self):
        assert exists("name").render() == {"exists": {"field": "name"}}

    def test_script(self):
        assert script("doc['a'].value > 1").render() == {"script": {"script": "doc['a'].value > 1"}}

    def test_script_with_params(self):
        node = script("doc['a'].value > min", {"min": 1})
        assert node.render() == {"script": {"script": "doc['a'].value > min", "params": {"min": 1}}}

    def test_raw(self):
        assert raw({"match_all": {}}).render() == {"match_all": {}}


class TestNegation:
    def test_not(self):
        assert (~term("email", "email")).render() == {"not": {"term": {"email": "email"}}}

    def test_not_of_cached(self):
        node = not_(cached(term("email", "email")))
        assert node.render() == {"not": {"filter": {"term": {"email": "email"}}}, "_cache": True}

    def test_cached_not(self):
        node = (~term("email", "email")).cached()
        assert node.render() == {"not": {"filter": {"term": {"email": "email"}}}, "_cache": True}

    def test_double_negation(self):
        node = term("a", 1)
        assert ~~node == node
        assert isinstance(~node, Not)


class TestComposites:
    def test_and_collapses_single(self):
        assert and_(term("a", 1)).render() == {"term": {"a": 1}}

    def test_or_collapses_single(self):
        assert or_(term("a", 1)).render() == {"term": {"a": 1}}

    @pytest.mark.parametrize("builder", [and_, or_])
    def test_empty_composite_rejected(self, builder):
        with pytest.raises(InvalidFieldError, match="at least one node"):
            builder()

    def test_empty_composite_rejected_on_combine(self):
        with pytest.raises(InvalidFieldError):
            term("a", 1) & Or(())

    def test_empty_fragment_is_not_a_clause(self):
        assert (term("a", 1) & raw({})).render() == {"term": {"a": 1}}
        assert (term("a", 1) | raw({}) | term("b", 2)).render() == {
            "or": {"filters": [{"term": {"a": 1}}, {"term": {"b": 2}}]}
        }

    def test_and(self):
        node = term("a", 1) & term("b", 2)
        assert node.render() == {"and": {"filters": [{"term": {"a": 1}}, {"term": {"b": 2}}]}}

    def test_or(self):
        node = term("a", 1) | term("b", 2)
        assert node.render() == {"or": {"filters": [{"term": {"a": 1}}, {"term": {"b": 2}}]}}

    def test_and_flattens(self):
        node = term("a", 1) & term("b", 2) & term("c", 3)
        assert isinstance(node, And)
        assert len(node.nodes) == 3

    def test_mixed_nesting(self):
        node = (term("a", 1) | term("b", 2)) & exists("c")
        assert node.render() == {
            "and": {
                "filters": [
                    {"or": {"filters": [{"term": {"a": 1}}, {"term": {"b": 2}}]}},
                    {"exists": {"field": "c"}},
                ]
            }
        }

    def test_combine_with_mapping(self):
        node = term("a", 1) | {"match_all": {}}
        assert isinstance(node, Or)
        assert node.nodes[1] == Raw({"match_all": {}})

    def test_combine_with_invalid(self):
        with pytest.raises(InvalidFieldError):
            term("a", 1) & "b"

    def test_cached_and(self):
        node = (term("a", 1) & term("b", 2)).cached()
        assert node.render() == {
            "and": {"filters": [{"term": {"a": 1}}, {"term": {"b": 2}}], "_cache": True}
        }

    def test_cached_term(self):
        assert Cached(term("a", 1)).render() == {"term": {"a": 1, "_cache": True}}

    def test_cached_is_idempotent(self):
        node = term("a", 1).cached()
        assert node.cached() is node


class TestPurity:
    def test_render_is_repeatable(self):
        node = (term("a", [1, 2]) | range_("b", gt=1)) & ~exists("c")
        assert node.render() == node.render()

    def test_render_does_not_leak_state(self):
        node = raw({"bool": {"must": [{"term": {"a": 1}}]}})
        first = node.render()
        first["bool"]["must"].append({"term": {"b": 2}})
        assert node.render() == {"bool": {"must": [{"term": {"a": 1}}]}}

    def test_nodes_are_immutable(self):
        node = term("a", 1)
        with pytest.raises(AttributeError):
            node.value = 2

    def test_structural_equality(self):
        assert term("a", 1) & term("b", 2) == term("a", 1) & term("b", 2)
        assert Term("a", [1, 2]) == Term("a", (1, 2))


class TestValidation:
    def test_range_unknown_bound(self):
        with pytest.raises(InvalidFieldError, match="not supported"):
            range_("age", between=(1, 2))

    def test_range_without_bounds(self):
        with pytest.raises(InvalidFieldError):
            range_("age")

    def test_range_none_bound(self):
        with pytest.raises(InvalidFieldError):
            range_("age", gt=None)

    def test_empty_field(self):
        with pytest.raises(InvalidFieldError):
            term("", 1)

    def test_empty_script(self):
        with pytest.raises(InvalidFieldError):
            script("  ")

    def test_raw_requires_mapping(self):
        with pytest.raises(InvalidFieldError):
            Raw(["not", "a", "mapping"])
