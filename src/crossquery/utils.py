"""Utility functions for crossquery.

Shared helpers for normalizing update patches before they reach a storage.
"""

from typing import Any, Iterable, List, Mapping, Sequence


# ===========================================================================
# Core utilities
# ===========================================================================


def is_blank(value: Any) -> bool:
    """Return True for values dropped from list storages.

    Blank values are `None`, `False`, whitespace-only strings and empty
    collections. Numbers, including zero, are never blank.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def wrap_list(value: Any) -> List[Any]:
    """Wrap a patch into a list: `None` -> [], sequences -> list, scalars -> [value]."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def flatten(items: Iterable[Any]) -> List[Any]:
    """Recursively flatten nested lists and tuples."""
    result: List[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            result.extend(flatten(item))
        else:
            result.append(item)
    return result


def compact(items: Iterable[Any]) -> List[Any]:
    """Drop blank values, keeping order."""
    return [item for item in items if not is_blank(item)]


def union(existing: Sequence[str], additions: Iterable[str]) -> List[str]:
    """Union two sequences as ordered sets, first occurrence wins."""
    seen = set()
    result: List[str] = []
    for item in list(existing) + list(additions):
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


# ===========================================================================
# Patch normalization helpers for Criteria
# ===========================================================================


def normalize_list_patch(patch: Any) -> List[Any]:
    """Normalize a list storage patch: wrap, flatten and drop blanks."""
    return compact(flatten(wrap_list(patch)))


def _name(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


def normalize_name_patch(patch: Any) -> List[str]:
    """Normalize a fields/types patch: stringify, then drop blank names.

    Example:
        >>> normalize_name_patch(["name", [1, None], False, " "])
        ['name', '1', 'false']
    """
    return [name for name in map(_name, flatten(wrap_list(patch))) if not is_blank(name)]


def expand_sort(patch: Any) -> List[Any]:
    """Split multi-key sort mappings into one single-key mapping per key.

    Example:
        >>> expand_sort([{"a": 1, "b": 2}, "c"])
        [{'a': 1}, {'b': 2}, 'c']
    """
    result: List[Any] = []
    for element in flatten(wrap_list(patch)):
        if isinstance(element, Mapping):
            result.extend({key: value} for key, value in element.items())
        else:
            result.append(element)
    return result
