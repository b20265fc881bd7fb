"""Stable grouping of commits and notes into titled buckets.

Groups come out in the order their key was first seen unless a group
comparator is supplied; items keep input order unless an item comparator
is supplied.  Both comparators are classic three-way functions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import cmp_to_key
from typing import Any

from changewriter.models import CompareFunc, CompareRule
from changewriter.normalizer import get_path

# Internal marker for "key field absent"; rendered as False in output.
_ABSENT = object()


# ---------------------------------------------------------------------------
# Comparators
# ---------------------------------------------------------------------------


def _compare_values(a: Any, b: Any) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    if type(a) is not type(b):
        a, b = str(a), str(b)
    return (a > b) - (a < b)


def make_comparator(rule: CompareRule) -> CompareFunc | None:
    """Build a three-way comparator from *rule*.

    *rule* may be ``None``, a comparator function (returned unchanged), a
    dot-path field name, or a list of field names compared in order.
    """
    if rule is None:
        return None
    if callable(rule):
        return rule
    fields = [rule] if isinstance(rule, str) else list(rule)
    if not fields:
        return None

    def compare(a: Any, b: Any) -> int:
        for field in fields:
            result = _compare_values(_field(a, field), _field(b, field))
            if result:
                return result
        return 0

    return compare


def _field(item: Any, path: str) -> Any:
    if isinstance(item, Mapping):
        return get_path(item, path)
    return getattr(item, path, None)


# ---------------------------------------------------------------------------
# Generic grouping
# ---------------------------------------------------------------------------


def _same_key(a: Any, b: Any) -> bool:
    """Exact key equality: ``1``, ``1.0`` and ``True`` stay distinct."""
    if a is _ABSENT or b is _ABSENT:
        return a is b
    return type(a) is type(b) and a == b


def _title(key: Any) -> Any:
    return False if key is _ABSENT else key


def group_items(
    key: str | None,
    items: Iterable[Mapping[str, Any]],
    group_compare: CompareRule = None,
    item_compare: CompareRule = None,
    *,
    items_field: str = "items",
    item_value: Callable[[Mapping[str, Any]], Any] | None = None,
) -> list[dict[str, Any]]:
    """Partition *items* by ``item[key]`` into ``{"title", items_field}`` groups.

    Items missing *key* (or every item when *key* is ``None``) share a group
    titled ``False``.  *item_value* maps each item before it is stored, and
    *item_compare* sorts the stored values.
    """
    keys: list[Any] = []
    buckets: list[list[Any]] = []

    for item in items:
        item_key = item.get(key, _ABSENT) if key is not None else _ABSENT
        value = item_value(item) if item_value is not None else item
        for idx, seen in enumerate(keys):
            if _same_key(seen, item_key):
                buckets[idx].append(value)
                break
        else:
            keys.append(item_key)
            buckets.append([value])

    item_cmp = make_comparator(item_compare)
    groups: list[dict[str, Any]] = []
    for group_key, bucket in zip(keys, buckets):
        if item_cmp is not None:
            bucket = sorted(bucket, key=cmp_to_key(item_cmp))
        groups.append({"title": _title(group_key), items_field: bucket})

    group_cmp = make_comparator(group_compare)
    if group_cmp is not None:
        groups.sort(key=cmp_to_key(group_cmp))

    return groups


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_commit_groups(
    group_by: str | None,
    commits: Sequence[Mapping[str, Any]],
    group_compare: CompareRule = None,
    commit_compare: CompareRule = None,
) -> list[dict[str, Any]]:
    """Group commits by the *group_by* field into ``{"title", "commits"}``."""
    return group_items(
        group_by,
        commits,
        group_compare,
        commit_compare,
        items_field="commits",
    )


def get_note_groups(
    notes: Sequence[Mapping[str, Any]],
    group_compare: CompareRule = None,
    note_compare: CompareRule = None,
) -> list[dict[str, Any]]:
    """Group notes by ``title`` into ``{"title", "notes"}`` of note texts.

    An empty title is a group of its own; it is not merged with notes that
    have no title at all.
    """
    return group_items(
        "title",
        notes,
        group_compare,
        note_compare,
        items_field="notes",
        item_value=lambda note: note.get("text"),
    )
