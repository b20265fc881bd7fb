"""Render-context assembly from grouped commits and notes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from changewriter.grouping import get_commit_groups, get_note_groups
from changewriter.models import WriterOptions


def get_extra_context(
    commits: Sequence[Mapping[str, Any]],
    notes: Sequence[Mapping[str, Any]],
    options: WriterOptions | None = None,
) -> dict[str, Any]:
    """Return ``{"commitGroups": ..., "noteGroups": ...}``.

    Commits are grouped by ``options.group_by``; a field that no commit
    carries puts every commit into the single ``False`` group.  Notes are
    always grouped by title.
    """
    options = options or WriterOptions()
    return {
        "commitGroups": get_commit_groups(
            options.group_by,
            commits,
            options.commit_groups_compare,
            options.commits_compare,
        ),
        "noteGroups": get_note_groups(
            notes,
            options.note_groups_compare,
            options.notes_compare,
        ),
    }


def merge_context(
    context: Mapping[str, Any] | None,
    key_context: Mapping[str, Any] | None,
    extra: Mapping[str, Any],
) -> dict[str, Any]:
    """Shallow-merge the three sources; later ones win key by key.

    ``commitGroups`` and ``noteGroups`` from *extra* therefore always
    survive, whatever the caller contexts hold.
    """
    merged: dict[str, Any] = {}
    merged.update(context or {})
    merged.update(key_context or {})
    merged.update(extra)
    return merged
