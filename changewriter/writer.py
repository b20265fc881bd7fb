"""End-to-end changelog generation.

Pipeline: decode commits -> drop revert pairs (optional) -> normalize ->
group commits and notes -> merge contexts -> render the compiled template.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from changewriter.context import get_extra_context, merge_context
from changewriter.models import Commit, TemplateSet, WriterOptions
from changewriter.normalizer import normalize_commit, parse_commit
from changewriter.reverts import filter_reverted
from changewriter.templates import CompiledTemplate, compile_templates

logger = logging.getLogger(__name__)


def collect_notes(commits: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Gather the ``notes`` lists carried by *commits*, in commit order."""
    notes: list[dict[str, Any]] = []
    for commit in commits:
        for note in commit.get("notes") or []:
            if isinstance(note, Mapping):
                notes.append(dict(note))
    return notes


def process_commits(
    commits: Iterable[Mapping[str, Any] | str | bytes],
    options: WriterOptions | None = None,
) -> list[Commit]:
    """Decode, revert-filter and normalize *commits*.

    Reverts are matched on the decoded records before any transform runs,
    so transforms that shorten hashes cannot break the matching.
    """
    options = options or WriterOptions()
    decoded: Sequence[Commit] = [parse_commit(c) for c in commits]

    if options.ignore_reverted:
        before = len(decoded)
        decoded = filter_reverted(decoded)
        logger.debug("Revert filter kept %d of %d commits", len(decoded), before)

    processed: list[Commit] = []
    for commit in decoded:
        normalized = normalize_commit(commit, options.transform)
        if normalized is not None:
            processed.append(normalized)
    return processed


def generate(
    templates: TemplateSet | CompiledTemplate | Mapping[str, Any],
    commits: Iterable[Mapping[str, Any] | str | bytes],
    notes: Sequence[Mapping[str, Any]] | None = None,
    context: Mapping[str, Any] | None = None,
    key_context: Mapping[str, Any] | None = None,
    options: WriterOptions | None = None,
) -> str:
    """Render a changelog from *commits* and *notes*.

    Parameters
    ----------
    templates:
        A template set, or a template already compiled with
        :func:`~changewriter.templates.compile_templates`.
    commits:
        Commit mappings or their JSON text encodings.
    notes:
        Note mappings ``{"title", "text"}``.  When ``None`` the notes are
        collected from each processed commit's ``notes`` field.
    context:
        Base render context.
    key_context:
        Per-release context overriding *context*.  Neither context can
        override ``commitGroups`` or ``noteGroups``.
    options:
        Grouping, sorting, revert and transform options.

    Returns
    -------
    str
        The rendered text.
    """
    options = options or WriterOptions()
    processed = process_commits(commits, options)

    if notes is None:
        notes = collect_notes(processed)

    extra = get_extra_context(processed, notes, options)
    logger.debug(
        "Built %d commit group(s) and %d note group(s)",
        len(extra["commitGroups"]),
        len(extra["noteGroups"]),
    )

    final_context = merge_context(context, key_context, extra)
    if options.finalize_context is not None:
        final_context = options.finalize_context(final_context, options, processed)

    if isinstance(templates, CompiledTemplate):
        compiled = templates
    else:
        compiled = compile_templates(templates)
    return compiled(final_context)
