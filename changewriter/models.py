"""Pydantic v2 models for changewriter options and template sets."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# A commit record is an open mapping of field name -> value.
Commit = dict[str, Any]

# Three-way comparator: negative = a first, positive = b first, zero = keep.
CompareFunc = Callable[[Any, Any], int]

# Comparator rule: a callable, a field path, or a list of field paths.
CompareRule = CompareFunc | str | list[str] | None

# Whole-record function or mapping of dot path -> literal / leaf function.
Transform = Callable[[Commit], Commit | None] | Mapping[str, Any] | None


class TemplateSet(BaseModel):
    """Main template plus named partials.

    A partial explicitly set to ``None`` or ``""`` is suppressed.  A partial
    left unset falls back to the built-in default of the same name.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    main_template: str | None = None
    header_partial: str | None = None
    commit_partial: str | None = None
    footer_partial: str | None = None
    partials: dict[str, str | None] | None = None

    def explicit_partials(self) -> dict[str, str | None]:
        """Return the partial overrides the caller actually provided.

        ``<name>_partial`` fields count only when they were set; entries in
        ``partials`` win over them.
        """
        overrides: dict[str, str | None] = {}
        for name in ("header", "commit", "footer"):
            field_name = f"{name}_partial"
            if field_name in self.model_fields_set:
                overrides[name] = getattr(self, field_name)
        if self.partials:
            overrides.update(self.partials)
        return overrides


class WriterOptions(BaseModel):
    """Options consumed by the context assembler and the generator."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    group_by: str | None = None
    ignore_reverted: bool = False
    commit_groups_compare: CompareRule = None
    commits_compare: CompareRule = None
    note_groups_compare: CompareRule = None
    notes_compare: CompareRule = None
    transform: Transform = None
    finalize_context: Callable[..., dict[str, Any]] | None = Field(
        default=None,
        description="Hook called as finalize_context(context, options, commits).",
    )
