"""Template resolution and compilation with Jinja2.

The main template pulls in partials with ``{% include "name" %}``.
Partials are resolved from the built-in defaults, then from the template
set's explicit overrides; an override of ``None`` or ``""`` removes the
partial from the compiled set, and including it renders nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from jinja2 import ChainableUndefined, ChoiceLoader, DictLoader, Environment, Template

from changewriter.models import TemplateSet

DEFAULT_MAIN_TEMPLATE = (
    '{% include "header" %}\n'
    "\n"
    "{% for group in commitGroups %}\n"
    "{% if group.title %}\n"
    "### {{ group.title }}\n"
    "\n"
    "{% endif %}\n"
    "{% for commit in group.commits %}\n"
    '{% include "commit" %}\n'
    "{% endfor %}\n"
    "\n"
    "{% endfor %}\n"
    '{% include "footer" %}\n'
)

_HEADER_PARTIAL = (
    "## {% if isPatch %}<small>{% endif %}{{ version }}"
    '{% if title %} "{{ title }}"{% endif %}'
    "{% if date %} ({{ date }}){% endif %}"
    "{% if isPatch %}</small>{% endif %}\n"
    "\n"
)

_COMMIT_PARTIAL = (
    "* {{ commit.header }}"
    "{% if commit.shortHash %} ({{ commit.shortHash }}){% endif %}\n"
    "\n"
)

_FOOTER_PARTIAL = (
    "{% if noteGroups %}\n"
    "{% for group in noteGroups %}\n"
    "### {{ group.title }}\n"
    "\n"
    "{% for note in group.notes %}\n"
    "* {{ note }}\n"
    "{% endfor %}\n"
    "\n"
    "{% endfor %}\n"
    "{% endif %}\n"
)

# Read-only so separate writers can never alter each other's defaults.
DEFAULT_PARTIALS: Mapping[str, str] = MappingProxyType(
    {
        "header": _HEADER_PARTIAL,
        "commit": _COMMIT_PARTIAL,
        "footer": _FOOTER_PARTIAL,
    }
)


class CompiledTemplate:
    """A main template bound to its resolved partials.

    Calling the instance renders a context into text, with no escaping.
    """

    def __init__(self, template: Template, partials: Mapping[str, str]) -> None:
        self._template = template
        self.partials = MappingProxyType(dict(partials))

    def __call__(self, context: Mapping[str, Any] | None = None) -> str:
        return self._template.render(dict(context or {}))


def _merge_partials(
    template_set: TemplateSet,
    defaults: Mapping[str, str],
) -> dict[str, str | None]:
    merged: dict[str, str | None] = dict(defaults)
    merged.update(template_set.explicit_partials())
    return merged


def resolve_partials(
    template_set: TemplateSet,
    defaults: Mapping[str, str] = DEFAULT_PARTIALS,
) -> dict[str, str]:
    """Merge *defaults* with the template set's overrides.

    Partials whose final value is empty are left out entirely.
    """
    merged = _merge_partials(template_set, defaults)
    return {name: body for name, body in merged.items() if body}


def suppressed_partials(
    template_set: TemplateSet,
    defaults: Mapping[str, str] = DEFAULT_PARTIALS,
) -> frozenset[str]:
    """Return the partial names whose final value is ``None`` or ``""``."""
    merged = _merge_partials(template_set, defaults)
    return frozenset(name for name, body in merged.items() if not body)


def _make_environment(
    partials: Mapping[str, str],
    suppressed: frozenset[str] = frozenset(),
) -> Environment:
    # Suppressed names load as empty templates; unknown names still raise.
    return Environment(
        loader=ChoiceLoader(
            [
                DictLoader(dict(partials)),
                DictLoader({name: "" for name in suppressed}),
            ]
        ),
        autoescape=False,
        undefined=ChainableUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def compile_templates(
    template_set: TemplateSet | Mapping[str, Any],
    defaults: Mapping[str, str] = DEFAULT_PARTIALS,
) -> CompiledTemplate:
    """Compile *template_set* into a render function.

    Each call builds its own Jinja2 environment; nothing is cached between
    template sets.  ``jinja2.TemplateSyntaxError`` propagates unchanged.
    """
    if not isinstance(template_set, TemplateSet):
        template_set = TemplateSet.model_validate(template_set)

    partials = resolve_partials(template_set, defaults)
    env = _make_environment(partials, suppressed_partials(template_set, defaults))
    main = template_set.main_template
    if main is None:
        main = DEFAULT_MAIN_TEMPLATE
    return CompiledTemplate(env.from_string(main), partials)
