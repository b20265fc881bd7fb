"""Typer CLI entry point for changewriter.

Provides one command:

- ``render``: Read commit records (JSON array or newline-delimited JSON),
  group them, and render a changelog through the default or a custom
  template.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import typer
from jinja2 import TemplateError
from rich.console import Console

from changewriter import writer
from changewriter.models import TemplateSet, WriterOptions
from changewriter.normalizer import MalformedInputError, default_transform

app = typer.Typer(
    name="changewriter",
    help="Render a changelog from parsed commit records.",
    add_completion=False,
)

_console = Console(stderr=True)


@app.callback()
def main() -> None:
    """Render a changelog from parsed commit records."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read_text(source: str) -> str:
    """Return the contents of *source*, or stdin when it is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_commits(text: str) -> list[Any]:
    """Split *text* into commit chunks.

    A JSON array yields its elements; anything else is read as one JSON
    record per non-blank line, left undecoded for the normalizer.
    """
    stripped = text.strip()
    if stripped.startswith("["):
        data = json.loads(stripped)
        if isinstance(data, list):
            return data
    return [line for line in text.splitlines() if line.strip()]


def _load_context(path: str | None) -> dict[str, Any] | None:
    """Load a JSON object from *path*, or return ``None`` if not given."""
    if path is None:
        return None
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        typer.echo(f"Error: context file must hold a JSON object: {path}", err=True)
        raise typer.Exit(1)
    return data


# ---------------------------------------------------------------------------
# render command
# ---------------------------------------------------------------------------


@app.command()
def render(
    commits_file: str = typer.Argument(
        ...,
        help="File with commit records (JSON array or NDJSON); '-' for stdin.",
    ),
    context_file: str | None = typer.Option(
        None,
        "--context",
        "-c",
        help="JSON file with the base render context.",
    ),
    key_context_file: str | None = typer.Option(
        None,
        "--key-context",
        help="JSON file with per-release context overriding --context.",
    ),
    template_file: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Jinja2 main template (defaults to the built-in layout).",
    ),
    group_by: str | None = typer.Option(
        None,
        "--group-by",
        "-g",
        help="Commit field to group by (default: no grouping).",
    ),
    ignore_reverted: bool = typer.Option(
        False,
        "--ignore-reverted",
        help="Drop revert commits together with the commits they revert.",
    ),
    out_file: str | None = typer.Option(
        None,
        "--out-file",
        "-f",
        help="Write the changelog to this file instead of stdout.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log processing details.",
    ),
) -> None:
    """Render a changelog from commit records."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # --- 1. Read inputs ---
    try:
        chunks = _load_commits(_read_text(commits_file))
        context = _load_context(context_file)
        key_context = _load_context(key_context_file)
        main_template = (
            Path(template_file).read_text(encoding="utf-8") if template_file else None
        )
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"Error reading input: {exc}", err=True)
        raise typer.Exit(1)

    if verbose:
        _console.print(f"[cyan]Read {len(chunks)} commit record(s).[/cyan]")

    # --- 2. Render ---
    templates = (
        TemplateSet(main_template=main_template) if main_template else TemplateSet()
    )
    options = WriterOptions(
        group_by=group_by or None,
        ignore_reverted=ignore_reverted,
        transform=default_transform,
    )

    try:
        rendered = writer.generate(
            templates, chunks, context=context, key_context=key_context, options=options
        )
    except MalformedInputError as exc:
        typer.echo(f"Error: malformed commit: {exc}", err=True)
        raise typer.Exit(1)
    except TemplateError as exc:
        typer.echo(f"Error rendering template: {exc}", err=True)
        raise typer.Exit(1)

    # --- 3. Output ---
    if out_file:
        out_path = Path(out_file)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered, encoding="utf-8")
        _console.print(f"[green]Changelog written to {out_file}[/green]")
    else:
        typer.echo(rendered, nl=False)

