"""Commit normalization: decoding, raw snapshots, and field transforms.

A commit arrives either as a mapping or as a JSON text encoding of one.
:func:`normalize_commit` decodes it, snapshots the original into ``raw``,
and applies an optional transform to the rest of the record.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from changewriter.models import Commit, Transform

logger = logging.getLogger(__name__)

# Matches the first tag in a ``git log --decorate`` string, e.g.
# ``"HEAD -> main, tag: v1.2.0, origin/main"``.
_GIT_TAG_RE = re.compile(r"tag:\s*[v=]?(.+?)(?:[,)]|$)", re.IGNORECASE)

_SHORT_HASH_LEN = 7


class MalformedInputError(ValueError):
    """Raised when a commit input cannot be decoded into a record."""

    def __init__(self, message: str, chunk: Any = None) -> None:
        super().__init__(message)
        self.chunk = chunk


# ---------------------------------------------------------------------------
# Dot-path helpers
# ---------------------------------------------------------------------------


def _split_path(path: str) -> list[str]:
    return path.split(".")


def get_path(record: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Return the value at dot-separated *path*, or *default* if missing."""
    current: Any = record
    for part in _split_path(path):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def set_path(record: dict[str, Any], path: str, value: Any) -> None:
    """Set *value* at dot-separated *path*, creating intermediate dicts.

    An intermediate value that is not a dict is replaced by an empty one.
    """
    parts = _split_path(path)
    current = record
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def parse_commit(chunk: Mapping[str, Any] | str | bytes) -> Commit:
    """Decode *chunk* into a fresh commit dict.

    Mappings are deep-copied; ``str``/``bytes`` are parsed as JSON.

    Raises:
        MalformedInputError: If the text is not valid JSON, decodes to
            something other than an object, or *chunk* is neither text nor
            a mapping.
    """
    if isinstance(chunk, (str, bytes, bytearray)):
        try:
            decoded = json.loads(chunk)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(
                f"Commit is not valid JSON: {exc}", chunk
            ) from exc
        if not isinstance(decoded, dict):
            raise MalformedInputError(
                f"Commit JSON must decode to an object, got {type(decoded).__name__}",
                chunk,
            )
        return decoded

    if isinstance(chunk, Mapping):
        return copy.deepcopy(dict(chunk))

    raise MalformedInputError(
        f"Commit must be a mapping or JSON text, got {type(chunk).__name__}",
        chunk,
    )


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


def _apply_field_map(commit: Commit, fields: Mapping[str, Any]) -> Commit:
    for path, replacement in fields.items():
        if callable(replacement):
            value = replacement(get_path(commit, path))
        else:
            value = replacement
        set_path(commit, path, value)
    return commit


def _resolve_transform(
    transform: Transform,
) -> Callable[[Commit], Commit | None] | None:
    """Turn either transform shape into a single whole-record callable."""
    if transform is None:
        return None
    if callable(transform):
        return transform
    if isinstance(transform, Mapping):
        fields = dict(transform)
        return lambda commit: _apply_field_map(commit, fields)
    raise TypeError(
        "transform must be a callable or a mapping of field paths, "
        f"got {type(transform).__name__}"
    )


def normalize_commit(
    chunk: Mapping[str, Any] | str | bytes,
    transform: Transform = None,
) -> Commit | None:
    """Normalize one commit record.

    Parameters
    ----------
    chunk:
        A commit mapping or its JSON text encoding.  Never mutated.
    transform:
        Optional whole-record callable, or a mapping of dot paths to either
        literal values or functions of the current leaf value.

    Returns
    -------
    dict | None
        The transformed record with a deep ``raw`` snapshot of the input,
        or ``None`` when a whole-record transform dropped the commit.
    """
    commit = parse_commit(chunk)
    # Re-normalizing must not nest raw inside raw.
    commit.pop("raw", None)
    raw = copy.deepcopy(commit)

    apply = _resolve_transform(transform)
    if apply is not None:
        commit = apply(commit)
        if commit is None:
            logger.debug("Transform dropped commit %s", raw.get("hash"))
            return None
        commit = dict(commit)

    commit["raw"] = raw
    return commit


def default_transform(commit: Commit) -> Commit:
    """Add display fields commonly used by changelog templates.

    - ``shortHash``: first 7 characters of ``hash``.
    - ``committerDate``: reformatted as ``YYYY-MM-DD`` when it is ISO text.
    - ``version``: first tag parsed from a ``gitTags`` decoration string.
    """
    commit_hash = commit.get("hash")
    if isinstance(commit_hash, str):
        commit["shortHash"] = commit_hash.strip()[:_SHORT_HASH_LEN]

    committer_date = commit.get("committerDate")
    if isinstance(committer_date, str) and committer_date:
        try:
            parsed = datetime.fromisoformat(committer_date.strip())
        except ValueError:
            logger.debug("Leaving unparseable committerDate %r", committer_date)
        else:
            commit["committerDate"] = parsed.strftime("%Y-%m-%d")

    git_tags = commit.get("gitTags")
    if isinstance(git_tags, str):
        match = _GIT_TAG_RE.search(git_tags)
        if match:
            commit["version"] = match.group(1)

    return commit
