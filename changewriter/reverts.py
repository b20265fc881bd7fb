"""Removal of revert commits and the commits they revert."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)


def _reverted_hashes(commits: Sequence[Mapping[str, Any]]) -> list[str]:
    """Collect ``revert.hash`` from every revert commit.

    Empty or missing hashes are skipped; an empty prefix would match
    every commit.
    """
    hashes: list[str] = []
    for commit in commits:
        revert = commit.get("revert")
        if revert is None:
            continue
        reverted = revert.get("hash") if isinstance(revert, Mapping) else None
        if isinstance(reverted, str) and reverted:
            hashes.append(reverted)
    return hashes


def _is_reverted(commit: Mapping[str, Any], reverted: Sequence[str]) -> bool:
    # A revert reference is often shorter than the stored hash, so match
    # by prefix of the candidate's hash.
    commit_hash = commit.get("hash")
    if not isinstance(commit_hash, str):
        return False
    return any(commit_hash.startswith(h) for h in reverted)


def filter_reverted(
    commits: Sequence[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Drop revert commits and the commits they revert, keeping order.

    A revert whose target is not in *commits* is still dropped.
    """
    reverted = _reverted_hashes(commits)
    kept: list[Mapping[str, Any]] = []
    for commit in commits:
        if commit.get("revert") is not None:
            logger.debug("Dropping revert commit %s", commit.get("hash"))
            continue
        if _is_reverted(commit, reverted):
            logger.debug("Dropping reverted commit %s", commit.get("hash"))
            continue
        kept.append(commit)
    return kept
