#!/usr/bin/env python3
"""Commit filters applied before classification.

Two passes run in order: the noise filter drops CI and release-tooling
churn, then the revert filter drops every revert commit together with the
commit it reverted, when that commit can be found in the same range.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from utils.commit_models import CommitRecord
from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)

REVERT_PATTERN = re.compile(r'\b(revert d\d{8}: |revert\b|back out ".*")', re.IGNORECASE)

# A revert target pairs with a commit whose summary is within this share
# of the target's length, measured in edits.
REVERT_MATCH_RATIO = 0.5


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two strings."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


def filter_noise_commits(
    commits: Iterable[CommitRecord],
    keywords: Optional[Sequence[str]] = None,
) -> List[CommitRecord]:
    """Drop commits whose message mentions CI or release tooling.

    Args:
        commits: Commits in source order
        keywords: Lowercase denylist substrings (defaults to Config.NOISE_KEYWORDS)

    Returns:
        The commits that mention none of the keywords, in the same order
    """
    denylist = [k.lower() for k in (keywords if keywords is not None else Config.NOISE_KEYWORDS)]
    kept: List[CommitRecord] = []
    for commit in commits:
        text = commit.message.lower()
        hit = next((k for k in denylist if k in text), None)
        if hit:
            logger.debug(f"Removing noise commit {commit.id} (matched '{hit}')")
            continue
        kept.append(commit)
    return kept


def revert_target(summary: str) -> Optional[str]:
    """Return the description a revert summary points at, or None.

    The summary is lowercased and the first revert marker is cut out, so
    `Revert D12345678: Fix thing` yields `fix thing`.
    """
    text = summary.lower()
    if not REVERT_PATTERN.search(text):
        return None
    return REVERT_PATTERN.sub("", text, count=1)


def is_revert_match(summary: str, target: str) -> bool:
    return edit_distance(summary.lower(), target) < REVERT_MATCH_RATIO * len(target)


def filter_revert_commits(commits: Iterable[CommitRecord]) -> List[CommitRecord]:
    """Drop revert commits along with the commits they revert.

    Reverts are collected in a first pass. Each remaining commit is then
    checked against the pending revert targets in order; the first target it
    fuzzily matches is consumed and the commit is dropped. Reverts left
    unpaired are logged by summary so they can be removed by hand.
    """
    # (target, first line of the revert commit)
    pending: List[Tuple[str, str]] = []
    survivors: List[CommitRecord] = []
    for commit in commits:
        target = revert_target(commit.first_line)
        if target is None:
            survivors.append(commit)
            continue
        pending.append((target, commit.first_line))
        logger.info(f"Removing revert commit {commit.id}: {commit.first_line}")

    kept: List[CommitRecord] = []
    for commit in survivors:
        matched = next((i for i, (target, _) in enumerate(pending) if is_revert_match(commit.first_line, target)), None)
        if matched is None:
            kept.append(commit)
            continue
        target, _ = pending.pop(matched)
        logger.info(f"Removing reverted commit {commit.id}: {commit.first_line} (paired with '{target}')")

    if pending:
        logger.warning(
            "Was unable to find the mate for the following revert commits:\n\n"
            + "\n".join(summary for _, summary in pending)
            + "\n\nYou will need to manually remove these from the changelog."
        )
    return kept
