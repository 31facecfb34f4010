#!/usr/bin/env python3
"""Heuristic commit classification into changelog categories and platforms.

Classification is keyword based: no attempt is made to understand the
change. Misfiled entries are expected and are left for a human curator.
"""

import logging
import re
from typing import Iterable, Optional

from utils.commit_models import AuthorInfo, ChangelogBundle, ClassifiedEntry, CommitRecord
from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)

# First-line tags for changes that never reach the public changelog
_SKIP_PATTERNS = (
    re.compile(r"\bfabric\b", re.IGNORECASE),
    re.compile(r"\btm\b", re.IGNORECASE),
    re.compile(r"^\[internal\]", re.IGNORECASE),
)

_PLATFORM_TAG = re.compile(r"\[ios\]|\[android\]|\[general\]", re.IGNORECASE)
_NOT_ANDROID_TAG = re.compile(r"\[ios\]|\[general\]", re.IGNORECASE)
_NOT_IOS_TAG = re.compile(r"\[android\]|\[general\]", re.IGNORECASE)

_ANDROID_PATTERNS = (
    re.compile(r"\b(android|java)\b", re.IGNORECASE),
    re.compile(r"android", re.IGNORECASE),
)
_IOS_PATTERNS = (
    re.compile(r"\b(ios|xcode|swift|objective-c|iphone|ipad)\b", re.IGNORECASE),
    re.compile(r"ios\b", re.IGNORECASE),
    re.compile(r"\brct", re.IGNORECASE),
)

# Checked in order; the first hit wins and "changed" is the fallback
_CATEGORY_PATTERNS = (
    ("added", re.compile(r"\badded\b", re.IGNORECASE)),
    ("fixed", re.compile(r"\bfixed\b", re.IGNORECASE)),
    ("removed", re.compile(r"\bremoved\b", re.IGNORECASE)),
    ("deprecated", re.compile(r"\bdeprecated\b", re.IGNORECASE)),
    ("security", re.compile(r"\bsecurity\b", re.IGNORECASE)),
)
DEFAULT_CATEGORY = "changed"

_LEADING_TAGS = re.compile(r"^((\[\w*\] ?)+ - )", re.IGNORECASE)
_TRAILING_PR_NUMBER = re.compile(r" \(#\d*\)$")
_TRAILING_PERIOD = re.compile(r"\.$")
_LEADING_DASH = re.compile(r"^- ")


def should_skip(first_line: str) -> bool:
    """True for renderer-internal, TurboModule-internal or internal-only changes."""
    return any(pattern.search(first_line) for pattern in _SKIP_PATTERNS)


def is_android(message: str) -> bool:
    if _NOT_ANDROID_TAG.search(message):
        return False
    return any(pattern.search(message) for pattern in _ANDROID_PATTERNS)


def is_ios(message: str) -> bool:
    if _NOT_IOS_TAG.search(message):
        return False
    return any(pattern.search(message) for pattern in _IOS_PATTERNS)


def detect_platform(message: str) -> str:
    if is_android(message):
        return "android"
    if is_ios(message):
        return "ios"
    return "general"


def detect_category(message: str) -> str:
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(message):
            return category
    return DEFAULT_CATEGORY


def extract_change_text(message: str) -> str:
    """Pick the changelog line out of a commit message and tidy it up.

    The last line carrying a platform tag wins; without one the summary line
    is used. Leading tag blocks, a trailing PR number, a trailing period and
    a leading dash are stripped.
    """
    lines = message.splitlines() or [""]
    entry = next((line for line in reversed(lines) if _PLATFORM_TAG.search(line)), lines[0])
    entry = _LEADING_TAGS.sub("", entry)
    entry = _TRAILING_PR_NUMBER.sub("", entry)
    entry = _TRAILING_PERIOD.sub("", entry)
    entry = _LEADING_DASH.sub("", entry)
    return entry


def author_link(author: Optional[AuthorInfo]) -> str:
    if author is None or author.is_empty():
        return ""
    if author.login:
        return f" by [@{author.login}](https://github.com/{author.login})"
    if author.email:
        return f" by [{author.name or author.email}](mailto:{author.email})"
    return ""


def provenance_suffix(commit: CommitRecord, commit_url_base: Optional[str] = None) -> str:
    base = (commit_url_base or Config.COMMIT_URL_BASE).rstrip("/")
    return f"([{commit.id}]({base}/{commit.id}){author_link(commit.author)})"


def classify_commit(commit: CommitRecord, commit_url_base: Optional[str] = None) -> Optional[ClassifiedEntry]:
    """Classify one commit, or return None when it is internal-only."""
    if should_skip(commit.first_line):
        logger.debug(f"Skipping internal commit {commit.id}: {commit.first_line}")
        return None

    text = f"{extract_change_text(commit.message)} {provenance_suffix(commit, commit_url_base)}"
    return ClassifiedEntry(
        text=text,
        category=detect_category(commit.message),
        platform=detect_platform(commit.message),
        commit_id=commit.id,
    )


def build_changelog(commits: Iterable[CommitRecord], commit_url_base: Optional[str] = None) -> ChangelogBundle:
    """Classify commits and group the resulting lines, keeping input order."""
    bundle = ChangelogBundle()
    for commit in commits:
        entry = classify_commit(commit, commit_url_base)
        if entry is None:
            continue
        bundle.add(entry)
    logger.debug(f"Built changelog with {bundle.total()} entries")
    return bundle
