#!/usr/bin/env python3
"""Pydantic models for commit records and changelog structures.

This module defines the records handed over by the commit source, the
classified changelog lines derived from them, and the grouped bundle that
the markdown renderer consumes.
"""

from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


Category = Literal[
    "added",
    "changed",
    "deprecated",
    "removed",
    "fixed",
    "security",
]

Platform = Literal["general", "android", "ios"]

# Rendering order
CATEGORIES: Tuple[str, ...] = ("added", "changed", "deprecated", "removed", "fixed", "security")
PLATFORMS: Tuple[str, ...] = ("general", "android", "ios")


class AuthorInfo(BaseModel):
    """Identity of a commit author."""

    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Contact email")
    login: Optional[str] = Field(None, description="GitHub username, when known")

    model_config = ConfigDict(frozen=True, extra="ignore")

    def is_empty(self) -> bool:
        return not (self.login or self.name or self.email)


class CommitRecord(BaseModel):
    """One commit between the base and compare revisions."""

    id: str = Field(..., description="Short commit SHA")
    message: str = Field("", description="Full commit message")
    author: Optional[AuthorInfo] = Field(None, description="Commit author, if attributable")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def first_line(self) -> str:
        return extract_first_line(self.message)


class ClassifiedEntry(BaseModel):
    """A rendered changelog line with its category and platform."""

    text: str = Field(..., description="Changelog line including the provenance suffix")
    category: Category = Field(..., description="Change category")
    platform: Platform = Field(..., description="Platform bucket")
    commit_id: str = Field(..., description="Short SHA of the source commit")

    model_config = ConfigDict(frozen=True)


class PlatformEntries(BaseModel):
    """Entries of one category split by platform."""

    general: List[str] = Field(default_factory=list)
    android: List[str] = Field(default_factory=list)
    ios: List[str] = Field(default_factory=list)


class ChangelogBundle(BaseModel):
    """Changelog entries grouped by category, then by platform.

    Every category and every platform bucket is always present, so renderers
    can emit a stable skeleton even when nothing landed in a section.
    """

    added: PlatformEntries = Field(default_factory=PlatformEntries)
    changed: PlatformEntries = Field(default_factory=PlatformEntries)
    deprecated: PlatformEntries = Field(default_factory=PlatformEntries)
    removed: PlatformEntries = Field(default_factory=PlatformEntries)
    fixed: PlatformEntries = Field(default_factory=PlatformEntries)
    security: PlatformEntries = Field(default_factory=PlatformEntries)

    def entries(self, category: str, platform: str) -> List[str]:
        if category not in CATEGORIES:
            raise KeyError(f"Unknown category: {category}")
        if platform not in PLATFORMS:
            raise KeyError(f"Unknown platform: {platform}")
        return getattr(getattr(self, category), platform)

    def add(self, entry: ClassifiedEntry) -> None:
        self.entries(entry.category, entry.platform).append(entry.text)

    def total(self) -> int:
        return sum(len(self.entries(c, p)) for c in CATEGORIES for p in PLATFORMS)

    def is_empty(self) -> bool:
        return self.total() == 0


def extract_first_line(message: str) -> str:
    """Extract the first line of a commit message.

    Args:
        message: Full commit message

    Returns:
        First line of the message, or an empty string
    """
    if not message:
        return ""

    lines = message.splitlines()
    return lines[0] if lines else ""
