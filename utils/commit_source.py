#!/usr/bin/env python3
"""Commit source abstraction layer.

This module provides a single entry point for fetching the commits between
two revisions, either from a local checkout or from the GitHub compare API,
and normalizes both into CommitRecord objects.
"""

import logging
from typing import Any, Dict, List, Optional

from .commit_models import AuthorInfo, CommitRecord
from .git_history import GitHistory, GitHistoryError
from .github_compare import GithubCompare, GithubAuthError, GithubApiError
from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)

SOURCE_MODES = ("local", "github", "auto")


class CommitSourceError(Exception):
    """Raised when commit history cannot be read, with a typed code."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


def _short(sha: str) -> str:
    return (sha or "")[: Config.SHORT_SHA_LENGTH]


def _author(name: Optional[str] = None, email: Optional[str] = None,
            login: Optional[str] = None) -> Optional[AuthorInfo]:
    author = AuthorInfo(name=name or None, email=email or None, login=login or None)
    return None if author.is_empty() else author


def normalize_local_commit(raw: Dict[str, str]) -> CommitRecord:
    """Build a CommitRecord from a GitHistory record."""
    return CommitRecord(
        id=_short(raw.get("sha", "")),
        message=raw.get("body", ""),
        author=_author(raw.get("author_name"), raw.get("author_email")),
    )


def normalize_github_commit(raw: Dict[str, Any]) -> CommitRecord:
    """Build a CommitRecord from a GitHub compare API commit.

    The GitHub account is preferred for attribution; the git author identity
    is kept for commits made by emails not linked to an account.
    """
    git_commit = raw.get("commit") or {}
    git_author = git_commit.get("author") or {}
    account = raw.get("author") or {}
    return CommitRecord(
        id=_short(raw.get("sha", "")),
        message=git_commit.get("message") or "",
        author=_author(git_author.get("name"), git_author.get("email"), account.get("login")),
    )


class CommitSource:
    """Commit source with local-first, GitHub REST fallback strategy."""

    def __init__(self, mode: Optional[str] = None, repo_path: Optional[str] = None,
                 owner: Optional[str] = None, repo: Optional[str] = None,
                 history: Optional[GitHistory] = None, github: Optional[GithubCompare] = None):
        """Initialize the commit source.

        Args:
            mode: "local", "github" or "auto" (defaults to Config.COMMIT_SOURCE)
            repo_path: Local checkout path for the local reader
            owner: GitHub repository owner for the REST fallback
            repo: GitHub repository name for the REST fallback
            history: Optional preconfigured GitHistory
            github: Optional preconfigured GithubCompare
        """
        self.mode = mode or Config.COMMIT_SOURCE
        if self.mode not in SOURCE_MODES:
            raise CommitSourceError(f"Unsupported commit source: {self.mode}", code="CONFIG")
        github_config = Config.get_github_config()
        self.owner = owner or github_config["owner"]
        self.repo = repo or github_config["repo"]
        self.history = history or GitHistory(repo_path)
        self._github = github
        self.routing: Dict[str, str] = {}

    @property
    def github(self) -> GithubCompare:
        # Lazy so that local-only runs never open an HTTP session
        if self._github is None:
            self._github = GithubCompare()
        return self._github

    def list_commits(self, base: str, compare: str) -> List[CommitRecord]:
        """Fetch commits between two revisions using the configured mode.

        Raises:
            CommitSourceError: If no source could provide the history
        """
        if self.mode in ("local", "auto"):
            try:
                records = [normalize_local_commit(c) for c in self.history.list_commits(base, compare)]
                self.routing["list_commits"] = "local"
                return records
            except GitHistoryError as e:
                if self.mode == "local":
                    raise CommitSourceError(str(e), code="REPO_UNAVAILABLE") from e
                logger.warning(f"Local history unavailable ({e}), falling back to GitHub REST")

        try:
            raw = self.github.compare_commits(self.owner, self.repo, base, compare)
        except GithubAuthError as e:
            raise CommitSourceError(f"Failed to compare {base}...{compare}: {e}", code="UNAUTHORIZED") from e
        except GithubApiError as e:
            code = self._map_api_error_to_code(str(e))
            raise CommitSourceError(f"Failed to compare {base}...{compare}: {e}", code=code) from e
        self.routing["list_commits"] = "github"
        return [normalize_github_commit(c) for c in raw]

    def close(self) -> None:
        if self._github is not None:
            self._github.close()

    def _map_api_error_to_code(self, message: str) -> str:
        m = message.lower()
        if "timeout" in m:
            return "TIMEOUT"
        if "not found" in m or "404" in m:
            return "NOT_FOUND"
        if "unauthorized" in m or "401" in m or "403" in m:
            return "UNAUTHORIZED"
        if "429" in m or "rate limit" in m:
            return "RATE_LIMIT"
        if "network" in m or "connection" in m:
            return "NETWORK"
        return "UNKNOWN"
