#!/usr/bin/env python3
"""Local Git history reader.

Reads commit history from a local checkout with the git CLI. Used as the
primary commit source; the GitHub compare API is the fallback.
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
# hash, author name, author email, raw body
_LOG_FORMAT = "%H%x1f%an%x1f%ae%x1f%B%x1e"


class GitHistoryError(Exception):
    """Raised when the local checkout cannot be read."""
    pass


class GitHistory:
    """Reads commits and branches from a local Git checkout."""

    def __init__(self, repo_path: Optional[str] = None, max_commits: Optional[int] = None):
        """Initialize the reader.

        Args:
            repo_path: Path of the checkout (defaults to Config.LOCAL_REPO_PATH)
            max_commits: Cap on commits per query (defaults to Config.MAX_COMMITS)
        """
        source_config = Config.get_source_config()
        self.repo_path = os.path.abspath(repo_path or source_config["repo_path"])
        self.max_commits = max_commits or source_config["max_commits"]

    def _run(self, args: List[str]) -> str:
        if not os.path.isdir(self.repo_path):
            raise GitHistoryError(
                f"Unable to open local workspace; is it checked out in {self.repo_path}?"
            )
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True
            )
        except FileNotFoundError as e:
            raise GitHistoryError("Git is not installed or not found in PATH") from e
        except subprocess.CalledProcessError as e:
            error_msg = (e.stderr or e.stdout or str(e)).strip()
            if "not a git repository" in error_msg.lower():
                raise GitHistoryError(f"Not a Git repository: {self.repo_path}") from e
            raise GitHistoryError(f"Git command failed: git {' '.join(args)}\nError: {error_msg}") from e
        return result.stdout

    def list_commits(self, base: str, head: str) -> List[Dict[str, str]]:
        """List commits reachable from head but not from base, newest first.

        Returns:
            Raw records with keys sha, author_name, author_email, body
        """
        logger.info(f"Reading local history {base}..{head} in {self.repo_path}")
        output = self._run([
            "log",
            f"--format={_LOG_FORMAT}",
            "-n", str(self.max_commits),
            f"{base}..{head}",
        ])
        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            parts = record.split(_FIELD_SEP, 3)
            if len(parts) != 4:
                logger.warning(f"Skipping malformed git log record: {record[:80]!r}")
                continue
            sha, name, email, body = parts
            commits.append({
                "sha": sha.strip(),
                "author_name": name,
                "author_email": email,
                "body": body.strip("\n"),
            })
        logger.debug(f"✓ Read {len(commits)} local commits")
        return commits

    def list_branches(self) -> List[str]:
        """Return local branch names."""
        output = self._run(["for-each-ref", "--format=%(refname)", "refs/heads/"])
        return [
            line.strip()[len("refs/heads/"):]
            for line in output.splitlines()
            if line.strip().startswith("refs/heads/")
        ]
