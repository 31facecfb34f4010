#!/usr/bin/env python3
"""GitHub REST API client for comparing two revisions.

Used when no local checkout is available. The compare endpoint returns the
commits between two refs, oldest first, together with author metadata.
"""

import logging
from typing import Dict, List, Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GithubAuthError(Exception):
    """Raised when GitHub API authentication fails."""
    pass


class GithubApiError(Exception):
    """Raised when GitHub API operations fail."""
    pass


class GithubCompare:
    """Client for the GitHub compare endpoint."""

    def __init__(self, token: Optional[str] = None, timeout_s: Optional[int] = None,
                 base_url: Optional[str] = None):
        """Initialize the compare client.

        Args:
            token: GitHub Personal Access Token (defaults to Config.GITHUB_TOKEN; optional for public repos)
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            base_url: API root (defaults to Config.GITHUB_API_URL)
        """
        github_config = Config.get_github_config()
        self.token = token or github_config["token"]
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.base_url = (base_url or github_config["api_url"]).rstrip('/')

        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'rn-changelog-generator/1.0'
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'
        else:
            logger.debug("No GitHub token configured; using unauthenticated requests")

        # Configure retries for transient failures
        retry_strategy = Retry(
            total=3,
            status_forcelist=[429, 500, 502, 503, 504],
            backoff_factor=1,
            allowed_methods=["HEAD", "GET", "OPTIONS"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)

        logger.info("GitHub compare client initialized")

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> List[Dict[str, Any]]:
        """Fetch the commits between two refs via GitHub REST API.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Base tag, branch or SHA
            head: Compare tag, branch or SHA

        Returns:
            List of commit dictionaries as returned by GitHub

        Raises:
            GithubAuthError: If the token is rejected
            GithubApiError: If the request fails or the refs are unknown
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/compare/{base}...{head}"

        try:
            logger.info(f"Fetching comparison: {owner}/{repo} {base}...{head}")

            # Large release ranges span several pages
            all_commits: List[Dict[str, Any]] = []
            page = 1
            per_page = 100

            while True:
                params = {'page': page, 'per_page': per_page}
                response = self.session.get(url, params=params, timeout=self.timeout_s)

                if response.status_code == 401:
                    raise GithubAuthError("Invalid GitHub token or insufficient permissions")
                elif response.status_code == 404:
                    raise GithubApiError(
                        f"Comparison {base}...{head} not found in {owner}/{repo}; "
                        "did you pass a valid tag, branch, or commit hash?"
                    )
                elif response.status_code != 200:
                    raise GithubApiError(f"GitHub API error: HTTP {response.status_code}")

                data = response.json() or {}
                page_commits = data.get("commits") or []
                if not page_commits:  # No more commits
                    break

                all_commits.extend(page_commits)
                total = data.get("total_commits")
                if total is None or len(all_commits) >= total:
                    break
                page += 1

                # Safety limit to prevent infinite loops
                if page > 50:
                    logger.warning(
                        f"Comparison {base}...{head} has {total} commits; stopping after {len(all_commits)}"
                    )
                    break

            logger.debug(f"✓ Retrieved {len(all_commits)} commits for {base}...{head}")
            return all_commits

        except requests.RequestException as e:
            raise GithubApiError(f"Failed to compare {owner}/{repo} {base}...{head}: {e}")

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
