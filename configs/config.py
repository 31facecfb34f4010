import os
from typing import Dict, Any, List


def _split_csv(raw: str) -> List[str]:
	return [part.strip().lower() for part in raw.split(",") if part.strip()]


class Config:
	"""Configuration for the changelog generator."""

	# GitHub Configuration
	GITHUB_OWNER = os.getenv("GITHUB_OWNER", "facebook")
	GITHUB_REPO = os.getenv("GITHUB_REPO", "react-native")
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))

	# Commit source
	COMMIT_SOURCE = os.getenv("COMMIT_SOURCE", "auto")
	LOCAL_REPO_PATH = os.getenv("LOCAL_REPO_PATH", "react-native")
	MAX_COMMITS = int(os.getenv("MAX_COMMITS", "2000"))
	SHORT_SHA_LENGTH = int(os.getenv("SHORT_SHA_LENGTH", "7"))

	# Version resolution
	NPM_PACKAGE = os.getenv("NPM_PACKAGE", "react-native")
	NPM_REGISTRY_URL = os.getenv("NPM_REGISTRY_URL", "https://registry.npmjs.org").rstrip('/')
	CHANGELOG_PATH = os.getenv("CHANGELOG_PATH", "CHANGELOG.md")

	# Rendering
	COMMIT_URL_BASE = os.getenv("COMMIT_URL_BASE", "https://github.com/facebook/react-native/commit").rstrip('/')
	RENDER_STYLE = os.getenv("RENDER_STYLE", "sectioned")

	# Substrings that mark CI and release-tooling churn
	NOISE_KEYWORDS = _split_csv(
		os.getenv("NOISE_KEYWORDS", "travis,circleci,circle ci,bump version numbers,docker")
	)

	# Observability
	METRICS_ROOT = os.getenv("METRICS_ROOT", ".cache/changelog/metrics")
	METRICS_ENABLED = bool(int(os.getenv("METRICS_ENABLED", "0")))

	@classmethod
	def observability(cls) -> Dict[str, Any]:
		return {
			"metrics_root": cls.METRICS_ROOT,
			"metrics_enabled": cls.METRICS_ENABLED,
		}

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST compare client."""
		return {
			"owner": cls.GITHUB_OWNER,
			"repo": cls.GITHUB_REPO,
			"api_url": cls.GITHUB_API_URL,
			"token": cls.GITHUB_TOKEN,
			"timeout_s": cls.HTTP_TIMEOUT_S
		}

	@classmethod
	def get_source_config(cls) -> Dict[str, Any]:
		"""Get commit source configuration.

		Returns:
			Mapping with source mode, local checkout path and commit cap.
		"""
		return {
			"mode": cls.COMMIT_SOURCE,
			"repo_path": cls.LOCAL_REPO_PATH,
			"max_commits": cls.MAX_COMMITS,
		}
