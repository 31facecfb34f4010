#!/usr/bin/env python3
"""Resolution and validation of the base and compare versions.

The base defaults to the newest release already listed in the changelog;
the compare target defaults to the latest published npm version, falling
back to the highest local `*-stable` branch.
"""

from __future__ import annotations

import logging
import os
import re
from typing import List, Optional, Tuple

import requests

from configs.config import Config
from utils.git_history import GitHistory, GitHistoryError

logger = logging.getLogger(__name__)

_NUMERIC_VERSION = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_RELEASE_HEADING = re.compile(r"^##\s+\[?v?(\d+\.\d+(?:\.\d+)?[^\]\s]*)\]?", re.MULTILINE)

Version = Tuple[int, int, int]


class VersionError(Exception):
	"""Raised when the version range is unusable, with a typed code."""
	def __init__(self, message: str, code: str = "UNKNOWN") -> None:
		super().__init__(message)
		self.code = code


def coerce_version(text: Optional[str]) -> Optional[Version]:
	"""Coerce a tag or branch name such as `v0.72.1` or `0.72-stable` to a tuple."""
	if not text:
		return None
	m = _NUMERIC_VERSION.search(text)
	if not m:
		return None
	return tuple(int(part or 0) for part in m.groups())  # type: ignore[return-value]


def format_version(version: Version) -> str:
	return ".".join(str(part) for part in version)


def validate_versions(base: str, compare: str) -> None:
	if base == compare:
		raise VersionError(
			"Base and compare versions are the same, but this makes no sense. "
			"Perhaps the latest version is already present in the changelog?",
			code="SAME_VERSION",
		)
	b, c = coerce_version(base), coerce_version(compare)
	if b is not None and c is not None and b > c:
		raise VersionError(
			"Base is newer than the compare version; perhaps it's already been run?",
			code="BASE_NEWER",
		)


def presume_base_from_changelog(path: Optional[str] = None) -> str:
	"""Return the newest release in the changelog as a `v`-prefixed tag."""
	path = path or Config.CHANGELOG_PATH
	if not os.path.exists(path):
		raise VersionError(f"Changelog not found: {path}; pass --base explicitly", code="NO_CHANGELOG")
	with open(path, "r", encoding="utf-8") as f:
		content = f.read()
	m = _RELEASE_HEADING.search(content)
	if not m:
		raise VersionError(f"No release heading found in {path}; pass --base explicitly", code="NO_CHANGELOG")
	base = "v" + m.group(1)
	logger.warning(f"Using base version {base} from the top of the changelog")
	return base


def latest_published_version(package: Optional[str] = None, registry_url: Optional[str] = None,
							 timeout_s: Optional[int] = None) -> str:
	"""Return the `latest` dist-tag of an npm package as a `v`-prefixed tag."""
	package = package or Config.NPM_PACKAGE
	registry_url = (registry_url or Config.NPM_REGISTRY_URL).rstrip("/")
	url = f"{registry_url}/{package}/latest"
	try:
		response = requests.get(url, timeout=timeout_s or Config.HTTP_TIMEOUT_S)
	except requests.RequestException as e:
		raise VersionError(f"Failed to fetch latest version of {package}: {e}", code="NETWORK") from e
	if response.status_code != 200:
		raise VersionError(f"npm registry error for {package}: HTTP {response.status_code}", code="NOT_FOUND")
	version = (response.json() or {}).get("version")
	if not version:
		raise VersionError(f"npm registry returned no version for {package}", code="NOT_FOUND")
	return "v" + version


def highest_stable_branch(history: GitHistory) -> str:
	"""Return the local `*-stable` branch with the highest version."""
	try:
		branches = history.list_branches()
	except GitHistoryError as e:
		raise VersionError(
			f"Unable to get branches from {history.repo_path}; is it checked out and is Git installed? ({e})",
			code="REPO_UNAVAILABLE",
		) from e
	stable: List[Tuple[Version, str]] = []
	for branch in branches:
		if not branch.endswith("-stable"):
			continue
		version = coerce_version(branch)
		if version is not None:
			stable.append((version, branch))
	if not stable:
		raise VersionError(f"No -stable branches found in {history.repo_path}", code="NO_STABLE_BRANCH")
	return max(stable)[1]


def presume_compare(history: GitHistory, package: Optional[str] = None) -> str:
	try:
		return latest_published_version(package)
	except VersionError as e:
		logger.warning(f"{e}; falling back to the highest -stable branch")
	return highest_stable_branch(history)
