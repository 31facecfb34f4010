#!/usr/bin/env python3
"""Changelog agent for generating a release section from commit history.

This agent fetches the commits between two versions, drops CI churn and
reverted changes, classifies what is left and renders a markdown changelog
section ready for human curation.
"""

import json
import logging
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file before Config reads them
load_dotenv()

from utils.commit_classifier import build_changelog
from utils.commit_filters import filter_noise_commits, filter_revert_commits
from utils.commit_models import ChangelogBundle, CommitRecord
from utils.commit_source import CommitSource, CommitSourceError, SOURCE_MODES
from utils.markdown_renderer import RENDER_STYLES, render_markdown
from utils.metrics import Timer, incr
from utils.version_resolver import (
	VersionError, coerce_version, format_version, presume_base_from_changelog,
	presume_compare, validate_versions,
)

# Set up logging
logger = logging.getLogger(__name__)


def build_bundle(commits: List[CommitRecord], commit_url_base: Optional[str] = None) -> ChangelogBundle:
	"""Run the filter and classification passes over an ordered commit list."""
	fetched = len(commits)
	without_noise = filter_noise_commits(commits)
	survivors = filter_revert_commits(without_noise)
	bundle = build_changelog(survivors, commit_url_base)

	incr("changelog.commits.noise", value=fetched - len(without_noise))
	incr("changelog.commits.reverts", value=len(without_noise) - len(survivors))
	incr("changelog.entries", value=bundle.total())
	logger.info(
		f"✓ {fetched} commits: {fetched - len(without_noise)} noise, "
		f"{len(without_noise) - len(survivors)} reverted, {bundle.total()} changelog entries"
	)
	return bundle


def release_label(compare: str) -> str:
	version = coerce_version(compare)
	return format_version(version) if version else compare


class ChangelogAgent:
	"""Agent for fetching commit history and generating changelog sections."""

	def __init__(self, source: Optional[CommitSource] = None):
		"""Initialize the changelog agent.

		Args:
			source: Optional CommitSource instance. If None, creates one from Config.
		"""
		self.source = source or CommitSource()
		logger.info("Changelog agent initialized")

	def resolve_range(self, base: Optional[str], compare: Optional[str]) -> Tuple[str, str]:
		"""Fill in missing versions and validate the range.

		Raises:
			VersionError: If a version cannot be resolved or the range is invalid
		"""
		if not base:
			base = presume_base_from_changelog()
		if not compare:
			compare = presume_compare(self.source.history)
		logger.warning(f"Generating changelog between {base} and {compare}")
		validate_versions(base, compare)
		return base, compare

	def fetch_commits(self, base: str, compare: str) -> List[CommitRecord]:
		with Timer("changelog.fetch", base=base, compare=compare):
			commits = self.source.list_commits(base, compare)
		incr("changelog.commits.fetched", value=len(commits))
		logger.info(f"✓ Fetched {len(commits)} commits via {self.source.routing.get('list_commits', 'unknown')}")
		return commits

	def generate(self, base: str, compare: str) -> ChangelogBundle:
		commits = self.fetch_commits(base, compare)
		with Timer("changelog.build", base=base, compare=compare):
			return build_bundle(commits)

	def render(self, compare: str, bundle: ChangelogBundle, style: Optional[str] = None) -> str:
		return render_markdown(release_label(compare), bundle, style=style)

	def close(self) -> None:
		"""Close the agent and cleanup resources."""
		self.source.close()
		logger.info("Changelog agent closed")


def write_output(text: str, out: Optional[str]) -> None:
	if out:
		with open(out, "w", encoding="utf-8") as f:
			f.write(text)
		logger.info(f"✓ Changelog written to {out}")
	else:
		print(text)


def build_parser():
	import argparse

	parser = argparse.ArgumentParser(
		description="Generate a React Native changelog from the commits between two versions",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.changelog_agent --base v0.71.0 --compare v0.72.0
  python -m agents.changelog_agent -b 0.71-stable -c 0.72-stable --source local -o section.md
  python -m agents.changelog_agent --source github --json
		"""
	)
	parser.add_argument("--base", "-b", help="Base version branch or commit to compare against; "
		"if omitted, the latest version listed in the changelog is used")
	parser.add_argument("--compare", "-c", "--head", dest="compare", help="New version branch, tag or commit; "
		"if omitted, the latest npm release is tried, then the highest -stable branch")
	parser.add_argument("--out", "-o", help="Write the output to a file instead of stdout")
	parser.add_argument("--source", choices=SOURCE_MODES, default=None, help="Where to read commits from (default: COMMIT_SOURCE)")
	parser.add_argument("--repo-path", help="Local checkout path (default: LOCAL_REPO_PATH)")
	parser.add_argument("--owner", help="GitHub repository owner (default: GITHUB_OWNER)")
	parser.add_argument("--repo", help="GitHub repository name (default: GITHUB_REPO)")
	parser.add_argument("--style", choices=RENDER_STYLES, default=None, help="Markdown layout (default: RENDER_STYLE)")
	parser.add_argument("--json", action="store_true", help="Output the grouped entries as JSON instead of markdown")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	return parser


def main(argv: Optional[List[str]] = None):
	"""CLI entry point for the changelog agent."""
	args = build_parser().parse_args(argv)

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from libraries unless in debug mode
	if not args.verbose:
		logging.getLogger("utils.git_history").setLevel(logging.WARNING)
		logging.getLogger("utils.github_compare").setLevel(logging.WARNING)
		logging.getLogger("urllib3").setLevel(logging.WARNING)

	agent = None
	try:
		source = CommitSource(mode=args.source, repo_path=args.repo_path, owner=args.owner, repo=args.repo)
		agent = ChangelogAgent(source)
		base, compare = agent.resolve_range(args.base, args.compare)
		bundle = agent.generate(base, compare)
		if args.json:
			output = json.dumps(bundle.model_dump(), indent=2)
		else:
			output = agent.render(compare, bundle, style=args.style)
		write_output(output, args.out)
		sys.exit(0)

	except (VersionError, CommitSourceError) as e:
		print(f"Error: {e}", file=sys.stderr)
		if args.verbose:
			logger.exception("Detailed error information:")
		sys.exit(1)

	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		sys.exit(1)

	except Exception as e:
		# Unexpected error
		print(f"Unexpected error: {e}", file=sys.stderr)
		if args.verbose:
			logger.exception("Detailed error information:")
		else:
			print("Use --verbose for more details", file=sys.stderr)
		sys.exit(1)

	finally:
		if agent:
			agent.close()


if __name__ == "__main__":
	main()
