#!/usr/bin/env python3
from __future__ import annotations

from typing import List, Optional

from utils.commit_models import CATEGORIES, ChangelogBundle
from configs.config import Config

RENDER_STYLES = ("sectioned", "flat")

_PLATFORM_HEADINGS = (
	("android", "Android specific"),
	("ios", "iOS specific"),
)
_PLATFORM_PREFIXES = (
	("general", ""),
	("android", "[Android] "),
	("ios", "[iOS] "),
)


def version_label(version: str) -> str:
	version = (version or "").strip()
	return version[1:] if version[:1] in ("v", "V") else version


def bullet_lines(lines: List[str]) -> str:
	return "\n".join("- " + line for line in (lines or []))


def _block(heading: str, body: str) -> str:
	# Headings stay even when the body is empty
	return f"{heading}\n\n{body}" if body else heading


def _render_sectioned(bundle: ChangelogBundle) -> List[str]:
	blocks: List[str] = []
	for category in CATEGORIES:
		blocks.append(_block(f"### {category.capitalize()}", bullet_lines(bundle.entries(category, "general"))))
		for platform, title in _PLATFORM_HEADINGS:
			blocks.append(_block(f"#### {title}", bullet_lines(bundle.entries(category, platform))))
	return blocks


def _render_flat(bundle: ChangelogBundle) -> List[str]:
	blocks: List[str] = []
	for category in CATEGORIES:
		lines = [prefix + entry for platform, prefix in _PLATFORM_PREFIXES for entry in bundle.entries(category, platform)]
		blocks.append(_block(f"### {category.capitalize()}", bullet_lines(lines)))
	return blocks


def render_markdown(version: str, bundle: ChangelogBundle, *, style: Optional[str] = None) -> str:
	"""Render one changelog release section.

	"sectioned" lists general entries under each category heading followed by
	Android and iOS subsections; "flat" folds platforms into one list with a
	platform prefix per line.
	"""
	style = style or Config.RENDER_STYLE
	if style not in RENDER_STYLES:
		raise ValueError(f"Unsupported render style: {style}")
	blocks = [f"## [{version_label(version)}]"]
	if style == "flat":
		blocks.extend(_render_flat(bundle))
	else:
		blocks.extend(_render_sectioned(bundle))
	return "\n\n".join(blocks) + "\n"
