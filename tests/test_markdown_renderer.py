from __future__ import annotations

import pytest

from utils.commit_models import ChangelogBundle, ClassifiedEntry
from utils.markdown_renderer import render_markdown, version_label


def _bundle() -> ChangelogBundle:
    bundle = ChangelogBundle()
    bundle.add(ClassifiedEntry(text="Shared thing", category="added", platform="general", commit_id="a"))
    bundle.add(ClassifiedEntry(text="Droid thing", category="added", platform="android", commit_id="b"))
    bundle.add(ClassifiedEntry(text="Apple fix", category="fixed", platform="ios", commit_id="c"))
    return bundle


def test_empty_bundle_renders_full_skeleton() -> None:
    rendered = render_markdown("v0.72.0", ChangelogBundle(), style="sectioned")

    assert rendered.startswith("## [0.72.0]\n\n### Added\n\n#### Android specific\n\n#### iOS specific\n\n### Changed")
    for heading in ("Added", "Changed", "Deprecated", "Removed", "Fixed", "Security"):
        assert f"### {heading}\n" in rendered
    assert rendered.count("#### Android specific") == 6
    assert rendered.count("#### iOS specific") == 6
    assert "- " not in rendered


def test_sectioned_layout_places_entries_under_headings() -> None:
    rendered = render_markdown("0.72.0", _bundle(), style="sectioned")

    assert "### Added\n\n- Shared thing\n\n#### Android specific\n\n- Droid thing\n\n#### iOS specific\n\n### Changed" in rendered
    assert "### Fixed\n\n#### Android specific\n\n#### iOS specific\n\n- Apple fix\n\n### Security" in rendered
    assert rendered.endswith("### Security\n\n#### Android specific\n\n#### iOS specific\n")


def test_flat_layout_prefixes_platform() -> None:
    rendered = render_markdown("0.72.0", _bundle(), style="flat")

    assert "### Added\n\n- Shared thing\n- [Android] Droid thing\n\n### Changed\n\n### Deprecated" in rendered
    assert "### Fixed\n\n- [iOS] Apple fix" in rendered
    assert "####" not in rendered


def test_unknown_style_is_rejected() -> None:
    with pytest.raises(ValueError):
        render_markdown("0.72.0", ChangelogBundle(), style="fancy")


def test_version_label_strips_leading_v() -> None:
    assert version_label("v0.72.0") == "0.72.0"
    assert version_label("0.72.0-rc.1") == "0.72.0-rc.1"
