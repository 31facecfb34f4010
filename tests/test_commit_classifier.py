from __future__ import annotations

from typing import Optional

from utils.commit_classifier import (
    build_changelog,
    classify_commit,
    detect_category,
    detect_platform,
    extract_change_text,
)
from utils.commit_models import CATEGORIES, PLATFORMS, AuthorInfo, CommitRecord

URL = "https://example.com/commit"


def _commit(message: str, author: Optional[AuthorInfo] = None, sha: str = "abc1234") -> CommitRecord:
    return CommitRecord(id=sha, message=message, author=author)


def test_explicit_tag_overrides_platform_keyword() -> None:
    entry = classify_commit(_commit("[General] Added something for Android"), URL)

    assert entry is not None
    assert entry.platform == "general"
    assert entry.category == "added"


def test_category_priority_order() -> None:
    assert detect_category("Added a prop and fixed a crash") == "added"
    assert detect_category("Removed the old flag; fixed docs") == "fixed"
    assert detect_category("Deprecated and removed API") == "removed"
    assert detect_category("Deprecated a security option") == "deprecated"
    assert detect_category("Tighten security of bundle loading") == "security"


def test_unmatched_category_defaults_to_changed() -> None:
    assert detect_category("Refactor layout code") == "changed"
    # Whole-word matching only
    assert detect_category("Add a fixedWidth prop") == "changed"


def test_platform_keywords() -> None:
    assert detect_platform("Use java.util.Optional in bridge") == "android"
    assert detect_platform("Update ReactAndroid gradle setup") == "android"
    assert detect_platform("Support Xcode 15") == "ios"
    assert detect_platform("Change RCTView border handling") == "ios"
    assert detect_platform("Make iPad split view work") == "ios"
    assert detect_platform("Tidy up the JS renderer") == "general"


def test_platform_tag_suppresses_other_platform() -> None:
    assert detect_platform("Fix Android style parity\n\n[iOS] [Fixed] - Fix style") == "ios"
    assert detect_platform("Mirror the iOS behaviour\n\n[Android] [Changed] - Mirror it") == "android"


def test_internal_changes_are_skipped() -> None:
    assert classify_commit(_commit("[Internal] Added a test helper"), URL) is None
    assert classify_commit(_commit("[Fabric] Fix layout of text"), URL) is None
    assert classify_commit(_commit("[TM] Add codegen for modules"), URL) is None

    bundle = build_changelog([_commit("[Internal] Added android stuff\n\n[Android] [Added] - Thing")], URL)
    assert bundle.is_empty()


def test_extract_prefers_last_tagged_line() -> None:
    message = (
        "Fix crash on scroll (#1234)\n"
        "\n"
        "Summary: the scroll view crashed.\n"
        "\n"
        "Changelog:\n"
        "[iOS] [Fixed] - Fixed crash when scrolling."
    )

    assert extract_change_text(message) == "Fixed crash when scrolling"


def test_extract_falls_back_to_summary_line() -> None:
    assert extract_change_text("Add onScroll prop to FlatList (#4321)\n\nDetails") == "Add onScroll prop to FlatList"
    assert extract_change_text("- Fixed thing.") == "Fixed thing"
    assert extract_change_text("") == ""


def test_entry_text_carries_provenance() -> None:
    plain = classify_commit(_commit("Added a thing"), URL)
    by_login = classify_commit(_commit("Added a thing", AuthorInfo(name="Octo Cat", login="octocat")), URL)
    by_email = classify_commit(_commit("Added a thing", AuthorInfo(name="Jane", email="jane@example.com")), URL)
    name_only = classify_commit(_commit("Added a thing", AuthorInfo(name="Jane")), URL)

    assert plain.text == f"Added a thing ([abc1234]({URL}/abc1234))"
    assert by_login.text == f"Added a thing ([abc1234]({URL}/abc1234) by [@octocat](https://github.com/octocat))"
    assert by_email.text == f"Added a thing ([abc1234]({URL}/abc1234) by [Jane](mailto:jane@example.com))"
    assert name_only.text == f"Added a thing ([abc1234]({URL}/abc1234))"


def test_tagged_commit_lands_in_its_bucket() -> None:
    commit = _commit("Fix scroll\n\nChangelog:\n[iOS] [Fixed] - Fixed crash when scrolling", sha="def5678")

    bundle = build_changelog([commit], URL)

    assert bundle.entries("fixed", "ios") == [f"Fixed crash when scrolling ([def5678]({URL}/def5678))"]
    assert bundle.total() == 1


def test_bundle_always_has_every_bucket() -> None:
    bundle = build_changelog([], URL)

    dumped = bundle.model_dump()
    assert list(dumped) == list(CATEGORIES)
    for category in CATEGORIES:
        assert sorted(dumped[category]) == sorted(PLATFORMS)
        assert all(dumped[category][p] == [] for p in PLATFORMS)


def test_bucket_order_follows_input_order() -> None:
    commits = [
        _commit("Added first thing", sha="aaaaaaa"),
        _commit("Refactor renderer", sha="bbbbbbb"),
        _commit("Added second thing", sha="ccccccc"),
    ]

    bundle = build_changelog(commits, URL)

    assert [e.split(" (")[0] for e in bundle.entries("added", "general")] == ["Added first thing", "Added second thing"]
    assert len(bundle.entries("changed", "general")) == 1


def test_classification_is_deterministic() -> None:
    commits = [
        _commit("Added Android thing", sha="aaaaaaa"),
        _commit("Fixed RCTText crash", sha="bbbbbbb"),
        _commit("Deprecated old API", sha="ccccccc"),
    ]

    assert build_changelog(commits, URL) == build_changelog(commits, URL)
