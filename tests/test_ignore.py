"""Tests covering the ignored-asset set."""

from __future__ import annotations

from package_exporter.assets import AssetDatabase
from package_exporter.ignore import IgnoreSet

from conftest import guid_for


def test_add_remove_contains(database: AssetDatabase, write_asset) -> None:
    write_asset("Assets/Foo/Secret.asset", "secret")
    ignore_set = IgnoreSet(database)

    assert ignore_set.add("Assets/Foo/Secret.asset")
    assert not ignore_set.add("Assets/Foo/Secret.asset")
    assert ignore_set.contains("Assets/Foo/Secret.asset")
    assert "Assets/Foo/Secret.asset" in ignore_set
    assert len(ignore_set) == 1

    assert ignore_set.remove("Assets/Foo/Secret.asset")
    assert not ignore_set.remove("Assets/Foo/Secret.asset")
    assert not ignore_set.contains("Assets/Foo/Secret.asset")
    assert not ignore_set


def test_membership_is_exact(database: AssetDatabase, write_asset) -> None:
    """Identifiers sharing a prefix or suffix must not match each other."""

    write_asset("Assets/Foo/A.asset", "", guid="aaaa1111bbbb2222cccc3333dddd4444")
    write_asset("Assets/Foo/B.asset", "", guid="aaaa1111bbbb2222")
    ignore_set = IgnoreSet(database, ["aaaa1111bbbb2222cccc3333dddd4444"])

    assert ignore_set.contains("Assets/Foo/A.asset")
    assert not ignore_set.contains("Assets/Foo/B.asset")


def test_setting_round_trip_preserves_order(database: AssetDatabase) -> None:
    ignore_set = IgnoreSet.from_setting(database, ",b,a,,b,c")

    assert ignore_set.identifiers == ("b", "a", "c")
    assert ignore_set.to_setting() == "b,a,c"
    assert IgnoreSet.from_setting(database, None).identifiers == ()


def test_folder_ignores_its_subtree(database: AssetDatabase, write_asset, project_root) -> None:
    write_asset("Assets/Foo/Private/Notes.cs", "")
    (project_root / "Assets/Foo/Private.meta").write_text(
        f"guid: {guid_for('Assets/Foo/Private')}\n",
        encoding="utf-8",
    )
    ignore_set = IgnoreSet(database, [guid_for("Assets/Foo/Private")])

    assert ignore_set.is_ignored("Assets/Foo/Private")
    assert ignore_set.is_ignored("Assets/Foo/Private/Notes.cs")
    assert not ignore_set.contains("Assets/Foo/Private/Notes.cs")
    assert not ignore_set.is_ignored("Assets/Foo")


def test_prune_drops_unknown_identifiers(database: AssetDatabase, write_asset) -> None:
    write_asset("Assets/Foo/Secret.asset", "")
    known = guid_for("Assets/Foo/Secret.asset")
    ignore_set = IgnoreSet(database, [known, "deadbeefdeadbeefdeadbeefdeadbeef"])

    assert ignore_set.prune() == ["deadbeefdeadbeefdeadbeefdeadbeef"]
    assert ignore_set.identifiers == (known,)
