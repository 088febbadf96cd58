"""Tests for the grouped feature tree (type and player views)."""

import pytest

from quiet_year.models import FEATURE_TYPES, BuiltFeature
from quiet_year.tree import (
    NO_DESCRIPTION,
    UNKNOWN_PLAYER,
    FeatureRecord,
    build_tree,
    feature_records,
)


def _rec(fid: str, title: str, player: str = "Alice", ftype: str = "npcs",
         description: str = "desc") -> FeatureRecord:
    return FeatureRecord(
        id=fid, title=title, description=description,
        player_name=player, feature_type=ftype,
    )


def _leaf_ids(node) -> list[str]:
    if node.children is None:
        return [node.feature_id]
    ids = []
    for child in node.children:
        ids.extend(_leaf_ids(child))
    return ids


RECORDS = [
    _rec("f1", "Zelda", "Bob", "npcs"),
    _rec("f2", "apple tree", "Alice", "locations"),
    _rec("f3", "Brom", "Alice", "npcs"),
    _rec("f4", "Élan", "", "deities"),
    _rec("f5", "Echo", "Bob", "npcs"),
]


# ── feature_records ──────────────────────────────────────────


def _feature(description: str = "", **kwargs) -> BuiltFeature:
    return BuiltFeature(
        player_id="1", player_name="Alice", description=description,
        season="Spring", turn=1, **kwargs,
    )


def test_records_prefer_canvas_title():
    records = feature_records({"s1": _feature("A well")}, titles={"s1": "Old Well"})
    assert records[0].title == "Old Well"
    assert records[0].description == "A well"


def test_records_fall_back_to_description_then_id():
    records = feature_records(
        {"s1": _feature("A well"), "s2": _feature("")},
        titles={"s1": "   "},
    )
    by_id = {r.id: r for r in records}
    assert by_id["s1"].title == "A well"
    assert by_id["s2"].title == "Feature s2"
    assert by_id["s2"].description == NO_DESCRIPTION


# ── Type view ────────────────────────────────────────────────


def test_type_view_has_six_folders_in_order():
    tree = build_tree([], "type")
    assert [n.label for n in tree.nodes] == [label for _, label in FEATURE_TYPES]
    assert [n.id for n in tree.nodes] == [f"type:{t}" for t, _ in FEATURE_TYPES]
    assert all(n.children == [] for n in tree.nodes)
    assert tree.default_expanded == []
    assert tree.folder_ids == [n.id for n in tree.nodes]


def test_type_view_sorts_children_by_title():
    tree = build_tree(RECORDS, "type")
    npcs = tree.nodes[0]
    assert [c.label for c in npcs.children] == ["Brom", "Echo", "Zelda"]
    assert npcs.children[0].id == "feature:f3"
    assert npcs.children[0].player_name == "Alice"
    assert npcs.children[0].children is None


def test_type_view_contains_each_feature_once():
    tree = build_tree(RECORDS, "type")
    leaves = [fid for node in tree.nodes for fid in _leaf_ids(node)]
    assert sorted(leaves) == sorted(r.id for r in RECORDS)


def test_type_view_default_expanded_skips_empty_folders():
    tree = build_tree(RECORDS, "type")
    assert tree.default_expanded == ["type:npcs", "type:deities", "type:locations"]


def test_sort_ignores_case_and_accents():
    records = [_rec("a", "zebra"), _rec("b", "Élan"), _rec("c", "apple"), _rec("d", "Eagle")]
    tree = build_tree(records, "type")
    assert [c.label for c in tree.nodes[0].children] == ["apple", "Eagle", "Élan", "zebra"]


def test_sort_puts_lowercase_first_on_case_ties():
    records = [_rec("a", "Apple"), _rec("b", "apple"), _rec("c", "APPLE")]
    tree = build_tree(records, "type")
    assert [c.label for c in tree.nodes[0].children] == ["apple", "Apple", "APPLE"]


# ── Player view ──────────────────────────────────────────────


def test_player_view_groups_sorted_by_name():
    tree = build_tree(RECORDS, "player")
    assert [n.label for n in tree.nodes] == ["Alice", "Bob", UNKNOWN_PLAYER]


def test_player_view_only_emits_non_empty_types():
    tree = build_tree(RECORDS, "player")
    alice, bob, unknown = tree.nodes
    assert [c.label for c in alice.children] == ["NPCs", "Locations"]
    assert [c.label for c in bob.children] == ["NPCs"]
    assert [leaf.label for leaf in bob.children[0].children] == ["Echo", "Zelda"]
    assert [c.label for c in unknown.children] == ["Deities"]


def test_player_view_folder_ids():
    tree = build_tree(RECORDS, "player")
    assert tree.folder_ids == [
        "player:alice-0",
        "player:alice-0:npcs",
        "player:alice-0:locations",
        "player:bob-1",
        "player:bob-1:npcs",
        "player:unknown-adventurer-2",
        "player:unknown-adventurer-2:deities",
    ]
    assert tree.default_expanded == tree.folder_ids


def test_player_view_non_ascii_name_slug():
    tree = build_tree([_rec("x", "t", "???")], "player")
    assert tree.nodes[0].id == "player:0"


def test_player_view_empty():
    tree = build_tree([], "player")
    assert tree.nodes == []
    assert tree.folder_ids == []


# ── Determinism ──────────────────────────────────────────────


@pytest.mark.parametrize("view", ["type", "player"])
def test_build_is_deterministic(view):
    assert build_tree(RECORDS, view) == build_tree(list(RECORDS), view)


@pytest.mark.parametrize("view", ["type", "player"])
def test_ids_stable_across_input_order(view):
    first = build_tree(RECORDS, view)
    second = build_tree(list(reversed(RECORDS)), view)
    assert first.folder_ids == second.folder_ids
    assert first == second


def test_duplicate_titles_ordered_by_id():
    tree = build_tree([_rec("b", "Same"), _rec("a", "Same")], "type")
    assert [c.feature_id for c in tree.nodes[0].children] == ["a", "b"]


def test_unknown_view_mode():
    with pytest.raises(ValueError):
        build_tree(RECORDS, "season")
