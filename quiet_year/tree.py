"""Hierarchical views of the feature store.

Two view modes share one grouping routine:

  type    six folders, one per feature type in declared order, always present
  player  one folder per player name (sorted), each holding only the
          non-empty feature-type subfolders

Leaves are features sorted by title. Folder ids are built from the view's
prefix and the group key, so rebuilding the same view yields the same ids:

  type:<type>                      type view folder
  player:<slug>                    player view folder
  player:<slug>:<type>             player view type subfolder
  feature:<feature id>             leaf

build_tree() is pure: the same records and view mode give an equal tree.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from quiet_year.models import FEATURE_TYPES, BuiltFeature, FeatureType
from quiet_year.text import collation_key, slugify

ViewMode = Literal["type", "player"]

UNKNOWN_PLAYER = "Unknown Adventurer"
NO_DESCRIPTION = "No description provided yet."


class FeatureRecord(BaseModel):
    """A feature flattened for display."""

    id: str
    title: str
    description: str
    player_name: str
    feature_type: FeatureType


class TreeNode(BaseModel):
    """A folder (``children`` is a list, maybe empty) or a feature leaf."""

    id: str
    label: str
    description: str | None = None
    player_name: str | None = None
    feature_id: str | None = None
    children: list[TreeNode] | None = None

    @property
    def is_folder(self) -> bool:
        return self.children is not None


class TreeStructure(BaseModel):
    nodes: list[TreeNode]
    folder_ids: list[str]
    default_expanded: list[str]


def feature_records(
    features: dict[str, BuiltFeature], titles: dict[str, str] | None = None
) -> list[FeatureRecord]:
    """Flatten the store for the tree views.

    ``titles`` carries names the canvas knows for some features. Without one,
    a feature is titled by its description, or "Feature <id>" if that's empty.
    """
    titles = titles or {}
    records = []
    for feature_id, feature in features.items():
        name = (titles.get(feature_id) or "").strip()
        records.append(FeatureRecord(
            id=feature_id,
            title=name or feature.description or f"Feature {feature_id}",
            description=feature.description or NO_DESCRIPTION,
            player_name=feature.player_name,
            feature_type=feature.feature_type,
        ))
    return records


# ---------------------------------------------------------------------------
# Grouping strategies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Grouping:
    key: Callable[[FeatureRecord], str]
    # (key, label) pairs in emission order, given the populated groups
    order: Callable[[dict[str, list[FeatureRecord]]], list[tuple[str, str]]]
    folder_id: Callable[[str | None, str, int], str]
    keep_empty: bool
    nested: _Grouping | None = None


def _type_order(_groups: dict[str, list[FeatureRecord]]) -> list[tuple[str, str]]:
    return list(FEATURE_TYPES)


def _type_folder_id(parent_id: str | None, key: str, _index: int) -> str:
    return f"{parent_id}:{key}" if parent_id else f"type:{key}"


def _player_key(record: FeatureRecord) -> str:
    return record.player_name or UNKNOWN_PLAYER


def _player_order(groups: dict[str, list[FeatureRecord]]) -> list[tuple[str, str]]:
    return [(name, name) for name in sorted(groups, key=collation_key)]


def _player_folder_id(_parent_id: str | None, key: str, index: int) -> str:
    return f"player:{slugify(f'{key}-{index}', fallback='item')}"


_BY_TYPE = _Grouping(
    key=lambda record: record.feature_type,
    order=_type_order,
    folder_id=_type_folder_id,
    keep_empty=True,
)

_BY_PLAYER = _Grouping(
    key=_player_key,
    order=_player_order,
    folder_id=_player_folder_id,
    keep_empty=False,
    nested=_Grouping(
        key=lambda record: record.feature_type,
        order=_type_order,
        folder_id=_type_folder_id,
        keep_empty=False,
    ),
)

_GROUPINGS: dict[str, _Grouping] = {"type": _BY_TYPE, "player": _BY_PLAYER}


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------

def _leaf(record: FeatureRecord) -> TreeNode:
    return TreeNode(
        id=f"feature:{record.id}",
        label=record.title,
        description=record.description,
        player_name=record.player_name,
        feature_id=record.id,
    )


def _emit(
    records: Iterable[FeatureRecord],
    grouping: _Grouping,
    parent_id: str | None,
    folder_ids: list[str],
) -> list[TreeNode]:
    groups: dict[str, list[FeatureRecord]] = defaultdict(list)
    for record in records:
        groups[grouping.key(record)].append(record)

    nodes = []
    for index, (key, label) in enumerate(grouping.order(groups)):
        members = groups.get(key, [])
        if not members and not grouping.keep_empty:
            continue
        folder_id = grouping.folder_id(parent_id, key, index)
        folder_ids.append(folder_id)
        if grouping.nested is None:
            ordered = sorted(members, key=lambda r: (collation_key(r.title), r.id))
            children = [_leaf(r) for r in ordered]
        else:
            children = _emit(members, grouping.nested, folder_id, folder_ids)
        nodes.append(TreeNode(id=folder_id, label=label, children=children))
    return nodes


def _has_leaf(node: TreeNode) -> bool:
    if not node.is_folder:
        return True
    return any(_has_leaf(child) for child in node.children)


def _expandable(nodes: list[TreeNode]) -> list[str]:
    found = []
    for node in nodes:
        if node.is_folder and _has_leaf(node):
            found.append(node.id)
            found.extend(_expandable(node.children))
    return found


def build_tree(records: Iterable[FeatureRecord], view_mode: ViewMode) -> TreeStructure:
    """Group feature records into a folder tree for the given view mode."""
    try:
        grouping = _GROUPINGS[view_mode]
    except KeyError:
        raise ValueError(f"Unknown view mode: {view_mode!r}") from None
    folder_ids: list[str] = []
    nodes = _emit(records, grouping, None, folder_ids)
    return TreeStructure(
        nodes=nodes,
        folder_ids=folder_ids,
        default_expanded=_expandable(nodes),
    )
