"""Search filtering over a built feature tree."""

from __future__ import annotations

from quiet_year.tree import TreeNode, TreeStructure


def _matches(node: TreeNode, query: str) -> bool:
    fields = (node.label, node.description, node.player_name)
    return any(value and query in value.lower() for value in fields)


def _filter_node(node: TreeNode, query: str) -> TreeNode | None:
    matches_self = _matches(node, query)
    if not node.children:
        return node if matches_self else None

    children = [
        kept for kept in (_filter_node(child, query) for child in node.children)
        if kept is not None
    ]
    if children or matches_self:
        # Non-matching siblings are dropped, even under a folder that matched.
        return node.model_copy(update={"children": children})
    return None


def filter_tree(nodes: list[TreeNode], term: str) -> list[TreeNode]:
    """Prune the tree to nodes matching ``term`` (case-insensitive substring).

    A leaf survives if its label, description or player name contains the
    term. A folder survives if it matches itself or keeps any descendant.
    An empty term returns ``nodes`` unchanged.
    """
    if not term:
        return nodes
    query = term.lower()
    return [kept for kept in (_filter_node(node, query) for node in nodes) if kept is not None]


def expanded_folders(tree: TreeStructure, term: str, expanded: set[str] | None = None) -> set[str]:
    """Folders to show open.

    While a search term is active every folder is forced open so surviving
    leaves are visible; otherwise the caller's choice (or the tree's
    defaults) applies.
    """
    if term:
        return set(tree.folder_ids)
    if expanded is None:
        return set(tree.default_expanded)
    return set(expanded)
