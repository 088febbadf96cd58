"""Feature tree endpoints (grouped view + search)."""

from fastapi import APIRouter, HTTPException

from backend import storage
from quiet_year.search import expanded_folders, filter_tree
from quiet_year.tree import build_tree, feature_records

from .models import TreeQuery
from .sessions import load_or_404

router = APIRouter()

VIEW_MODES = ("type", "player")


def _tree_response(slug: str, query: TreeQuery) -> dict:
    view = query.view or storage.get_config()["default_view_mode"]
    if view not in VIEW_MODES:
        raise HTTPException(400, f"Unknown view mode: {view}")
    engine = load_or_404(slug)
    tree = build_tree(feature_records(engine.get_features(), query.titles), view)
    expanded = set(query.expanded) if query.expanded is not None else None
    return {
        "view": view,
        "nodes": [node.model_dump() for node in filter_tree(tree.nodes, query.q)],
        "folder_ids": tree.folder_ids,
        "default_expanded": tree.default_expanded,
        "expanded": sorted(expanded_folders(tree, query.q, expanded)),
    }


@router.get("/sessions/{slug}/tree")
async def get_tree(slug: str, view: str | None = None, q: str = ""):
    """Features grouped by type or player, filtered by an optional search term."""
    return _tree_response(slug, TreeQuery(view=view, q=q))


@router.post("/sessions/{slug}/tree")
async def post_tree(slug: str, body: TreeQuery):
    """Same as GET; the body may add canvas titles and the open folders."""
    return _tree_response(slug, body)
