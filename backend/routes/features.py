"""Feature and lore history endpoints."""

from fastapi import APIRouter, HTTPException

from backend import storage
from quiet_year.models import FeatureData, normalize_feature_type

from .models import LoreNote, UpsertFeature
from .sessions import load_or_404

router = APIRouter()


@router.get("/sessions/{slug}/features")
async def list_features(slug: str):
    """All features keyed by their canvas id."""
    engine = load_or_404(slug)
    return {fid: f.model_dump() for fid, f in engine.get_features().items()}


@router.get("/sessions/{slug}/features/{feature_id}")
async def get_feature(slug: str, feature_id: str):
    """Get a single feature."""
    engine = load_or_404(slug)
    feature = engine.get_feature(feature_id)
    if feature is None:
        raise HTTPException(404, "Feature not found")
    return feature.model_dump()


@router.put("/sessions/{slug}/features/{feature_id}")
async def upsert_feature(slug: str, feature_id: str, body: UpsertFeature):
    """Create or edit a feature's details.

    Without an explicit author the feature keeps its original one, and a new
    feature is credited to the active player.
    """
    async with storage.session_lock(slug):
        engine = load_or_404(slug)
        existing = engine.get_feature(feature_id)
        current = engine.get_current_player()
        player_id = body.player_id or (existing.player_id if existing else current.id)
        if body.player_name is not None:
            player_name = body.player_name
        else:
            player_name = existing.player_name if existing else current.name
        engine.upsert_feature(feature_id, FeatureData(
            player_id=player_id,
            player_name=player_name,
            description=body.description,
            lore=body.lore,
            feature_type=normalize_feature_type(body.feature_type),
        ))
        storage.save_engine(slug, engine)
    return engine.get_feature(feature_id).model_dump()


@router.get("/sessions/{slug}/features/{feature_id}/lore")
async def get_lore(slug: str, feature_id: str):
    """Lore notes for a feature, newest first."""
    engine = load_or_404(slug)
    return [entry.model_dump() for entry in engine.lore_timeline(feature_id)]


@router.post("/sessions/{slug}/features/{feature_id}/lore", status_code=201)
async def add_lore(slug: str, feature_id: str, body: LoreNote):
    """Record a lore note by the active player."""
    text = body.text.strip()
    if not text:
        raise HTTPException(400, "Lore note is empty")
    async with storage.session_lock(slug):
        engine = load_or_404(slug)
        entry = engine.add_to_lore_history(feature_id, text)
        storage.save_engine(slug, engine)
    return entry.model_dump()
