"""Session lifecycle, turn clock, export/import, and chronicle endpoints."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response

from backend import storage
from backend.chronicle import banner_label, render_chronicle
from quiet_year.engine import TURNS_PER_SEASON_PER_PLAYER, GameEngine, make_players
from quiet_year.models import SEASONS
from quiet_year.snapshot import SnapshotError

from .models import CreateSession, TurnPayload

router = APIRouter()


def load_or_404(slug: str) -> GameEngine:
    """Load a session's engine or raise 404."""
    if not storage.get_session(slug):
        raise HTTPException(404, "Session not found")
    engine = storage.load_engine(slug)
    if engine is None:
        raise HTTPException(404, "Session not found")
    return engine


def turn_payload(engine: GameEngine) -> TurnPayload:
    info = engine.get_current_turn_info()
    player = engine.get_current_player()
    return TurnPayload(
        turn=info.turn,
        season=info.season,
        year=info.year,
        label=banner_label(info),
        current_player={"id": player.id, "name": player.name},
        prompt=engine.get_current_prompt(),
        turns_taken=engine.turns_taken(),
        total_turns=engine.total_turns(),
        is_complete=engine.is_complete(),
    )


@router.get("/sessions")
async def list_sessions():
    """List all sessions."""
    return storage.list_sessions()


@router.post("/sessions", status_code=201)
async def create_session(body: CreateSession):
    """Start a new game from a list of player names."""
    turns = body.turns_per_player
    if body.years is not None:
        turns = body.years * TURNS_PER_SEASON_PER_PLAYER * len(SEASONS)
    try:
        session = storage.create_session(body.title, make_players(body.player_names), turns)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return session


@router.post("/sessions/import", status_code=201)
async def import_session(request: Request, title: str = "Imported Game"):
    """Restore a session from an exported snapshot (raw JSON body)."""
    document = await request.body()
    try:
        session = storage.import_session(document, title)
    except SnapshotError as e:
        raise HTTPException(400, str(e))
    except ValueError as e:
        raise HTTPException(400, f"Snapshot has invalid configuration: {e}")
    return session


@router.get("/sessions/{slug}")
async def get_session(slug: str):
    """Session metadata plus players and the current turn."""
    session = storage.get_session(slug)
    if not session:
        raise HTTPException(404, "Session not found")
    engine = load_or_404(slug)
    state = engine.get_state()
    return {
        **session,
        "players": [p.model_dump() for p in state.players],
        "turns_per_player": state.turns_per_player,
        "turn": turn_payload(engine).model_dump(),
    }


@router.delete("/sessions/{slug}")
async def delete_session(slug: str):
    """Delete a session and its game state."""
    if not storage.get_session(slug):
        raise HTTPException(404, "Session not found")
    async with storage.session_lock(slug):
        storage.delete_session(slug)
    return {"ok": True}


@router.get("/sessions/{slug}/turn")
async def get_turn(slug: str):
    """Current turn, season, year, player and prompt."""
    return turn_payload(load_or_404(slug))


@router.post("/sessions/{slug}/end-turn")
async def end_turn(slug: str):
    """End the active player's turn and return the new turn."""
    async with storage.session_lock(slug):
        engine = load_or_404(slug)
        engine.end_turn()
        storage.save_engine(slug, engine)
    return turn_payload(engine)


@router.get("/sessions/{slug}/export")
async def export_session(slug: str):
    """Download the full game snapshot."""
    engine = load_or_404(slug)
    filename = storage.get_config()["export_filename"]
    return Response(
        content=engine.export_game(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/sessions/{slug}/chronicle", response_class=PlainTextResponse)
async def get_chronicle(slug: str):
    """Markdown digest of every feature and its lore."""
    engine = load_or_404(slug)
    session = storage.get_session(slug)
    return render_chronicle(session["title"], engine)
