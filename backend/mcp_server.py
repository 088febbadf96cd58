"""FastMCP server exposing a session's turn clock and lore as MCP tools.

Tools:
  - current_turn(slug)                       — turn, season, year, player, prompt
  - lookup_feature(slug, feature_id)         — a feature with its lore
  - add_lore_note(slug, feature_id, text)    — append a note by the active player
  - end_turn(slug)                           — advance to the next player

Sessions are read from and written back to storage, under the same
per-session lock as the HTTP routes. The lock is a file lock in the data dir,
so this process and the HTTP app never interleave writes to one session.

Usage:
    uv run python -m backend.mcp_server
"""

from typing import Any

from mcp.server.fastmcp import FastMCP

from backend import storage
from backend.chronicle import banner_label

mcp = FastMCP("quiet-year")


def _engine(slug: str):
    engine = storage.load_engine(slug)
    if engine is None:
        raise ValueError(f"Session not found: {slug}")
    return engine


def _turn(engine) -> dict[str, Any]:
    info = engine.get_current_turn_info()
    return {
        **info.model_dump(),
        "label": banner_label(info),
        "current_player": engine.get_current_player().model_dump(),
        "prompt": engine.get_current_prompt(),
        "is_complete": engine.is_complete(),
    }


@mcp.tool()
def current_turn(slug: str) -> dict:
    """Return the current turn, season, year, active player and prompt."""
    return _turn(_engine(slug))


@mcp.tool()
def lookup_feature(slug: str, feature_id: str) -> dict:
    """Look up a feature by canvas id. Lore notes are listed newest first."""
    engine = _engine(slug)
    feature = engine.get_feature(feature_id)
    if feature is None:
        raise ValueError(f"Feature not found: {feature_id}")
    data = feature.model_dump()
    data["lore_history"] = [e.model_dump() for e in engine.lore_timeline(feature_id)]
    return data


@mcp.tool()
async def add_lore_note(slug: str, feature_id: str, text: str) -> dict:
    """Record a lore note on a feature as the active player. Returns the entry."""
    text = text.strip()
    if not text:
        raise ValueError("Lore note is empty")
    async with storage.session_lock(slug):
        engine = _engine(slug)
        entry = engine.add_to_lore_history(feature_id, text)
        storage.save_engine(slug, engine)
    return entry.model_dump()


@mcp.tool()
async def end_turn(slug: str) -> dict:
    """End the active player's turn. Returns the new turn."""
    async with storage.session_lock(slug):
        engine = _engine(slug)
        engine.end_turn()
        storage.save_engine(slug, engine)
    return _turn(engine)


if __name__ == "__main__":
    import os
    from pathlib import Path

    data_path = Path(os.getenv("DATA_DIR", Path(__file__).parent.parent / "data"))
    storage.init_storage(data_path)
    mcp.run()
