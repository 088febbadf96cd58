"""Session CRUD, snapshot persistence, and import."""

import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from quiet_year.engine import GameEngine
from quiet_year.models import Player

from .core import sessions_dir, slugify, write_atomic
from .locks import drop_lock

logger = logging.getLogger(__name__)


def _meta_path(slug: str) -> Path:
    return sessions_dir() / f"{slug}.json"


def _game_path(slug: str) -> Path:
    return sessions_dir() / slug / "game.json"


def _claim_slug(title: str) -> str:
    """Reserve a free slug by creating its session dir.

    mkdir is atomic, so two processes creating the same title get different
    slugs.
    """
    base_slug = slugify(title)
    target_slug = base_slug
    counter = 2
    while True:
        try:
            if not _meta_path(target_slug).exists():
                (sessions_dir() / target_slug).mkdir()
                return target_slug
        except FileExistsError:
            pass
        target_slug = f"{base_slug}-{counter}"
        counter += 1


def _write_session(title: str, engine: GameEngine) -> dict[str, Any]:
    slug = _claim_slug(title)
    now = datetime.now(timezone.utc).isoformat()
    session = {
        "title": title,
        "slug": slug,
        "created_at": now,
        "updated_at": now,
    }
    # game.json first: a session is listed only once its metadata exists
    write_atomic(_game_path(slug), engine.export_game())
    write_atomic(_meta_path(slug), json.dumps(session, indent=2))
    logger.info("session %s created with %d player(s)", slug, len(engine.get_state().players))
    return session


def list_sessions() -> list[dict[str, Any]]:
    results = []
    for path in sorted(sessions_dir().glob("*.json")):
        results.append(json.loads(path.read_text()))
    return results


def get_session(slug: str) -> dict[str, Any] | None:
    path = _meta_path(slug)
    if not path.is_file():
        return None
    return json.loads(path.read_text())


def create_session(
    title: str,
    players: list[Player],
    turns_per_player: int | None = None,
) -> dict[str, Any]:
    """Start a fresh game. Turn budget and prompts default from config.

    Raises:
        ValueError: no players, or a non-positive turn budget.
    """
    from .config import get_config
    from quiet_year.prompts import merge_prompts

    config = get_config()
    if turns_per_player is None:
        turns_per_player = config["turns_per_player"]
    engine = GameEngine(
        players,
        turns_per_player=turns_per_player,
        prompts=merge_prompts(config["prompts"]),
    )
    return _write_session(title, engine)


def import_session(document: str | bytes, title: str = "Imported Game") -> dict[str, Any]:
    """Restore an exported snapshot as a new session.

    Raises:
        SnapshotError: the document can't be parsed; nothing is written.
    """
    engine = GameEngine.import_game(document)
    return _write_session(title, engine)


def delete_session(slug: str) -> bool:
    json_path = _meta_path(slug)
    if not json_path.is_file():
        return False
    json_path.unlink()
    child_dir = sessions_dir() / slug
    if child_dir.is_dir():
        shutil.rmtree(child_dir)
    drop_lock(slug)
    logger.info("session %s deleted", slug)
    return True


def load_engine(slug: str) -> GameEngine | None:
    """Rebuild the engine from the stored snapshot. None if the session is missing."""
    try:
        document = _game_path(slug).read_text()
    except FileNotFoundError:
        return None
    return GameEngine.import_game(document)


def save_engine(slug: str, engine: GameEngine) -> None:
    """Persist the engine's state and bump the session's updated_at.

    Callers mutating a session hold session_lock(slug) (or
    session_file_lock(slug)) across load_engine() and save_engine().
    """
    write_atomic(_game_path(slug), engine.export_game())
    session = get_session(slug)
    if session is not None:
        session["updated_at"] = datetime.now(timezone.utc).isoformat()
        write_atomic(_meta_path(slug), json.dumps(session, indent=2))
