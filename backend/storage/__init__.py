"""File-based JSON storage for game sessions.

Data layout:
  data/
    sessions/            One entry per running game
      <slug>.json        Session metadata (title, slug, created_at, updated_at)
      <slug>/
        game.json        Full game snapshot (same document as an export)
    locks/
      <slug>.lock        flock target for a session's mutations
    config.json          App settings (turn budget, default view, export name, prompts)

Slug rules: title → Unicode normalize → strip non-ASCII → lowercase →
replace non-alnum runs with hyphen → strip leading/trailing hyphens.
Colliding titles get a numeric suffix ("spring-game-2").

The engine itself keeps no storage; routes load it with load_engine(),
mutate it under session_lock(slug), then save_engine(). The lock holds across
processes (HTTP app and MCP server), and every file is replaced atomically.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates — prompts merged season by season,
scalars overwritten.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
    sessions_dir,
    slugify,
    write_atomic,
)

from .sessions import (  # noqa: F401
    create_session,
    delete_session,
    get_session,
    import_session,
    list_sessions,
    load_engine,
    save_engine,
)

from .locks import (  # noqa: F401
    FileLock,
    drop_lock,
    session_file_lock,
    session_lock,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
