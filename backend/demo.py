"""Create a demo session for development/testing."""

import shutil

from backend import storage
from quiet_year.engine import make_players
from quiet_year.models import FeatureData

DEMO_PLAYERS = ["Alice", "Bob", "Cora"]

# (canvas id, author index, type, description, lore, lore notes)
DEMO_FEATURES = [
    (
        "shape:well", 0, "locations",
        "The old well at the crossroads",
        "Dug before the settlement had a name.",
        ["Children claim to hear singing from the bottom."],
    ),
    (
        "shape:miller", 1, "npcs",
        "Oswin the miller",
        "Keeps the only working millstone in the valley.",
        ["Oswin refused to grind grain for the eastern farms.", "He was seen at the well at midnight."],
    ),
    (
        "shape:lantern", 2, "magic-items",
        "A lantern that never goes out",
        "",
        [],
    ),
]


def create_demo_data() -> dict:
    """Wipe existing sessions and create a fresh demo session."""
    if storage.sessions_dir().exists():
        shutil.rmtree(storage.sessions_dir())
    storage.sessions_dir().mkdir(parents=True, exist_ok=True)

    players = make_players(DEMO_PLAYERS)
    session = storage.create_session("The Quiet Valley", players)
    slug = session["slug"]
    engine = storage.load_engine(slug)

    for feature_id, author, feature_type, description, lore, notes in DEMO_FEATURES:
        player = players[author]
        engine.upsert_feature(feature_id, FeatureData(
            player_id=player.id,
            player_name=player.name,
            description=description,
            lore=lore,
            feature_type=feature_type,
        ))
        for note in notes:
            engine.add_to_lore_history(feature_id, note)
        engine.end_turn()

    storage.save_engine(slug, engine)
    return session
