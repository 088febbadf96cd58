"""Tests for the demo session generator."""

from backend import storage
from backend.demo import DEMO_FEATURES, create_demo_data
from quiet_year.engine import make_players


def test_create_demo_data():
    storage.create_session("Leftover", make_players(["Zed"]))
    session = create_demo_data()
    assert session["title"] == "The Quiet Valley"
    assert [s["slug"] for s in storage.list_sessions()] == [session["slug"]]

    engine = storage.load_engine(session["slug"])
    features = engine.get_features()
    assert set(features) == {f[0] for f in DEMO_FEATURES}
    assert features["shape:miller"].player_name == "Bob"
    assert len(features["shape:miller"].lore_history) == 2
    # one turn ended per demo feature
    assert engine.get_current_turn_info().turn == len(DEMO_FEATURES) + 1
