"""Tests for quiet_year.models."""

import pytest
from pydantic import ValidationError

from quiet_year.models import (
    BuiltFeature,
    FeatureData,
    LoreEntry,
    Player,
    normalize_feature_type,
)


class TestPlayer:
    def test_name_defaults_to_empty(self) -> None:
        assert Player(id="1").name == ""

    def test_accepts_alias_or_field_name(self) -> None:
        assert Player.model_validate({"id": "1", "name": "Alice"}) == Player(id="1", name="Alice")


class TestBuiltFeature:
    def test_lore_history_defaults_to_empty(self) -> None:
        f = BuiltFeature(player_id="1", player_name="A", season="Spring", turn=1)
        assert f.lore_history == []
        assert f.feature_type == "unassigned"
        assert f.description == ""

    def test_dump_by_alias_is_camel_case(self) -> None:
        f = BuiltFeature(player_id="1", player_name="A", season="Winter", turn=3)
        dumped = f.model_dump(by_alias=True)
        assert dumped["playerId"] == "1"
        assert dumped["featureType"] == "unassigned"
        assert dumped["loreHistory"] == []

    def test_validates_from_camel_case(self) -> None:
        f = BuiltFeature.model_validate({
            "playerId": "2", "playerName": "Bob", "description": "d", "lore": "l",
            "featureType": "deities", "season": "Autumn", "turn": 7,
            "loreHistory": [{
                "playerId": "2", "playerName": "Bob", "season": "Autumn",
                "turn": 7, "text": "hi", "timestamp": 1,
            }],
        })
        assert f.feature_type == "deities"
        assert f.lore_history[0] == LoreEntry(
            player_id="2", player_name="Bob", season="Autumn", turn=7, text="hi", timestamp=1,
        )

    def test_invalid_season_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BuiltFeature(player_id="1", player_name="A", season="Monsoon", turn=1)

    def test_invalid_feature_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FeatureData(player_id="1", player_name="A", feature_type="dragons")


class TestNormalizeFeatureType:
    def test_known_types(self) -> None:
        assert normalize_feature_type("npcs") == "npcs"
        assert normalize_feature_type("Magic-Items") == "magic-items"

    def test_unknown_or_missing(self) -> None:
        assert normalize_feature_type("dragons") == "unassigned"
        assert normalize_feature_type("") == "unassigned"
        assert normalize_feature_type(None) == "unassigned"
        assert normalize_feature_type(3) == "unassigned"
