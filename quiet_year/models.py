"""Core domain models.

The engine, snapshot codec and tree views all operate on these types.
Pydantic is used for validation and serialisation at every data boundary.
Attributes are snake_case in Python; snapshots use the camelCase aliases
so saved games keep their original field names.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Season = Literal["Spring", "Summer", "Autumn", "Winter"]

# Cyclic order; Winter wraps back to Spring.
SEASONS: tuple[Season, ...] = ("Spring", "Summer", "Autumn", "Winter")

FeatureType = Literal[
    "npcs",
    "monsters",
    "magic-items",
    "deities",
    "locations",
    "unassigned",
]

# Declared order, used by both tree views.
FEATURE_TYPES: tuple[tuple[FeatureType, str], ...] = (
    ("npcs", "NPCs"),
    ("monsters", "Monsters"),
    ("magic-items", "Magic Items"),
    ("deities", "Deities"),
    ("locations", "Locations"),
    ("unassigned", "Unassigned"),
)

FEATURE_TYPE_LABELS: dict[str, str] = dict(FEATURE_TYPES)


def normalize_feature_type(value: object) -> FeatureType:
    """Map free-form canvas metadata onto a known feature type."""
    if not value or not isinstance(value, str):
        return "unassigned"
    normalized = value.lower()
    for type_id, _label in FEATURE_TYPES:
        if type_id == normalized:
            return type_id
    return "unassigned"


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Player(_Model):
    """A seat at the table. Identity is the id; name is display-only."""

    id: str
    name: str = ""


class LoreEntry(_Model):
    """A single note in a feature's append-only lore history."""

    player_id: str
    player_name: str
    season: Season
    turn: int
    text: str
    timestamp: int  # wall-clock milliseconds at insertion


class FeatureData(_Model):
    """The mutable fields of a feature, as supplied by an edit."""

    player_id: str
    player_name: str
    description: str = ""
    lore: str = ""
    feature_type: FeatureType = "unassigned"


class BuiltFeature(FeatureData):
    """A feature on the shared map.

    ``season`` and ``turn`` record when the feature was first created and
    never change afterwards.
    """

    season: Season
    turn: int
    lore_history: list[LoreEntry] = Field(default_factory=list)


class TurnInfo(_Model):
    turn: int
    season: Season
    year: int


class GameState(_Model):
    """The single mutable aggregate owned by a GameEngine."""

    players: list[Player]
    current_player_index: int = 0
    current_season: Season = "Spring"
    global_turn_count: int = 1
    season_turn_count: int = 0
    turns_per_player: int = 8
    year: int = 1
    prompts: dict[Season, list[str]]
    built_features: dict[str, BuiltFeature] = Field(default_factory=dict)
