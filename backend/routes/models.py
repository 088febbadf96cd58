"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel, Field


class CreateSession(BaseModel):
    title: str
    player_names: list[str] = Field(min_length=1)
    turns_per_player: int | None = None
    years: int | None = None  # shorthand: 8 turns per player per year


class UpsertFeature(BaseModel):
    description: str = ""
    lore: str = ""
    feature_type: str = "unassigned"
    player_id: str | None = None
    player_name: str | None = None


class LoreNote(BaseModel):
    text: str


class TreeQuery(BaseModel):
    view: str | None = None
    q: str = ""
    titles: dict[str, str] = Field(default_factory=dict)
    expanded: list[str] | None = None  # folders the client has open; None = defaults


class TurnPayload(BaseModel):
    turn: int
    season: str
    year: int
    label: str
    current_player: dict[str, str]
    prompt: str
    turns_taken: int
    total_turns: int
    is_complete: bool
