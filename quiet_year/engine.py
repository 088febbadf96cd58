"""Game engine — the controller that owns one session's GameState.

Turn flow:
  1. The active player takes an action (edits features, records lore).
  2. end_turn() advances the global and season counters and rotates to the
     next player.
  3. After every player has had two turns in the season, the season moves on;
     wrapping from Winter back to Spring starts a new year.

The prompt for a turn is picked from the current season's list by the
season-local turn counter, independent of which player is active.

Features are created lazily, the first time they are edited or given a lore
note, and are stamped with the turn/season of creation. That stamp never
changes; later edits only overwrite the descriptive fields.

The raw state is never handed out for mutation: readers get deep copies.
"""

from __future__ import annotations

import logging
import time

from quiet_year import snapshot
from quiet_year.models import (
    SEASONS,
    BuiltFeature,
    FeatureData,
    GameState,
    LoreEntry,
    Player,
    Season,
    TurnInfo,
)
from quiet_year.prompts import INITIAL_PROMPTS

logger = logging.getLogger(__name__)

TURNS_PER_SEASON_PER_PLAYER = 2
DEFAULT_TURNS_PER_PLAYER = TURNS_PER_SEASON_PER_PLAYER * len(SEASONS)  # one year


def make_players(names: list[str]) -> list[Player]:
    """Seat players in order with ids "1".."n"; blank names become "Player n"."""
    return [
        Player(id=str(i), name=name.strip() or f"Player {i}")
        for i, name in enumerate(names, start=1)
    ]


def _validate(state: GameState) -> None:
    if not state.players:
        raise ValueError("A session needs at least one player")
    if state.turns_per_player <= 0:
        raise ValueError("turns_per_player must be greater than 0")
    for season in SEASONS:
        if not state.prompts.get(season):
            raise ValueError(f"No prompts configured for {season}")
    if not 0 <= state.current_player_index < len(state.players):
        raise ValueError(
            f"current_player_index {state.current_player_index} out of range "
            f"for {len(state.players)} players"
        )


class GameEngine:
    """Turn clock and feature store for a single session.

    Args:
        players:          Seating order, fixed for the session.
        turns_per_player: Turn budget per player; 8 is one full year.
        prompts:          Season → prompt list. Defaults to the built-in table.
    """

    def __init__(
        self,
        players: list[Player],
        turns_per_player: int = DEFAULT_TURNS_PER_PLAYER,
        prompts: dict[Season, list[str]] | None = None,
    ) -> None:
        state = GameState(
            players=list(players),
            turns_per_player=turns_per_player,
            prompts=prompts if prompts is not None else INITIAL_PROMPTS,
        )
        _validate(state)
        # Own a private copy so callers can't mutate players/prompts under us.
        self._state = state.model_copy(deep=True)

    @classmethod
    def from_state(cls, state: GameState) -> GameEngine:
        _validate(state)
        engine = cls.__new__(cls)
        engine._state = state.model_copy(deep=True)
        return engine

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def export_game(self) -> str:
        """Serialise the full state to a JSON document."""
        return snapshot.export_game(self._state)

    @classmethod
    def import_game(cls, document: str | bytes) -> GameEngine:
        """Restore an engine from an exported document.

        Raises:
            SnapshotError: the document is not valid JSON or fails validation.
        """
        return cls.from_state(snapshot.import_game(document))

    def get_state(self) -> GameState:
        return self._state.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Turn clock
    # ------------------------------------------------------------------

    def get_current_player(self) -> Player:
        return self._state.players[self._state.current_player_index].model_copy()

    def get_current_turn_info(self) -> TurnInfo:
        return TurnInfo(
            turn=self._state.global_turn_count,
            season=self._state.current_season,
            year=self._state.year,
        )

    def get_current_prompt(self) -> str:
        season_prompts = self._state.prompts[self._state.current_season]
        return season_prompts[self._state.season_turn_count % len(season_prompts)]

    def end_turn(self) -> None:
        state = self._state
        state.global_turn_count += 1
        state.season_turn_count += 1
        state.current_player_index = (state.current_player_index + 1) % len(state.players)

        if state.season_turn_count >= len(state.players) * TURNS_PER_SEASON_PER_PLAYER:
            self._move_to_next_season()

    def _move_to_next_season(self) -> None:
        state = self._state
        index = SEASONS.index(state.current_season)
        state.current_season = SEASONS[(index + 1) % len(SEASONS)]
        state.season_turn_count = 0
        if state.current_season == SEASONS[0]:
            state.year += 1
            logger.info("year %d begins", state.year)
        logger.debug(
            "season -> %s (turn %d, year %d)",
            state.current_season, state.global_turn_count, state.year,
        )

    def turns_taken(self) -> int:
        return self._state.global_turn_count - 1

    def total_turns(self) -> int:
        """Turns in the whole game: each player's budget times the table size."""
        return self._state.turns_per_player * len(self._state.players)

    def is_complete(self) -> bool:
        """True once the turn budget is spent.

        Only a signal: end_turn() keeps advancing the clock past it.
        """
        return self.turns_taken() >= self.total_turns()

    # ------------------------------------------------------------------
    # Feature store
    # ------------------------------------------------------------------

    def _stamp(self, data: FeatureData) -> BuiltFeature:
        feature = BuiltFeature(
            **data.model_dump(),
            season=self._state.current_season,
            turn=self._state.global_turn_count,
        )
        logger.debug("feature created (%s, turn %d)", feature.season, feature.turn)
        return feature

    def upsert_feature(self, feature_id: str, data: FeatureData) -> None:
        """Create or overwrite a feature's descriptive fields.

        An existing feature keeps its creation stamp and lore history.
        """
        existing = self._state.built_features.get(feature_id)
        if existing is None:
            self._state.built_features[feature_id] = self._stamp(data)
            return
        existing.player_id = data.player_id
        existing.player_name = data.player_name
        existing.description = data.description
        existing.lore = data.lore
        existing.feature_type = data.feature_type

    def add_to_lore_history(
        self, feature_id: str, text: str, timestamp: int | None = None
    ) -> LoreEntry:
        """Append a lore note by the active player and return it.

        A feature that doesn't exist yet is created as ``unassigned`` and
        attributed to the active player.
        """
        player = self._state.players[self._state.current_player_index]
        feature = self._state.built_features.get(feature_id)
        if feature is None:
            feature = self._stamp(FeatureData(player_id=player.id, player_name=player.name))
            self._state.built_features[feature_id] = feature

        entry = LoreEntry(
            player_id=player.id,
            player_name=player.name,
            season=self._state.current_season,
            turn=self._state.global_turn_count,
            text=text,
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
        )
        feature.lore_history.append(entry)
        return entry.model_copy()

    def get_feature(self, feature_id: str) -> BuiltFeature | None:
        feature = self._state.built_features.get(feature_id)
        if feature is None:
            return None
        return feature.model_copy(deep=True)

    def get_features(self) -> dict[str, BuiltFeature]:
        """Point-in-time copy of every feature; later mutations don't show through."""
        return {
            feature_id: feature.model_copy(deep=True)
            for feature_id, feature in self._state.built_features.items()
        }

    def lore_timeline(self, feature_id: str) -> list[LoreEntry]:
        """A feature's lore notes, newest first. [] for an unknown feature."""
        feature = self._state.built_features.get(feature_id)
        if feature is None:
            return []
        ordered = sorted(
            enumerate(feature.lore_history),
            key=lambda pair: (pair[1].timestamp, pair[0]),
            reverse=True,
        )
        return [entry.model_copy() for _, entry in ordered]
