"""Snapshot export/import with a versioned migration chain.

A snapshot is the whole GameState as a JSON document using the camelCase
field names, tagged with ``schemaVersion``. Documents saved before the tag
existed are treated as version 1.

Each migration declares the defaults for fields introduced in its version.
Importing runs every migration newer than the document, filling only the
fields that are absent, then validates the result:

  1 → 2   feature.playerName ("Player <playerId>"), year (1), globalTurnCount (1)
  2 → 3   feature.loreHistory ([]), feature.featureType ("unassigned")
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from quiet_year.models import GameState

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 3
VERSION_KEY = "schemaVersion"

# A default is either a literal (deep-copied per record) or a callable that
# derives the value from the record being migrated.
Default = Any


class SnapshotError(ValueError):
    """Raised when a snapshot document can't be parsed or validated."""


@dataclass(frozen=True)
class Migration:
    version: int
    state_defaults: dict[str, Default] = field(default_factory=dict)
    feature_defaults: dict[str, Default] = field(default_factory=dict)


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=2,
        state_defaults={"year": 1, "globalTurnCount": 1},
        feature_defaults={"playerName": lambda f: f"Player {f.get('playerId', '')}"},
    ),
    Migration(
        version=3,
        feature_defaults={"loreHistory": [], "featureType": "unassigned"},
    ),
)


def _fill(record: dict[str, Any], defaults: dict[str, Default]) -> None:
    for key, default in defaults.items():
        if key in record:
            continue
        record[key] = default(record) if callable(default) else copy.deepcopy(default)


def migrate(data: dict[str, Any]) -> dict[str, Any]:
    """Bring a decoded snapshot up to SCHEMA_VERSION in place and return it."""
    version = data.get(VERSION_KEY, 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise SnapshotError(f"Invalid {VERSION_KEY}: {version!r}")
    if version > SCHEMA_VERSION:
        raise SnapshotError(
            f"Snapshot {VERSION_KEY} {version} is newer than supported ({SCHEMA_VERSION})"
        )

    features = data.get("builtFeatures")
    for migration in MIGRATIONS:
        if migration.version <= version:
            continue
        _fill(data, migration.state_defaults)
        if isinstance(features, dict):
            for feature in features.values():
                if isinstance(feature, dict):
                    _fill(feature, migration.feature_defaults)
    data[VERSION_KEY] = SCHEMA_VERSION
    return data


def export_game(state: GameState) -> str:
    document = {VERSION_KEY: SCHEMA_VERSION}
    document.update(state.model_dump(mode="json", by_alias=True))
    return json.dumps(document, indent=2)


def import_game(document: str | bytes) -> GameState:
    try:
        data = json.loads(document)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Snapshot is not valid JSON: {e}")
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    data = migrate(data)
    data.pop(VERSION_KEY)
    try:
        return GameState.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Snapshot failed validation: {e.error_count()} error(s)")
        raise SnapshotError(f"Snapshot failed validation: {e}") from e
