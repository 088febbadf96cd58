"""Handlebars rendering for the turn banner and the session chronicle.

The chronicle is a markdown digest of the map: features grouped by type (in
the same order as the type view), each with its creation stamp, current lore,
and lore notes newest first.
"""

from collections.abc import Callable
from typing import Any

import pybars

from quiet_year.engine import GameEngine
from quiet_year.models import TurnInfo
from quiet_year.tree import build_tree, feature_records

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}

BANNER_TEMPLATE = "Turn {{turn}} — {{season}}, Year {{year}}"

PROVENANCE_TEMPLATE = "{{season}} — Turn {{turn}}"

CHRONICLE_TEMPLATE = """\
# {{{title}}}

{{{banner}}}

{{#each groups}}
## {{{label}}}

{{#each features}}
### {{{title}}}
_Added by {{{player_name}}} · {{{provenance}}}_

{{{description}}}

{{#if lore}}
> {{{lore}}}

{{/if}}
{{#each history}}
- {{{player_name}}} ({{{provenance}}}): {{{text}}}
{{/each}}

{{/each}}
{{/each}}
"""


class ChronicleError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


def render_template(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise ChronicleError(f"Template error: {e}") from e


def banner_label(info: TurnInfo) -> str:
    """Date line for the turn banner, e.g. "Turn 5 — Summer, Year 1"."""
    return render_template(BANNER_TEMPLATE, info.model_dump())


def provenance_label(season: str, turn: int) -> str:
    return render_template(PROVENANCE_TEMPLATE, {"season": season, "turn": turn})


def build_chronicle_context(
    title: str, engine: GameEngine, titles: dict[str, str] | None = None
) -> dict[str, Any]:
    """Assemble template variables for CHRONICLE_TEMPLATE.

    Only feature types with at least one feature are included.
    """
    features = engine.get_features()
    tree = build_tree(feature_records(features, titles), "type")

    groups = []
    for folder in tree.nodes:
        if not folder.children:
            continue
        entries = []
        for leaf in folder.children:
            feature = features[leaf.feature_id]
            entries.append({
                "title": leaf.label,
                "player_name": feature.player_name,
                "provenance": provenance_label(feature.season, feature.turn),
                "description": leaf.description,
                "lore": feature.lore,
                "history": [
                    {
                        "player_name": entry.player_name,
                        "provenance": provenance_label(entry.season, entry.turn),
                        "text": entry.text,
                    }
                    for entry in engine.lore_timeline(leaf.feature_id)
                ],
            })
        groups.append({"label": folder.label, "features": entries})

    return {
        "title": title,
        "banner": banner_label(engine.get_current_turn_info()),
        "groups": groups,
    }


def render_chronicle(
    title: str, engine: GameEngine, titles: dict[str, str] | None = None
) -> str:
    return render_template(CHRONICLE_TEMPLATE, build_chronicle_context(title, engine, titles))
