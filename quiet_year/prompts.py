"""Seasonal prompt table.

Each season carries an ordered list of prompts; the engine picks one by the
season-local turn counter, so the list alternates regardless of who is playing.
"""

from quiet_year.models import Season

INITIAL_PROMPTS: dict[Season, list[str]] = {
    "Spring": [
        "A new settlement has been established. What is it called and what draws people there?",
        "Spring rains have revealed something previously hidden. What is it and how does it affect the community?",
    ],
    "Summer": [
        "A traveling merchant arrives with unusual goods. What are they and what do they offer in exchange?",
        "The heat has caused a problem with the water supply. How do the communities respond?",
    ],
    "Autumn": [
        "Harvest time brings both abundance and conflict. What resources are being contested?",
        "A mysterious figure arrives claiming to have knowledge of the coming winter. What do they say?",
    ],
    "Winter": [
        "A harsh storm has trapped a group of people. How do the other communities respond?",
        "An old structure has collapsed under the weight of snow. What is discovered beneath it?",
    ],
}


def merge_prompts(overrides: dict[str, list[str]] | None) -> dict[Season, list[str]]:
    """Return a fresh prompt table with per-season overrides applied.

    Seasons missing from ``overrides`` (or given an empty list) keep the
    built-in prompts.
    """
    table: dict[Season, list[str]] = {
        season: list(prompts) for season, prompts in INITIAL_PROMPTS.items()
    }
    for season, prompts in (overrides or {}).items():
        if season in table and prompts:
            table[season] = list(prompts)
    return table
