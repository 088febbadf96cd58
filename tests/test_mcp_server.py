"""MCP tool tests over an in-memory client session."""

import json

from mcp.shared.memory import create_connected_server_and_client_session

import backend.mcp_server as mcp_server
from backend import storage
from quiet_year.engine import make_players


def _payload(result) -> dict:
    assert not result.isError, result.content
    return json.loads(result.content[0].text)


def _start() -> str:
    return storage.create_session("Valley", make_players(["Alice", "Bob"]))["slug"]


async def test_current_turn():
    slug = _start()
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        turn = _payload(await client.call_tool("current_turn", {"slug": slug}))
    assert turn["turn"] == 1
    assert turn["season"] == "Spring"
    assert turn["label"] == "Turn 1 — Spring, Year 1"
    assert turn["current_player"]["name"] == "Alice"
    assert turn["is_complete"] is False


async def test_end_turn_persists():
    slug = _start()
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        turn = _payload(await client.call_tool("end_turn", {"slug": slug}))
    assert turn["turn"] == 2
    assert turn["current_player"]["name"] == "Bob"
    assert storage.load_engine(slug).get_current_turn_info().turn == 2


async def test_add_and_lookup_lore():
    slug = _start()
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        entry = _payload(await client.call_tool(
            "add_lore_note", {"slug": slug, "feature_id": "shape:well", "text": "Dry since spring"},
        ))
        await client.call_tool("end_turn", {"slug": slug})
        await client.call_tool(
            "add_lore_note", {"slug": slug, "feature_id": "shape:well", "text": "Bob hears singing"},
        )
        feature = _payload(await client.call_tool(
            "lookup_feature", {"slug": slug, "feature_id": "shape:well"},
        ))

    assert entry["player_name"] == "Alice"
    assert entry["season"] == "Spring"
    assert feature["feature_type"] == "unassigned"
    assert [e["text"] for e in feature["lore_history"]] == ["Bob hears singing", "Dry since spring"]


async def test_empty_note_is_error():
    slug = _start()
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool(
            "add_lore_note", {"slug": slug, "feature_id": "f1", "text": "  "},
        )
    assert result.isError
    assert storage.load_engine(slug).get_features() == {}


async def test_missing_session_is_error():
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("current_turn", {"slug": "nope"})
    assert result.isError


async def test_missing_feature_is_error():
    slug = _start()
    async with create_connected_server_and_client_session(mcp_server.mcp) as client:
        result = await client.call_tool("lookup_feature", {"slug": slug, "feature_id": "nope"})
    assert result.isError
