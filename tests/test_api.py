import json

import pytest
from fastapi.testclient import TestClient

import orchestrator.main as agent_main
import trip_tools.main as tools_main
from trip_tools.config import CONFIG as TOOLS_CONFIG
from trip_tools.deps import get_pipeline
from trip_tools.geocoding import GeocodingPipeline
from trip_tools.models import ToolInvocation

from conftest import FakeGeoProvider


API_KEY = "test-key"


class RecordingModel:
    def __init__(self, turns):
        self.turns = list(turns)
        self.systems = []

    async def stream_turn(self, system, history, tools):
        self.systems.append(system)
        for chunk in self.turns.pop(0) if self.turns else ["Done."]:
            yield chunk


@pytest.fixture(autouse=True)
def _no_rate_limits(monkeypatch):
    monkeypatch.setattr(agent_main.limiter, "enabled", False)
    monkeypatch.setattr(tools_main.limiter, "enabled", False)
    monkeypatch.setattr(TOOLS_CONFIG, "api_key", API_KEY)
    monkeypatch.setattr(TOOLS_CONFIG, "rapidapi_key", None)


def _frames(text):
    out = []
    for line in text.splitlines():
        if line.startswith("data: "):
            body = line[len("data: "):]
            out.append(body if body == "[DONE]" else json.loads(body))
    return out


# --- Agent endpoint ----------------------------------------------------------

def test_agent_requires_messages():
    agent_main.app.state.chat_model = RecordingModel([])
    with TestClient(agent_main.app) as client:
        resp = client.post("/agent", json={"messages": []})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Messages array is required"}


def test_agent_streams_tool_calls_and_text():
    model = RecordingModel([
        [ToolInvocation(id="1", name="add_to_wishlist", arguments={"destinationName": "Bali", "destinationId": "ID"})],
        ["Bali is on your wishlist."],
    ])
    agent_main.app.state.chat_model = model
    with TestClient(agent_main.app) as client:
        resp = client.post(
            "/agent",
            json={"messages": [{"role": "user", "content": "save bali"}], "userName": "Sam"},
            headers={"x-user-id": "user-42", "x-vercel-ip-country": "IN"},
        )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    frames = _frames(resp.text)
    assert json.loads(frames[0]["toolCall"])["name"] == "add_to_wishlist"
    result = json.loads(frames[1]["toolResult"])["output"]
    assert result["success"] is True
    assert result["context"]["currency"] == "INR"
    assert frames[2] == {"content": "Bali is on your wishlist."}
    assert frames[-1] == "[DONE]"

    system = model.systems[0]
    assert "The user's name is Sam." in system
    assert "Indian Rupee (INR, symbol: ₹)" in system


def test_agent_honours_declared_override_only():
    model = RecordingModel([["ok"]])
    agent_main.app.state.chat_model = model
    with TestClient(agent_main.app) as client:
        client.post(
            "/agent",
            json={
                "messages": [{"role": "user", "content": "hi"}],
                "currencyContext": {"currency": "JPY", "source": "geo"},
                "currency": {"code": "EUR", "symbol": "€", "name": "Euro"},
            },
            headers={"x-vercel-ip-country": "IN"},
        )
    assert "(EUR, symbol: €)" in model.systems[0]


def test_agent_without_user_id_reports_tool_failure():
    model = RecordingModel([[ToolInvocation(id="1", name="get_wishlist", arguments={})], ["Please sign in."]])
    agent_main.app.state.chat_model = model
    with TestClient(agent_main.app) as client:
        resp = client.post("/agent", json={"messages": [{"role": "user", "content": "wishlist?"}]})
    result = json.loads(_frames(resp.text)[1]["toolResult"])["output"]
    assert result["errorType"] == "not_authenticated"


def test_currency_endpoint_resolves_caller_signals():
    agent_main.app.state.chat_model = RecordingModel([])
    with TestClient(agent_main.app) as client:
        geo = client.get("/currency", headers={"x-vercel-ip-country": "JP"}).json()
        override = client.get("/currency", params={"override": "EUR"}, headers={"x-vercel-ip-country": "JP"}).json()
    assert (geo["currency"], geo["source"]) == ("JPY", "geo")
    assert "resolvedAt" in geo
    assert (override["currency"], override["country"], override["source"]) == ("EUR", "JP", "user_override")


# --- Tool service ------------------------------------------------------------

def test_tool_service_requires_api_key():
    with TestClient(tools_main.app) as client:
        resp = client.post("/calendar/validate", json={"date": "tomorrow"})
    assert resp.status_code == 401


def test_calendar_routes():
    headers = {"x-api-key": API_KEY}
    with TestClient(tools_main.app) as client:
        ok = client.post(
            "/calendar/validate-range", json={"check_in": "2099-01-05", "check_out": "2099-01-10"}, headers=headers
        ).json()
        past = client.post(
            "/calendar/validate-range", json={"check_in": "2020-01-01", "check_out": "2020-01-05"}, headers=headers
        ).json()
        single = client.post("/calendar/validate", json={"date": "13/02/2099"}, headers=headers).json()
        today = client.get("/calendar/today", headers=headers).json()
    assert ok["is_valid"] is True and ok["nights"] == 5
    assert past["is_valid"] is False and "cannot be in the past" in past["error"]
    assert single["iso_date"] == "2099-02-13"
    assert today["current_date"] == f"{today['current_year']:04d}-{today['current_month']:02d}-{today['current_day']:02d}"


def test_currency_routes():
    headers = {"x-api-key": API_KEY}
    with TestClient(tools_main.app) as client:
        ctx = client.post("/currency/resolve", json={"country": "IN"}, headers=headers).json()
        converted = client.post("/currency/convert", json={"amount": 10, "from": "USD", "to": "INR"}, headers=headers)
        bad = client.post("/currency/convert", json={"amount": 10, "from": "USD", "to": "XYZ"}, headers=headers)
    assert (ctx["currency"], ctx["source"]) == ("INR", "geo")
    assert converted.json() == {"rate": 83.0, "converted": 830.0}
    assert bad.status_code == 400


def test_booking_search_uses_mock_inventory_without_provider_key():
    headers = {"x-api-key": API_KEY}
    body = {"destination": "Lisbon", "check_in": "2099-03-01", "check_out": "2099-03-04", "currency": "eur"}
    with TestClient(tools_main.app) as client:
        resp = client.post("/booking/search", json=body, headers=headers)
        bad = client.post("/booking/search", json={**body, "check_out": "2099-02-01"}, headers=headers)
    data = resp.json()
    assert data["currency"] == "EUR"
    assert data["nights"] == 3
    assert len(data["hotels"]) == 5
    assert bad.status_code == 400


def test_geocode_route_with_fake_provider():
    provider = FakeGeoProvider(geocode_hits={"Kyoto, Japan": (35.01, 135.77)})
    tools_main.app.dependency_overrides[get_pipeline] = lambda: GeocodingPipeline(provider, delay_sec=0)
    try:
        with TestClient(tools_main.app) as client:
            resp = client.post(
                "/geo/geocode",
                json={"locations": ["Kyoto", "Atlantis"], "country_hint": "Japan"},
                headers={"x-api-key": API_KEY},
            )
    finally:
        tools_main.app.dependency_overrides.clear()
    data = resp.json()
    assert (data["resolved"], data["total"]) == (1, 2)
    assert data["locations"][0]["lat"] == 35.01
