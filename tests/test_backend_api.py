from fastapi.testclient import TestClient
from backend.app import app


client = TestClient(app)


def _new_game(**body):
    payload = {"seed": 7, "botParty": "B", "firstParty": "A"}
    payload.update(body)
    r = client.post("/new-game", json=payload)
    assert r.status_code == 200
    return r.json()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_new_game_returns_snapshot():
    data = _new_game()
    state = data["state"]
    assert data["botParty"] == "B"
    assert state["schemaVersion"] == 1
    assert state["phase"] == "a-turn"
    assert len(state["parties"]["A"]["hand"]) == 14
    assert len(state["parties"]["B"]["hand"]) == 14
    assert all(t["position"] is None for t in state["tokens"])


def test_round_flow_human_then_bot_then_resolve():
    sid = _new_game()["sessionId"]
    legal = client.get(f"/legal/{sid}/A").json()["selections"]
    assert legal
    r = client.post("/play", json={"sessionId": sid, "party": "A", "indices": legal[0]})
    assert r.status_code == 200
    assert r.json()["state"]["phase"] == "b-turn"

    r = client.post("/step", json={"sessionId": sid})
    assert r.status_code == 200
    state = r.json()["state"]
    assert state["phase"] == "round-end"
    assert "explain" in state

    r = client.post("/step", json={"sessionId": sid})
    assert r.status_code == 200
    state = r.json()["state"]
    assert state["roundNumber"] == 2
    assert state["lastRoundResult"]["winner"] in ("A", "B", "tie")

    score = client.get(f"/score/{sid}").json()
    assert score["final"] is False
    assert len(score["details"]) == 4


def test_illegal_play_is_rejected_with_message():
    sid = _new_game()["sessionId"]
    r = client.post("/play", json={"sessionId": sid, "party": "A", "indices": []})
    assert r.status_code == 400
    assert r.json()["detail"]
    r = client.post("/validate", json={"sessionId": sid, "party": "A", "indices": [0, 1, 2, 3]})
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is False
    assert body["rule"] == "size"


def test_server_party_and_waiting_human_are_guarded():
    sid = _new_game()["sessionId"]
    r = client.post("/play", json={"sessionId": sid, "party": "B", "indices": [0]})
    assert r.status_code == 409
    r = client.post("/step", json={"sessionId": sid})
    assert r.status_code == 409


def test_unknown_session_is_404():
    assert client.get("/state/nope").status_code == 404
    assert client.post("/step", json={"sessionId": "nope"}).status_code == 404


def test_load_round_trips_a_snapshot():
    state = _new_game()["state"]
    r = client.post("/load", json={"state": state, "botParty": None})
    assert r.status_code == 200
    assert r.json()["state"] == state
    broken = dict(state)
    broken["schemaVersion"] = 99
    r = client.post("/load", json={"state": broken})
    assert r.status_code == 400


def test_load_rejects_round_with_one_party_playing_twice():
    state = _new_game(botParty=None)["state"]
    sid = client.post("/load", json={"state": state, "botParty": "A"}).json()["sessionId"]
    snap = client.post("/step", json={"sessionId": sid}).json()["state"]
    assert len(snap["roundPlays"]) == 1
    snap["roundPlays"].append(dict(snap["roundPlays"][0], cards=[snap["parties"]["B"]["hand"].pop(0)]))
    snap["phase"] = "round-end"
    r = client.post("/load", json={"state": snap})
    assert r.status_code == 400
