from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.schemas.playerdata import snapshot_payload

from tests.builders import T0, T_END, T_TRACKING_END, make_snapshot, make_stats, minutes_after, with_ratio, with_stat


@pytest.fixture
def client():
    return TestClient(app)


def _payload(player_data, **overrides):
    body = snapshot_payload(player_data)
    body.update(overrides)
    return body


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_stat_keys(client):
    body = client.get("/api/stats/keys").json()
    keys = [s["key"] for s in body["stats"]]
    assert keys[:2] == ["experience", "stars"]
    assert len(keys) == 15
    index = next(s for s in body["stats"] if s["key"] == "index")
    assert index["label"] == "Index (FKDR^2 * Stars)"
    assert {"key": "overall", "label": "Total"} in body["gamemodes"]
    assert [v["key"] for v in body["variants"]] == ["session", "overall"]


def test_compute_overall(client):
    snapshot = make_snapshot(T0, experience=500, overall=make_stats(kills=40, deaths=0, winstreak=None))
    resp = client.post(
        "/api/stats/compute",
        json={"snapshot": _payload(snapshot), "stats": ["kills", "kdr", "stars", "winstreak"]},
    )
    assert resp.status_code == 200
    assert resp.json()["values"] == {"kills": 40, "kdr": 40, "stars": 1.0, "winstreak": None}


def test_compute_session(client):
    start = make_snapshot(T0, overall=make_stats(final_kills=10, final_deaths=5))
    end = make_snapshot(minutes_after(T0, 60), overall=make_stats(final_kills=20, final_deaths=7))
    resp = client.post(
        "/api/stats/compute",
        json={
            "snapshot": _payload(end),
            # Out of order on purpose
            "history": [_payload(end), _payload(start)],
            "variant": "session",
            "stats": ["finalKills", "fkdr"],
        },
    )
    assert resp.status_code == 200
    assert resp.json()["values"] == {"finalKills": 10, "fkdr": 5.0}


def test_compute_session_without_history(client):
    resp = client.post(
        "/api/stats/compute",
        json={"snapshot": _payload(make_snapshot()), "variant": "session"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMPTY_HISTORY"


def test_compute_drops_unsupported_history_snapshots(client):
    snapshot = make_snapshot()
    resp = client.post(
        "/api/stats/compute",
        json={
            "snapshot": _payload(snapshot),
            "history": [_payload(snapshot, dataFormatVersion=2)],
            "variant": "session",
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMPTY_HISTORY"


def test_compute_rejects_unsupported_snapshot(client):
    resp = client.post(
        "/api/stats/compute",
        json={"snapshot": _payload(make_snapshot(), dataFormatVersion=2)},
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "UNSUPPORTED_DATA_FORMAT"


def test_compute_unknown_stat(client):
    resp = client.post("/api/stats/compute", json={"snapshot": _payload(make_snapshot()), "stats": ["bogus"]})
    assert resp.status_code == 422


def test_history_too_large(client, monkeypatch):
    monkeypatch.setenv("FLASHLIGHT_MAX_HISTORY_POINTS", "2")
    history = [_payload(make_snapshot(minutes_after(T0, i))) for i in range(3)]
    resp = client.post(
        "/api/stats/compute",
        json={"snapshot": history[-1], "history": history, "variant": "session"},
    )
    assert resp.status_code == 413
    detail = resp.json()["detail"]
    assert detail["code"] == "HISTORY_TOO_LARGE"
    assert detail["details"]["limit"] == 2


def test_level(client):
    assert client.post("/api/stats/level", json={"experience": 500}).json() == {"stars": 1.0}
    assert client.post("/api/stats/level", json={"experience": -1}).status_code == 422


def test_progression(client):
    history = [with_stat(T0, "overall", "wins", 100), with_stat(T_END, "overall", "wins", 400)]
    resp = client.post(
        "/api/stats/progression",
        json={
            "trackingHistory": [_payload(s) for s in history],
            "current": _payload(history[1]),
            "stat": "wins",
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["error"] is False
    assert body["nextMilestoneValue"] == 500
    assert body["reachable"] is True
    assert body["daysUntilMilestone"] == pytest.approx(10)
    assert body["projectedMilestoneDate"] == (T_END + timedelta(days=10)).isoformat()


def test_progression_quotient_unreachable(client):
    history = [with_ratio(T0, "overall", "fkdr", 100, 50), with_ratio(T_END, "overall", "fkdr", 250, 100)]
    current = with_ratio(T_END, "overall", "fkdr", 260, 104)
    resp = client.post(
        "/api/stats/progression",
        json={
            "trackingHistory": [_payload(s) for s in history],
            "current": _payload(current),
            "stat": "fkdr",
            "trackingEnd": T_TRACKING_END.isoformat(),
        },
    )
    body = resp.json()
    assert body["error"] is False
    assert body["reachable"] is False
    assert body["daysUntilMilestone"] is None
    assert body["projectedMilestoneDate"] is None
    assert body["sessionQuotient"] == 3
    assert body["trackingEnd"] == T_TRACKING_END.isoformat()


def test_progression_not_enough_data(client):
    resp = client.post(
        "/api/stats/progression",
        json={"trackingHistory": [_payload(make_snapshot())], "current": _payload(make_snapshot()), "stat": "wins"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"error": True, "reason": "Not enough data"}


def test_progression_without_history(client):
    resp = client.post("/api/stats/progression", json={"stat": "fkdr"})
    assert resp.json() == {"error": True, "reason": "No data"}


def _pit(games_played, experience):
    return make_snapshot(
        minutes_after(T0, games_played),
        experience=experience,
        overall=make_stats(games_played=games_played),
    )


def test_extrapolate_sessions(client):
    session = {
        "start": _payload(_pit(10, 11_000)),
        "end": _payload(_pit(11, 12_000)),
        "consecutive": True,
    }
    resp = client.post(
        "/api/sessions/extrapolate",
        json={"sessions": [session], "history": [_payload(_pit(8, 9_000)), _payload(_pit(16, 21_000))]},
    )
    assert resp.status_code == 200
    sessions = resp.json()["sessions"]
    assert [(s["extrapolated"], s["consecutive"]) for s in sessions] == [
        (True, False),
        (False, True),
        (True, False),
    ]
    assert sessions[0]["start"]["overall"]["gamesPlayed"] == 8
    assert sessions[-1]["end"]["experience"] == 21_000


def test_extrapolate_sessions_without_history(client):
    resp = client.post("/api/sessions/extrapolate", json={"sessions": []})
    assert resp.json() == {"sessions": []}


def test_chart_data(client):
    history = [
        make_snapshot(T0, overall=make_stats(wins=1)),
        make_snapshot(minutes_after(T0, 120), overall=make_stats(wins=5)),
    ]
    resp = client.post("/api/history/chart", json={"histories": [[_payload(s) for s in history]]})
    assert resp.status_code == 200
    rows = resp.json()["data"]
    assert [row["queriedAt"] for row in rows] == [s.queried_at_ms for s in history]
    assert rows[1]["history-test-uuid-session-overall-wins"] == 4


def test_intervals(client):
    resp = client.post("/api/intervals", json={"type": "until", "date": "2024-02-14T17:15:00+00:00"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["day"] == {"start": "2024-02-14T00:00:00+00:00", "end": "2024-02-14T23:59:59.999000+00:00"}
    assert body["week"]["start"] == "2024-02-08T00:00:00+00:00"
