"""
Tests for the HTTP API.

Uses the conftest.py `client` fixture. Response bodies use camelCase field
names and null for NaN weights.
"""

import pytest


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_version(self, client):
        data = client.get("/version").json()
        assert data["service"] == "lifting-log-compiler"
        assert data["version"]


class TestParseNotationEndpoint:
    def test_uniform_count(self, client):
        response = client.post("/notation/parse", json={"notation": "4 x 5 @ 95,135,155,155"})

        assert response.status_code == 200
        data = response.json()
        assert data["scheme"] == {"kind": "uniform_count", "count": 4, "reps": 5}
        assert [(s["reps"], s["weight"]) for s in data["sets"]] == [
            (5, 95), (5, 135), (5, 155), (5, 155),
        ]
        assert data["sets"][0]["durationLabel"] is None

    def test_timed(self, client):
        data = client.post("/notation/parse", json={"notation": "2 x 0:45 @ 20"}).json()

        assert data["scheme"]["kind"] == "timed"
        assert [s["durationLabel"] for s in data["sets"]] == ["0:45", "0:45"]

    def test_malformed_weight_is_null(self, client):
        data = client.post("/notation/parse", json={"notation": "1 x 5 @ heavy"}).json()
        assert data["sets"][0]["weight"] is None

    def test_missing_notation_is_422(self, client):
        assert client.post("/notation/parse", json={}).status_code == 422


class TestCompileEndpoint:
    def test_compile(self, client, sample_session_dict):
        response = client.post("/workouts/compile", json={"sessions": [sample_session_dict]})

        assert response.status_code == 200
        data = response.json()
        assert data["errors"] == []

        workout = data["workouts"][0]
        assert workout["date"] == "2023-01-05"
        assert [e["exerciseId"] for e in workout["exercises"]] == [101, 202, 303, 404]
        assert workout["exercises"][1]["volume"] == 2220

    def test_bad_record_reported(self, client, sample_session_dict):
        response = client.post(
            "/workouts/compile",
            json={"sessions": [{"title": "broken"}, sample_session_dict]},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["workouts"]) == 1
        assert data["errors"][0]["index"] == 0


class TestClassifyEndpoint:
    @pytest.fixture
    def compiled(self, client, sample_session_dict):
        return client.post("/workouts/compile", json={"sessions": [sample_session_dict]}).json()["workouts"]

    def test_classify(self, client, compiled):
        response = client.post("/workouts/classify", json={"workouts": compiled, "threshold": 0.85})

        assert response.status_code == 200
        data = response.json()
        squat = data["workouts"][0]["exercises"][0]
        assert [s["isWorkSet"] for s in squat["sets"]] == [False, True, True, True]
        assert squat["workVolume"] == 2225
        assert data["stats"]["totalSets"] == 15
        assert data["stats"]["warmupSets"] + data["stats"]["workSets"] == 15
        assert "warmupPct" in data["stats"]

    def test_default_threshold(self, client, compiled):
        response = client.post("/workouts/classify", json={"workouts": compiled})
        assert response.status_code == 200

    @pytest.mark.parametrize("threshold", [0, 1.5, -1])
    def test_invalid_threshold_is_400(self, client, compiled, threshold):
        response = client.post("/workouts/classify", json={"workouts": compiled, "threshold": threshold})

        assert response.status_code == 400
        assert "Threshold" in response.json()["detail"]


class TestMalformedTokens:
    def test_compile_then_classify(self, client, malformed_session_dict):
        compiled = client.post("/workouts/compile", json={"sessions": [malformed_session_dict]}).json()

        assert compiled["errors"] == []
        assert compiled["workouts"][0]["volume"] is None

        response = client.post("/workouts/classify", json={"workouts": compiled["workouts"], "threshold": 0.9})

        assert response.status_code == 200
        data = response.json()
        heavy, partial, timed = data["workouts"][0]["exercises"]
        assert all(s["isWorkSet"] for s in heavy["sets"])
        assert partial["sets"][1]["reps"] is None
        assert partial["workVolume"] == 1000
        assert timed["volume"] == 0
        assert data["stats"]["totalSets"] == 9


def test_version_reports_environment(client):
    assert client.get("/version").json()["environment"] == "development"
