"""Tests for the Flask routes."""

import pytest

import main
from engine import IntervalTimer


@pytest.fixture
def client(timers):
    main.app.config.update(TESTING=True, TIMER_FACTORY=timers, RANDOM_SEED=3)
    with main.app.test_client() as client:
        yield client
    main.close_all_sessions()
    main.app.config.update(TIMER_FACTORY=IntervalTimer, RANDOM_SEED=None, MAX_SESSIONS=64)


def only_session():
    assert len(main._SESSIONS) == 1
    return next(iter(main._SESSIONS.values()))


class TestPages:
    """Tests for the HTML page and read-only endpoints."""

    def test_index_renders(self, client):
        response = client.get("/")
        body = response.get_data(as_text=True)

        assert response.status_code == 200
        assert "<svg" in body
        assert 'id="algo-selector"' in body
        assert "Status: Ready" in body

    def test_state(self, client):
        data = client.get("/api/state").get_json()

        assert len(data["sink"]["array"]) == main.app.config["DEFAULT_SIZE"]
        assert data["playback"]["state"] == "idle"
        assert data["svg"].startswith("<svg")

    def test_same_cookie_same_session(self, client):
        client.get("/api/state")
        client.get("/api/state")

        assert len(main._SESSIONS) == 1

    def test_algorithms(self, client):
        data = client.get("/api/algorithms").get_json()

        assert [a["key"] for a in data][:2] == ["bubble", "selection"]
        assert len(data) == 8

    def test_algorithms_by_tag(self, client):
        data = client.get("/api/algorithms?tag=non-comparison").get_json()

        assert [a["key"] for a in data] == ["radix"]


class TestSessionStore:
    """The per-browser store stays bounded."""

    def test_cookieless_requests_stay_under_cap(self, client):
        main.app.config["MAX_SESSIONS"] = 5
        for _ in range(20):
            main.app.test_client().get("/api/state")

        assert len(main._SESSIONS) == 5

    def test_active_browser_survives_eviction(self, client):
        main.app.config["MAX_SESSIONS"] = 3
        client.post("/api/array/custom", json={"values": "5,3,8,1"})
        for _ in range(4):
            main.app.test_client().get("/api/state")
            client.get("/api/state")

        assert client.get("/api/state").get_json()["sink"]["array"] == [5, 3, 8, 1]

    def test_evicted_session_is_closed(self, client, timers, wait_for_compile):
        main.app.config["MAX_SESSIONS"] = 1
        client.post("/api/run", json={"algo_key": "bubble"})
        first = only_session()
        wait_for_compile(first)
        main.app.test_client().get("/api/state")

        assert first not in main._SESSIONS.values()
        assert not first.scheduler.is_playing()


class TestArrayRoutes:
    """Tests for random and custom arrays."""

    def test_random(self, client):
        data = client.post("/api/array/random", json={"size": 15, "seed": 1}).get_json()

        assert len(data["sink"]["array"]) == 15
        assert data["status"] == "Randomized"

    def test_random_out_of_range(self, client):
        response = client.post("/api/array/random", json={"size": 5})

        assert response.status_code == 400
        assert response.get_json()["kind"] == "InvalidInput"

    def test_custom(self, client):
        data = client.post("/api/array/custom", json={"values": "5,3,8,1"}).get_json()

        assert data["sink"]["array"] == [5, 3, 8, 1]
        assert data["status"] == "Custom array loaded (4 elements)"

    def test_custom_invalid(self, client):
        response = client.post("/api/array/custom", json={"values": "5,x"})

        assert response.status_code == 400
        assert "error" in response.get_json()

    @pytest.mark.parametrize("payload", [{"size": "abc"}, {"size": None}, {"size": [3]}, {"size": 20, "seed": "x"}])
    def test_random_rejects_non_integer_fields(self, client, payload):
        response = client.post("/api/array/random", json=payload)

        assert response.status_code == 400
        assert response.get_json()["kind"] == "InvalidInput"

    @pytest.mark.parametrize("values", [5, None, {"a": 1}])
    def test_custom_rejects_non_sequence(self, client, values):
        response = client.post("/api/array/custom", json={"values": values})

        assert response.status_code == 400
        assert response.get_json()["kind"] == "InvalidInput"

    def test_non_object_body_uses_defaults(self, client):
        response = client.post("/api/array/random", json=[1, 2, 3])

        assert response.status_code == 200
        assert len(response.get_json()["sink"]["array"]) == main.app.config["DEFAULT_SIZE"]


class TestPlaybackRoutes:
    """Tests for run / pause / step / reset."""

    def test_full_run(self, client, timers, wait_for_compile):
        client.post("/api/array/custom", json={"values": "5,3,8,1"})
        response = client.post("/api/run", json={"algo_key": "bubble"})
        assert response.status_code == 202

        wait_for_compile(only_session())
        timers.last.fire(100)
        data = client.get("/api/state").get_json()

        assert data["sink"]["array"] == [1, 3, 5, 8]
        assert data["status"] == "Completed (13 ops)"
        assert data["stats"]["compares"] == 6

    def test_run_twice_conflicts(self, client, wait_for_compile):
        client.post("/api/run", json={"algo_key": "heap"})
        wait_for_compile(only_session())

        assert client.post("/api/run").status_code == 409

    def test_custom_while_playing_conflicts(self, client, wait_for_compile):
        client.post("/api/run")
        wait_for_compile(only_session())
        response = client.post("/api/array/custom", json={"values": "1,2"})

        assert response.status_code == 409
        assert response.get_json()["kind"] == "PlaybackActive"

    def test_pause_step_reset(self, client, timers, wait_for_compile):
        client.post("/api/array/custom", json={"values": "5,3,8,1"})
        client.post("/api/run", json={"algo_key": "bubble"})
        wait_for_compile(only_session())
        timers.last.fire()

        paused = client.post("/api/pause").get_json()
        assert paused["playback"]["state"] == "paused"

        stepped = client.post("/api/step").get_json()
        assert stepped["playback"]["cursor"] == 2
        assert stepped["sink"]["array"] == [3, 5, 8, 1]

        reset = client.post("/api/reset").get_json()
        assert reset["sink"]["array"] == [5, 3, 8, 1]
        assert reset["status"] == "Reset"

    def test_invalid_transitions_conflict(self, client):
        assert client.post("/api/pause").status_code == 409
        assert client.post("/api/step").status_code == 409

    def test_reset_when_idle_is_fine(self, client):
        assert client.post("/api/reset").status_code == 200


class TestConfigRoutes:
    """Tests for algorithm / speed / label settings."""

    def test_select_algorithm_by_label(self, client):
        data = client.post("/api/config/algo", json={"algo_key": "Radix Sort"}).get_json()

        assert data["algo_key"] == "radix"
        assert "code-line" in data["pseudocode"]

    def test_unknown_algorithm_falls_back(self, client):
        data = client.post("/api/config/algo", json={"algo_key": "bogo"}).get_json()

        assert data["algo_key"] == "bubble"

    def test_speed_slider(self, client):
        assert client.post("/api/config/speed", json={"slider": 1}).get_json() == {"delay_ms": 2}
        assert client.post("/api/config/speed", json={"delay_ms": 900}).get_json() == {"delay_ms": 200}

    @pytest.mark.parametrize("payload", [{"slider": "x"}, {"delay_ms": "fast"}, {"preset": "warp"}, {"preset": ["fast"]}])
    def test_speed_rejects_bad_values(self, client, payload):
        response = client.post("/api/config/speed", json=payload)

        assert response.status_code == 400
        assert response.get_json()["kind"] == "InvalidInput"

    def test_speed_preset(self, client):
        assert client.post("/api/config/speed", json={"preset": "turbo"}).get_json() == {"delay_ms": 2}

    def test_non_string_algorithm_falls_back(self, client):
        data = client.post("/api/config/algo", json={"algo_key": 7}).get_json()

        assert data["algo_key"] == "bubble"

    def test_hide_numbers(self, client):
        client.post("/api/array/custom", json={"values": "5,3,8,1"})
        client.post("/api/config/numbers", json={"show": False})
        data = client.get("/api/state").get_json()

        assert data["show_numbers"] is False
        assert "value-label" not in data["svg"]

    def test_compare(self, client):
        client.post("/api/array/custom", json={"values": "9,8,7,6,5,4,3,2,1"})
        data = client.post("/api/compare", json={"left": "bubble", "right": "merge"}).get_json()

        assert data["left"]["algo_key"] == "bubble"
        assert data["winner_compares"] == "Merge Sort"
        assert "comparison-table" in data["html"]
