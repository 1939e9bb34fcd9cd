import pytest

from api import build_calculator, create_app


@pytest.fixture
def client(db_path):
    app = create_app(build_calculator(db_path))
    app.config["TESTING"] = True
    return app.test_client()


def press_all(client, buttons):
    response = None
    for button in buttons:
        response = client.post("/api/press", json={"button": button})
        assert response.status_code == 200
    return response.get_json()


def test_initial_state(client):
    body = client.get("/api/state").get_json()
    assert body["success"] is True
    assert body["data"] == {"expression": "0", "result": "0", "history": [], "notice": None}


def test_press_and_evaluate(client):
    body = press_all(client, ["1", "2", "×", "3", "="])
    assert body["data"]["result"] == "36"
    assert body["data"]["expression"] == "36"
    assert body["data"]["history"] == ["12*3 = 36"]


def test_digit_operator_evaluate_endpoints(client):
    client.post("/api/digit", json={"value": "10"})
    client.post("/api/operator", json={"value": "/"})
    client.post("/api/digit", json={"value": "4"})
    body = client.post("/api/evaluate").get_json()
    assert body["data"]["result"] == "2.5"


def test_error_result(client):
    body = press_all(client, ["5", "÷", "0", "="])
    assert body["data"]["result"] == "Error"
    assert body["data"]["expression"] == "5/0"


def test_delete_and_clear(client):
    press_all(client, ["4", "2"])
    body = client.post("/api/delete").get_json()
    assert body["data"]["expression"] == "4"
    body = client.post("/api/clear").get_json()
    assert body["data"]["expression"] == "0"


def test_unary_endpoint(client):
    client.post("/api/digit", json={"value": "16"})
    body = client.post("/api/unary/sqrt").get_json()
    assert body["data"]["result"] == "4"
    assert body["data"]["history"] == ["√(16) = 4"]


def test_bad_requests(client):
    assert client.post("/api/press", json={}).status_code == 400
    assert client.post("/api/press", json={"button": "?"}).status_code == 400
    assert client.post("/api/digit", json={"value": "1a"}).status_code == 400
    assert client.post("/api/operator", json={"value": "%"}).status_code == 400
    assert client.post("/api/unary/cube").status_code == 400


def test_history_round_trip(client, db_path):
    press_all(client, ["2", "+", "2", "="])
    body = client.get("/api/history").get_json()
    assert body["data"] == ["2+2 = 4"]
    assert body["count"] == 1

    restarted = create_app(build_calculator(db_path)).test_client()
    assert restarted.get("/api/history").get_json()["data"] == ["2+2 = 4"]


def test_clear_history(client):
    press_all(client, ["2", "+", "2", "="])
    body = client.delete("/api/history").get_json()
    assert body["success"] is True
    assert body["data"]["history"] == []
    assert client.get("/api/history").get_json()["count"] == 0


def test_missing_fields_report_which_one(client):
    body = client.post("/api/press", json={"button": 7}).get_json()
    assert body == {"success": False, "error": "Missing 'button'"}
    body = client.post("/api/operator").get_json()
    assert body == {"success": False, "error": "Missing 'value'"}


def test_internal_key_error_is_not_a_bad_request(db_path, monkeypatch):
    calculator = build_calculator(db_path)

    def broken_press(button):
        raise KeyError("history")

    monkeypatch.setattr(calculator, "press", broken_press)
    app = create_app(calculator)
    app.config["TESTING"] = True

    with pytest.raises(KeyError):
        app.test_client().post("/api/press", json={"button": "7"})
