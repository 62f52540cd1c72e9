import json

import pytest
from django.contrib.auth.models import User
from django.core.management import call_command
from django.db import DatabaseError

from lab.chemicals import CHEMICALS, EXPERIMENT_TEMPLATES
from lab.models import Chemical, Experiment, Lesson

pytestmark = pytest.mark.django_db


def post(client, url, data=None):
    body = json.dumps(data) if data is not None else ""
    return client.post(url, data=body, content_type="application/json")


@pytest.fixture
def user():
    return User.objects.create_user(username="ada", email="ada@example.com", password="s3cret-pass")


@pytest.fixture
def signed_in(client, user):
    client.force_login(user)
    return client


def _bench(client):
    assert post(client, "/api/lab/start/").status_code == 200
    response = post(client, "/api/lab/equipment/", {"type": "beaker", "position": [0, 1, 0]})
    assert response.status_code == 201
    return response.json()["equipment"]["id"]


def test_workbench_rejected_before_start(client):
    response = post(client, "/api/lab/equipment/", {"type": "beaker"})
    assert response.status_code == 400
    assert response.json()["error"] == "Start an experiment before using the workbench."


def test_guest_bench_survives_between_requests(client):
    beaker = _bench(client)
    response = post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "HCl", "volume": 5})
    assert response.status_code == 200
    assert response.json()["reaction"] is None

    response = post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "NaOH", "volume": 5})
    body = response.json()
    assert body["reaction"]["reaction_id"] == "hcl_naoh_neutralization"
    assert body["message"] == "Acid-Base Neutralization detected! +50 points"
    assert body["equipment"]["total_volume"] == 10
    assert body["state"]["score"] == 100
    assert body["state"]["badges"] == ["acid_base"]

    state = client.get("/api/lab/state/").json()["state"]
    assert state["is_experiment_started"] is True
    assert len(state["reactions"]) == 1


def test_add_chemical_returns_new_alerts(client):
    beaker = _bench(client)
    post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "H2SO4"})
    body = post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"chemical": {"name": "Mg"}}).json()
    assert [a["level"] for a in body["alerts"]] == ["critical"]
    assert body["reaction"]["danger_level"] == "extreme"

    alerts = client.get("/api/lab/alerts/").json()["alerts"]
    assert len(alerts) == 1
    assert client.delete("/api/lab/alerts/").json()["alerts"] == []
    assert client.get("/api/lab/alerts/").json()["alerts"] == []


def test_heat_triggers_reaction(client):
    crucible = _bench(client)
    post(client, f"/api/lab/equipment/{crucible}/chemicals/", {"name": "Mg", "volume": 1})
    post(client, f"/api/lab/equipment/{crucible}/chemicals/", {"name": "O2", "volume": 1})
    body = post(client, f"/api/lab/equipment/{crucible}/heat/", {"temperature": 700}).json()
    assert body["reaction"]["reaction_id"] == "mg_combustion"
    assert body["equipment"]["is_heated"] is True

    response = post(client, f"/api/lab/equipment/{crucible}/heat/", {})
    assert response.status_code == 400


def test_change_volume(client):
    beaker = _bench(client)
    post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "Water", "volume": 5})
    body = post(client, f"/api/lab/equipment/{beaker}/volume/", {"index": 0, "volume": 20}).json()
    assert body["equipment"]["total_volume"] == 20

    response = post(client, f"/api/lab/equipment/{beaker}/volume/", {"index": 0, "volume": 0})
    assert response.status_code == 400


def test_bad_requests(client):
    _bench(client)
    response = client.post("/api/lab/equipment/", data="{oops", content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON."

    response = post(client, "/api/lab/equipment/missing/chemicals/", {"name": "HCl"})
    assert response.status_code == 404

    response = post(client, "/api/lab/start/")
    assert response.status_code == 400

    assert client.get("/api/lab/start/").status_code == 405


def test_pause_resume_and_reset(client):
    _bench(client)
    assert post(client, "/api/lab/pause/").json()["state"]["experiment_state"]["status"] == "paused"
    assert post(client, "/api/lab/equipment/", {"type": "flask"}).status_code == 400
    assert post(client, "/api/lab/resume/").json()["state"]["experiment_state"]["status"] == "active"

    state = post(client, "/api/lab/reset/").json()["state"]
    assert state["score"] == 0
    assert state["placed_equipment"] == []
    assert state["is_experiment_started"] is False


def test_save_requires_sign_in(client):
    _bench(client)
    response = post(client, "/api/lab/save/")
    assert response.status_code == 401
    assert Experiment.objects.count() == 0


def test_save_writes_experiment(signed_in, user):
    beaker = _bench(signed_in)
    post(signed_in, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "HCl"})
    post(signed_in, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "NaOH"})

    response = post(signed_in, "/api/lab/save/")
    assert response.status_code == 200
    assert response.json()["saved"] is True

    experiment = Experiment.objects.get()
    assert experiment.user_id == str(user.pk)
    assert experiment.score == 100
    assert experiment.chemicals_used == ["HCl", "NaOH"]
    assert experiment.results["reactions_performed"] == ["Acid-Base Neutralization"]


def test_failed_save_is_reported_and_state_kept(signed_in, monkeypatch):
    _bench(signed_in)

    def unavailable(*args, **kwargs):
        raise DatabaseError("disk I/O error")

    monkeypatch.setattr(Experiment.objects, "create", unavailable)
    response = post(signed_in, "/api/lab/save/")
    assert response.status_code == 502
    body = response.json()
    assert body["saved"] is False
    assert "disk I/O error" in body["error"]
    assert body["state"]["score"] == 20


def test_complete_saves_for_signed_in_user(signed_in):
    _bench(signed_in)
    body = post(signed_in, "/api/lab/complete/").json()
    assert body["saved"] is True
    assert body["state"]["experiment_state"]["status"] == "completed"
    assert Experiment.objects.count() == 1


def test_auto_save_toggle(client):
    body = post(client, "/api/lab/auto-save/", {"enabled": False}).json()
    assert body["message"] == "Auto-save disabled."
    assert body["state"]["experiment_state"]["auto_save_enabled"] is False


def test_catalog(client):
    reactions = client.get("/api/lab/catalog/").json()["reactions"]
    assert reactions[0]["id"] == "hcl_naoh_neutralization"
    acid_base = client.get("/api/lab/catalog/", {"type": "acid_base"}).json()["reactions"]
    assert {r["type"] for r in acid_base} == {"acid_base"}
    assert client.get("/api/lab/catalog/", {"type": "fusion"}).status_code == 400


def test_library(client):
    metals = client.get("/api/lab/library/", {"category": "metal"}).json()["chemicals"]
    assert {c["id"] for c in metals} == {"Fe2O3", "Fe", "Mg", "Na"}
    found = client.get("/api/lab/library/", {"search": "peroxide"}).json()["chemicals"]
    assert [c["id"] for c in found] == ["H2O2"]
    assert client.get("/api/lab/library/", {"category": "plasma"}).status_code == 400


def test_experiment_crud(client):
    payload = {
        "user_id":         "77",
        "experiment_name": "Lab Session 2026-01-01",
        "chemicals_used":  ["HCl"],
        "results":         {"reactions": 0},
        "score":           25,
    }
    response = client.post("/api/experiments/", data=payload, content_type="application/json")
    assert response.status_code == 201
    client.post("/api/experiments/", data={**payload, "user_id": "78"}, content_type="application/json")

    mine = client.get("/api/experiments/", {"user_id": "77"}).json()
    assert [e["user_id"] for e in mine] == ["77"]

    bad = client.post("/api/experiments/", data={**payload, "score": -5}, content_type="application/json")
    assert bad.status_code == 400


def test_load_lab_library_command(client):
    call_command("load_lab_library")
    call_command("load_lab_library")
    assert Chemical.objects.count() == len(CHEMICALS)
    assert Lesson.objects.count() == len(EXPERIMENT_TEMPLATES)

    hcl = Chemical.objects.get(name="Hydrochloric Acid")
    assert "Sodium Hydroxide" in hcl.reacts_with
    lessons = client.get("/api/lessons/").json()
    assert lessons[0]["chemicals"] == ["HCl", "NaOH"]
    assert len(client.get("/api/chemicals/").json()) == len(CHEMICALS)


def test_accounts_flow(client):
    response = post(client, "/api/auth/register/", {"username": "grace", "password": "pw-12345"})
    assert response.status_code == 201
    user_id = response.json()["user_id"]

    assert post(client, "/api/auth/login/", {"username": "grace", "password": "wrong"}).status_code == 401
    assert post(client, "/api/auth/login/", {"username": "grace", "password": "pw-12345"}).status_code == 200

    session = client.get("/api/auth/session/").json()
    assert session == {"is_authenticated": True, "user_id": user_id, "username": "grace", "email": ""}

    post(client, "/api/auth/logout/")
    assert client.get("/api/auth/session/").json()["is_authenticated"] is False


def test_invalid_color_is_a_bad_request(client):
    beaker = _bench(client)
    response = post(client, f"/api/lab/equipment/{beaker}/chemicals/",
                    {"chemical": {"name": "HCl", "color": "red"}})
    assert response.status_code == 400
    assert "hex color" in response.json()["error"]

    body = post(client, f"/api/lab/equipment/{beaker}/chemicals/", {"name": "NaOH"}).json()
    assert body["equipment"]["contents"] == ["NaOH"]
    assert body["state"]["score"] == 35


def test_non_finite_temperature_is_a_bad_request(client):
    beaker = _bench(client)
    response = post(client, f"/api/lab/equipment/{beaker}/heat/", {"temperature": "nan"})
    assert response.status_code == 400
    assert client.get("/api/lab/state/").json()["state"]["placed_equipment"][0]["temperature"] == 20.0
