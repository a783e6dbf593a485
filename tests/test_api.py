import pytest

from liftlog.dao import ExerciseSetDAO
from tests.conftest import make_token


async def create_routine(client, headers, name="Upper Lower"):
    res = await client.post("/routines", json={"name": name, "objective": "Hypertrophy"}, headers=headers)
    assert res.status_code == 201
    return res.json()


async def add_exercise_with_sets(client, headers, day_id, exercise_id, sets):
    res = await client.post(f"/days/{day_id}/exercises", json={"exercise_id": exercise_id}, headers=headers)
    assert res.status_code == 201
    scheduled = res.json()
    for reps, weight in sets:
        res = await client.post(
            f"/exercises/{scheduled['id']}/sets", json={"reps": reps, "weight": weight}, headers=headers
        )
        assert res.status_code == 201
    return scheduled


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert "X-Request-ID" in res.headers


@pytest.mark.asyncio
async def test_requires_a_valid_token(client):
    assert (await client.get("/routines")).status_code == 401
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert (await client.get("/routines", headers=bad)).status_code == 401


@pytest.mark.asyncio
async def test_token_without_subject_is_rejected(client):
    headers = {"Authorization": f"Bearer {make_token('')}"}
    assert (await client.get("/routines", headers=headers)).status_code == 401


@pytest.mark.asyncio
async def test_create_routine_has_seven_template_days(client, auth_headers):
    routine = await create_routine(client, auth_headers)

    assert routine["is_active"] is False
    assert [d["day_name"] for d in routine["template_days"]] == [
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    ]
    assert {d["state"] for d in routine["template_days"]} == {"TEMPLATE"}
    assert routine["workouts"] == []

    listed = (await client.get("/routines", headers=auth_headers)).json()
    assert [r["id"] for r in listed] == [routine["id"]]


@pytest.mark.asyncio
async def test_routines_are_private(client, auth_headers, other_auth_headers):
    routine = await create_routine(client, auth_headers)

    assert (await client.get(f"/routines/{routine['id']}", headers=other_auth_headers)).status_code == 404
    assert (await client.get("/routines", headers=other_auth_headers)).json() == []
    res = await client.post(f"/routines/{routine['id']}/activate", headers=other_auth_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_update_and_delete_routine(client, auth_headers):
    routine = await create_routine(client, auth_headers)

    res = await client.patch(f"/routines/{routine['id']}", json={"name": "Renamed"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["name"] == "Renamed"
    assert res.json()["objective"] == "Hypertrophy"

    res = await client.delete(f"/routines/{routine['id']}", headers=auth_headers)
    assert res.json() == {"deleted": True, "id": routine["id"]}
    assert (await client.get(f"/routines/{routine['id']}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_active_routine_endpoints(client, auth_headers):
    assert (await client.get("/routines/active", headers=auth_headers)).json() == {"active": False, "routine": None}
    first = await create_routine(client, auth_headers, "A")
    second = await create_routine(client, auth_headers, "B")

    await client.post(f"/routines/{first['id']}/activate", headers=auth_headers)
    res = await client.post(f"/routines/{second['id']}/start-week", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["is_active"] is True
    assert res.json()["week_start_date"] is not None

    active = (await client.get("/routines/active", headers=auth_headers)).json()
    assert active["active"] is True
    assert active["routine"]["id"] == second["id"]
    listed = (await client.get("/routines", headers=auth_headers)).json()
    assert sum(r["is_active"] for r in listed) == 1


@pytest.mark.asyncio
async def test_start_complete_and_duplicate_conflicts(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    monday = routine["template_days"][0]
    await add_exercise_with_sets(client, auth_headers, monday["id"], 7, [(None, None), (8, 40.0)])

    body = {"date": "2026-03-09", "start_time": "2026-03-09T18:00:00Z"}
    res = await client.post(f"/days/{monday['id']}/start", json=body, headers=auth_headers)
    assert res.status_code == 201
    started = res.json()
    assert started["day"]["state"] == "IN_PROGRESS"
    assert started["day"]["date"] == "2026-03-09"
    assert started["copy_report"] == {"days": 1, "exercises": 1, "sets": 2, "failed": 0, "failures": []}

    again = await client.post(f"/days/{monday['id']}/start", json=body, headers=auth_headers)
    assert again.status_code == 409

    workout_id = started["day"]["id"]
    tree = (await client.get(f"/days/{workout_id}", headers=auth_headers)).json()
    # Left running for years: closed on read
    assert tree["state"] == "COMPLETED"
    assert [(s["reps"], s["weight"]) for s in tree["exercises"][0]["sets"]] == [(0, 0.0), (8, 40.0)]

    res = await client.post(f"/days/{workout_id}/complete", headers=auth_headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_start_without_body_uses_now(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    friday = routine["template_days"][4]

    res = await client.post(f"/days/{friday['id']}/start", headers=auth_headers)
    assert res.status_code == 201
    workout_id = res.json()["day"]["id"]

    res = await client.post(f"/days/{workout_id}/complete", headers=auth_headers)
    assert res.status_code == 200
    finished = res.json()
    assert finished["state"] == "COMPLETED"
    assert finished["duration_minutes"] == 0
    assert finished["display_duration_minutes"] is None

    last = (await client.get(f"/days/{friday['id']}/last-completed", headers=auth_headers)).json()
    assert last["id"] == workout_id


@pytest.mark.asyncio
async def test_day_lookups_and_note(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    rid = routine["id"]

    res = await client.get(f"/routines/{rid}/days/by-name/Sunday", headers=auth_headers)
    assert res.status_code == 200
    sunday = res.json()
    assert sunday["day_name"] == "Sunday"

    assert (await client.get(f"/routines/{rid}/days/by-name/Funday", headers=auth_headers)).status_code == 422
    assert (await client.get(f"/routines/{rid}/days/by-date/2026-03-15", headers=auth_headers)).json() is None

    res = await client.patch(f"/days/{sunday['id']}", json={"note": "Rest or mobility"}, headers=auth_headers)
    assert res.json()["note"] == "Rest or mobility"


@pytest.mark.asyncio
async def test_set_crud(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    monday = routine["template_days"][0]
    scheduled = await add_exercise_with_sets(client, auth_headers, monday["id"], 3, [(10, 50.0)])
    base = f"/exercises/{scheduled['id']}/sets"

    res = await client.post(base, json={"reps": -1, "weight": 0}, headers=auth_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["set_number"] == 2

    res = await client.patch(f"{base}/{created['id']}", json={"reps": None, "rpe": 9}, headers=auth_headers)
    assert res.json()["reps"] is None
    assert res.json()["weight"] == 0
    assert res.json()["rpe"] == 9

    assert (await client.delete(f"{base}/{created['id']}", headers=auth_headers)).json()["deleted"] is True
    assert (await client.delete(f"{base}/{created['id']}", headers=auth_headers)).status_code == 404

    res = await client.delete(f"/days/{monday['id']}/exercises/{scheduled['id']}", headers=auth_headers)
    assert res.status_code == 200
    day = (await client.get(f"/days/{monday['id']}", headers=auth_headers)).json()
    assert day["exercises"] == []


@pytest.mark.asyncio
async def test_duplicate_routine(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    monday = routine["template_days"][0]
    await add_exercise_with_sets(client, auth_headers, monday["id"], 1, [])

    res = await client.post(f"/routines/{routine['id']}/duplicate", json={"name": "Block 2"}, headers=auth_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["routine"]["copied_from_id"] == routine["id"]
    assert body["routine"]["objective"] == "Hypertrophy"
    assert body["copy_report"]["sets"] == 3

    copy = (await client.get(f"/routines/{body['routine']['id']}", headers=auth_headers)).json()
    sets = copy["template_days"][0]["exercises"][0]["sets"]
    assert [(s["set_number"], s["reps"], s["weight"]) for s in sets] == [(1, None, None), (2, None, None), (3, None, None)]


@pytest.mark.asyncio
async def test_progress_endpoints(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    await client.post(f"/routines/{routine['id']}/activate", headers=auth_headers)

    res = await client.get("/progress/calendar?start=2026-03-09&end=2026-03-15", headers=auth_headers)
    assert res.status_code == 200
    assert len(res.json()["items"]) == 7
    assert {e["display_state"] for e in res.json()["items"]} == {"MISSED"}

    bad = await client.get("/progress/calendar?start=2026-03-15&end=2026-03-09", headers=auth_headers)
    assert bad.status_code == 422

    weekly = (await client.get("/progress/weekly", headers=auth_headers)).json()
    assert weekly["sessions_count"] == 0

    monthly = (await client.get("/progress/monthly?year=2026&month=2", headers=auth_headers)).json()
    assert (monthly["start"], monthly["end"]) == ("2026-02-01", "2026-02-28")


@pytest.mark.asyncio
async def test_running_workout_endpoint(client, auth_headers):
    routine = await create_routine(client, auth_headers)
    wednesday = routine["template_days"][2]
    await add_exercise_with_sets(client, auth_headers, wednesday["id"], 7, [(5, 100.0)])

    assert (await client.get(f"/days/{wednesday['id']}/active", headers=auth_headers)).json() is None
    started = (await client.post(f"/days/{wednesday['id']}/start", headers=auth_headers)).json()["day"]

    running = (await client.get(f"/days/{wednesday['id']}/active", headers=auth_headers)).json()
    assert running["id"] == started["id"]
    assert running["state"] == "IN_PROGRESS"
    assert [(s["reps"], s["weight"]) for s in running["exercises"][0]["sets"]] == [(5, 100.0)]

    await client.post(f"/days/{started['id']}/complete", headers=auth_headers)
    assert (await client.get(f"/days/{wednesday['id']}/active", headers=auth_headers)).json() is None


@pytest.mark.asyncio
async def test_exercise_history_and_record_endpoints(client, auth_headers, other_auth_headers):
    routine = await create_routine(client, auth_headers)
    monday = routine["template_days"][0]
    await add_exercise_with_sets(client, auth_headers, monday["id"], 7, [(5, 100.0), (3, 110.0)])
    started = (await client.post(f"/days/{monday['id']}/start", headers=auth_headers)).json()["day"]

    res = await client.get("/progress/exercises/7/history", headers=auth_headers)
    assert res.status_code == 200
    sessions = res.json()["sessions"]
    assert [s["day_id"] for s in sessions] == [started["id"]]
    assert (sessions[0]["top_weight"], sessions[0]["total_reps"], sessions[0]["volume"]) == (110.0, 8, 830.0)

    record = (await client.get("/progress/exercises/7/record", headers=auth_headers)).json()
    assert (record["weight"], record["reps"], record["day_id"]) == (110.0, 3, started["id"])

    assert (await client.get("/progress/exercises/7/record", headers=other_auth_headers)).json() is None
    assert (await client.get("/progress/exercises/7/history?limit=0", headers=auth_headers)).status_code == 422


@pytest.mark.asyncio
async def test_set_number_race_is_a_conflict(client, auth_headers, monkeypatch):
    routine = await create_routine(client, auth_headers)
    scheduled = await add_exercise_with_sets(client, auth_headers, routine["template_days"][0]["id"], 3, [(10, 50.0)])

    async def stale_next_set_number(cls, session, scheduled_exercise_id):
        return 1

    monkeypatch.setattr(ExerciseSetDAO, "next_set_number", classmethod(stale_next_set_number))

    res = await client.post(f"/exercises/{scheduled['id']}/sets", json={"reps": 8}, headers=auth_headers)
    assert res.status_code == 409
    assert "retry" in res.json()["detail"]
