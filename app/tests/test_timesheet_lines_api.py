from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

EMPLOYEE = 52001


def _create() -> str:
    resp = client.post("/timesheets", json={"id": EMPLOYEE})
    assert resp.status_code == 200, f"create failed: {resp.status_code} {resp.text}"
    return resp.json()["id"]


def _add_line(timecard_id: str, **fields) -> dict:
    body = {"work_date": "2026-03-02", "hours": 8, "project": "ops"}
    body.update(fields)
    resp = client.post(f"/timesheets/{timecard_id}/lines", json=body)
    assert resp.status_code == 200, f"add line failed: {resp.status_code} {resp.text}"
    return resp.json()


def test_add_and_get_line():
    timecard_id = _create()

    line = _add_line(timecard_id, description="standup")
    assert line["unique_identifier"]
    assert line["work_date"] == "2026-03-02"
    assert line["hours"] == 8
    assert line["description"] == "standup"
    assert line["recorded"]

    resp = client.get(f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}")
    assert resp.status_code == 200
    fetched = resp.json()
    for key in ("unique_identifier", "work_date", "hours", "project", "description"):
        assert fetched[key] == line[key], key


def test_get_unknown_line_is_404():
    timecard_id = _create()
    _add_line(timecard_id)

    assert client.get(f"/timesheets/{timecard_id}/lines/nope").status_code == 404
    assert client.get("/timesheets/nope/lines").status_code == 404


def test_lines_listed_by_work_date():
    timecard_id = _create()
    _add_line(timecard_id, work_date="2026-03-04", project="c")
    _add_line(timecard_id, work_date="2026-03-02", project="a")
    _add_line(timecard_id, work_date="2026-03-03", project="b")

    resp = client.get(f"/timesheets/{timecard_id}/lines")
    assert resp.status_code == 200
    assert [line["project"] for line in resp.json()] == ["a", "b", "c"]


def test_invalid_line_document_is_422():
    timecard_id = _create()

    missing_hours = client.post(
        f"/timesheets/{timecard_id}/lines",
        json={"work_date": "2026-03-02", "project": "ops"},
    )
    assert missing_hours.status_code == 422

    too_many = client.post(
        f"/timesheets/{timecard_id}/lines",
        json={"work_date": "2026-03-02", "hours": 25, "project": "ops"},
    )
    assert too_many.status_code == 422


def test_post_line_replaces_whole_document():
    timecard_id = _create()
    line = _add_line(timecard_id, description="standup")

    resp = client.post(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"work_date": "2026-03-05", "hours": 3, "project": "support"},
    )
    assert resp.status_code == 200
    replaced = resp.json()
    assert replaced["unique_identifier"] == line["unique_identifier"]
    assert replaced["work_date"] == "2026-03-05"
    assert replaced["hours"] == 3
    assert replaced["project"] == "support"
    assert replaced["description"] is None


def test_post_line_requires_full_document():
    timecard_id = _create()
    line = _add_line(timecard_id)

    resp = client.post(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"hours": 3},
    )
    assert resp.status_code == 422


def test_patch_line_changes_only_given_fields():
    timecard_id = _create()
    line = _add_line(timecard_id, description="standup")

    resp = client.patch(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"hours": 5.5},
    )
    assert resp.status_code == 200
    patched = resp.json()
    assert patched["hours"] == 5.5
    assert patched["project"] == "ops"
    assert patched["work_date"] == "2026-03-02"
    assert patched["description"] == "standup"

    stored = client.get(f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}").json()
    assert stored["hours"] == 5.5


def test_update_unknown_line_is_404():
    timecard_id = _create()
    _add_line(timecard_id)

    assert client.patch(f"/timesheets/{timecard_id}/lines/nope", json={"hours": 1}).status_code == 404
    assert client.patch("/timesheets/nope/lines/nope", json={"hours": 1}).status_code == 404


def test_line_update_allowed_after_submit_by_default(monkeypatch):
    monkeypatch.delenv("LINE_UPDATES_DRAFT_ONLY", raising=False)
    timecard_id = _create()
    line = _add_line(timecard_id)
    assert client.post(f"/timesheets/{timecard_id}/submittal", json={"person": EMPLOYEE}).status_code == 200

    resp = client.patch(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"hours": 2},
    )
    assert resp.status_code == 200
    assert resp.json()["hours"] == 2


def test_line_update_guarded_when_draft_only(monkeypatch):
    monkeypatch.setenv("LINE_UPDATES_DRAFT_ONLY", "true")
    timecard_id = _create()
    line = _add_line(timecard_id)

    draft_patch = client.patch(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"hours": 6},
    )
    assert draft_patch.status_code == 200

    assert client.post(f"/timesheets/{timecard_id}/submittal", json={"person": EMPLOYEE}).status_code == 200

    resp = client.patch(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"hours": 2},
    )
    assert resp.status_code == 409
    assert resp.json()["error"] == "InvalidStateError"


def test_patch_line_with_null_required_field_is_422():
    timecard_id = _create()
    line = _add_line(timecard_id)
    path = f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}"

    for field in ("hours", "project", "work_date"):
        resp = client.patch(path, json={field: None})
        assert resp.status_code == 422, field

    stored = client.get(path).json()
    assert stored["hours"] == 8
    assert stored["project"] == "ops"
    assert stored["work_date"] == "2026-03-02"


def test_patch_line_null_description_clears_it():
    timecard_id = _create()
    line = _add_line(timecard_id, description="standup")

    resp = client.patch(
        f"/timesheets/{timecard_id}/lines/{line['unique_identifier']}",
        json={"description": None},
    )
    assert resp.status_code == 200
    assert resp.json()["description"] is None
    assert resp.json()["hours"] == 8
