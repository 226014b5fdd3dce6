import pytest
from sqlalchemy import func, select

from classweave.models.timetable import Lesson, Timetable
from helpers import create, seed_school


def generate(client, ids, **extra):
    payload = {"name": "Autumn draft", "academic_year": "2026-27", "timing_id": ids["timing"], "random_seed": 7}
    payload.update(extra)
    return client.post("/api/timetables/generate", json=payload)


def empty_timetable(db_session, ids, name="Manual"):
    timetable = Timetable(name=name, academic_year="2026-27", timing_id=ids["timing"])
    db_session.add(timetable)
    db_session.commit()
    return timetable.id


def lesson_payload(ids, **overrides):
    payload = {
        "day": 0,
        "time_slot_id": ids["slots"][0],
        "class_id": ids["class_a"],
        "subject_id": ids["math"],
        "teacher_id": ids["ada"],
        "classroom_id": ids["room_small"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def school(client):
    return seed_school(client)


def test_generate_timetable_persists_lessons(client, school):
    response = generate(client, school)
    assert response.status_code == 201, response.text
    body = response.json()

    assert body["lesson_count"] == 5
    assert body["warnings"] == []
    assert {item["state"] for item in body["outcomes"]} == {"satisfied"}
    assert body["timetable"]["is_active"] is False
    assert body["timetable"]["is_locked"] is False

    timetable = client.get(f"/api/timetables/{body['timetable']['id']}").json()
    assert len(timetable["lessons"]) == 5
    math_days = [item["day"] for item in timetable["lessons"] if item["subject_id"] == school["math"]]
    assert len(set(math_days)) == 3

    listed = client.get("/api/timetables/").json()
    assert [item["id"] for item in listed] == [body["timetable"]["id"]]
    assert "lessons" not in listed[0]


def test_generate_reports_shortfall_as_success(client, school):
    create(client, "/api/subjects/", {
        "name": "Art",
        "code": "ART",
        "year_id": school["year"],
        "class_ids": [school["class_a"]],
        "periods_per_week": 2,
    })
    response = generate(client, school)
    assert response.status_code == 201
    warnings = response.json()["warnings"]
    assert [item["kind"] for item in warnings] == ["no_eligible_teacher"]
    assert "Art (ART)" in warnings[0]["message"]


def test_generate_unknown_timing_is_404(client, school):
    response = client.post(
        "/api/timetables/generate",
        json={"name": "Draft", "academic_year": "2026-27", "timing_id": "missing"},
    )
    assert response.status_code == 404
    assert "Timing configuration" in response.json()["message"]


def test_generate_without_classes_is_refused(client):
    slot = create(client, "/api/time-slots", {"name": "P1", "start_time": "09:00", "end_time": "09:50", "order": 1})
    timing = create(client, "/api/timings", {"academic_year": "2026-27", "periods_per_day": 1, "time_slot_ids": [slot["id"]]})
    response = client.post(
        "/api/timetables/generate",
        json={"name": "Draft", "academic_year": "2026-27", "timing_id": timing["id"]},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "No classes found"
    assert client.get("/api/timetables/").json() == []


def test_generate_filters_by_year(client, school):
    other_year = create(client, "/api/years/", {"name": "Year 2", "value": 2})
    response = generate(client, school, year_id=other_year["id"])
    assert response.status_code == 422
    assert response.json()["message"] == "No classes found"


def test_add_lesson_rejects_double_booking(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    path = f"/api/timetables/{timetable_id}/lessons"

    first = client.post(path, json=lesson_payload(school))
    assert first.status_code == 201
    assert first.json()["timetable_id"] == timetable_id

    room_clash = client.post(path, json=lesson_payload(
        school, class_id=school["class_b"], subject_id=school["english"], teacher_id=school["brian"],
    ))
    assert room_clash.status_code == 409
    assert room_clash.json()["details"]["conflicts"] == ["Classroom is already in use at this time"]

    class_clash = client.post(path, json=lesson_payload(
        school, subject_id=school["english"], teacher_id=school["brian"], classroom_id=school["room_large"],
    ))
    assert class_clash.status_code == 409
    assert class_clash.json()["details"]["class_conflict"] is True

    teacher_clash = client.post(path, json=lesson_payload(school, class_id=school["class_b"], classroom_id=None))
    assert teacher_clash.status_code == 409
    assert teacher_clash.json()["message"] == "Teacher is already teaching at this time"

    ok = client.post(path, json=lesson_payload(
        school, class_id=school["class_b"], subject_id=school["english"], teacher_id=school["brian"],
        classroom_id=school["room_large"],
    ))
    assert ok.status_code == 201
    assert len(client.get(f"/api/timetables/{timetable_id}").json()["lessons"]) == 2


def test_add_lesson_requires_qualified_teacher(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    response = client.post(
        f"/api/timetables/{timetable_id}/lessons",
        json=lesson_payload(school, subject_id=school["english"]),
    )
    assert response.status_code == 409
    assert response.json()["details"]["reason"] == "teacher_not_qualified"
    assert client.get(f"/api/timetables/{timetable_id}").json()["lessons"] == []


def test_add_lesson_unknown_reference_is_404(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    response = client.post(
        f"/api/timetables/{timetable_id}/lessons",
        json=lesson_payload(school, classroom_id="nowhere"),
    )
    assert response.status_code == 404
    assert client.post("/api/timetables/missing/lessons", json=lesson_payload(school)).status_code == 404


def test_update_lesson_checks_conflicts_against_others(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    path = f"/api/timetables/{timetable_id}/lessons"
    math_lesson = client.post(path, json=lesson_payload(school)).json()
    english_lesson = client.post(path, json=lesson_payload(
        school, day=1, class_id=school["class_b"], subject_id=school["english"], teacher_id=school["brian"],
    )).json()

    # Re-saving a lesson unchanged never collides with itself.
    same = client.put(f"{path}/{math_lesson['id']}", json={"day": 0})
    assert same.status_code == 200

    clash = client.put(f"{path}/{english_lesson['id']}", json={"day": 0})
    assert clash.status_code == 409
    assert clash.json()["details"]["classroom_conflict"] is True

    moved = client.put(f"{path}/{english_lesson['id']}", json={"day": 0, "classroom_id": school["room_large"]})
    assert moved.status_code == 200
    assert moved.json()["day"] == 0
    assert moved.json()["classroom_id"] == school["room_large"]

    assert client.put(f"{path}/missing", json={"day": 2}).status_code == 404


def test_remove_lesson(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    path = f"/api/timetables/{timetable_id}/lessons"
    lesson = client.post(path, json=lesson_payload(school)).json()

    assert client.delete(f"{path}/{lesson['id']}").json() == {"success": True}
    assert client.delete(f"{path}/{lesson['id']}").status_code == 404
    assert client.get(f"/api/timetables/{timetable_id}").json()["lessons"] == []


def test_locked_timetable_rejects_every_mutation(client, school):
    timetable_id = generate(client, school).json()["timetable"]["id"]
    before = client.get(f"/api/timetables/{timetable_id}").json()["lessons"]
    lesson_id = before[0]["id"]

    locked = client.post(f"/api/timetables/{timetable_id}/lock")
    assert locked.json()["is_locked"] is True

    path = f"/api/timetables/{timetable_id}/lessons"
    attempts = [
        client.post(path, json=lesson_payload(school, day=4, time_slot_id=school["slots"][5])),
        client.post(path, json=lesson_payload(school, subject_id=school["english"])),
        client.put(f"{path}/{lesson_id}", json={"day": 3}),
        client.put(f"{path}/missing", json={"day": 3}),
        client.delete(f"{path}/{lesson_id}"),
    ]
    for response in attempts:
        assert response.status_code == 403
        assert response.json()["message"] == "Timetable is locked and cannot be modified"

    assert client.get(f"/api/timetables/{timetable_id}").json()["lessons"] == before

    unlocked = client.post(f"/api/timetables/{timetable_id}/lock")
    assert unlocked.json()["is_locked"] is False
    assert client.delete(f"{path}/{lesson_id}").status_code == 200


def test_set_active_is_exclusive(client, db_session, school):
    assert client.get("/api/timetables/active").status_code == 404

    first = generate(client, school, name="First").json()["timetable"]["id"]
    second = generate(client, school, name="Second").json()["timetable"]["id"]
    third = empty_timetable(db_session, school, name="Third")

    for target in (first, second, third, second):
        response = client.post(f"/api/timetables/{target}/activate")
        assert response.status_code == 200
        assert response.json()["is_active"] is True
        states = {item["id"]: item["is_active"] for item in client.get("/api/timetables/").json()}
        assert [key for key, value in states.items() if value] == [target]

    active = client.get("/api/timetables/active").json()
    assert active["id"] == second
    assert len(active["lessons"]) == 5
    assert client.post("/api/timetables/missing/activate").status_code == 404


def test_delete_timetable_cascades_to_lessons(client, db_session, school):
    timetable_id = generate(client, school).json()["timetable"]["id"]
    count = select(func.count()).select_from(Lesson).where(Lesson.timetable_id == timetable_id)
    assert db_session.execute(count).scalar_one() == 5

    assert client.delete(f"/api/timetables/{timetable_id}").json() == {"success": True}
    assert client.get(f"/api/timetables/{timetable_id}").status_code == 404
    assert db_session.execute(count).scalar_one() == 0
    assert client.delete(f"/api/timetables/{timetable_id}").status_code == 404


def test_filtered_views_are_ordered(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    path = f"/api/timetables/{timetable_id}/lessons"
    for day, slot_index in [(2, 0), (0, 3), (0, 1), (1, 5)]:
        response = client.post(path, json=lesson_payload(school, day=day, time_slot_id=school["slots"][slot_index]))
        assert response.status_code == 201

    expected = [(0, school["slots"][1]), (0, school["slots"][3]), (1, school["slots"][5]), (2, school["slots"][0])]
    for view in (
        f"/api/timetables/{timetable_id}/classes/{school['class_a']}/lessons",
        f"/api/timetables/{timetable_id}/teachers/{school['ada']}/lessons",
        f"/api/timetables/{timetable_id}/classrooms/{school['room_small']}/lessons",
    ):
        lessons = client.get(view).json()
        assert [(item["day"], item["time_slot_id"]) for item in lessons] == expected

    assert client.get(f"/api/timetables/{timetable_id}/teachers/{school['brian']}/lessons").json() == []
    assert client.get(f"/api/timetables/{timetable_id}/classes/missing/lessons").status_code == 404


def test_conflict_audit_reports_stored_double_booking(client, db_session, school):
    timetable_id = empty_timetable(db_session, school)
    # Written directly so the mutation checks are bypassed.
    for class_id in (school["class_a"], school["class_b"]):
        db_session.add(Lesson(
            timetable_id=timetable_id,
            day=0,
            time_slot_id=school["slots"][0],
            class_id=class_id,
            subject_id=school["math"],
            teacher_id=school["ada"],
            classroom_id=None,
        ))
    db_session.commit()

    report = client.get(f"/api/timetables/{timetable_id}/conflicts").json()
    assert [item["conflict_type"] for item in report["conflicts"]] == ["teacher_conflict"]
    assert "Ada Lovelace" in report["conflicts"][0]["description"]
    assert {item["action_type"] for item in report["suggested_resolutions"]} == {"move_lesson", "change_teacher"}


def test_generated_timetable_audits_clean(client, school):
    timetable_id = generate(client, school).json()["timetable"]["id"]
    report = client.get(f"/api/timetables/{timetable_id}/conflicts").json()
    assert report["conflicts"] == []


def test_generate_validates_overrides(client, school):
    response = generate(client, school, time_budget_seconds=0)
    assert response.status_code == 422


def test_room_strictness_can_be_overridden(client, school):
    chemistry = create(client, "/api/subjects/", {
        "name": "Chemistry Lab",
        "code": "CHL",
        "year_id": school["year"],
        "class_ids": [school["class_b"]],
        "is_lab": True,
        "periods_per_week": 1,
    })
    client.put(f"/api/teachers/{school['brian']}", json={"subject_ids": [school["english"], chemistry["id"]]})

    # No lab exists, so the lab period cannot be placed under the default policy.
    strict = generate(client, school).json()
    assert strict["lesson_count"] == 5
    assert [item["kind"] for item in strict["warnings"]] == ["shortfall"]

    lenient = generate(client, school, require_room_strict=False).json()
    assert lenient["lesson_count"] == 6
    assert lenient["warnings"] == []
    lessons = client.get(f"/api/timetables/{lenient['timetable']['id']}").json()["lessons"]
    lab_lessons = [item for item in lessons if item["subject_id"] == chemistry["id"]]
    assert len(lab_lessons) == 1
    assert lab_lessons[0]["classroom_id"] is None
