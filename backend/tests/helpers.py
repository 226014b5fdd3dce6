def create(client, path, payload):
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def seed_school(client, *, math_periods=3, english_periods=2, slot_count=6):
    """Two classes, two teachers, two rooms and a five-day timing."""
    year = create(client, "/api/years/", {"name": "Year 1", "value": 1})
    class_a = create(client, "/api/classes/", {"name": "Grade 1", "year_id": year["id"], "section": "A", "student_count": 30})
    class_b = create(client, "/api/classes/", {"name": "Grade 1", "year_id": year["id"], "section": "B", "student_count": 28})
    room_small = create(client, "/api/classrooms/", {"name": "Room 101", "capacity": 30})
    room_large = create(client, "/api/classrooms/", {"name": "Room 201", "capacity": 60})
    math = create(client, "/api/subjects/", {
        "name": "Mathematics",
        "code": "math",
        "year_id": year["id"],
        "class_ids": [class_a["id"]],
        "periods_per_week": math_periods,
        "periods_per_day": 1,
    })
    english = create(client, "/api/subjects/", {
        "name": "English",
        "code": "ENG",
        "year_id": year["id"],
        "class_ids": [class_b["id"]],
        "periods_per_week": english_periods,
        "periods_per_day": 1,
    })
    ada = create(client, "/api/teachers/", {
        "name": "Ada Lovelace",
        "email": "Ada@Example.com",
        "department": "Mathematics",
        "subject_ids": [math["id"]],
        "max_hours_per_day": 5,
    })
    brian = create(client, "/api/teachers/", {
        "name": "Brian Kernighan",
        "email": "brian@example.com",
        "department": "Languages",
        "subject_ids": [english["id"]],
    })
    slots = [
        create(client, "/api/time-slots", {
            "name": f"Period {index}",
            "start_time": f"{8 + index:02d}:00",
            "end_time": f"{8 + index:02d}:50",
            "order": index,
        })
        for index in range(1, slot_count + 1)
    ]
    timing = create(client, "/api/timings", {
        "academic_year": "2026-27",
        "periods_per_day": slot_count,
        "working_days": [0, 1, 2, 3, 4],
        "time_slot_ids": [slot["id"] for slot in slots],
    })
    return {
        "year": year["id"],
        "class_a": class_a["id"],
        "class_b": class_b["id"],
        "room_small": room_small["id"],
        "room_large": room_large["id"],
        "math": math["id"],
        "english": english["id"],
        "ada": ada["id"],
        "brian": brian["id"],
        "slots": [slot["id"] for slot in slots],
        "timing": timing["id"],
    }
