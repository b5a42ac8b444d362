import pytest


def _student_payload(**overrides):
    payload = {
        "name": "Arjun Mehta",
        "roll_number": "2024001",
        "class_name": "10th",
        "section": "A",
        "email": "arjun.mehta@student.com",
        "gender": "Male",
        "phone": "9000000001",
    }
    payload.update(overrides)
    return payload


def test_create_and_fetch_student(teacher_client):
    """
    Tests that a teacher can add a student and read it back by id and by roll number.
    """
    response = teacher_client.post("/api/students", json=_student_payload(email="Arjun.Mehta@Student.com"))

    assert response.status_code == 201, f"Failed to create student. Status: {response.status_code}, Response: {response.text}"
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Student added successfully"
    student = body["data"]
    assert student["email"] == "arjun.mehta@student.com", "Emails are stored lower-cased"
    assert student["is_active"] is True
    assert student["admission_date"] is not None

    by_id = teacher_client.get(f"/api/students/{student['id']}")
    assert by_id.status_code == 200
    assert by_id.json()["roll_number"] == "2024001"

    by_roll = teacher_client.get("/api/students/roll/2024001")
    assert by_roll.status_code == 200
    assert by_roll.json()["id"] == student["id"]


def test_list_students_sorted_and_filtered(teacher_client):
    teacher_client.post("/api/students", json=_student_payload(name="Zoya Ali", roll_number="1", email="zoya@s.com"))
    teacher_client.post("/api/students", json=_student_payload(name="Aman Rao", roll_number="2", email="aman@s.com"))
    teacher_client.post("/api/students", json=_student_payload(
        name="Kabir Das", roll_number="3", email="kabir@s.com", class_name="9th", section="B"
    ))

    response = teacher_client.get("/api/students")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [s["name"] for s in body["data"]] == ["Aman Rao", "Kabir Das", "Zoya Ali"]

    filtered = teacher_client.get("/api/students", params={"class_name": "10th", "section": "A"}).json()
    assert [s["name"] for s in filtered["data"]] == ["Aman Rao", "Zoya Ali"]

    none = teacher_client.get("/api/students", params={"class_name": "12th"}).json()
    assert none == {"success": True, "count": 0, "data": []}


def test_students_require_authentication(anon_client, student):
    for response in (
        anon_client.get("/api/students"),
        anon_client.get(f"/api/students/{student.id}"),
        anon_client.post("/api/students", json=_student_payload()),
        anon_client.put(f"/api/students/{student.id}", json={"name": "X"}),
        anon_client.delete(f"/api/students/{student.id}"),
    ):
        assert response.status_code == 401, f"Expected 401, got {response.status_code}: {response.text}"
        assert response.json()["code"] == "UNAUTHENTICATED"


@pytest.mark.parametrize("overrides, message", [
    ({"roll_number": "2024010"}, "Student with this roll number already exists"),
    ({"email": "Z@X.com"}, "Student with this email already exists"),
    ({"email": "bad-email"}, "Please enter a valid email"),
])
def test_create_student_rejects_bad_input(teacher_client, student, overrides, message):
    response = teacher_client.post("/api/students", json=_student_payload(**overrides))

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message, "code": "BAD_USER_INPUT"}


def test_create_student_schema_errors_use_422(teacher_client):
    payload = _student_payload(gender="Unknown")
    assert teacher_client.post("/api/students", json=payload).status_code == 422

    payload = _student_payload()
    del payload["class_name"]
    assert teacher_client.post("/api/students", json=payload).status_code == 422


def test_update_student(teacher_client, student):
    response = teacher_client.put(f"/api/students/{student.id}", json={
        "section": "B",
        "phone": "9111111111",
        "is_active": False,
    })

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert response.json()["message"] == "Student updated successfully"
    assert data["section"] == "B"
    assert data["phone"] == "9111111111"
    assert data["is_active"] is True, "Activation state can only change through delete"
    assert data["roll_number"] == "2024010"


def test_update_student_keeps_own_roll_number_and_email(teacher_client, student):
    response = teacher_client.put(f"/api/students/{student.id}", json={
        "roll_number": "2024010",
        "email": "z@x.com",
    })
    assert response.status_code == 200, response.text


def test_update_student_rejects_taken_roll_number(teacher_client, student):
    other = teacher_client.post("/api/students", json=_student_payload()).json()["data"]

    response = teacher_client.put(f"/api/students/{other['id']}", json={"roll_number": "2024010"})

    assert response.status_code == 400
    assert response.json()["message"] == "Student with this roll number already exists"


def test_update_missing_student_is_not_found(teacher_client):
    response = teacher_client.put("/api/students/9999", json={"name": "Nobody"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found", "code": "NOT_FOUND"}


def test_only_admin_can_delete_student(teacher_client, student):
    response = teacher_client.delete(f"/api/students/{student.id}")

    assert response.status_code == 403
    assert response.json()["message"] == "Only admins can delete students"


def test_soft_delete_hides_student_but_keeps_identifiers(admin_client, db_session, student):
    """
    Tests that a deleted student disappears from reads while the row, its roll
    number and its email stay reserved.
    """
    response = admin_client.delete(f"/api/students/{student.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Student deleted successfully"}

    assert admin_client.get(f"/api/students/{student.id}").status_code == 404
    assert admin_client.get("/api/students/roll/2024010").status_code == 404
    assert admin_client.get("/api/students").json()["count"] == 0
    assert admin_client.put(f"/api/students/{student.id}", json={"name": "X"}).status_code == 404

    db_session.expire_all()
    assert student.is_active is False, "The row must still exist after a soft delete"

    again = admin_client.post("/api/students", json=_student_payload(roll_number="2024010"))
    assert again.status_code == 400
    assert again.json()["message"] == "Student with this roll number already exists"


def test_delete_missing_student_is_not_found(admin_client):
    assert admin_client.delete("/api/students/4242").status_code == 404
