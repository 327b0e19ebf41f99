"""API tests for /api/v1/inbox."""

from app.config import settings
from tests.conftest import auth_headers

BASE = "/api/v1/inbox"


async def apply(client, student, drive_id):
    response = await client.post(
        "/api/v1/applications", json={"drive_id": str(drive_id)}, headers=auth_headers(student.token)
    )
    assert response.status_code == 201


async def unread(client, headers) -> int:
    response = await client.get(f"{BASE}/unread/count", headers=headers)
    return response.json()["count"]


async def test_submission_lands_in_inbox(client, seed):
    student = await seed.student()
    drive_id = await seed.drive(company_name="Acme", role="SDE")
    headers = auth_headers(student.token)

    await apply(client, student, drive_id)

    response = await client.get(BASE, headers=headers)
    assert response.status_code == 200
    messages = response.json()
    assert len(messages) == 1
    assert messages[0]["subject"] == "Application Submitted - Acme"
    assert messages[0]["company_name"] == "Acme"
    assert messages[0]["role"] == "SDE"
    assert messages[0]["is_read"] is False
    assert await unread(client, headers) == 1


async def test_opening_a_message_marks_it_read(client, seed):
    student = await seed.student()
    drive_id = await seed.drive()
    headers = auth_headers(student.token)
    await apply(client, student, drive_id)

    message_id = (await client.get(BASE, headers=headers)).json()[0]["id"]

    response = await client.get(f"{BASE}/{message_id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert response.json()["read_at"] is not None
    assert await unread(client, headers) == 0

    response = await client.put(f"{BASE}/{message_id}/unread", headers=headers)
    assert response.status_code == 200
    assert await unread(client, headers) == 1

    response = await client.get(BASE, params={"unread_only": True}, headers=headers)
    assert [row["id"] for row in response.json()] == [message_id]

    response = await client.put(f"{BASE}/{message_id}/read", headers=headers)
    assert response.status_code == 200
    assert await unread(client, headers) == 0


async def test_delete_message(client, seed):
    student = await seed.student()
    drive_id = await seed.drive()
    headers = auth_headers(student.token)
    await apply(client, student, drive_id)
    message_id = (await client.get(BASE, headers=headers)).json()[0]["id"]

    response = await client.delete(f"{BASE}/{message_id}", headers=headers)
    assert response.status_code == 200

    response = await client.get(f"{BASE}/{message_id}", headers=headers)
    assert response.status_code == 404


async def test_cannot_touch_another_users_message(client, seed):
    owner = await seed.student()
    intruder = await seed.student()
    drive_id = await seed.drive()
    await apply(client, owner, drive_id)
    message_id = (await client.get(BASE, headers=auth_headers(owner.token))).json()[0]["id"]
    headers = auth_headers(intruder.token)

    assert (await client.get(f"{BASE}/{message_id}", headers=headers)).status_code == 404
    assert (await client.put(f"{BASE}/{message_id}/read", headers=headers)).status_code == 404
    assert (await client.delete(f"{BASE}/{message_id}", headers=headers)).status_code == 404


async def test_preview_is_limited(client, seed, monkeypatch):
    monkeypatch.setattr(settings, "INBOX_PREVIEW_LIMIT", 2)
    student = await seed.student()
    for n in range(3):
        await apply(client, student, await seed.drive(company_name=f"Company {n}"))

    response = await client.get(f"{BASE}/preview", headers=auth_headers(student.token))

    assert response.status_code == 200
    assert len(response.json()) == 2


async def test_admin_sends_message(client, seed):
    admin = await seed.admin()
    student = await seed.student()

    response = await client.post(
        f"{BASE}/send",
        json={
            "recipient_id": str(student.user_id),
            "subject": "Pre-placement talk",
            "message": "Auditorium, 3 PM.",
            "message_type": "Announcement",
        },
        headers=auth_headers(admin.token),
    )
    assert response.status_code == 201

    messages = (await client.get(BASE, headers=auth_headers(student.token))).json()
    assert messages[0]["subject"] == "Pre-placement talk"
    assert messages[0]["message_type"] == "Announcement"


async def test_send_requires_fields(client, seed):
    admin = await seed.admin()

    response = await client.post(f"{BASE}/send", json={"subject": "Hi"}, headers=auth_headers(admin.token))

    assert response.status_code == 400
    assert response.json()["detail"] == "Recipient, subject, and message are required"


async def test_bulk_send(client, seed):
    admin = await seed.admin()
    first = await seed.student()
    second = await seed.student()

    response = await client.post(
        f"{BASE}/send-bulk",
        json={
            "recipient_ids": [str(first.user_id), str(second.user_id)],
            "subject": "Reminder",
            "message": "Update your CGPA",
            "message_type": "Reminder",
        },
        headers=auth_headers(admin.token),
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Messages sent successfully to 2 recipients"
    for student in (first, second):
        assert await unread(client, auth_headers(student.token)) == 1


async def test_bulk_send_validation(client, seed):
    admin = await seed.admin()
    headers = auth_headers(admin.token)

    response = await client.post(f"{BASE}/send-bulk", json={"recipient_ids": [], "subject": "S", "message": "M"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Recipient IDs array is required"

    response = await client.post(
        f"{BASE}/send-bulk", json={"recipient_ids": [str(admin.user_id)], "subject": "S"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Subject and message are required"


async def test_students_cannot_send(client, seed):
    student = await seed.student()

    response = await client.post(
        f"{BASE}/send",
        json={"recipient_id": str(student.user_id), "subject": "S", "message": "M"},
        headers=auth_headers(student.token),
    )

    assert response.status_code == 403
