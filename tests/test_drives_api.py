"""API tests for /api/v1/drives."""

from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select

from app.models import Application
from tests.conftest import auth_headers

BASE = "/api/v1/drives"


async def test_student_sees_eligibility_per_drive(client, seed):
    student = await seed.student(cgpa=5.5, branch="CS")
    open_drive = await seed.drive(company_name="Open")
    strict_drive = await seed.drive(company_name="Strict", min_cgpa=6.0, allowed_branches=["EC"])

    response = await client.get(BASE, headers=auth_headers(student.token))

    assert response.status_code == 200
    drives = {row["id"]: row for row in response.json()}
    assert drives[str(open_drive)]["eligible"] is True
    assert drives[str(open_drive)]["eligibility_reasons"] is None
    assert drives[str(strict_drive)]["eligible"] is False
    assert drives[str(strict_drive)]["eligibility_reasons"] == [
        "Minimum CGPA requirement is 6.0. Your CGPA: 5.5",
        "Your branch is not eligible for this drive",
    ]
    assert drives[str(strict_drive)]["allowed_branches"] == ["EC"]


async def test_applied_drive_is_flagged(client, seed):
    student = await seed.student()
    drive_id = await seed.drive()
    await seed.application(student.student_id, drive_id)

    response = await client.get(BASE, headers=auth_headers(student.token))

    drive = response.json()[0]
    assert drive["has_applied"] is True
    assert drive["eligible"] is False
    assert drive["eligibility_reasons"] == ["Already applied"]


async def test_placed_student_is_told_first(client, seed):
    student = await seed.student(is_placed=True)
    await seed.drive(min_cgpa=9.5)

    response = await client.get(BASE, headers=auth_headers(student.token))

    assert response.json()[0]["eligibility_reasons"][0] == "Already placed"


async def test_student_without_academic_record(client, seed):
    student = await seed.student(with_academics=False)
    await seed.drive()

    response = await client.get(BASE, headers=auth_headers(student.token))

    assert response.status_code == 404
    assert response.json()["detail"] == "Academic information not found. Please complete your profile."


async def test_admin_list_has_no_eligibility(client, seed):
    admin = await seed.admin()
    await seed.drive()

    response = await client.get(BASE, headers=auth_headers(admin.token))

    assert response.status_code == 200
    assert response.json()[0]["eligible"] is None


async def test_status_filter(client, seed):
    admin = await seed.admin()
    await seed.drive(company_name="Upcoming Co")
    await seed.drive(company_name="Closed Co", status="Closed")

    response = await client.get(BASE, params={"status": "Closed"}, headers=auth_headers(admin.token))

    assert [row["company_name"] for row in response.json()] == ["Closed Co"]


async def test_upcoming_preview(client, seed):
    student = await seed.student()
    later = await seed.drive(company_name="Later", drive_date=date.today() + timedelta(days=30))
    sooner = await seed.drive(company_name="Sooner", drive_date=date.today() + timedelta(days=10))
    await seed.drive(company_name="Expired", deadline_in=timedelta(days=-1))
    await seed.drive(company_name="Ongoing", status="Ongoing")

    response = await client.get(f"{BASE}/upcoming/preview", headers=auth_headers(student.token))

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [str(sooner), str(later)]


async def test_get_drive(client, seed):
    student = await seed.student()
    drive_id = await seed.drive(company_name="Hooli")

    response = await client.get(f"{BASE}/{drive_id}", headers=auth_headers(student.token))
    assert response.status_code == 200
    assert response.json()["company_name"] == "Hooli"
    assert response.json()["has_applied"] is False

    response = await client.get(f"{BASE}/{student.user_id}", headers=auth_headers(student.token))
    assert response.status_code == 404
    assert response.json()["detail"] == "Placement drive not found"


async def test_admin_creates_drive(client, seed):
    admin = await seed.admin()
    payload = {
        "company_name": "Pied Piper",
        "role": "Backend Engineer",
        "drive_date": str(date.today() + timedelta(days=20)),
        "min_cgpa": 7.0,
        "max_backlogs": 0,
        "allowed_branches": ["CS", "IS"],
    }

    response = await client.post(BASE, json=payload, headers=auth_headers(admin.token))

    assert response.status_code == 201
    drive_id = response.json()["id"]

    response = await client.get(f"{BASE}/{drive_id}", headers=auth_headers(admin.token))
    drive = response.json()
    assert drive["status"] == "Upcoming"
    assert drive["company_type"] == "Service"
    assert drive["allowed_branches"] == ["CS", "IS"]
    assert drive["min_cgpa"] == 7.0


async def test_create_drive_requires_core_fields(client, seed):
    admin = await seed.admin()

    response = await client.post(BASE, json={"company_name": "No Role"}, headers=auth_headers(admin.token))

    assert response.status_code == 400
    assert response.json()["detail"] == "Company name, role, and drive date are required"


async def test_student_cannot_create_drive(client, seed):
    student = await seed.student()

    response = await client.post(
        BASE,
        json={"company_name": "X", "role": "Y", "drive_date": str(date.today())},
        headers=auth_headers(student.token),
    )

    assert response.status_code == 403


async def test_admin_updates_drive(client, seed):
    admin = await seed.admin()
    drive_id = await seed.drive(min_cgpa=6.0, max_backlogs=2)

    response = await client.put(
        f"{BASE}/{drive_id}",
        json={"status": "Closed", "min_cgpa": 7.5, "max_backlogs": None},
        headers=auth_headers(admin.token),
    )

    assert response.status_code == 200
    drive = response.json()
    assert drive["status"] == "Closed"
    assert drive["min_cgpa"] == 7.5
    # null keeps the current value
    assert drive["max_backlogs"] == 2


async def test_closed_drive_rejects_applications(client, seed):
    admin = await seed.admin()
    student = await seed.student()
    drive_id = await seed.drive()

    await client.put(f"{BASE}/{drive_id}", json={"status": "Closed"}, headers=auth_headers(admin.token))
    response = await client.post(
        "/api/v1/applications", json={"drive_id": str(drive_id)}, headers=auth_headers(student.token)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "This drive is no longer accepting applications"


async def test_delete_drive_removes_applications(client, seed, db_session):
    admin = await seed.admin()
    student = await seed.student()
    drive_id = await seed.drive()
    await seed.application(student.student_id, drive_id)

    response = await client.delete(f"{BASE}/{drive_id}", headers=auth_headers(admin.token))
    assert response.status_code == 200
    assert response.json()["message"] == "Placement drive deleted successfully"

    result = await db_session.execute(
        select(func.count()).select_from(Application).where(Application.drive_id == drive_id)
    )
    assert result.scalar() == 0

    response = await client.get(f"{BASE}/{drive_id}", headers=auth_headers(admin.token))
    assert response.status_code == 404


IST = timezone(timedelta(hours=5, minutes=30))


async def test_offset_deadline_is_stored_as_utc(client, seed):
    admin = await seed.admin()
    deadline = datetime.now(IST) + timedelta(days=2)

    response = await client.post(
        BASE,
        json={
            "company_name": "Offset Co",
            "role": "SDE",
            "drive_date": str(date.today() + timedelta(days=10)),
            "registration_deadline": deadline.isoformat(),
        },
        headers=auth_headers(admin.token),
    )
    assert response.status_code == 201

    response = await client.get(f"{BASE}/{response.json()['id']}", headers=auth_headers(admin.token))
    stored = datetime.fromisoformat(response.json()["registration_deadline"])
    assert stored == deadline.astimezone(timezone.utc).replace(tzinfo=None)


async def test_passed_offset_deadline_rejects_applications(client, seed):
    admin = await seed.admin()
    student = await seed.student()
    an_hour_ago = datetime.now(IST) - timedelta(hours=1)

    response = await client.post(
        BASE,
        json={
            "company_name": "Late Co",
            "role": "SDE",
            "drive_date": str(date.today() + timedelta(days=10)),
            "registration_deadline": an_hour_ago.isoformat(),
        },
        headers=auth_headers(admin.token),
    )
    drive_id = response.json()["id"]

    response = await client.post(
        "/api/v1/applications", json={"drive_id": drive_id}, headers=auth_headers(student.token)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Registration deadline has passed"


async def test_updated_offset_deadline_is_enforced(client, seed):
    admin = await seed.admin()
    student = await seed.student()
    drive_id = await seed.drive()
    passed = (datetime.now(timezone.utc) - timedelta(minutes=30)).isoformat().replace("+00:00", "Z")

    response = await client.put(
        f"{BASE}/{drive_id}", json={"registration_deadline": passed}, headers=auth_headers(admin.token)
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/v1/applications", json={"drive_id": str(drive_id)}, headers=auth_headers(student.token)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Registration deadline has passed"
