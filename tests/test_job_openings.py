"""
Tests for job openings and their follow-up schedule.
"""
from datetime import date

import pytest

from prospectflow.db.models.user import User
from prospectflow.db.models.contact import Contact
from prospectflow.db.models.follow_up import FollowUp
from prospectflow.db.models.job_opening import JobOpening
from prospectflow.services import follow_up_service
from conftest import create_opening


@pytest.fixture
def today(monkeypatch):
    """Pin "today" to 2026-03-10."""
    pinned = date(2026, 3, 10)
    monkeypatch.setattr(follow_up_service, "today_utc", lambda: pinned)
    return pinned


def _follow_up_dates(opening):
    return [f["follow_up_date"] for f in opening["follow_ups"]]


def test_create_schedules_three_follow_ups(client, auth_headers, db):
    opening = create_opening(client, auth_headers)

    assert opening["status"] == "Watching"
    assert opening["company_name_cache"] == "Acme Corp"
    assert opening["company_id"] is not None
    assert _follow_up_dates(opening) == ["2026-03-09", "2026-03-16", "2026-03-23"]
    assert all(f["status"] == "Pending" for f in opening["follow_ups"])
    assert opening["next_follow_up"]["follow_up_date"] == "2026-03-09"
    assert [c["email"] for c in opening["associated_contacts"]] == ["rita@acme-example.com"]

    contact = db.query(Contact).one()
    assert contact.company_name_cache == "Acme Corp"


def test_create_uses_settings_cadence_and_templates(client, auth_headers):
    response = client.put(
        "/settings",
        json={
            "follow_up_cadence_days": [3, 10, 30],
            "default_email_templates": {
                "follow_up_1": {"subject": "Quick follow-up", "opening_line": "Hope you're well."},
                "follow_up_2": {"subject": "Checking in", "opening_line": ""},
                "follow_up_3": {"subject": "", "opening_line": "Last note from me."},
                "shared_signature": "Cheers,\nOlivia",
            },
            "usage_preference": "job_hunt",
        },
        headers=auth_headers,
    )
    assert response.status_code == 200

    opening = create_opening(
        client,
        auth_headers,
        follow_ups=[{}, {"subject": "Custom second", "body": "  "}],
    )

    assert _follow_up_dates(opening) == ["2026-03-05", "2026-03-12", "2026-04-01"]
    first, second, third = opening["follow_ups"]
    assert first["email_subject"] == "Quick follow-up"
    assert first["email_body"] == "Hope you're well.\n\nCheers,\nOlivia"
    assert second["email_subject"] == "Custom second"
    assert second["email_body"] == "Cheers,\nOlivia"
    assert third["email_subject"] is None
    assert third["email_body"] == "Last note from me.\n\nCheers,\nOlivia"


def test_create_requires_contact_and_company(client, auth_headers):
    response = client.post(
        "/job-openings",
        json={"company_name": "Acme", "role_title": "Dev", "contacts": [], "initial_email_date": "2026-03-02"},
        headers=auth_headers,
    )
    assert response.status_code == 422

    response = client.post(
        "/job-openings",
        json={
            "role_title": "Dev",
            "contacts": [{"name": "A", "email": "a@example.com"}],
            "initial_email_date": "2026-03-02",
        },
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_blank_role_title_rejected(client, auth_headers):
    response = client.post(
        "/job-openings",
        json={
            "company_name": "Acme Corp",
            "role_title": "   ",
            "contacts": [{"name": "Rita Recruiter", "email": "rita@acme-example.com"}],
            "initial_email_date": "2026-03-02",
        },
        headers=auth_headers,
    )
    assert response.status_code == 422

    opening = create_opening(client, auth_headers)
    response = client.put(f"/job-openings/{opening['id']}", json={"role_title": " "}, headers=auth_headers)
    assert response.status_code == 422


def test_existing_contacts_are_reused(client, auth_headers, db):
    contact = client.post(
        "/contacts",
        json={"name": "Rita Recruiter", "email": "rita@acme-example.com"},
        headers=auth_headers,
    ).json()

    opening = create_opening(
        client,
        auth_headers,
        contacts=[
            {"contact_id": contact["id"]},
            {"name": "Rita Again", "email": "RITA@acme-example.com"},
            {"name": "Sam Sourcer", "email": "sam@acme-example.com"},
        ],
    )

    assert [c["name"] for c in opening["associated_contacts"]] == ["Rita Recruiter", "Sam Sourcer"]
    assert db.query(Contact).count() == 2


def test_log_and_unlog_follow_up(client, auth_headers, today):
    opening = create_opening(client, auth_headers)
    first_id = opening["follow_ups"][0]["id"]

    response = client.post(f"/job-openings/follow-ups/{first_id}/log", headers=auth_headers)
    assert response.status_code == 200
    opening = response.json()
    first = opening["follow_ups"][0]
    assert first["status"] == "Sent"
    assert first["follow_up_date"] == "2026-03-10"
    assert first["original_due_date"] == "2026-03-09"
    assert opening["status"] == "1st Follow Up"
    assert opening["next_follow_up"]["follow_up_date"] == "2026-03-16"

    response = client.post(f"/job-openings/follow-ups/{first_id}/log", headers=auth_headers)
    assert response.status_code == 409

    response = client.post(f"/job-openings/follow-ups/{first_id}/unlog", headers=auth_headers)
    assert response.status_code == 200
    opening = response.json()
    first = opening["follow_ups"][0]
    assert first["status"] == "Pending"
    assert first["follow_up_date"] == "2026-03-09"
    assert first["original_due_date"] is None
    assert opening["status"] == "Emailed"

    response = client.post(f"/job-openings/follow-ups/{first_id}/unlog", headers=auth_headers)
    assert response.status_code == 409


def test_logging_all_three_reaches_third_follow_up(client, auth_headers, today):
    opening = create_opening(client, auth_headers)
    for follow_up in opening["follow_ups"]:
        response = client.post(
            f"/job-openings/follow-ups/{follow_up['id']}/log",
            params={"sent_on": follow_up["follow_up_date"]},
            headers=auth_headers,
        )
        assert response.status_code == 200

    opening = response.json()
    assert opening["status"] == "3rd Follow Up"
    assert opening["next_follow_up"] is None
    assert opening["is_overdue"] is False


def test_logging_keeps_status_after_outreach_stage(client, auth_headers, today):
    opening = create_opening(client, auth_headers, status="Interviewing")

    response = client.post(
        f"/job-openings/follow-ups/{opening['follow_ups'][0]['id']}/log",
        headers=auth_headers,
    )

    assert response.json()["status"] == "Interviewing"


def test_skip_follow_up(client, auth_headers):
    opening = create_opening(client, auth_headers)
    first_id = opening["follow_ups"][0]["id"]

    response = client.post(f"/job-openings/follow-ups/{first_id}/skip", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["follow_ups"][0]["status"] == "Skipped"
    assert response.json()["next_follow_up"]["follow_up_date"] == "2026-03-16"

    assert client.post(f"/job-openings/follow-ups/{first_id}/skip", headers=auth_headers).status_code == 409


def test_changing_initial_date_reschedules_pending_only(client, auth_headers, today):
    opening = create_opening(client, auth_headers)
    client.post(f"/job-openings/follow-ups/{opening['follow_ups'][0]['id']}/log", headers=auth_headers)

    response = client.put(
        f"/job-openings/{opening['id']}",
        json={"initial_email_date": "2026-04-01"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    follow_ups = response.json()["follow_ups"]
    assert [f["follow_up_date"] for f in follow_ups] == ["2026-03-10", "2026-04-15", "2026-04-22"]
    assert follow_ups[0]["status"] == "Sent"


def test_update_fields_and_contacts(client, auth_headers):
    opening = create_opening(client, auth_headers, tags=["backend"])

    response = client.put(
        f"/job-openings/{opening['id']}",
        json={
            "role_title": "Staff Engineer",
            "status": "Replied - Positive",
            "tags": ["priority"],
            "notes": "Spoke on the phone",
            "contacts": [{"name": "Hank Hiring", "email": "hank@acme-example.com"}],
            "follow_ups": [{"subject": "Following up on our call"}],
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["role_title"] == "Staff Engineer"
    assert body["status"] == "Replied - Positive"
    assert body["tags"] == ["priority"]
    assert body["notes"] == "Spoke on the phone"
    assert [c["name"] for c in body["associated_contacts"]] == ["Hank Hiring"]
    assert body["follow_ups"][0]["email_subject"] == "Following up on our call"


def test_list_sort_order(client, auth_headers):
    later = create_opening(client, auth_headers, role_title="Later", initial_email_date="2026-03-02")
    sooner = create_opening(client, auth_headers, role_title="Sooner", initial_email_date="2026-02-01")
    favorite = create_opening(client, auth_headers, role_title="Favorite", initial_email_date="2026-05-01")

    response = client.post(f"/job-openings/{favorite['id']}/favorite", headers=auth_headers)
    assert response.json()["is_favorite"] is True
    assert response.json()["favorited_at"] is not None

    response = client.get("/job-openings", headers=auth_headers)
    assert [o["id"] for o in response.json()["job_openings"]] == [favorite["id"], sooner["id"], later["id"]]

    response = client.post(f"/job-openings/{favorite['id']}/favorite", headers=auth_headers)
    assert response.json()["favorited_at"] is None


def test_list_filters(client, auth_headers, today):
    overdue = create_opening(client, auth_headers, role_title="Platform Engineer", tags=["Remote"])
    create_opening(
        client,
        auth_headers,
        company_name="Initech",
        role_title="Data Analyst",
        initial_email_date="2026-03-08",
        status="Emailed",
    )

    def titles(**params):
        response = client.get("/job-openings", params=params, headers=auth_headers)
        assert response.status_code == 200
        return [o["role_title"] for o in response.json()["job_openings"]]

    assert titles(overdue_only=True) == ["Platform Engineer"]
    assert titles(search="initech") == ["Data Analyst"]
    assert titles(tag="remote") == ["Platform Engineer"]
    assert titles(status="Emailed") == ["Data Analyst"]

    response = client.get(f"/job-openings/{overdue['id']}", headers=auth_headers)
    assert response.json()["is_overdue"] is True


def test_due_follow_ups(client, auth_headers, today):
    first = create_opening(client, auth_headers, role_title="First")
    create_opening(client, auth_headers, role_title="Second", initial_email_date="2026-03-08")

    response = client.get("/job-openings/follow-ups/due", headers=auth_headers)
    assert [(f["role_title"], f["follow_up_date"]) for f in response.json()] == [("First", "2026-03-09")]
    assert response.json()[0]["is_overdue"] is True

    response = client.get("/job-openings/follow-ups/due", params={"on_or_before": "2026-03-16"}, headers=auth_headers)
    assert [(f["role_title"], f["follow_up_date"]) for f in response.json()] == [
        ("First", "2026-03-09"),
        ("Second", "2026-03-15"),
        ("First", "2026-03-16"),
    ]

    client.post(f"/job-openings/follow-ups/{first['follow_ups'][0]['id']}/log", headers=auth_headers)
    response = client.get("/job-openings/follow-ups/due", headers=auth_headers)
    assert response.json() == []


def test_delete_cascades_follow_ups(client, auth_headers, db):
    opening = create_opening(client, auth_headers)

    assert client.delete(f"/job-openings/{opening['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/job-openings/{opening['id']}", headers=auth_headers).status_code == 404
    assert db.query(FollowUp).count() == 0
    assert db.query(Contact).count() == 1


def test_openings_are_private(client, auth_headers, other_headers):
    opening = create_opening(client, auth_headers)
    follow_up_id = opening["follow_ups"][0]["id"]

    assert client.get(f"/job-openings/{opening['id']}", headers=other_headers).status_code == 404
    assert client.post(f"/job-openings/follow-ups/{follow_up_id}/log", headers=other_headers).status_code == 404
    assert client.get("/job-openings", headers=other_headers).json()["total"] == 0


def test_free_plan_job_opening_limit(client, auth_headers, db):
    user = db.query(User).filter(User.email == "owner@example.com").first()
    db.add_all([
        JobOpening(
            user_id=user.id,
            company_name_cache="Filler",
            role_title=f"Role {i}",
            initial_email_date=date(2026, 1, 1),
            status="Watching",
            tags=[],
        )
        for i in range(30)
    ])
    db.commit()

    response = client.post(
        "/job-openings",
        json={
            "company_name": "Acme",
            "role_title": "One more",
            "contacts": [{"name": "A", "email": "a@example.com"}],
            "initial_email_date": "2026-03-02",
        },
        headers=auth_headers,
    )

    assert response.status_code == 402
    assert response.json()["detail"]["resource"] == "job_openings"


def test_compute_follow_up_dates():
    assert follow_up_service.compute_follow_up_dates(date(2026, 1, 28)) == [
        date(2026, 2, 4),
        date(2026, 2, 11),
        date(2026, 2, 18),
    ]
    assert follow_up_service.compute_follow_up_dates(date(2026, 12, 30), [1, 2, 90]) == [
        date(2026, 12, 31),
        date(2027, 1, 1),
        date(2027, 3, 30),
    ]
